import pytest

import kiosk


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    """keep termcolor from emitting escape codes into captured output"""
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)


@pytest.fixture
def write_menu(tmp_path):
    """write lines into a menu file and return its path"""
    def _write(*lines, name="menu.txt"):
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def sample_menu(write_menu):
    return write_menu(
        "A001 Drinks 150 Cola",
        "A002 Drinks 125 Lemonade",
        "B001 Food 899 Cheese Burger",
        "B002 Food 650 Veggie Wrap",
        "C001 Dessert 300 Ice Cream",
    )


@pytest.fixture
def app(sample_menu):
    return kiosk.Application(sample_menu)
