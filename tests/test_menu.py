import pytest

from kiosk import Menu, MenuFileError, MenuItem, parse_menu_line, safe_int


def test_load_keeps_every_field(sample_menu):
    menu = Menu()
    menu.load(sample_menu)
    assert len(menu) == 5
    assert menu.find("A001") == MenuItem("A001", "Cola", "Drinks", 150)
    assert menu.find("B001") == MenuItem("B001", "Cheese Burger", "Food", 899)
    assert menu.find("Z999") is None


def test_load_preserves_file_order(sample_menu):
    menu = Menu()
    menu.load(sample_menu)
    assert [item.id for item in menu] == ["A001", "A002", "B001", "B002", "C001"]


def test_name_is_rest_of_line(write_menu):
    menu = Menu()
    menu.load(write_menu("X1Y2 Snacks 99     Salted  Pretzel"))
    assert menu.find("X1Y2").name == "Salted  Pretzel"


def test_empty_lines_are_skipped(write_menu):
    menu = Menu()
    menu.load(write_menu("", "A001 Drinks 150 Cola", "", "A002 Drinks 125 Lemonade"))
    assert len(menu) == 2


def test_boundary_lengths_accepted(write_menu):
    menu = Menu()
    menu.load(write_menu("ZZ99 ABCDEFGHIJKLMNO 1 " + "n" * 20))
    item = menu.find("ZZ99")
    assert item.category == "ABCDEFGHIJKLMNO"
    assert item.name == "n" * 20
    assert item.cost == 1


def test_several_files_accumulate(write_menu):
    menu = Menu()
    menu.load(write_menu("A001 Drinks 150 Cola", name="a.txt"))
    menu.load(write_menu("B001 Food 899 Burger", name="b.txt"))
    assert {item.id for item in menu} == {"A001", "B001"}


@pytest.mark.parametrize("line", [
    "A01 Drinks 150 Cola",
    "A0001 Drinks 150 Cola",
    "A-01 Drinks 150 Cola",
    "A001 ABCDEFGHIJKLMNOP 150 Cola",
    "A001 Drinks 0 Cola",
    "A001 Drinks -5 Cola",
    "A001 Drinks abc Cola",
    "A001 Drinks 150",
    "A001 Drinks 150   ",
    "A001 Drinks 150 " + "n" * 21,
    "A001",
    "   ",
    "\t",
    "A001 Drinks 1_500 Cola",
    "A001 Drinks +150 Cola",
    "A001 Drinks \u0661\u0665\u0660 Cola",
    "A001 Drinks 1.50 Cola",
])
def test_malformed_record_is_fatal(write_menu, line):
    path = write_menu(line)
    with pytest.raises(MenuFileError) as exc:
        Menu().load(path)
    assert str(exc.value) == f"Invalid menu file: {path}"
    assert exc.value.path == path


def test_duplicate_id_is_fatal(write_menu):
    path = write_menu("A001 Drinks 150 Cola", "A001 Food 899 Burger")
    with pytest.raises(MenuFileError, match="Invalid menu file"):
        Menu().load(path)


def test_duplicate_across_files_names_second_file(write_menu):
    menu = Menu()
    menu.load(write_menu("A001 Drinks 150 Cola", name="a.txt"))
    second = write_menu("A001 Food 899 Burger", name="b.txt")
    with pytest.raises(MenuFileError) as exc:
        menu.load(second)
    assert exc.value.path == second


def test_missing_file(tmp_path):
    path = str(tmp_path / "nope.txt")
    with pytest.raises(MenuFileError) as exc:
        Menu().load(path)
    assert str(exc.value) == f"Can't open file: {path}"


def test_parse_menu_line_reports_reason():
    with pytest.raises(ValueError, match="cost"):
        parse_menu_line("A001 Drinks free Cola")


def test_add_rejects_duplicate():
    menu = Menu()
    menu.add(MenuItem("A001", "Cola", "Drinks", 150))
    with pytest.raises(ValueError):
        menu.add(MenuItem("A001", "Other", "Drinks", 100))


@pytest.mark.parametrize("raw, expected", [
    ("150", 150),
    ("-3", -3),
    ("1_500", None),
    ("+5", None),
    ("\u0665", None),
    ("", None),
    (" 5", None),
])
def test_safe_int_accepts_plain_decimal_only(raw, expected):
    assert safe_int(raw) == expected


def test_safe_int_minimum():
    assert safe_int("0", minimum=1) is None
    assert safe_int("1", minimum=1) == 1
