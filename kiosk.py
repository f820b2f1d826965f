#!/usr/bin/env python3
#  _    _           _
# | | _(_) ___  ___| | __
# | |/ / |/ _ \/ __| |/ /
# |   <| | (_) \__ \   <
# |_|\_\_|\___/|___/_|\_\  menu & order kiosk
#
# menu items come from plain text files given on the command line,
# the order only lives as long as the process does

import inspect
import logging
import os
import re
import signal
import sys
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, TextIO

from termcolor import cprint, colored
from colorama import just_fix_windows_console as enable_windows_ansi_interpretation

# fix windows terminal misinterpreting ansi escape sequences
enable_windows_ansi_interpretation()

logger = logging.getLogger("kiosk")

# constants
PROMPT = "cmd> "
USAGE = "usage: kiosk <menu-file>*"
INVALID_COMMAND = "Invalid command"
MAX_INPUT_CHARS = 100
ID_LENGTH = 4
MAX_NAME_LENGTH = 20
MAX_CATEGORY_LENGTH = 15
CENTS_PER_DOLLAR = 100
TOTAL_LABEL_WIDTH = 51
INTEGER_PATTERN = re.compile(r"-?[0-9]+")
LOG_LEVEL = os.getenv("KIOSK_LOG_LEVEL", "WARNING").upper()

MENU_HEADER = f"{'ID':<5}{'Name':<21}{'Category':<16}Cost"
ORDER_HEADER = f"{'ID':<5}{'Name':<21}{'Quantity':<9}{'Category':<16}Cost"

# helpers
def safe_int(value: str, minimum: int | None = None):
    """return int value or none if not plain ascii decimal / below minimum"""
    if not INTEGER_PATTERN.fullmatch(value):
        return None
    v = int(value)
    if minimum is not None and v < minimum:
        return None
    return v

def format_money(cents: int) -> str:
    """format integer cents as a 6-wide dollar amount"""
    return f"${cents / CENTS_PER_DOLLAR:6.2f}"

def read_line(source: TextIO, max_chars: int | None = None) -> str | None:
    """read exactly one line without its terminator; none at end of input

    the whole line is always consumed, max_chars only cuts what is returned
    """
    line = source.readline()
    if not line:
        return None
    if line.endswith("\n"):
        line = line[:-1]
    if max_chars is not None:
        line = line[:max_chars]
    return line

# errors
class MenuFileError(Exception):
    """menu file could not be opened or holds a malformed record"""
    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path

# domain models
@dataclass(frozen=True)
class MenuItem:
    """purchasable catalog entry, cost in cents"""
    id: str
    name: str
    category: str
    cost: int

@dataclass
class OrderItem:
    """quantity of one menu item held in the order"""
    menu_item: MenuItem
    quantity: int

    @property
    def line_cost(self) -> int:
        """cost of this line in cents"""
        return self.menu_item.cost * self.quantity

def parse_menu_line(line: str) -> MenuItem:
    """parse `<id> <category> <cost> <name...>`, raising valueerror on bad fields"""
    fields = line.split(None, 3)
    if len(fields) < 4:
        raise ValueError("expected id, category, cost and name")
    item_id, category, raw_cost, name = fields
    if len(item_id) != ID_LENGTH or not (item_id.isascii() and item_id.isalnum()):
        raise ValueError(f"id must be {ID_LENGTH} alphanumeric characters: {item_id!r}")
    if len(category) > MAX_CATEGORY_LENGTH:
        raise ValueError(f"category longer than {MAX_CATEGORY_LENGTH}: {category!r}")
    cost = safe_int(raw_cost, minimum=1)
    if cost is None:
        raise ValueError(f"cost must be a positive integer: {raw_cost!r}")
    if len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"name longer than {MAX_NAME_LENGTH}: {name!r}")
    return MenuItem(item_id, name, category, cost)

# menu store
class Menu:
    """menu items in load order, indexed by id"""
    def __init__(self):
        self._items: list[MenuItem] = []
        self._by_id: dict[str, MenuItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(self._items)

    def find(self, item_id: str) -> MenuItem | None:
        """lookup a menu item by exact id"""
        return self._by_id.get(item_id)

    def add(self, item: MenuItem):
        """append an item; ids must be unique"""
        if item.id in self._by_id:
            raise ValueError(f"duplicate id {item.id!r}")
        self._items.append(item)
        self._by_id[item.id] = item

    def load(self, path: str):
        """append every record of a menu file; empty lines are skipped

        an unreadable file or any bad record raises menufileerror
        """
        try:
            fp = open(path, encoding="utf-8")
        except OSError as e:
            raise MenuFileError(f"Can't open file: {path}", path) from e
        loaded = 0
        with fp:
            try:
                while (line := read_line(fp)) is not None:
                    if line == "":
                        continue
                    self.add(parse_menu_line(line))
                    loaded += 1
            except ValueError as e:
                logger.debug("rejecting %s: %s", path, e)
                raise MenuFileError(f"Invalid menu file: {path}", path) from e
        logger.debug("loaded %d items from %s", loaded, path)

# order store
class Order:
    """in-memory order, one line per menu item id"""
    def __init__(self):
        self.items: list[OrderItem] = []

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[OrderItem]:
        return iter(self.items)

    @property
    def total_cost(self) -> int:
        """sum of line costs in cents"""
        return sum(i.line_cost for i in self.items)

    def find(self, item_id: str) -> OrderItem | None:
        """return the order line holding this menu item id or none"""
        return next((i for i in self.items if i.menu_item.id == item_id), None)

    def add(self, menu_item: MenuItem, quantity: int) -> bool:
        """merge quantity into an existing line or append a new one"""
        if quantity < 1:
            return False
        existing = self.find(menu_item.id)
        if existing is not None:
            existing.quantity += quantity
        else:
            self.items.append(OrderItem(menu_item, quantity))
        logger.debug("added %d x %s", quantity, menu_item.id)
        return True

    def remove(self, item_id: str, quantity: int) -> bool:
        """take quantity off a line, dropping the line when it reaches zero"""
        for i, itm in enumerate(self.items):
            if itm.menu_item.id != item_id:
                continue
            if quantity < 1 or quantity > itm.quantity:
                logger.debug("cannot remove %d x %s, holding %d", quantity, item_id, itm.quantity)
                return False
            if quantity == itm.quantity:
                del self.items[i]
            else:
                itm.quantity -= quantity
            logger.debug("removed %d x %s", quantity, item_id)
            return True
        logger.debug("%s not in order", item_id)
        return False

# sorting & formatting
def by_category(item: MenuItem):
    """category, then id"""
    return (item.category, item.id)

def by_id(item: MenuItem):
    return item.id

def by_order_value(item: OrderItem):
    """highest line cost first, then id"""
    return (-item.line_cost, item.menu_item.id)

def format_menu(items: Iterable[MenuItem], key: Callable[[MenuItem], object],
                predicate: Callable[[MenuItem], bool] | None = None) -> list[str]:
    """render header plus one fixed-width row per (matching) item"""
    lines = [MENU_HEADER]
    for item in sorted(items, key=key):
        if predicate is not None and not predicate(item):
            continue
        lines.append(f"{item.id:<5}{item.name:<21}{item.category:<16}{format_money(item.cost)}")
    return lines

def format_order(order: Order) -> list[str]:
    """render header, rows by value and the total row"""
    lines = [ORDER_HEADER]
    for itm in sorted(order, key=by_order_value):
        m = itm.menu_item
        lines.append(
            f"{m.id:<5}{m.name:<21}{itm.quantity:>8} {m.category:<16}{format_money(itm.line_cost)}"
        )
    lines.append(f"{'Total':<{TOTAL_LABEL_WIDTH}}{format_money(order.total_cost)}")
    return lines

# command results
@dataclass
class Outcome:
    """result of one command: success flag, body lines, whether to stop"""
    ok: bool
    lines: list[str] = field(default_factory=list)
    done: bool = False

# order management
class OrderManager:
    """add / remove / list commands against the order"""
    def __init__(self, menu: Menu, order: Order):
        self.menu = menu
        self.order = order

    def list_order(self, *_) -> Outcome:
        return Outcome(True, format_order(self.order))

    def add_order_item(self, item_id: str, quantity: str) -> Outcome:
        """add quantity of an item already in the order, else from the menu"""
        qty = safe_int(quantity, minimum=1)
        if qty is None:
            return Outcome(False)
        existing = self.order.find(item_id)
        chosen = existing.menu_item if existing else self.menu.find(item_id)
        if chosen is None:
            return Outcome(False)
        return Outcome(self.order.add(chosen, qty))

    def remove_order_item(self, item_id: str, quantity: str) -> Outcome:
        qty = safe_int(quantity, minimum=1)
        if qty is None:
            return Outcome(False)
        return Outcome(self.order.remove(item_id, qty))

# command infrastructure
class Command:
    """bind a command name to a function"""
    def __init__(self, name: str, function: Callable[..., Outcome]):
        self.name = name
        self._fn = function

    def execute(self, tokens: list[str]) -> Outcome:
        """validate arg count and invoke function; a *args parameter takes any surplus"""
        sig = inspect.signature(self._fn)
        params = list(sig.parameters.values())
        positional = [
            p for p in params if p.kind in (
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
                inspect.Parameter.POSITIONAL_ONLY
            )
        ]
        required = sum(p.default is inspect.Parameter.empty for p in positional)
        variadic = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params)
        if len(tokens) < required or (not variadic and len(tokens) > len(positional)):
            logger.debug("'%s' expects %d-%d args, got %d", self.name, required, len(positional), len(tokens))
            return Outcome(False)
        return self._fn(*tokens)

class CommandParser:
    """line-oriented repl: tokenise, dispatch, render"""
    def __init__(self):
        self.running = True
        self.commands: list[Command] = [
            Command("quit", self.quit),
        ]

    @staticmethod
    def tokenize(input_str: str) -> list[str]:
        """first three whitespace-delimited words, the rest is ignored"""
        return input_str.split()[:3]

    def parse_and_execute(self, input_str: str) -> Outcome:
        """parse the raw input string and attempt to execute a command"""
        tokens = self.tokenize(input_str)
        for cmd in self.commands:
            parts = cmd.name.split()
            if tokens[:len(parts)] != parts:
                continue
            return cmd.execute(tokens[len(parts):])
        logger.debug("unknown command %r", input_str)
        return Outcome(False)

    def quit(self, *_) -> Outcome:
        self.running = False
        return Outcome(True, done=True)

    @staticmethod
    def render(input_str: str, outcome: Outcome):
        """echo the input, then the body or the error, then a blank line"""
        print(input_str)
        if outcome.done:
            return
        for line in outcome.lines:
            print(line)
        if not outcome.ok:
            cprint(INVALID_COMMAND, "red")
        print()

    def start_repl(self, source: TextIO):
        """main repl loop; stops on quit or end of input"""
        while self.running:
            print(colored(PROMPT, "blue"), end="", flush=True)
            user_input = read_line(source, MAX_INPUT_CHARS)
            if user_input is None:
                break
            self.render(user_input, self.parse_and_execute(user_input))

# application wiring
class Application:
    """load menus & build the command table"""
    def __init__(self, *paths: str):
        self.menu = Menu()
        for path in paths:
            self.menu.load(path)
        self.order = Order()
        self.order_manager = OrderManager(self.menu, self.order)
        self.parser = CommandParser()
        self.parser.commands += [
            Command("list menu", self.list_menu),
            Command("list category", self.list_category),
            Command("list order", self.order_manager.list_order),
            Command("add", self.order_manager.add_order_item),
            Command("remove", self.order_manager.remove_order_item),
        ]

    def list_menu(self) -> Outcome:
        return Outcome(True, format_menu(self.menu, by_category))

    def list_category(self, name: str = "", *_) -> Outcome:
        """items whose category is exactly name"""
        return Outcome(True, format_menu(self.menu, by_id, lambda item: item.category == name))

    def run(self, source: TextIO | None = None):
        """start the repl on source (stdin by default)"""
        source = sys.stdin if source is None else source
        if source.isatty():
            cprint(f"welcome! {len(self.menu)} items on the menu, type 'quit' to leave.",
                   "green", attrs=["bold"])
        self.parser.start_repl(source)

# signal handler
class SignalHandler:
    """ctrl+c ends the session politely"""
    @staticmethod
    def sigint(_, __):
        """handle ctrl+c"""
        cprint("\nnext time, use quit!", "yellow")
        sys.exit(0)

# entry point
def main(argv: list[str] | None = None):
    """entrypoint wrapper"""
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=LOG_LEVEL, stream=sys.stderr,
                        format="%(levelname)s %(name)s: %(message)s")
    if not args:
        cprint(USAGE, "red", file=sys.stderr)
        sys.exit(1)
    try:
        app = Application(*args)
    except MenuFileError as e:
        cprint(str(e), "red", file=sys.stderr)
        sys.exit(1)
    signal.signal(signal.SIGINT, SignalHandler.sigint)
    app.run()

if __name__ == "__main__":
    main()
