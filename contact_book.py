import json
import logging
import re
from collections import UserList
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

# ────────────────────────────────────────────────────────────────────────────
# Rich console
# ────────────────────────────────────────────────────────────────────────────
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

console = Console()
log = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────────────────────
# Settings
# ────────────────────────────────────────────────────────────────────────────
DATA_FILE = "contacts.json"

MENU = {
    "1": "Add contact",
    "2": "Find contact by name",
    "3": "List birthdays by month",
    "4": "List all contacts sorted by name",
    "5": "Delete contact",
    "6": "Exit",
}

FIELDS = ("name", "birthday", "phone", "email")


def setup_logging(level=logging.WARNING):
    """Send log records to stderr so they never mix with the menu output."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


# ────────────────────────────────────────────────────────────────────────────
# Data model
# ────────────────────────────────────────────────────────────────────────────
@dataclass
class Contact:
    name: str
    birthday: str  # "DD/MM"
    phone: str
    email: str

    @property
    def birth_month(self) -> Optional[str]:
        parts = self.birthday.split("/")
        return parts[1] if len(parts) > 1 else None

    def to_dict(self) -> Dict[str, str]:
        return {f: getattr(self, f) for f in FIELDS}

    @classmethod
    def from_dict(cls, data) -> "Contact":
        if not isinstance(data, dict):
            raise ValueError("Contact entry must be an object.")
        values = {}
        for f in FIELDS:
            v = data.get(f)
            if not isinstance(v, str):
                raise ValueError(f"Contact field '{f}' is missing or not text.")
            try:
                v.encode("utf-8")
            except UnicodeEncodeError as e:
                raise ValueError(f"Contact field '{f}' is not valid UTF-8 text.") from e
            values[f] = v
        return cls(**values)


_ASCII_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ",
                             "abcdefghijklmnopqrstuvwxyz")


def ascii_fold(text: str) -> str:
    return text.translate(_ASCII_LOWER)


class ContactBook(UserList):
    """Contacts in insertion order. Names are the lookup key but may repeat."""

    def add(self, contact: Contact):
        self.data.append(contact)

    def find(self, name: str) -> Optional[Contact]:
        # first hit wins, ASCII-only case folding
        key = ascii_fold(name)
        for c in self.data:
            if ascii_fold(c.name) == key:
                return c
        return None

    def by_month(self, month: int) -> List[Contact]:
        target = f"{month:02d}"
        return [c for c in self.data if c.birth_month == target]

    def sorted_by_name(self) -> List[Contact]:
        # later duplicates shadow earlier ones in this view only
        by_name = {c.name: c for c in self.data}
        return [by_name[n] for n in sorted(by_name)]

    def delete(self, name: str) -> int:
        """Drop every contact with this name (any case); return how many went."""
        key = name.lower()
        before = len(self.data)
        self.data = [c for c in self.data if c.name.lower() != key]
        return before - len(self.data)


# ────────────────────────────────────────────────────────────────────────────
# Persistence
# ────────────────────────────────────────────────────────────────────────────
def save(book: ContactBook, path: str = DATA_FILE):
    # OSError is left to propagate: a failed write ends the session
    with open(path, "w", encoding="utf-8") as f:
        json.dump([c.to_dict() for c in book], f, indent=2, ensure_ascii=False)
    log.debug("Saved %d contacts to %s", len(book), path)


def load(path: str = DATA_FILE) -> ContactBook:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        return ContactBook()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        log.warning("Could not parse %s (%s); starting with an empty book.", path, e)
        return ContactBook()

    if not isinstance(raw, list):
        log.warning("%s does not hold a list of contacts; starting with an empty book.", path)
        return ContactBook()
    try:
        book = ContactBook(Contact.from_dict(item) for item in raw)
    except ValueError as e:
        log.warning("Malformed contact in %s (%s); starting with an empty book.", path, e)
        return ContactBook()
    log.debug("Loaded %d contacts from %s", len(book), path)
    return book


# ────────────────────────────────────────────────────────────────────────────
# Validation
# ────────────────────────────────────────────────────────────────────────────
NUMBER_RE = re.compile(r"\+?[0-9]+")
MAX_NUMBER = 2 ** 32 - 1

LONG_MONTHS = {1, 3, 5, 7, 8, 10, 12}
SHORT_MONTHS = {4, 6, 9, 11}


def parse_number(raw: str) -> Optional[int]:
    raw = raw.strip()
    if not NUMBER_RE.fullmatch(raw):
        return None
    n = int(raw)
    return n if n <= MAX_NUMBER else None


def valid_month(month: int) -> bool:
    return 1 <= month <= 12


def valid_day(day: int, month: int) -> bool:
    if month in LONG_MONTHS:
        return 1 <= day <= 31
    if month in SHORT_MONTHS:
        return 1 <= day <= 30
    if month == 2:
        return 1 <= day <= 29  # Feb 29 always allowed, no leap-year check
    return False


def format_birthday(day: int, month: int) -> str:
    return f"{day:02d}/{month:02d}"


# ────────────────────────────────────────────────────────────────────────────
# Utility helpers
# ────────────────────────────────────────────────────────────────────────────
def ok(msg): return f"[green]✔ {msg}[/]"


def ask(prompt: str) -> str:
    return console.input(prompt).strip()


def ask_number(prompt: str) -> int:
    while True:
        n = parse_number(console.input(prompt))
        if n is not None:
            return n
        console.print("[red]Invalid input. Try again.[/]")


def ask_validated(prompt: str, check: Callable[[int], bool], error: str) -> int:
    while True:
        n = ask_number(prompt)
        if check(n):
            return n
        console.print(f"[red]{error}[/]")


def show_contacts(contacts: List[Contact]):
    table = Table(header_style="bold blue", expand=True)
    table.add_column("Name", style="bold deep_sky_blue1", no_wrap=True)
    table.add_column("Birthday", style="magenta", no_wrap=True)
    table.add_column("Phone", style="white")
    table.add_column("Email", style="white")
    for c in contacts:
        table.add_row(*(escape(getattr(c, f)) for f in FIELDS))
    console.print(table)


def show_menu():
    table = Table(title="\n📘 Menu", header_style="bold blue", style="bold bright_cyan")
    table.add_column("Option", justify="center", style="bold deep_sky_blue1", no_wrap=True)
    table.add_column("Action", style="white")
    for key, desc in MENU.items():
        table.add_row(f"[green]{key}[/green]", desc)
    console.print(table)


# ────────────────────────────────────────────────────────────────────────────
# Handlers
# ────────────────────────────────────────────────────────────────────────────
def add_contact(book: ContactBook, path: str = DATA_FILE):
    name = ask("Name: ")
    month = ask_validated("Birth month (1-12): ", valid_month,
                          "Invalid month. Try again.")
    day = ask_validated("Birth day: ", lambda d: valid_day(d, month),
                        "Invalid day for that month. Try again.")
    phone = ask("Phone: ")
    email = ask("Email: ")

    book.add(Contact(name, format_birthday(day, month), phone, email))
    save(book, path)
    console.print(ok("Contact added and saved."))


def find_contact(book: ContactBook, path: str = DATA_FILE):
    contact = book.find(ask("Contact name: "))
    if contact is None:
        console.print("[yellow]Contact not found.[/]")
        return
    show_contacts([contact])


def list_by_month(book: ContactBook, path: str = DATA_FILE):
    month = parse_number(console.input("Month number (1-12): "))
    if month is None or not valid_month(month):
        console.print("[red]Invalid month.[/]")
        return
    hits = book.by_month(month)
    if not hits:
        console.print("[dim]No contacts with a birthday in that month.[/]")
        return
    show_contacts(hits)


def list_sorted(book: ContactBook, path: str = DATA_FILE):
    show_contacts(book.sorted_by_name())


def delete_contact(book: ContactBook, path: str = DATA_FILE):
    removed = book.delete(ask("Name of the contact to delete: "))
    if not removed:
        console.print("[yellow]No contact with that name.[/]")
        return
    save(book, path)
    console.print(ok("Contact deleted."))


COMMANDS: Dict[str, Callable[[ContactBook, str], None]] = {
    "1": add_contact,
    "2": find_contact,
    "3": list_by_month,
    "4": list_sorted,
    "5": delete_contact,
}
EXIT_CHOICE = "6"


# ────────────────────────────────────────────────────────────────────────────
# Main loop
# ────────────────────────────────────────────────────────────────────────────
def run(book: ContactBook, path: str = DATA_FILE):
    while True:
        try:
            show_menu()
            choice = ask("Choose an option >>> ")
            if choice == EXIT_CHOICE:
                save(book, path)
                console.print(ok("Contacts saved. Bye!"))
                break
            handler = COMMANDS.get(choice)
            if handler is None:
                console.print("[red]Invalid option.[/]")
                continue
            handler(book, path)
        except (KeyboardInterrupt, EOFError):
            console.print("\nInterrupted. Saving …")
            save(book, path)
            break


def main(path: str = DATA_FILE):
    setup_logging()
    book = load(path)
    run(book, path)


if __name__ == "__main__":
    main()
