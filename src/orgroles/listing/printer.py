"""Fixed-width rendering of account role lines."""

import threading
from typing import Callable, Iterable, Optional

from rich.console import Console

DEFAULT_PAD_WIDTH = 40

HEADER_USER = "USER"
HEADER_USER_ID = "USER ID"
HEADER_ROLES = "ROLES"


def pad(value: str, width: int) -> str:
    """
    Pad or clip a value to exactly ``width`` characters.

    Shorter values get trailing spaces. Values that fill or exceed the width
    are cut to ``width - 2`` characters followed by two spaces so columns stay
    separated.
    """
    if len(value) < width:
        return value + " " * (width - len(value))
    return value[: width - 2] + "  "


def join_roles(roles: Iterable[str]) -> str:
    """Join role identifiers with spaces, keeping resolution order."""
    return " ".join(roles)


class RolePrinter:
    """Formats and prints one line per account."""

    def __init__(self, width: int = DEFAULT_PAD_WIDTH, console: Optional[Console] = None):
        """
        Initialize the printer.

        Args:
            width: Display width of the username and user id columns (at least 2)
            console: Console receiving the lines, stdout by default
        """
        if width < 2:
            raise ValueError(f"Column width must be at least 2, got {width}")
        self.width = width
        self.console = console or Console(soft_wrap=True)
        self.lines_printed = 0
        # Checked under the print lock; once true no further lines are written
        self.halted: Optional[Callable[[], bool]] = None
        self._lock = threading.Lock()

    def format(self, username: str, user_id: str, roles: Iterable[str]) -> str:
        return f"{pad(username, self.width)} {pad(user_id, self.width)} {join_roles(roles)}"

    def header(self) -> str:
        return f"{pad(HEADER_USER, self.width)} {pad(HEADER_USER_ID, self.width)} {HEADER_ROLES}"

    def emit(self, line: str) -> bool:
        """
        Print a line; safe to call from several workers at once.

        Returns:
            False if the printer has been halted and the line was dropped
        """
        with self._lock:
            if self.halted is not None and self.halted():
                return False
            self.console.out(line, highlight=False)
            self.lines_printed += 1
            return True

    def print_header(self) -> None:
        """Print the header row followed by a blank line."""
        with self._lock:
            self.console.out(self.header(), highlight=False)
            self.console.out("")

    def print_account(self, username: str, user_id: str, roles: Iterable[str]) -> bool:
        return self.emit(self.format(username, user_id, roles))
