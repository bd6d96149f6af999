"""Tests for fixed-width role line rendering."""

import io

import pytest
from rich.console import Console

from orgroles.listing.printer import RolePrinter, join_roles, pad


def _printer(width=40):
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, soft_wrap=True, color_system=None)
    return RolePrinter(width=width, console=console), buffer


class TestPad:
    """Test cases for pad."""

    @pytest.mark.parametrize("value", ["", "a", "john.doe", "x" * 39])
    def test_short_values_are_padded_to_width(self, value):
        result = pad(value, 40)

        assert len(result) == 40
        assert result.startswith(value)
        assert result[len(value) :] == " " * (40 - len(value))

    def test_long_values_are_clipped_with_two_spaces(self):
        value = "a-really-long-username-that-does-not-fit-the-column@example.com"

        result = pad(value, 40)

        assert len(result) == 40
        assert result == value[:38] + "  "

    def test_value_filling_the_width_is_clipped(self):
        value = "y" * 10

        assert pad(value, 10) == "y" * 8 + "  "

    def test_minimum_width(self):
        assert pad("abc", 2) == "  "
        assert pad("a", 2) == "a "


class TestRolePrinter:
    """Test cases for RolePrinter."""

    def test_format_joins_columns_with_single_spaces(self):
        printer, _ = _printer(width=10)

        line = printer.format("alice", "id-1", ["OrganizationAdmin", "ClusterEditor"])

        assert line == "alice      id-1       OrganizationAdmin ClusterEditor"

    def test_roles_keep_resolution_order(self):
        assert join_roles(["first", "second", "third"]) == "first second third"

    def test_format_without_roles(self):
        printer, _ = _printer(width=6)

        assert printer.format("bob", "42", []) == "bob    42     "

    def test_header(self):
        printer, _ = _printer()

        assert printer.header() == "USER" + " " * 36 + " " + "USER ID" + " " * 33 + " ROLES"

    def test_print_header_adds_blank_line(self):
        printer, buffer = _printer(width=8)

        printer.print_header()

        assert buffer.getvalue() == "USER     USER ID  ROLES\n\n"

    def test_emit_counts_lines_and_ignores_markup(self):
        printer, buffer = _printer(width=12)

        printer.print_account("[bold]eve[/bold]", ":smile:", ["Role"])

        assert printer.lines_printed == 1
        assert "[bold]eve[  " in buffer.getvalue()
        assert ":smile:" in buffer.getvalue()

    def test_halted_printer_drops_lines(self):
        printer, buffer = _printer(width=12)
        stopped = []
        printer.halted = lambda: bool(stopped)

        assert printer.print_account("alice", "id-1", ["A"])
        stopped.append(True)
        assert not printer.print_account("bob", "id-2", ["A"])

        assert printer.lines_printed == 1
        assert "bob" not in buffer.getvalue()

    def test_width_below_two_is_rejected(self):
        with pytest.raises(ValueError):
            RolePrinter(width=1)
