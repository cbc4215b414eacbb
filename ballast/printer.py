"""Coloured, chainable status output for the terminal."""

from __future__ import annotations

import math
import sys
from decimal import Decimal
from enum import Enum
from typing import TextIO

_RESET = "\x1b[0m"


class _Color(Enum):
    WHITE = "37"
    GREEN = "32"
    YELLOW = "33"
    RED = "31"


def sign_string(num: float) -> str:
    """Return ``"+"`` for non-negative numbers and an empty string otherwise."""
    if num >= 0.0:
        return "+"
    return ""


def _format_number(value: float) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        text = str(int(value))
        return "-0" if value == 0 and math.copysign(1.0, value) < 0 else text
    return format(Decimal(repr(value)), "f")


class Printer:
    """Writes labelled status lines; every method returns the printer for chaining."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        isatty = getattr(self._stream, "isatty", None)
        self._is_term = bool(isatty()) if callable(isatty) else False

    def _style(self, text: str, color: _Color, bold: bool = False) -> str:
        if not self._is_term:
            return text
        codes = color.value + (";1" if bold else "")
        return f"\x1b[{codes}m{text}{_RESET}"

    def _write_line(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()

    def _titled(self, color: _Color, title: str, description: str, indent: int) -> Printer:
        self._write_line(
            " " * max(indent, 0)
            + self._style(title, color, bold=True)
            + " "
            + self._style(description, _Color.WHITE)
        )
        return self

    def print_with_green(self, title: str, description: str, indent: int = 0) -> Printer:
        return self._titled(_Color.GREEN, title, description, indent)

    def print_with_yellow(self, title: str, description: str, indent: int = 0) -> Printer:
        return self._titled(_Color.YELLOW, title, description, indent)

    def print_with_red(self, title: str, description: str, indent: int = 0) -> Printer:
        return self._titled(_Color.RED, title, description, indent)

    def print_stat(self, title: str, val: float, diff: float | None, unit: str) -> Printer:
        """Print a statistic, with its change against a previous run when known."""
        head = f"    {self._style(title, _Color.WHITE)}: {self._style(_format_number(val), _Color.WHITE)} "
        if diff is None:
            tail = self._style(unit, _Color.WHITE)
        else:
            color = _Color.RED if diff > 0.0 else _Color.GREEN
            tail = self._style(f"({sign_string(diff)}{_format_number(diff)}{unit})", color)
        self._write_line(head + tail)
        return self

    def clear_previous(self) -> Printer:
        """Erase the last written line on a terminal."""
        if self._is_term:
            self._stream.write("\x1b[1A\r\x1b[2K")
            self._stream.flush()
        return self

    def blank_line(self) -> Printer:
        self._write_line("")
        return self