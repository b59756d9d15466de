"""Number parsing and value rendering used by the argument parser."""

from __future__ import annotations

import enum
import re
import sys
from collections.abc import Iterable
from typing import Any

_REPR_MAX_CONTAINER_SIZE = 5
_C_SPACE = " \t\n\v\f\r"

_HEX_FLOAT = re.compile(
    r"[-+]?0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)(?:[pP][-+]?[0-9]+)?"
)
_SPECIAL_FLOAT = re.compile(r"[-+]?(?:inf(?:inity)?|nan(?:\([0-9A-Za-z_]*\))?)", re.IGNORECASE)
_DECIMAL_FLOAT = re.compile(r"[-+]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")


class CharsFormat(enum.IntFlag):
    """Accepted spellings of a floating-point number."""

    SCIENTIFIC = 0x1
    FIXED = 0x2
    HEX = 0x4
    GENERAL = FIXED | SCIENTIFIC


def _is_container(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, Iterable) and hasattr(value, "__len__")


def value_repr(value: Any) -> str:
    """Render a value for help text: booleans, quoted strings, braced containers."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if _is_container(value):
        items = list(value)
        size = len(items)
        out = "{"
        if size > 1:
            out += value_repr(items[0])
            middle = items[1:min(size, _REPR_MAX_CONTAINER_SIZE) - 1]
            out += "".join(" " + value_repr(item) for item in middle)
            out += " " if size <= _REPR_MAX_CONTAINER_SIZE else "..."
        if size > 0:
            out += value_repr(items[-1])
        return out + "}"
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def consume_hex_prefix(text: str) -> tuple[bool, str]:
    """Strip a leading ``0x``/``0X``; report whether one was there."""
    if text.startswith(("0x", "0X")):
        return True, text[2:]
    return False, text


def _digit_value(char: str) -> int:
    if "0" <= char <= "9":
        return ord(char) - ord("0")
    lower = char.lower()
    if "a" <= lower <= "z":
        return ord(lower) - ord("a") + 10
    return 99


def _from_chars(text: str, base: int) -> int:
    position = 1 if text.startswith("-") else 0
    start = position
    while position < len(text) and _digit_value(text[position]) < base:
        position += 1
    if position == start:
        raise ValueError("pattern not found")
    if position != len(text):
        raise ValueError("pattern does not match to the end")
    return int(text[:position], base)


def parse_integer(text: str, radix: int = 0) -> int:
    """Parse a whole string as an integer.

    Radix 0 picks the base from the spelling: ``0x`` for hexadecimal, a
    leading ``0`` for octal, decimal otherwise. Radix 16 requires ``0x``.
    """
    if radix == 0:
        is_hex, rest = consume_hex_prefix(text)
        if is_hex:
            return _from_chars(rest, 16)
        if text.startswith("0"):
            return _from_chars(rest, 8)
        return _from_chars(rest, 10)
    if radix == 16:
        is_hex, rest = consume_hex_prefix(text)
        if is_hex:
            return _from_chars(rest, 16)
        raise ValueError("pattern not found")
    if not 2 <= radix <= 36:
        raise ValueError(f"unsupported radix {radix}")
    return _from_chars(text, radix)


def _check_range(value: float, mantissa: str, significant: str) -> float:
    if value in (float("inf"), float("-inf")):
        raise OverflowError("not representable")
    if any(char in significant for char in mantissa):
        if value == 0.0 or abs(value) < sys.float_info.min:
            raise OverflowError("not representable")
    return value


def _strtod(text: str) -> tuple[float, int]:
    match = _HEX_FLOAT.match(text)
    if match:
        literal = match.group()
        try:
            value = float.fromhex(literal)
        except OverflowError as exc:
            raise OverflowError("not representable") from exc
        mantissa = re.split(r"[pP]", literal.lstrip("+-")[2:])[0]
        return _check_range(value, mantissa, "123456789abcdefABCDEF"), match.end()

    match = _SPECIAL_FLOAT.match(text)
    if match:
        literal = match.group()
        sign = "-" if literal.startswith("-") else ""
        body = literal.lstrip("+-").lower()
        value = float(sign + ("nan" if body.startswith("nan") else "inf"))
        return value, match.end()

    match = _DECIMAL_FLOAT.match(text)
    if match:
        literal = match.group()
        mantissa = re.split(r"[eE]", literal)[0]
        return _check_range(float(literal), mantissa, "123456789"), match.end()

    return 0.0, 0


def _do_strtod(text: str) -> float:
    if not text or text[0] in _C_SPACE or text[0] == "+":
        raise ValueError("pattern not found")
    value, end = _strtod(text)
    if end == len(text):
        return value
    raise ValueError("pattern does not match to the end")


def parse_float(text: str, fmt: CharsFormat = CharsFormat.GENERAL) -> float:
    """Parse a whole string as a float in the given format."""
    fmt = CharsFormat(fmt)
    is_hex, _ = consume_hex_prefix(text)
    if fmt == CharsFormat.HEX:
        if not is_hex:
            raise ValueError("hex format requires a hexfloat")
        return _do_strtod(text)
    if fmt == CharsFormat.GENERAL:
        if is_hex:
            raise ValueError("general format does not parse hexfloat")
        return _do_strtod(text)
    if fmt == CharsFormat.SCIENTIFIC:
        if is_hex:
            raise ValueError("scientific format does not parse hexfloat")
        if "e" not in text and "E" not in text:
            raise ValueError("scientific format requires exponent part")
        return _do_strtod(text)
    if fmt == CharsFormat.FIXED:
        if is_hex:
            raise ValueError("fixed format does not parse hexfloat")
        if "e" in text or "E" in text:
            raise ValueError("fixed format does not parse exponent part")
        return _do_strtod(text)
    raise ValueError(f"unsupported format {fmt!r}")


def join(items: Iterable[Any], separator: str) -> str:
    """Join the string forms of ``items`` with ``separator``."""
    return separator.join(str(item) for item in items)