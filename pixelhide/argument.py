"""A single command-line argument: its names, value count and parsed values."""

from __future__ import annotations

import enum
import re
import sys
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from .numparse import CharsFormat, join, parse_float, parse_integer, value_repr

UNBOUNDED = sys.maxsize
"""Upper bound used for argument counts without a limit."""

_MISSING = object()

_DECIMAL_LITERAL = re.compile(
    r"""
      (?: 0 | [1-9][0-9]* )
    | (?: [0-9]+ \. [0-9]* | \. [0-9]+ ) (?: [eE] [+-]? [0-9]+ )?
    | [0-9]+ [eE] [+-]? [0-9]+
    """,
    re.VERBOSE,
)

_INTEGER_SHAPES = {
    "d": (10, False),
    "i": (0, False),
    "u": (10, True),
    "o": (8, True),
    "x": (16, True),
    "X": (16, True),
}

_FLOAT_SHAPES = {
    "a": CharsFormat.HEX,
    "A": CharsFormat.HEX,
    "e": CharsFormat.SCIENTIFIC,
    "E": CharsFormat.SCIENTIFIC,
    "f": CharsFormat.FIXED,
    "F": CharsFormat.FIXED,
    "g": CharsFormat.GENERAL,
    "G": CharsFormat.GENERAL,
}

_CONTAINER_KINDS = (list, tuple)


class ArgumentError(Exception):
    """Raised when the command line does not fit the declared arguments."""


class ArgumentLogicError(Exception):
    """Raised when arguments are declared or queried inconsistently."""


class NargsPattern(enum.Enum):
    """Common shapes of the number of values an argument takes."""

    OPTIONAL = "optional"
    ANY = "any"
    AT_LEAST_ONE = "at_least_one"


@dataclass(frozen=True)
class NArgsRange:
    """Inclusive range of how many values an argument accepts."""

    minimum: int
    maximum: int

    def __post_init__(self) -> None:
        if self.minimum < 0 or self.minimum > self.maximum:
            raise ArgumentLogicError("Range of number of arguments is invalid")

    def contains(self, value: int) -> bool:
        """Whether ``value`` lies within the range."""
        return self.minimum <= value <= self.maximum

    def is_exact(self) -> bool:
        """Whether exactly one count is accepted."""
        return self.minimum == self.maximum

    def is_right_bounded(self) -> bool:
        """Whether the range has an upper limit."""
        return self.maximum < UNBOUNDED

    def __str__(self) -> str:
        if self.is_exact():
            if self.minimum not in (0, 1):
                return f"[nargs: {self.minimum}] "
            return ""
        if not self.is_right_bounded():
            return f"[nargs: {self.minimum} or more] "
        return f"[nargs={self.minimum}..{self.maximum}] "


def is_decimal_literal(text: str) -> bool:
    """Whether ``text`` spells an unsigned decimal number such as ``1``, ``.5`` or ``2e-3``."""
    return _DECIMAL_LITERAL.fullmatch(text) is not None


def is_positional(name: str, prefix_chars: str = "-") -> bool:
    """Whether ``name`` is positional: empty, a lone prefix, a negative number, or unprefixed."""
    if not name:
        return True
    if name[0] in prefix_chars:
        rest = name[1:]
        if not rest:
            return True
        return is_decimal_literal(rest)
    return True


def is_optional(name: str, prefix_chars: str = "-") -> bool:
    """Whether ``name`` looks like an option rather than a positional value."""
    return not is_positional(name, prefix_chars)


def _integer_parser(radix: int, unsigned: bool) -> Callable[[str], int]:
    def parse(text: str) -> int:
        if unsigned and text.startswith("-"):
            raise ValueError("pattern not found")
        return parse_integer(text, radix)

    return parse


def _float_parser(fmt: CharsFormat) -> Callable[[str], float]:
    def parse(text: str) -> float:
        return parse_float(text, fmt)

    return parse


def _cast(value: Any, kind: type | None) -> Any:
    if kind is None or isinstance(value, kind):
        return value
    raise TypeError(f"value {value!r} is not of type {kind.__name__}")


class Argument:
    """One positional argument or option, configured through chained calls."""

    def __init__(self, *names: str, prefix_chars: str = "-") -> None:
        if not names:
            raise ArgumentLogicError("An argument needs at least one name")
        self.prefix_chars = prefix_chars
        self._names = tuple(sorted(names, key=lambda n: (len(n), n)))
        self._optional = any(is_optional(n, prefix_chars) for n in names)
        self._used_name = ""
        self._help = ""
        self._metavar = ""
        self._default: Any = _MISSING
        self._default_repr = ""
        self._implicit: Any = None
        # Values are kept as the strings given unless an action converts them.
        self._action: Callable[[str], Any] = str
        self._values: list[Any] = []
        self._range = NArgsRange(1, 1)
        self._accepts_optional_like = False
        self._required = False
        self._repeatable = False
        self._used = False

    # Read-only views used by the parser and for inspection.

    @property
    def names(self) -> tuple[str, ...]:
        """All names, shortest first."""
        return self._names

    @property
    def optional(self) -> bool:
        """Whether this is an option rather than a positional argument."""
        return self._optional

    @property
    def used_name(self) -> str:
        """The name under which the argument was last given."""
        return self._used_name

    @property
    def help_text(self) -> str:
        return self._help

    @property
    def metavar_text(self) -> str:
        return self._metavar

    @property
    def nargs_range(self) -> NArgsRange:
        return self._range

    @property
    def is_required(self) -> bool:
        return self._required

    @property
    def is_used(self) -> bool:
        """Whether the argument appeared on the command line."""
        return self._used

    @property
    def has_default(self) -> bool:
        return self._default is not _MISSING

    @property
    def default_repr(self) -> str:
        return self._default_repr

    @property
    def accepts_optional_like_value(self) -> bool:
        return self._accepts_optional_like

    @property
    def values(self) -> tuple[Any, ...]:
        """The values collected so far."""
        return tuple(self._values)

    # Configuration.

    def help(self, text: str) -> "Argument":
        """Set the help text."""
        self._help = text
        return self

    def metavar(self, metavar: str) -> "Argument":
        """Set the placeholder shown for the value in help and usage."""
        self._metavar = metavar
        return self

    def default_value(self, value: Any) -> "Argument":
        """Set the value used when the argument is not given."""
        self._default_repr = value_repr(value)
        self._default = value
        return self

    def required(self) -> "Argument":
        """Mark the argument as required."""
        self._required = True
        return self

    def implicit_value(self, value: Any) -> "Argument":
        """Store ``value`` when the argument is given, and take no values."""
        self._implicit = value
        self._range = NArgsRange(0, 0)
        return self

    def action(self, func: Callable[..., Any], *args: Any) -> "Argument":
        """Convert each value with ``func(*args, value)``.

        An action that returns ``None`` for every value only observes them;
        the argument then records ``None`` placeholders for the values seen.
        """
        if args:
            self._action = lambda value: func(*args, value)
        else:
            self._action = func
        return self

    def append(self) -> "Argument":
        """Allow the argument to be given more than once."""
        self._repeatable = True
        return self

    def scan(self, shape: str, kind: type) -> "Argument":
        """Parse values as numbers, in the manner of a scanf conversion ``shape``."""
        if kind is int and shape in _INTEGER_SHAPES:
            radix, unsigned = _INTEGER_SHAPES[shape]
            return self.action(_integer_parser(radix, unsigned))
        if kind is float and shape in _FLOAT_SHAPES:
            return self.action(_float_parser(_FLOAT_SHAPES[shape]))
        raise ArgumentLogicError(
            f"No scan specification for shape {shape!r} and type {getattr(kind, '__name__', kind)}"
        )

    def nargs(self, minimum: int | NargsPattern, maximum: int | None = None) -> "Argument":
        """Set how many values the argument takes: a count, a range or a pattern."""
        if isinstance(minimum, NargsPattern):
            self._range = {
                NargsPattern.OPTIONAL: NArgsRange(0, 1),
                NargsPattern.ANY: NArgsRange(0, UNBOUNDED),
                NargsPattern.AT_LEAST_ONE: NArgsRange(1, UNBOUNDED),
            }[minimum]
        else:
            self._range = NArgsRange(minimum, minimum if maximum is None else maximum)
        return self

    def remaining(self) -> "Argument":
        """Take every value that follows, option-like ones included."""
        self._accepts_optional_like = True
        return self.nargs(NargsPattern.ANY)

    # Parsing.

    def consume(self, arguments: Sequence[str], used_name: str = "") -> int:
        """Take values from the front of ``arguments``; return how many were taken."""
        if not self._repeatable and self._used:
            raise ArgumentError("Duplicate argument")
        self._used = True
        self._used_name = used_name

        low, high = self._range.minimum, self._range.maximum
        if high == 0:
            self._values.append(self._implicit)
            self._action("")
            return 0

        if len(arguments) >= low:
            window = list(arguments[:min(len(arguments), high)])
            if not self._accepts_optional_like:
                end = next(
                    (i for i, item in enumerate(window) if is_optional(item, self.prefix_chars)),
                    len(window),
                )
                if end < low:
                    raise ArgumentError("Too few arguments")
                window = window[:end]
            self._apply(window)
            return len(window)

        if self.has_default:
            return 0
        raise ArgumentError(f"Too few arguments for '{self._used_name}'.")

    def _apply(self, window: list[str]) -> None:
        results = [self._action(item) for item in window]
        if results and all(result is None for result in results):
            if not self.has_default and not self._accepts_optional_like:
                count = len(window)
                del self._values[count:]
                self._values.extend([None] * (count - len(self._values)))
        else:
            self._values.extend(results)

    def validate(self) -> None:
        """Check the collected values against the declaration."""
        if self._optional:
            if not self._used and not self.has_default and self._required:
                raise ArgumentError(f"{self._names[0]}: required.")
            if self._used and self._required and not self._values:
                raise ArgumentError(f"{self._used_name}: no value provided.")
        elif not self._range.contains(len(self._values)) and not self.has_default:
            self._raise_nargs_error()

    def _raise_nargs_error(self) -> None:
        name = self._used_name or self._names[0]
        if self._range.is_exact():
            expected = f"{self._range.minimum}"
        elif self._range.is_right_bounded():
            expected = f"{self._range.minimum} to {self._range.maximum}"
        else:
            expected = f"{self._range.minimum} or more"
        raise ArgumentError(
            f"{name}: {expected} argument(s) expected. {len(self._values)} provided."
        )

    # Help output.

    def inline_usage(self) -> str:
        """The argument as it appears in a usage line, e.g. ``[--output VAR]``."""
        longest = max(self._names, key=len)
        usage = longest
        if self._range.maximum > 0:
            usage += " " + (self._metavar or "VAR")
            if self._range.maximum > 1:
                usage += "..."
        return usage if self._required else f"[{usage}]"

    def arguments_length(self) -> int:
        """Width of the names column for this argument in help output."""
        names_size = sum(len(name) for name in self._names)
        if is_positional(self._names[0], self.prefix_chars):
            if self._metavar:
                return 2 + len(self._metavar)
            return 2 + names_size + len(self._names) - 1
        size = names_size + 2 * (len(self._names) - 1)
        if self._metavar and self._range == NArgsRange(1, 1):
            size += len(self._metavar) + 1
        return size + 2

    def __format__(self, spec: str) -> str:
        width = int(spec) if spec else 0
        if is_positional(self._names[0], self.prefix_chars):
            label = self._metavar or join(self._names, " ")
        else:
            label = join(self._names, ", ")
            if self._metavar and self._range == NArgsRange(1, 1):
                label += " " + self._metavar
        line = ("  " + label).ljust(width) + "\t" + self._help
        if self._help:
            line += " "
        line += str(self._range)
        if self.has_default and self._range != NArgsRange(0, 0):
            line += f"[default: {self._default_repr}]"
        elif self._required:
            line += "[required]"
        return line + "\n"

    def __str__(self) -> str:
        return format(self)

    # Values.

    def get(self, kind: type | None = None) -> Any:
        """Return the value (or, for ``list``/``tuple``, all values), falling back to the default."""
        container = kind in _CONTAINER_KINDS
        if self._values:
            if container:
                return kind(self._values)
            return _cast(self._values[0], kind)
        if self.has_default:
            return _cast(self._default, kind)
        if container and not self._accepts_optional_like:
            return kind()
        raise ArgumentLogicError(f"No value provided for '{self._names[-1]}'.")

    def present(self, kind: type | None = None) -> Any:
        """Return the given value, or ``None`` if the argument was not given."""
        if self.has_default:
            raise ArgumentLogicError("Argument with default value always presents")
        if not self._values:
            return None
        if kind in _CONTAINER_KINDS:
            return kind(self._values)
        return _cast(self._values[0], kind)