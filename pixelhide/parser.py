"""Command-line parser built from :class:`~pixelhide.argument.Argument` declarations."""

from __future__ import annotations

import copy
import enum
import sys
from typing import Any, NoReturn, Sequence

from .argument import (
    Argument,
    ArgumentError,
    ArgumentLogicError,
    is_positional,
)


class DefaultArguments(enum.IntFlag):
    """Which built-in options a parser adds on creation."""

    NONE = 0
    HELP = 1
    VERSION = 2
    ALL = HELP | VERSION


class ArgumentParser:
    """Parses a command line into declared positional arguments, options and subcommands."""

    def __init__(
        self,
        program_name: str = "",
        version: str = "1.0",
        add_args: DefaultArguments = DefaultArguments.ALL,
    ) -> None:
        self._program_name = program_name
        self._version = version
        self._description = ""
        self._epilog = ""
        self._prefix_chars = "-"
        self._assign_chars = "="
        self._is_parsed = False
        self._positional: list[Argument] = []
        self._optional: list[Argument] = []
        self._map: dict[str, Argument] = {}
        self.parser_path = program_name
        self._subparsers: dict[str, ArgumentParser] = {}
        self._subparser_used: dict[str, bool] = {}

        add_args = DefaultArguments(add_args)
        if add_args & DefaultArguments.HELP:
            (
                self.add_argument("-h", "--help")
                .action(self._show_help)
                .default_value(False)
                .help("shows help message and exits")
                .implicit_value(True)
                .nargs(0)
            )
        if add_args & DefaultArguments.VERSION:
            (
                self.add_argument("-v", "--version")
                .action(self._show_version)
                .default_value(False)
                .help("prints version information and exits")
                .implicit_value(True)
                .nargs(0)
            )

    @property
    def program_name(self) -> str:
        return self._program_name

    @property
    def description(self) -> str:
        return self._description

    def _show_help(self, _value: str) -> NoReturn:
        sys.stdout.write(self.help())
        raise SystemExit(0)

    def _show_version(self, _value: str) -> NoReturn:
        print(self._version)
        raise SystemExit(0)

    def __bool__(self) -> bool:
        argument_used = any(argument.is_used for argument in self._map.values())
        subcommand_used = any(self._subparser_used.values())
        return self._is_parsed and (argument_used or subcommand_used)

    # Declaration.

    def _index(self, argument: Argument) -> None:
        for name in argument.names:
            self._map[name] = argument

    def add_argument(self, *args: str) -> Argument:
        """Declare an argument under the given names and return it for configuration."""
        argument = Argument(*args, prefix_chars=self._prefix_chars)
        (self._optional if argument.optional else self._positional).append(argument)
        self._index(argument)
        return argument

    def add_parents(self, *args: "ArgumentParser") -> "ArgumentParser":
        """Copy every argument declared in the given parsers into this one."""
        for parent in args:
            for argument in parent._positional:
                duplicate = copy.deepcopy(argument)
                self._positional.append(duplicate)
                self._index(duplicate)
            for argument in parent._optional:
                duplicate = copy.deepcopy(argument)
                self._optional.append(duplicate)
                self._index(duplicate)
        return self

    def add_description(self, description: str) -> "ArgumentParser":
        self._description = description
        return self

    def add_epilog(self, epilog: str) -> "ArgumentParser":
        self._epilog = epilog
        return self

    def set_prefix_chars(self, prefix_chars: str) -> "ArgumentParser":
        """Set the characters that introduce an option."""
        if not prefix_chars:
            raise ArgumentLogicError("At least one prefix character is needed")
        self._prefix_chars = prefix_chars
        for argument in self._positional + self._optional:
            argument.prefix_chars = prefix_chars
        return self

    def set_assign_chars(self, assign_chars: str) -> "ArgumentParser":
        """Set the characters that join an option to its value, as in ``--out=x``."""
        self._assign_chars = assign_chars
        return self

    def add_subparser(self, parser: "ArgumentParser") -> None:
        """Register ``parser`` as a subcommand named after its program name."""
        parser.parser_path = f"{self._program_name} {parser._program_name}"
        self._subparsers[parser._program_name] = parser
        self._subparser_used[parser._program_name] = False

    # Parsing.

    def parse_args(self, arguments: Sequence[str]) -> None:
        """Parse ``arguments`` (program name first) and validate the result."""
        self._parse(list(arguments), known=False)
        self._validate()

    def parse_known_args(self, arguments: Sequence[str]) -> list[str]:
        """Parse ``arguments``, returning those no declaration accepted."""
        unknown = self._parse(list(arguments), known=True)
        self._validate()
        return unknown

    def _validate(self) -> None:
        for _name, argument in sorted(self._map.items()):
            argument.validate()

    def _starts_with_prefix(self, text: str) -> bool:
        if not text:
            return False
        if "/" in self._prefix_chars:
            return text[0] in self._prefix_chars
        return len(text) > 1 and text[0] in self._prefix_chars and text[1] in self._prefix_chars

    def _preprocess(self, raw: list[str]) -> list[str]:
        arguments: list[str] = []
        for arg in raw:
            position = next((i for i, char in enumerate(arg) if char in self._assign_chars), -1)
            if arg not in self._map and self._starts_with_prefix(arg) and position >= 0:
                name = arg[:position]
                if name in self._map:
                    arguments.extend((name, arg[position + 1:]))
                    continue
            arguments.append(arg)
        return arguments

    def _parse(self, raw: list[str], known: bool) -> list[str]:
        arguments = self._preprocess(raw)
        unknown: list[str] = []
        if not self._program_name and arguments:
            self._program_name = arguments[0]

        positional_index = 0
        index = 1
        while index < len(arguments):
            current = arguments[index]
            if is_positional(current, self._prefix_chars):
                if positional_index == len(self._positional):
                    subparser = self._subparsers.get(current)
                    if subparser is not None:
                        self._is_parsed = True
                        self._subparser_used[current] = True
                        if known:
                            return subparser._parse(arguments[index:], known=True)
                        subparser.parse_args(arguments[index:])
                        return unknown
                    if not known:
                        raise ArgumentError("Maximum number of positional arguments exceeded")
                    unknown.append(current)
                    index += 1
                    continue
                argument = self._positional[positional_index]
                positional_index += 1
                index += argument.consume(arguments[index:])
                continue

            argument = self._map.get(current)
            if argument is not None:
                index += 1
                index += argument.consume(arguments[index:], current)
            elif (
                len(current) > 1
                and current[0] in self._prefix_chars
                and current[1] not in self._prefix_chars
            ):
                index += 1
                for char in current[1:]:
                    name = "-" + char
                    flag = self._map.get(name)
                    if flag is None:
                        if not known:
                            raise ArgumentError(f"Unknown argument: {current}")
                        unknown.append(current)
                        break
                    index += flag.consume(arguments[index:], name)
            else:
                if not known:
                    raise ArgumentError(f"Unknown argument: {current}")
                unknown.append(current)
                index += 1

        self._is_parsed = True
        return unknown

    # Queries.

    def __getitem__(self, name: str) -> Argument:
        argument = self._map.get(name)
        if argument is not None:
            return argument
        if not name or name[0] not in self._prefix_chars:
            prefix = self._prefix_chars[0]
            for candidate in (prefix + name, prefix * 2 + name):
                argument = self._map.get(candidate)
                if argument is not None:
                    return argument
        raise ArgumentLogicError(f"No such argument: {name}")

    def get(self, name: str, kind: type | None = None) -> Any:
        """Return the parsed (or default) value of an argument."""
        if not self._is_parsed:
            raise ArgumentLogicError("Nothing parsed, no arguments are available.")
        return self[name].get(kind)

    def present(self, name: str, kind: type | None = None) -> Any:
        """Return the given value of an argument without a default, or ``None``."""
        return self[name].present(kind)

    def is_used(self, name: str) -> bool:
        """Whether the argument was given on the command line."""
        return self[name].is_used

    def is_subcommand_used(self, name: str) -> bool:
        """Whether the named subcommand was invoked."""
        return self._subparser_used[name]

    # Help.

    def _longest_argument_length(self) -> int:
        if not self._map:
            return 0
        lengths = [argument.arguments_length() for argument in self._map.values()]
        lengths.extend(len(command) for command in self._subparsers)
        return max(lengths)

    def usage(self) -> str:
        """The one-line usage summary."""
        parts = [f"Usage: {self._program_name}"]
        for argument in self._optional:
            first = argument.names[0]
            if first == "-v":
                continue
            parts.append("[-h]" if first == "-h" else argument.inline_usage())
        for argument in self._positional:
            parts.append(argument.metavar_text or argument.names[0])
        if self._subparsers:
            parts.append("{" + ",".join(sorted(self._subparsers)) + "}")
        return " ".join(parts)

    def help(self) -> str:
        """The full help message."""
        width = self._longest_argument_length()
        out = [self.usage(), "\n\n"]
        if self._description:
            out += [self._description, "\n\n"]
        if self._positional:
            out.append("Positional arguments:\n")
        out += [f"{argument:{width}}" for argument in self._positional]
        if self._optional:
            out.append(("\n" if self._positional else "") + "Optional arguments:\n")
        out += [f"{argument:{width}}" for argument in self._optional]
        if self._subparsers:
            separator = "\n" if self._positional or self._optional else ""
            out.append(separator + "Subcommands:\n")
            for command in sorted(self._subparsers):
                column = command.ljust(max(0, width - 2))
                out.append(f"  {column} {self._subparsers[command].description}\n")
        if self._epilog:
            out += ["\n", self._epilog, "\n\n"]
        return "".join(out)

    def __str__(self) -> str:
        return self.help()