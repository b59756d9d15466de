import pytest
from hypothesis import given
from hypothesis import strategies as st

from pixelhide.argument import (
    UNBOUNDED,
    Argument,
    ArgumentError,
    ArgumentLogicError,
    NargsPattern,
    NArgsRange,
    is_decimal_literal,
    is_optional,
    is_positional,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0", True),
        ("01", False),
        ("1.", True),
        (".5", True),
        (".e5", False),
        ("1e-3", True),
        ("abc", False),
        ("", False),
    ],
)
def test_is_decimal_literal(text, expected):
    assert is_decimal_literal(text) is expected


@pytest.mark.parametrize(
    "name, expected",
    [("-", True), ("-1", True), ("-2.5", True), ("-x", False), ("--long", False), ("file", True), ("", True)],
)
def test_is_positional(name, expected):
    assert is_positional(name, "-") is expected


@given(st.text(max_size=8))
def test_optional_is_inverse_of_positional(name):
    assert is_optional(name, "-") is (not is_positional(name, "-"))


def test_names_sorted_shortest_first():
    arg = Argument("--verbose", "-v", "--debug")
    assert arg.names == ("-v", "--debug", "--verbose")
    assert arg.optional is True
    assert Argument("file").optional is False


def test_consume_single_value():
    arg = Argument("-o")
    assert arg.consume(["a.txt", "b"], "-o") == 1
    assert arg.values == ("a.txt",)
    assert arg.used_name == "-o"
    assert arg.is_used is True


def test_consume_stops_at_option():
    arg = Argument("files").nargs(NargsPattern.ANY)
    assert arg.consume(["a", "b", "-x", "c"]) == 2
    assert arg.get(list) == ["a", "b"]


def test_negative_numbers_are_values():
    arg = Argument("nums").nargs(NargsPattern.ANY)
    assert arg.consume(["-1", "-2.5"]) == 2


def test_remaining_takes_option_like_values():
    arg = Argument("rest").remaining()
    assert arg.consume(["-a", "b", "--c"]) == 3
    assert arg.values == ("-a", "b", "--c")


def test_too_few_before_option():
    arg = Argument("-p").nargs(2)
    with pytest.raises(ArgumentError, match="Too few arguments"):
        arg.consume(["a", "-x"], "-p")


def test_too_few_values_at_end():
    arg = Argument("-p").nargs(2)
    with pytest.raises(ArgumentError, match="Too few arguments for '-p'."):
        arg.consume(["a"], "-p")


def test_too_few_with_default_consumes_nothing():
    arg = Argument("-p").nargs(2).default_value("z")
    assert arg.consume(["a"], "-p") == 0
    assert arg.get() == "z"


def test_duplicate_argument():
    arg = Argument("-o")
    arg.consume(["a"], "-o")
    with pytest.raises(ArgumentError, match="Duplicate argument"):
        arg.consume(["b"], "-o")


def test_append_collects_repeats():
    arg = Argument("-I").append()
    arg.consume(["a"], "-I")
    arg.consume(["b"], "-I")
    assert arg.get(list) == ["a", "b"]


def test_implicit_value():
    arg = Argument("-v").default_value(False).implicit_value(True)
    assert arg.consume(["x"], "-v") == 0
    assert arg.get() is True
    assert arg.nargs_range == NArgsRange(0, 0)


def test_action_with_bound_arguments():
    arg = Argument("-n").action(lambda prefix, value: prefix + value, "p:")
    arg.consume(["a"], "-n")
    assert arg.get() == "p:a"


def test_observing_action_records_placeholders():
    seen = []
    arg = Argument("-n").nargs(2).action(seen.append)
    arg.consume(["a", "b"], "-n")
    assert seen == ["a", "b"]
    assert arg.values == (None, None)


@given(st.integers(min_value=0, max_value=2**64))
def test_scan_hex_round_trip(number):
    arg = Argument("-x").scan("x", int)
    arg.consume([f"0x{number:x}"], "-x")
    assert arg.get(int) == number


@given(st.integers(min_value=-(2**40), max_value=2**40))
def test_scan_decimal_round_trip(number):
    arg = Argument("n").scan("d", int)
    arg.consume([str(number)])
    assert arg.get(int) == number


@given(st.floats(allow_nan=False, allow_infinity=False, allow_subnormal=False))
def test_scan_general_float_round_trip(value):
    arg = Argument("f").scan("g", float)
    arg.consume([repr(value)])
    assert arg.get(float) == value


def test_scan_unsigned_rejects_negative():
    arg = Argument("-u").scan("u", int)
    with pytest.raises(ValueError):
        arg.consume(["-5"], "-u")


def test_scan_fixed_rejects_exponent():
    arg = Argument("-f").scan("f", float)
    with pytest.raises(ValueError):
        arg.consume(["1e5"], "-f")


def test_scan_without_specification():
    with pytest.raises(ArgumentLogicError):
        Argument("-x").scan("x", float)


def test_validate_required_missing():
    arg = Argument("-o", "--output").required()
    with pytest.raises(ArgumentError, match="-o: required."):
        arg.validate()


def test_validate_required_without_value():
    arg = Argument("-o").required().nargs(NargsPattern.ANY)
    arg.consume([], "--output")
    with pytest.raises(ArgumentError, match="--output: no value provided."):
        arg.validate()


def test_validate_positional_exact_count():
    arg = Argument("file").nargs(2)
    with pytest.raises(ArgumentError, match=r"file: 2 argument\(s\) expected. 0 provided."):
        arg.validate()


def test_validate_positional_range_and_open_range():
    with pytest.raises(ArgumentError, match="file: 1 to 3 argument"):
        Argument("file").nargs(1, 3).validate()
    with pytest.raises(ArgumentError, match="file: 1 or more argument"):
        Argument("file").nargs(NargsPattern.AT_LEAST_ONE).validate()


def test_validate_accepts_consumed_positional():
    arg = Argument("file")
    arg.consume(["a"])
    arg.validate()
    assert arg.get() == "a"


def test_get_without_value():
    arg = Argument("-o", "--out")
    with pytest.raises(ArgumentLogicError, match="No value provided for '--out'."):
        arg.get()


def test_get_list_without_values_is_empty():
    assert Argument("files").nargs(NargsPattern.ANY).get(list) == []


def test_get_wrong_type():
    arg = Argument("-o")
    arg.consume(["a"], "-o")
    with pytest.raises(TypeError):
        arg.get(int)


def test_present():
    arg = Argument("-o")
    assert arg.present() is None
    arg.consume(["a"], "-o")
    assert arg.present(str) == "a"
    with pytest.raises(ArgumentLogicError, match="always presents"):
        Argument("-d").default_value(1).present()


def test_inline_usage():
    assert Argument("-o", "--output").inline_usage() == "[--output VAR]"
    required = Argument("-o", "--output").metavar("FILE").nargs(2).required()
    assert required.inline_usage() == "--output FILE..."
    assert Argument("--flag").nargs(0).inline_usage() == "[--flag]"


@pytest.mark.parametrize(
    "arg",
    [
        Argument("-o", "--output").metavar("FILE"),
        Argument("-o", "--output"),
        Argument("source", "src"),
        Argument("file").metavar("PATH"),
    ],
)
def test_arguments_length_matches_names_column(arg):
    assert arg.arguments_length() == len(format(arg).split("\t")[0])


def test_format_with_default():
    arg = Argument("-o", "--output").help("Where to write").default_value("out.png")
    text = format(arg, "30")
    assert text.startswith("  -o, --output".ljust(30) + "\tWhere to write ")
    assert text.endswith('[default: "out.png"]\n')


def test_format_required():
    assert str(Argument("-o").required()).endswith("[required]\n")


def test_nargs_range_text():
    assert str(NArgsRange(2, 2)) == "[nargs: 2] "
    assert str(NArgsRange(1, 1)) == ""
    assert str(NArgsRange(1, UNBOUNDED)) == "[nargs: 1 or more] "
    assert str(NArgsRange(1, 3)) == "[nargs=1..3] "


def test_nargs_range_queries():
    span = NArgsRange(1, 3)
    assert span.contains(1) and span.contains(3)
    assert not span.contains(4)
    assert not span.is_exact()
    assert span.is_right_bounded()
    assert not NArgsRange(0, UNBOUNDED).is_right_bounded()


def test_nargs_range_invalid():
    with pytest.raises(ArgumentLogicError, match="invalid"):
        NArgsRange(3, 1)