"""Tests for the recursive-descent parser."""

import logging

import pytest

from lispy.exceptions import ParseError
from lispy.reader import List, Number, String, Symbol, parse, read, to_canonical, tokenize
from lispy.reader.parser import Parser

CANONICAL_CASES = [
    ("(+ 1 2)", "(+ 1 2)"),
    ("(+  1    2 )", "(+ 1 2)"),
    ("(  list 1 2 3)", "(list 1 2 3)"),
    ("(+  (- 3 2 ) 4)", "(+ (- 3 2) 4)"),
    ("()", "()"),
    ("( )", "()"),
    ("42", "42"),
    ("-7", "-7"),
    ('"hello"', '"hello"'),
    ("@x", "(deref x)"),
    ('(str "a b"   @count)', '(str "a b" (deref count))'),
]

MALFORMED_LINES = [
    "(+ 1 2",
    "(+ 1 2))",
    ")",
    '"unterminated',
    "+foo",
    "abc(",
    "-5abc",
    "@",
    "",
]


class TestAtoms:
    """Tests for top-level atoms."""

    def test_number(self):
        assert read("42") == Number(42)

    def test_negative_number(self):
        assert read("-5") == Number(-5)

    def test_lone_minus_is_symbol(self):
        assert read("-") == Symbol("-")

    @pytest.mark.parametrize("op", ["+", "-", "*", "/", "="])
    def test_operators(self, op):
        assert read(op) == Symbol(op)

    def test_alphanumeric_symbol(self):
        assert read("foo42") == Symbol("foo42")

    def test_digit_led_word_is_symbol(self):
        """A digit run that continues into letters is read as one symbol."""
        assert read("5abc") == Symbol("5abc")

    def test_string(self):
        assert read('"hello"') == String("hello")

    def test_string_keeps_contents_verbatim(self):
        """No escape processing; whitespace and parens are kept."""
        assert read('"a\\n (b)  c"') == String("a\\n (b)  c")

    def test_empty_string(self):
        assert read('""') == String("")

    def test_deref(self):
        assert read("@x") == List((Symbol("deref"), Symbol("x")))

    def test_int64_limits(self):
        assert read("9223372036854775807") == Number(2**63 - 1)
        assert read("-9223372036854775808") == Number(-(2**63))

    def test_surrounding_whitespace(self):
        assert read("   7 \t ") == Number(7)


class TestLists:
    """Tests for list parsing."""

    def test_flat_list(self):
        assert read("(+ 1 2 3 4)") == List.of("+", 1, 2, 3, 4)

    def test_nesting(self):
        assert read("(+ (- 3 2) 4)") == List(
            (Symbol("+"), List((Symbol("-"), Number(3), Number(2))), Number(4))
        )

    def test_empty_list(self):
        assert read("()") == List()

    def test_deep_nesting(self):
        assert read("((((x))))") == List.of(List.of(List.of(List.of("x"))))

    def test_minus_then_number_in_list(self):
        """'- 5' is an operator followed by a number, '-5' is one number."""
        assert read("(- 5)") == List.of("-", 5)
        assert read("(-5)") == List.of(-5)

    def test_minus_before_close(self):
        assert read("(1 -)") == List.of(1, "-")

    def test_deref_inside_list(self):
        assert read("(+ @x 1)") == List.of("+", List.of("deref", "x"), 1)

    def test_strings_inside_list(self):
        assert read('(concat "a" "b c")') == List.of("concat", String("a"), String("b c"))

    def test_adjacent_strings(self):
        assert read('("a""b")') == List((String("a"), String("b")))

    def test_whitespace_kinds_are_equivalent(self):
        assert read("(+\t1\n 2)") == read("(+ 1 2)")

    def test_space_inside_delimiters(self):
        assert read("(  a  )") == List.of("a")

    def test_symbol_ends_at_open_paren(self):
        """Structure characters end a name without any whitespace."""
        assert read("(f(x))") == List.of("f", List.of("x"))

    def test_number_ends_at_open_paren(self):
        assert read("(1(2))") == List.of(1, List.of(2))

    def test_symbol_ends_at_quote(self):
        assert read('(f"s")') == List.of("f", String("s"))

    def test_deref_ends_at_open_paren(self):
        assert read("(@x(y))") == List.of(List.of("deref", "x"), List.of("y"))

    def test_glued_structure_matches_tokenizer(self):
        line = "(f(x))"
        assert read(line).to_string() == to_canonical(tokenize(line)) == "(f (x))"


class TestParseRemaining:
    """Tests for parse() returning the unconsumed input."""

    def test_remaining_empty(self):
        result = parse("(a b)")
        assert result.expr == List.of("a", "b")
        assert result.remaining == ""

    def test_remaining_after_expression(self):
        result = parse("(+ 1 2) rest")
        assert result.expr == List.of("+", 1, 2)
        assert result.remaining == "rest"

    def test_two_atoms(self):
        result = parse("- 5")
        assert result.expr == Symbol("-")
        assert result.remaining == "5"

    def test_read_rejects_trailing_content(self):
        with pytest.raises(ParseError, match="Unexpected content after expression"):
            read("(a) (b)")

    def test_parser_object(self):
        parser = Parser("(x)")
        assert parser.read() == List.of("x")
        assert parser.pos == 3


class TestParseErrors:
    """Tests for malformed input and error traces."""

    @pytest.mark.parametrize("line", MALFORMED_LINES)
    def test_malformed_lines_fail(self, line):
        with pytest.raises(ParseError):
            read(line)

    def test_unterminated_list(self):
        with pytest.raises(ParseError) as exc:
            read("(+ 1 2")
        err = exc.value
        assert "Unterminated list" in err.message
        assert err.position == 6
        assert err.rules == ["lisp_expr", "expr", "list"]
        assert err.frames[-1].remaining == "(+ 1 2"

    def test_nested_failure_trace(self):
        """The trace lists every rule from the outermost inward."""
        with pytest.raises(ParseError) as exc:
            read('(a "b)')
        err = exc.value
        assert err.message == "Unterminated string"
        assert err.rules == ["lisp_expr", "expr", "list", "expr", "string"]
        assert [frame.position for frame in err.frames] == [0, 0, 0, 3, 3]

    def test_attempted_alternatives(self):
        with pytest.raises(ParseError) as exc:
            read(")")
        err = exc.value
        assert err.message == "Unexpected ')'"
        assert err.attempted == ["deref", "number", "string", "symbol", "list"]

    def test_unexpected_character(self):
        with pytest.raises(ParseError, match="Unexpected character '#'"):
            read("#")

    def test_operator_glued_to_word(self):
        with pytest.raises(ParseError) as exc:
            read("+foo")
        assert "Operator must be followed by whitespace" in exc.value.message
        assert exc.value.position == 1

    def test_negative_number_glued_to_word(self):
        with pytest.raises(ParseError) as exc:
            read("-5abc")
        assert exc.value.message == "Number must not run into 'a'"
        assert exc.value.position == 2

    def test_operator_glued_to_paren(self):
        with pytest.raises(ParseError, match="Operator must be followed"):
            read("(-(1))")

    def test_integer_out_of_range(self):
        with pytest.raises(ParseError, match="out of range"):
            read("9223372036854775808")

    def test_empty_input(self):
        with pytest.raises(ParseError, match="Unexpected end of input"):
            read("   ")

    def test_deref_without_name(self):
        with pytest.raises(ParseError, match="Expected a name after '@'"):
            read("@")

    def test_trace_text(self):
        with pytest.raises(ParseError) as exc:
            read("(+ 1 2")
        trace = exc.value.trace()
        assert trace.splitlines()[0] == "Unterminated list: expected ')' (at position 6)"
        assert "in list at 0" in trace

    def test_deep_nesting_is_reported(self):
        with pytest.raises(ParseError, match="nested too deeply"):
            read("(" * 5000 + ")" * 5000)

    def test_failure_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="lispy"):
            with pytest.raises(ParseError):
                read("(+ 1")
        assert "Parse failed" in caplog.text


class TestRoundTrip:
    """Tests for reading and printing back."""

    @pytest.mark.parametrize("line, expected", CANONICAL_CASES)
    def test_canonical_form(self, line, expected):
        assert read(line).to_string() == expected

    @pytest.mark.parametrize(
        "line",
        ["(add 1 2 3)", "(f  x   y )", "( g -1 \"s\" z )", "(h)"],
    )
    def test_flat_lists_match_normalized_input(self, line):
        """Flat lists print exactly like the whitespace-normalized input."""
        normalized = to_canonical(tokenize(line))
        assert read(line).to_string() == normalized

    @pytest.mark.parametrize("line", [case[0] for case in CANONICAL_CASES])
    def test_printing_is_idempotent(self, line):
        once = read(line).to_string()
        assert read(once).to_string() == once

    def test_to_canonical_on_tree(self):
        assert to_canonical(read("(a  b)")) == "(a b)"
