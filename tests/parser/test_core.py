# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the parser-combinator engine."""

import pytest

from perspectives.parser.core import (
    ParseError,
    Position,
    alt,
    any_char,
    attempt,
    between,
    char,
    digit,
    eof,
    furthest,
    label,
    lazy,
    letter,
    lookahead,
    many,
    not_followed_by,
    option,
    pure,
    run_parser,
    sep_by,
    sep_by1,
    seq,
    some,
    string,
)

# ###############
# Test Helpers
# ###############


def _error(source: str, parser) -> ParseError:
    """Run *parser* and return the ParseError it raises."""
    with pytest.raises(ParseError) as exc_info:
        run_parser(source, parser)
    return exc_info.value


# ###############
# Positions
# ###############


class TestPosition:
    def test_plain_character_moves_one_column(self) -> None:
        assert Position(1, 1).advance("a") == Position(1, 2)

    def test_newline_starts_next_line(self) -> None:
        assert Position(3, 7).advance("\n") == Position(4, 1)

    @pytest.mark.parametrize(
        ("column", "expected"),
        [(1, 9), (3, 9), (8, 9), (9, 17), (12, 17)],
    )
    def test_tab_moves_to_next_multiple_of_eight(self, column: int, expected: int) -> None:
        assert Position(1, column).advance("\t") == Position(1, expected)

    def test_positions_order_by_line_then_column(self) -> None:
        assert Position(1, 40) < Position(2, 1)
        assert Position(2, 3) < Position(2, 4)

    def test_consumed_text_updates_position(self) -> None:
        error = _error("ab\n\tcX", string("ab\n\tc") >> eof)
        assert error.position == Position(2, 10)


# ###############
# Primitives
# ###############


class TestPrimitives:
    def test_string_matches_literal(self) -> None:
        assert run_parser("abcd", string("abc")) == "abc"

    def test_string_mismatch_reports_expected_literal(self) -> None:
        error = _error("abx", string("abc"))
        assert error.message == "Expected 'abc'"
        assert error.position == Position(1, 1)

    def test_char_mismatch_reports_expected_char(self) -> None:
        assert _error("y", char("x")).message == "Expected 'x'"

    def test_satisfy_at_end_of_input(self) -> None:
        assert _error("", any_char).message == "Unexpected end of input"

    def test_labelled_character_class(self) -> None:
        assert _error("1", letter).message == "Expected letter"

    def test_eof_fails_on_remaining_input(self) -> None:
        error = _error("ab", char("a") >> eof)
        assert error.message == "Expected end of input"
        assert error.position == Position(1, 2)

    def test_error_string_carries_line_and_column(self) -> None:
        error = _error("a\nc", string("a\n") >> char("b"))
        assert str(error) == "Line 2, column 1: Expected 'b'"
        assert (error.line, error.column) == (2, 1)


# ###############
# Alternation and backtracking
# ###############


class TestAlternation:
    def test_second_branch_runs_when_first_consumed_nothing(self) -> None:
        assert run_parser("ac", string("ab") | string("ac")) == "ac"

    def test_second_branch_skipped_when_first_consumed_input(self) -> None:
        parser = (char("a") >> char("b")) | (char("a") >> char("c"))
        error = _error("ac", parser)
        assert error.message == "Expected 'b'"
        assert error.position == Position(1, 2)

    def test_attempt_allows_backtracking(self) -> None:
        parser = attempt(char("a") >> char("b")) | (char("a") >> char("c"))
        assert run_parser("ac", parser) == "c"

    def test_label_replaces_unconsumed_error(self) -> None:
        assert _error("!", label(digit | letter, "code")).message == "Expected code"

    def test_label_keeps_error_after_consumption(self) -> None:
        error = _error("ab", label(char("a") >> digit, "number"))
        assert error.message == "Expected digit"

    def test_nested_alternatives_keep_consumed_flag(self) -> None:
        inner = alt(char("x"), char("a"))
        parser = (char("a") >> inner) | string("zz")
        error = _error("a!", parser)
        assert error.message == "Expected 'a'"
        assert error.position == Position(1, 2)

    def test_option_returns_default(self) -> None:
        assert run_parser("y", option("d", char("x"))) == "d"


class TestFurthest:
    def test_returns_first_success(self) -> None:
        parser = furthest(char("a") >> char("b"), char("a") >> char("c"))
        assert run_parser("ac", parser) == "c"

    def test_reports_error_furthest_into_input(self) -> None:
        deep = char("a") >> char("b") >> char("c") >> char("d")
        shallow = char("a") >> char("z")
        for parser in (furthest(deep, shallow), furthest(shallow, deep)):
            error = _error("abcX", parser)
            assert error.message == "Expected 'd'"
            assert error.position == Position(1, 4)

    def test_ties_go_to_later_alternative(self) -> None:
        parser = furthest(label(digit, "first"), label(digit, "second"))
        assert _error("x", parser).message == "Expected second"

    def test_consuming_failure_is_not_backtracked(self) -> None:
        parser = furthest(char("a") >> char("b")) | pure("fallback")
        assert _error("ac", parser).position == Position(1, 2)


# ###############
# Repetition and sequencing
# ###############


class TestRepetition:
    def test_many_collects_until_no_match(self) -> None:
        assert run_parser("aab", many(char("a"))) == ["a", "a"]

    def test_many_accepts_zero_matches(self) -> None:
        assert run_parser("b", many(char("a"))) == []

    def test_many_propagates_failure_after_consumption(self) -> None:
        error = _error("abac", many(char("a") >> char("b")))
        assert error.message == "Expected 'b'"
        assert error.position == Position(1, 4)

    def test_many_rejects_parser_accepting_empty_input(self) -> None:
        with pytest.raises(ValueError):
            run_parser("abc", many(pure(1)))

    def test_some_requires_one_match(self) -> None:
        assert run_parser("11x", some(digit)) == ["1", "1"]
        _error("x", some(digit))

    def test_sep_by(self) -> None:
        assert run_parser("1,2,3", sep_by(digit, char(","))) == ["1", "2", "3"]
        assert run_parser("", sep_by(digit, char(","))) == []

    def test_sep_by1_fails_on_dangling_separator(self) -> None:
        _error("1,", sep_by1(digit, char(",")))

    def test_seq_returns_tuple(self) -> None:
        assert run_parser("a1", seq(letter, digit)) == ("a", "1")

    def test_between(self) -> None:
        assert run_parser("[7]", between(char("["), char("]"), digit)) == "7"


class TestLookahead:
    def test_lookahead_does_not_consume(self) -> None:
        parser = lookahead(string("ab")) >> string("abc")
        assert run_parser("abc", parser) == "abc"

    def test_not_followed_by_fails_when_parser_matches(self) -> None:
        assert _error("a", not_followed_by(char("a"))).message == "Negated parser succeeded"

    def test_not_followed_by_succeeds_otherwise(self) -> None:
        assert run_parser("b", not_followed_by(char("a")) >> char("b")) == "b"


class TestLazy:
    def test_recursive_grammar(self) -> None:
        nested = lazy(lambda: between(char("("), char(")"), option(0, nested.map(lambda depth: depth + 1))))
        assert run_parser("((()))", nested) == 2
