# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the token parsers derived from a language definition."""

import pytest

from perspectives.parser.core import ParseError, eof, run_parser, seq
from perspectives.parser.token import LanguageDef, TokenParser, make_token_parser

# ###############
# Test Helpers
# ###############

LANG = LanguageDef(
    comment_start="{-",
    comment_end="-}",
    comment_line="--",
    reserved_names=("let", "in", "true"),
    reserved_op_names=("=", "=>"),
)


@pytest.fixture
def tok() -> TokenParser:
    return make_token_parser(LANG)


def _error(source: str, parser) -> ParseError:
    with pytest.raises(ParseError) as exc_info:
        run_parser(source, parser << eof)
    return exc_info.value


# ###############
# Identifiers and reserved words
# ###############


class TestIdentifiers:
    def test_identifier_skips_trailing_whitespace(self, tok: TokenParser) -> None:
        assert run_parser("foo   bar", seq(tok.identifier, tok.identifier)) == ("foo", "bar")

    def test_identifier_letters(self, tok: TokenParser) -> None:
        assert run_parser("x_1'", tok.identifier) == "x_1'"

    @pytest.mark.parametrize("word", ["let", "in", "true"])
    def test_reserved_word_is_not_identifier(self, tok: TokenParser, word: str) -> None:
        with pytest.raises(ParseError, match="reserved word"):
            run_parser(word, tok.identifier)

    @pytest.mark.parametrize("word", ["lets", "inn", "truely", "le", "Let"])
    def test_near_reserved_word_is_identifier(self, tok: TokenParser, word: str) -> None:
        assert run_parser(word, tok.identifier) == word

    def test_reserved_matches_whole_word(self, tok: TokenParser) -> None:
        assert run_parser("true  ", tok.reserved("true") << eof) == "true"

    def test_reserved_rejects_longer_word(self, tok: TokenParser) -> None:
        with pytest.raises(ParseError):
            run_parser("truely", tok.reserved("true"))

    def test_reserved_failure_consumes_nothing(self, tok: TokenParser) -> None:
        parser = tok.reserved("true") | tok.identifier
        assert run_parser("truely", parser) == "truely"

    def test_case_insensitive_reserved_names(self) -> None:
        tok = make_token_parser(LanguageDef(reserved_names=("Select",), case_sensitive=False))
        assert tok.is_reserved_name("SELECT")
        assert run_parser("sElEcT", tok.reserved("select")) == "select"
        with pytest.raises(ParseError):
            run_parser("select", tok.identifier)

    def test_is_reserved_name_binary_search(self, tok: TokenParser) -> None:
        assert tok.is_reserved_name("in")
        assert not tok.is_reserved_name("i")
        assert not tok.is_reserved_name("zzz")


class TestOperators:
    def test_operator(self, tok: TokenParser) -> None:
        assert run_parser("+++ x", tok.operator) == "+++"

    def test_reserved_operator_is_not_operator(self, tok: TokenParser) -> None:
        with pytest.raises(ParseError, match="reserved operator"):
            run_parser("= x", tok.operator)

    def test_reserved_op_not_followed_by_operator_char(self, tok: TokenParser) -> None:
        assert run_parser("= 1", tok.reserved_op("=")) == "="
        with pytest.raises(ParseError):
            run_parser("=> 1", tok.reserved_op("="))
        assert run_parser("=> 1", tok.reserved_op("=>")) == "=>"


# ###############
# Numbers
# ###############


class TestNumbers:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [("42", 42), ("0", 0), ("0x1A", 26), ("0X1a", 26), ("0o17", 15), ("007", 7)],
    )
    def test_natural(self, tok: TokenParser, source: str, expected: int) -> None:
        assert run_parser(source, tok.natural << eof) == expected

    @pytest.mark.parametrize(("source", "expected"), [("-12", -12), ("- 12", -12), ("+3", 3), ("0x10", 16)])
    def test_integer(self, tok: TokenParser, source: str, expected: int) -> None:
        assert run_parser(source, tok.integer << eof) == expected

    @pytest.mark.parametrize(
        ("source", "expected"),
        [("3.14", 3.14), ("2e3", 2000.0), ("1.5e-2", 0.015), ("10E2", 1000.0)],
    )
    def test_float(self, tok: TokenParser, source: str, expected: float) -> None:
        value = run_parser(source, tok.float << eof)
        assert isinstance(value, float)
        assert value == pytest.approx(expected)

    def test_float_requires_fraction_or_exponent(self, tok: TokenParser) -> None:
        with pytest.raises(ParseError):
            run_parser("12", tok.float)

    def test_fraction_needs_digits(self, tok: TokenParser) -> None:
        assert _error("3.", tok.float).message == "Expected fraction"

    @pytest.mark.parametrize(
        ("source", "expected", "kind"),
        [("7", 7, int), ("7.5", 7.5, float), ("0x10", 16, int), ("0.5", 0.5, float), ("0", 0, int)],
    )
    def test_natural_or_float(self, tok: TokenParser, source: str, expected: float, kind: type) -> None:
        value = run_parser(source, tok.natural_or_float << eof)
        assert value == expected
        assert isinstance(value, kind)


# ###############
# Character and string literals
# ###############


class TestLiterals:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ('"hello"', "hello"),
            ('""', ""),
            ('"a\\tb"', "a\tb"),
            ('"say \\"hi\\""', 'say "hi"'),
            ('"\\65\\x42\\o103"', "ABC"),
            ('"\\SOH\\SO"', "\x01\x0e"),
            ('"\\^A"', "\x01"),
            ('"a\\&b"', "ab"),
            ('"a\\   \\b"', "ab"),
        ],
    )
    def test_string_literal(self, tok: TokenParser, source: str, expected: str) -> None:
        assert run_parser(source, tok.string_literal << eof) == expected

    def test_unterminated_string(self, tok: TokenParser) -> None:
        assert _error('"abc', tok.string_literal).message == "Expected end of string character"

    def test_code_point_out_of_range(self, tok: TokenParser) -> None:
        assert _error('"\\1114112"', tok.string_literal).message == "invalid escape sequence"

    @pytest.mark.parametrize(("source", "expected"), [("'x'", "x"), ("'\\n'", "\n"), ("'\\''", "'")])
    def test_char_literal(self, tok: TokenParser, source: str, expected: str) -> None:
        assert run_parser(source, tok.char_literal << eof) == expected


# ###############
# Whitespace, comments and helpers
# ###############


class TestWhiteSpace:
    def test_line_and_nested_block_comments(self, tok: TokenParser) -> None:
        source = "foo -- comment\n {- a {- nested -} b -} bar"
        assert run_parser(source, seq(tok.identifier, tok.identifier)) == ("foo", "bar")

    def test_unterminated_block_comment(self, tok: TokenParser) -> None:
        assert _error("foo {- x {- y -}", tok.identifier).message == "Expected end of comment"

    def test_flat_block_comments(self) -> None:
        tok = make_token_parser(LanguageDef(comment_start="{-", comment_end="-}", nested_comments=False))
        assert run_parser("a {- {- -} b", seq(tok.identifier, tok.identifier)) == ("a", "b")


class TestHelpers:
    def test_parens(self, tok: TokenParser) -> None:
        assert run_parser("( 5 )", tok.parens(tok.natural)) == 5

    def test_comma_sep(self, tok: TokenParser) -> None:
        assert run_parser("1, 2,3", tok.comma_sep(tok.natural) << eof) == [1, 2, 3]

    def test_semi_sep1_requires_item(self, tok: TokenParser) -> None:
        with pytest.raises(ParseError):
            run_parser("", tok.semi_sep1(tok.natural))

    def test_brackets_and_symbols(self, tok: TokenParser) -> None:
        parser = tok.brackets(tok.comma_sep(tok.identifier))
        assert run_parser("[ a , b ]", parser) == ["a", "b"]
