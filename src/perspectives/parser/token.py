# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexeme-level parsers built from a language definition.

:func:`make_token_parser` turns a :class:`LanguageDef` into a
:class:`TokenParser`: identifiers, reserved words and operators, numeric,
character and string literals, and whitespace skipping with line and
(optionally nested) block comments. Every token parser consumes the
whitespace that follows it.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Any, TypeVar

from perspectives.parser.core import (
    Failure,
    ParseError,
    Parser,
    ParseState,
    Result,
    Success,
    alpha_num,
    attempt,
    between,
    char,
    choice,
    digit,
    fail,
    hex_digit,
    label,
    letter,
    many,
    not_followed_by,
    oct_digit,
    one_of,
    option,
    pure,
    satisfy,
    sep_by,
    sep_by1,
    skip_many,
    skip_some,
    some,
    space,
    string,
    unexpected,
)

T = TypeVar("T")

# ###############
# Public Interface
# ###############

_OPERATOR_CHARS = ":!#$%&*+./<=>?@\\^|-~"


@dataclass(frozen=True)
class LanguageDef:
    """Lexical conventions of a language.

    Attributes:
        comment_start: Opening delimiter of a block comment ('' disables block comments).
        comment_end: Closing delimiter of a block comment.
        comment_line: Start of a comment running to the end of the line ('' disables).
        nested_comments: Whether block comments nest.
        ident_start: Parser for the first character of an identifier.
        ident_letter: Parser for subsequent identifier characters.
        op_start: Parser for the first character of an operator.
        op_letter: Parser for subsequent operator characters.
        reserved_names: Words that are not identifiers.
        reserved_op_names: Symbols that are not user operators.
        case_sensitive: Whether reserved names are matched case-sensitively.
    """

    comment_start: str = ""
    comment_end: str = ""
    comment_line: str = ""
    nested_comments: bool = True
    ident_start: Parser[str] = letter | char("_")
    ident_letter: Parser[str] = alpha_num | one_of("_'")
    op_start: Parser[str] = one_of(_OPERATOR_CHARS)
    op_letter: Parser[str] = one_of(_OPERATOR_CHARS)
    reserved_names: tuple[str, ...] = ()
    reserved_op_names: tuple[str, ...] = ()
    case_sensitive: bool = True


class TokenParser:
    """Token parsers derived from a :class:`LanguageDef`.

    Use :func:`make_token_parser` to construct one.
    """

    def __init__(self, language_def: LanguageDef) -> None:
        self.language_def = language_def
        if language_def.case_sensitive:
            names = list(language_def.reserved_names)
        else:
            names = [name.lower() for name in language_def.reserved_names]
        self._sorted_reserved_names: list[str] = sorted(names)

        self.white_space: Parser[None] = _white_space(language_def)

        self.identifier: Parser[str] = self.lexeme(attempt(self._ident().bind(self._check_not_reserved)))
        self.operator: Parser[str] = self.lexeme(attempt(self._oper().bind(self._check_not_reserved_op)))

        self.char_literal: Parser[str] = label(
            self.lexeme(between(char("'"), label(char("'"), "end of character"), _character_char)),
            "character",
        )
        self.string_literal: Parser[str] = self.lexeme(label(_string_literal, "literal string"))

        self.decimal: Parser[int] = _decimal
        self.hexadecimal: Parser[int] = _hexadecimal
        self.octal: Parser[int] = _octal

        self.natural: Parser[int] = label(self.lexeme(_nat), "natural")
        self.integer: Parser[int] = label(self.lexeme(_int(self.lexeme(_sign))), "integer")
        self.float: Parser[float] = label(self.lexeme(_floating), "float")
        self.natural_or_float: Parser[int | float] = label(self.lexeme(_nat_float), "number")

        self.semi: Parser[str] = self.symbol(";")
        self.comma: Parser[str] = self.symbol(",")
        self.colon: Parser[str] = self.symbol(":")
        self.dot: Parser[str] = self.symbol(".")

    # ------------------------------------------------------------------
    # Reserved names and operators
    # ------------------------------------------------------------------

    def is_reserved_name(self, name: str) -> bool:
        """Return True if *name* is a reserved word (binary search over the sorted names)."""
        key = name if self.language_def.case_sensitive else name.lower()
        index = bisect.bisect_left(self._sorted_reserved_names, key)
        return index < len(self._sorted_reserved_names) and self._sorted_reserved_names[index] == key

    def is_reserved_op(self, name: str) -> bool:
        return name in self.language_def.reserved_op_names

    def reserved(self, name: str) -> Parser[str]:
        """Match the reserved word *name*, not followed by an identifier character."""
        word = _case_string(name, self.language_def.case_sensitive)
        end = label(not_followed_by(self.language_def.ident_letter), f"end of {name!r}")
        return self.lexeme(attempt(word << end))

    def reserved_op(self, name: str) -> Parser[str]:
        """Match the reserved operator *name*, not followed by an operator character."""
        end = label(not_followed_by(self.language_def.op_letter), f"end of {name!r}")
        return self.lexeme(attempt(string(name) << end))

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------

    def lexeme(self, parser: Parser[T]) -> Parser[T]:
        """Run *parser*, then skip trailing whitespace and comments."""
        return parser << self.white_space

    def symbol(self, name: str) -> Parser[str]:
        return self.lexeme(string(name))

    def parens(self, parser: Parser[T]) -> Parser[T]:
        return between(self.symbol("("), self.symbol(")"), parser)

    def braces(self, parser: Parser[T]) -> Parser[T]:
        return between(self.symbol("{"), self.symbol("}"), parser)

    def angles(self, parser: Parser[T]) -> Parser[T]:
        return between(self.symbol("<"), self.symbol(">"), parser)

    def brackets(self, parser: Parser[T]) -> Parser[T]:
        return between(self.symbol("["), self.symbol("]"), parser)

    def semi_sep(self, parser: Parser[T]) -> Parser[list[T]]:
        return sep_by(parser, self.semi)

    def semi_sep1(self, parser: Parser[T]) -> Parser[list[T]]:
        return sep_by1(parser, self.semi)

    def comma_sep(self, parser: Parser[T]) -> Parser[list[T]]:
        return sep_by(parser, self.comma)

    def comma_sep1(self, parser: Parser[T]) -> Parser[list[T]]:
        return sep_by1(parser, self.comma)

    # ------------------------------------------------------------------
    # Identifier and operator internals
    # ------------------------------------------------------------------

    def _ident(self) -> Parser[str]:
        defn = self.language_def
        word = defn.ident_start.bind(lambda first: many(defn.ident_letter).map(lambda rest: first + "".join(rest)))
        return label(word, "identifier")

    def _oper(self) -> Parser[str]:
        defn = self.language_def
        word = defn.op_start.bind(lambda first: many(defn.op_letter).map(lambda rest: first + "".join(rest)))
        return label(word, "operator")

    def _check_not_reserved(self, name: str) -> Parser[str]:
        if self.is_reserved_name(name):
            return unexpected(f"reserved word {name!r}")
        return pure(name)

    def _check_not_reserved_op(self, name: str) -> Parser[str]:
        if self.is_reserved_op(name):
            return unexpected(f"reserved operator {name!r}")
        return pure(name)


def make_token_parser(language_def: LanguageDef) -> TokenParser:
    """Build the token parsers for *language_def*."""
    return TokenParser(language_def)


# ################
# Implementation
# ################


def _white_space(defn: LanguageDef) -> Parser[None]:
    simple_space = skip_some(space)
    alternatives: list[Parser[Any]] = [simple_space]
    if defn.comment_line:
        alternatives.append(_one_line_comment(defn.comment_line))
    if defn.comment_start:
        alternatives.append(_multi_line_comment(defn))
    return skip_many(label(choice(alternatives), "whitespace"))


def _one_line_comment(marker: str) -> Parser[None]:
    return attempt(string(marker)) >> skip_many(satisfy(lambda ch: ch != "\n"))


def _multi_line_comment(defn: LanguageDef) -> Parser[None]:
    """Skip a block comment, tracking nesting depth when comments nest."""
    start, end = defn.comment_start, defn.comment_end

    def run(state: ParseState) -> Result:
        if not state.source.startswith(start, state.offset):
            return Failure(ParseError(f"Expected {start!r}", state.position), state)
        current = state.advance(len(start))
        depth = 1
        while depth:
            if current.at_end():
                return Failure(ParseError("Expected end of comment", current.position), current)
            if current.source.startswith(end, current.offset):
                current = current.advance(len(end))
                depth -= 1
            elif defn.nested_comments and current.source.startswith(start, current.offset):
                current = current.advance(len(start))
                depth += 1
            else:
                current = current.advance(1)
        return Success(None, current)

    return Parser(run)


def _case_string(name: str, case_sensitive: bool) -> Parser[str]:
    """Match *name*, ignoring case when *case_sensitive* is False."""
    if case_sensitive:
        return string(name)

    def run(state: ParseState) -> Result:
        candidate = state.source[state.offset : state.offset + len(name)]
        if candidate.lower() == name.lower():
            return Success(name, state.advance(len(name)))
        return Failure(ParseError(f"Expected {name!r}", state.position), state)

    return Parser(run)


def _number(base: int, base_digit: Parser[str]) -> Parser[int]:
    return some(base_digit).map(lambda digits: int("".join(digits), base))


_decimal = _number(10, digit)
_hexadecimal = one_of("xX") >> _number(16, hex_digit)
_octal = one_of("oO") >> _number(8, oct_digit)

# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

_zero_number = char("0") >> (_hexadecimal | _octal | _decimal | pure(0))
_nat = _zero_number | _decimal

_sign = char("-").result(-1) | char("+").result(1) | pure(1)


def _int(sign: Parser[int]) -> Parser[int]:
    return sign.bind(lambda factor: _nat.map(lambda n: factor * n))


_fraction = (char(".") >> label(some(digit), "fraction")).map(lambda digits: "." + "".join(digits))
_exponent = label(
    one_of("eE") >> _sign.bind(lambda factor: _decimal.map(lambda n: f"e{factor * n}")),
    "exponent",
)


def _fract_exponent(n: int) -> Parser[float]:
    with_fraction = _fraction.bind(lambda fract: option("", _exponent).map(lambda expo: float(f"{n}{fract}{expo}")))
    exponent_only = _exponent.map(lambda expo: float(f"{n}{expo}"))
    return with_fraction | exponent_only


_floating = _decimal.bind(_fract_exponent)


_decimal_float = _decimal.bind(lambda n: option(n, _fract_exponent(n)))


_zero_num_float = _hexadecimal | _octal | _decimal_float | _fract_exponent(0) | pure(0)
_nat_float = (char("0") >> _zero_num_float) | _decimal_float

# ---------------------------------------------------------------------------
# Character and string literals
# ---------------------------------------------------------------------------

_ESCAPE_MAP: dict[str, str] = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

# Three-letter names come first so that "SOH" is not read as "SO" followed by "H".
_ASCII_NAMES: tuple[tuple[str, str], ...] = (
    ("NUL", "\x00"),
    ("SOH", "\x01"),
    ("STX", "\x02"),
    ("ETX", "\x03"),
    ("EOT", "\x04"),
    ("ENQ", "\x05"),
    ("ACK", "\x06"),
    ("BEL", "\x07"),
    ("DLE", "\x10"),
    ("DC1", "\x11"),
    ("DC2", "\x12"),
    ("DC3", "\x13"),
    ("DC4", "\x14"),
    ("NAK", "\x15"),
    ("SYN", "\x16"),
    ("ETB", "\x17"),
    ("CAN", "\x18"),
    ("SUB", "\x1a"),
    ("ESC", "\x1b"),
    ("DEL", "\x7f"),
    ("BS", "\x08"),
    ("HT", "\x09"),
    ("LF", "\x0a"),
    ("VT", "\x0b"),
    ("FF", "\x0c"),
    ("CR", "\x0d"),
    ("SO", "\x0e"),
    ("SI", "\x0f"),
    ("EM", "\x19"),
    ("FS", "\x1c"),
    ("GS", "\x1d"),
    ("RS", "\x1e"),
    ("US", "\x1f"),
    ("SP", " "),
)

_MAX_CODE_POINT = 0x10FFFF


def _code_point(code: int) -> Parser[str]:
    if code > _MAX_CODE_POINT:
        return fail("invalid escape sequence")
    return pure(chr(code))


_char_esc = one_of("".join(_ESCAPE_MAP)).map(_ESCAPE_MAP.__getitem__)
_char_num = (_decimal | (char("o") >> _number(8, oct_digit)) | (char("x") >> _number(16, hex_digit))).bind(
    _code_point
)
_char_ascii = choice([attempt(string(name)).result(value) for name, value in _ASCII_NAMES])
_char_control = char("^") >> satisfy(lambda ch: "A" <= ch <= "Z").map(lambda ch: chr(ord(ch) - ord("A") + 1))

_escape_code = label(_char_esc | _char_num | _char_ascii | _char_control, "escape code")

_char_letter = satisfy(lambda ch: ch != "'" and ch != "\\" and ch > "\x1a")
_char_escape = char("\\") >> _escape_code
_character_char = label(_char_letter | _char_escape, "literal character")

_string_letter = satisfy(lambda ch: ch != '"' and ch != "\\" and ch > "\x1a")
_escape_gap = label(some(space) >> char("\\"), "end of string gap")
_escape_empty = char("&")
_string_escape = char("\\") >> (_escape_gap.result(None) | _escape_empty.result(None) | _escape_code)
_string_char = label(_string_letter | _string_escape, "string character")

_string_literal = between(
    char('"'),
    label(char('"'), "end of string character"),
    many(_string_char),
).map(lambda chars: "".join(ch for ch in chars if ch is not None))
