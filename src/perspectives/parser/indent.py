# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Indentation-sensitive parsing on top of the combinator engine.

Every :class:`~perspectives.parser.core.ParseState` carries a *reference*
position. :func:`with_pos` sets the reference to the current cursor for the
duration of a parser; the checks below compare the cursor against it.
"""

from __future__ import annotations

from typing import TypeVar

from perspectives.parser.core import (
    INITIAL_POSITION,
    Failure,
    ParseError,
    Parser,
    ParseState,
    Position,
    Result,
    Success,
    alt,
    many,
)

T = TypeVar("T")

# ###############
# Public Interface
# ###############

NOT_INDENTED = "not indented"
INDENTATION_MISMATCH = "indentation doesn't match"
OVER_ONE_LINE = "over one line"


get_reference: Parser[Position] = Parser(lambda state: Success(state.reference, state))


def with_pos(parser: Parser[T]) -> Parser[T]:
    """Run *parser* with the reference set to the current position.

    The previous reference is restored afterwards, on success and on failure.
    """

    def run(state: ParseState) -> Result:
        saved = state.reference
        result = parser(state.with_reference(state.position))
        if isinstance(result, Failure):
            return Failure(result.error, result.state.with_reference(saved))
        return Success(result.value, result.state.with_reference(saved))

    return Parser(run)


def _indented(state: ParseState) -> Result:
    if state.position.column <= state.reference.column:
        return Failure(ParseError(NOT_INDENTED, state.position), state)
    reference = Position(state.position.line, state.reference.column)
    return Success(None, state.with_reference(reference))


def _same_line(state: ParseState) -> Result:
    if state.position.line == state.reference.line:
        return Success(None, state)
    return Failure(ParseError(OVER_ONE_LINE, state.position), state)


def _check_indent(state: ParseState) -> Result:
    if state.position.column == state.reference.column:
        return Success(None, state)
    return Failure(ParseError(INDENTATION_MISMATCH, state.position), state)


# Succeeds when the cursor is right of the reference column, then moves the
# reference line to the current line.
indented: Parser[None] = Parser(_indented)

same_line: Parser[None] = Parser(_same_line)

same_or_indented: Parser[None] = alt(same_line, indented)

check_indent: Parser[None] = Parser(_check_indent)


def block(parser: Parser[T]) -> Parser[list[T]]:
    """Collect consecutive *parser* results aligned on the column where the block starts."""
    return with_pos(many(check_indent >> parser))


def indented_block(parser: Parser[T]) -> Parser[list[T]]:
    """Parse an optional :func:`block` indented right of the reference column.

    When the block ends on a line that is still right of the reference column
    but not on the block's own column, the parse fails with
    ``"indentation doesn't match"``.
    """

    def run(state: ParseState) -> Result:
        opened = indented(state)
        if isinstance(opened, Failure):
            return Success([], state)
        column = opened.state.position.column
        result = block(parser)(opened.state)
        if isinstance(result, Failure):
            return result
        end = result.state
        if not end.at_end() and end.reference.column < end.position.column != column:
            return Failure(ParseError(INDENTATION_MISMATCH, end.position), end)
        return result

    return Parser(run)


def run_indent_parser(source: str, parser: Parser[T]) -> T:
    """Run an indentation-sensitive parser over *source*.

    The cursor and the reference both start at line 1, column 1. The parser is
    not required to consume all input.

    Args:
        source: The text to parse.
        parser: The grammar rule to run.

    Returns:
        The value produced by *parser*.

    Raises:
        ParseError: If *parser* fails; carries the message and position.
    """
    result = parser(ParseState(source, reference=INITIAL_POSITION))
    if isinstance(result, Failure):
        raise result.error
    return result.value
