# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Backtracking parser-combinator engine.

A parser is a function from an immutable :class:`ParseState` to either a
:class:`Success` or a :class:`Failure`. The state carries a *consumed* flag
that records whether input was consumed since the last checkpoint; alternation
only falls through to its second branch when the first branch failed without
consuming input. :func:`attempt` is the escape hatch that makes a failing
parser look as if it consumed nothing.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

# ###############
# Public Interface
# ###############

TAB_WIDTH = 8


@dataclass(frozen=True, order=True)
class Position:
    """A 1-based line/column location in the source text."""

    line: int = 1
    column: int = 1

    def advance(self, ch: str) -> Position:
        """Return the position after consuming *ch*."""
        if ch == "\n":
            return Position(self.line + 1, 1)
        if ch == "\t":
            return Position(self.line, self.column + TAB_WIDTH - (self.column - 1) % TAB_WIDTH)
        return Position(self.line, self.column + 1)

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


INITIAL_POSITION = Position(1, 1)


@dataclass(frozen=True)
class ParseState:
    """The threaded state of one parse.

    Attributes:
        source: The complete input text.
        offset: Index of the first unconsumed character in *source*.
        position: Line/column of the first unconsumed character.
        consumed: Whether input was consumed since the last checkpoint.
        reference: The indentation reference position (see ``parser.indent``).
    """

    source: str
    offset: int = 0
    position: Position = INITIAL_POSITION
    consumed: bool = False
    reference: Position = INITIAL_POSITION

    @property
    def remaining_input(self) -> str:
        return self.source[self.offset :]

    def at_end(self) -> bool:
        return self.offset >= len(self.source)

    def peek(self) -> str:
        """Return the next character, or '' at end of input."""
        if self.offset < len(self.source):
            return self.source[self.offset]
        return ""

    def advance(self, count: int) -> ParseState:
        """Consume *count* characters, updating the position."""
        position = self.position
        for ch in self.source[self.offset : self.offset + count]:
            position = position.advance(ch)
        return replace(self, offset=self.offset + count, position=position, consumed=True)

    def with_consumed(self, consumed: bool) -> ParseState:
        if consumed == self.consumed:
            return self
        return replace(self, consumed=consumed)

    def with_reference(self, reference: Position) -> ParseState:
        return replace(self, reference=reference)


class ParseError(Exception):
    """Raised when source text does not match the grammar.

    Attributes:
        message: Description of what went wrong.
        position: Where in the source the failure happened.
    """

    def __init__(self, message: str, position: Position) -> None:
        super().__init__(f"Line {position.line}, column {position.column}: {message}")
        self.message = message
        self.position = position

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    state: ParseState


@dataclass(frozen=True)
class Failure:
    error: ParseError
    state: ParseState

    @property
    def consumed(self) -> bool:
        return self.state.consumed


Result = Success[Any] | Failure


class Parser(Generic[T]):
    """A composable parser.

    Operators:
        ``p | q``  alternation (``q`` runs only if ``p`` failed without consuming input)
        ``p >> q`` run both, keep the result of ``q``
        ``p << q`` run both, keep the result of ``p``
    """

    def __init__(self, run: Callable[[ParseState], Result]) -> None:
        self._run = run

    def __call__(self, state: ParseState) -> Result:
        return self._run(state)

    def bind(self, f: Callable[[T], Parser[U]]) -> Parser[U]:
        """Run this parser and feed its result to *f* to obtain the next parser.

        A failure propagates with the state at the point of failure; ``bind``
        never rolls anything back.
        """

        def run(state: ParseState) -> Result:
            result = self(state)
            if isinstance(result, Failure):
                return result
            return f(result.value)(result.state)

        return Parser(run)

    def map(self, f: Callable[[T], U]) -> Parser[U]:
        def run(state: ParseState) -> Result:
            result = self(state)
            if isinstance(result, Failure):
                return result
            return Success(f(result.value), result.state)

        return Parser(run)

    def result(self, value: U) -> Parser[U]:
        """Replace a successful result with *value*."""
        return self.map(lambda _: value)

    def then(self, other: Parser[U]) -> Parser[U]:
        return self.bind(lambda _: other)

    def skip(self, other: Parser[Any]) -> Parser[T]:
        return self.bind(lambda value: other.result(value))

    def __rshift__(self, other: Parser[U]) -> Parser[U]:
        return self.then(other)

    def __lshift__(self, other: Parser[Any]) -> Parser[T]:
        return self.skip(other)

    def __or__(self, other: Parser[T]) -> Parser[T]:
        return alt(self, other)

    def label(self, name: str) -> Parser[T]:
        return label(self, name)

    def many(self) -> Parser[list[T]]:
        return many(self)

    def some(self) -> Parser[list[T]]:
        return some(self)

    def optional(self) -> Parser[T | None]:
        return option(None, self)


def pure(value: T) -> Parser[T]:
    """Succeed with *value* without consuming input."""
    return Parser(lambda state: Success(value, state))


def fail(message: str) -> Parser[Any]:
    """Fail with *message* at the current position."""
    return Parser(lambda state: Failure(ParseError(message, state.position), state))


def unexpected(what: str) -> Parser[Any]:
    return fail(f"Unexpected {what}")


def alt(first: Parser[T], second: Parser[T]) -> Parser[T]:
    """Try *first*; if it fails without consuming input, try *second* from the same state."""

    def run(state: ParseState) -> Result:
        checkpoint = state.with_consumed(False)
        result = first(checkpoint)
        if isinstance(result, Failure) and not result.consumed:
            result = second(checkpoint)
        return _merge_consumed(result, state.consumed)

    return Parser(run)


def attempt(parser: Parser[T]) -> Parser[T]:
    """Run *parser*; on failure pretend no input was consumed (the ``try`` combinator)."""

    def run(state: ParseState) -> Result:
        result = parser(state)
        if isinstance(result, Failure):
            return Failure(result.error, result.state.with_consumed(state.consumed))
        return result

    return Parser(run)


def label(parser: Parser[T], name: str) -> Parser[T]:
    """Replace the error of an unconsumed failure with ``Expected <name>``."""
    return alt(parser, fail(f"Expected {name}"))


def choice(parsers: Sequence[Parser[T]]) -> Parser[T]:
    if not parsers:
        return fail("No alternatives")
    combined = parsers[0]
    for parser in parsers[1:]:
        combined = alt(combined, parser)
    return combined


def furthest(*parsers: Parser[T]) -> Parser[T]:
    """Return the first success among *parsers*, each run from the same state.

    Every alternative is tried, even after an earlier one failed having
    consumed input. When all of them fail, the failure whose error lies
    furthest into the input wins (ties go to the later alternative), together
    with its consumed flag.
    """

    def run(state: ParseState) -> Result:
        best: Failure | None = None
        for parser in parsers:
            result = parser(state.with_consumed(False))
            if isinstance(result, Success):
                return _merge_consumed(result, state.consumed)
            if best is None or result.error.position >= best.error.position:
                best = result
        if best is None:
            return Failure(ParseError("No alternatives", state.position), state)
        return _merge_consumed(best, state.consumed)

    return Parser(run)


def option(default: U, parser: Parser[T]) -> Parser[T | U]:
    return alt(parser, pure(default))


def optional(parser: Parser[Any]) -> Parser[None]:
    """Run *parser* if it matches, discarding its result."""
    return alt(parser.result(None), pure(None))


def many(parser: Parser[T]) -> Parser[list[T]]:
    """Run *parser* zero or more times.

    Repetition ends cleanly when an attempt fails without consuming input; a
    failure after consuming input is propagated.

    Raises:
        ValueError: When *parser* succeeds without consuming input.
    """

    def run(state: ParseState) -> Result:
        values: list[T] = []
        current = state
        while True:
            result = parser(current.with_consumed(False))
            if isinstance(result, Failure):
                if result.consumed:
                    return result
                return Success(values, current)
            if result.state.offset == current.offset:
                raise ValueError("many: parser accepted empty input")
            values.append(result.value)
            current = result.state.with_consumed(True)

    return Parser(run)


def some(parser: Parser[T]) -> Parser[list[T]]:
    return parser.bind(lambda first: many(parser).map(lambda rest: [first, *rest]))


def skip_many(parser: Parser[Any]) -> Parser[None]:
    return many(parser).result(None)


def skip_some(parser: Parser[Any]) -> Parser[None]:
    return some(parser).result(None)


def seq(*parsers: Parser[Any]) -> Parser[tuple[Any, ...]]:
    """Run *parsers* in order and collect their results in a tuple."""

    def run(state: ParseState) -> Result:
        values = []
        current = state
        for parser in parsers:
            result = parser(current)
            if isinstance(result, Failure):
                return result
            values.append(result.value)
            current = result.state
        return Success(tuple(values), current)

    return Parser(run)


def between(open_: Parser[Any], close: Parser[Any], parser: Parser[T]) -> Parser[T]:
    return open_ >> parser << close


def sep_by1(parser: Parser[T], separator: Parser[Any]) -> Parser[list[T]]:
    return parser.bind(lambda first: many(separator >> parser).map(lambda rest: [first, *rest]))


def sep_by(parser: Parser[T], separator: Parser[Any]) -> Parser[list[T]]:
    return option([], sep_by1(parser, separator))


def end_by1(parser: Parser[T], separator: Parser[Any]) -> Parser[list[T]]:
    return some(parser << separator)


def end_by(parser: Parser[T], separator: Parser[Any]) -> Parser[list[T]]:
    return many(parser << separator)


def lookahead(parser: Parser[T]) -> Parser[T]:
    """Run *parser* and restore the state on success."""

    def run(state: ParseState) -> Result:
        result = parser(state)
        if isinstance(result, Success):
            return Success(result.value, state)
        return result

    return Parser(run)


def not_followed_by(parser: Parser[Any]) -> Parser[None]:
    """Succeed, consuming nothing, only when *parser* does not match here."""

    def run(state: ParseState) -> Result:
        result = attempt(parser)(state)
        if isinstance(result, Success):
            return Failure(ParseError("Negated parser succeeded", state.position), state)
        return Success(None, state)

    return Parser(run)


def lazy(factory: Callable[[], Parser[T]]) -> Parser[T]:
    """Defer building a parser until first use (for recursive grammars)."""
    cache: list[Parser[T]] = []

    def run(state: ParseState) -> Result:
        if not cache:
            cache.append(factory())
        return cache[0](state)

    return Parser(run)


get_position: Parser[Position] = Parser(lambda state: Success(state.position, state))


def _eof(state: ParseState) -> Result:
    if state.at_end():
        return Success(None, state)
    return Failure(ParseError("Expected end of input", state.position), state)


eof: Parser[None] = Parser(_eof)

# ---------------------------------------------------------------------------
# Character parsers
# ---------------------------------------------------------------------------


def satisfy(predicate: Callable[[str], bool]) -> Parser[str]:
    """Consume one character that satisfies *predicate*."""

    def run(state: ParseState) -> Result:
        ch = state.peek()
        if not ch:
            return Failure(ParseError("Unexpected end of input", state.position), state)
        if not predicate(ch):
            return Failure(ParseError(f"Unexpected {ch!r}", state.position), state)
        return Success(ch, state.advance(1))

    return Parser(run)


def char(expected: str) -> Parser[str]:
    return label(satisfy(lambda ch: ch == expected), repr(expected))


def string(expected: str) -> Parser[str]:
    """Match *expected* literally; consumes nothing when it does not match."""

    def run(state: ParseState) -> Result:
        if state.source.startswith(expected, state.offset):
            return Success(expected, state.advance(len(expected)))
        return Failure(ParseError(f"Expected {expected!r}", state.position), state)

    return Parser(run)


def one_of(chars: str) -> Parser[str]:
    return satisfy(lambda ch: ch in chars)


def none_of(chars: str) -> Parser[str]:
    return satisfy(lambda ch: ch not in chars)


any_char: Parser[str] = satisfy(lambda _: True)
letter: Parser[str] = label(satisfy(str.isalpha), "letter")
upper: Parser[str] = label(satisfy(str.isupper), "uppercase letter")
lower: Parser[str] = label(satisfy(str.islower), "lowercase letter")
alpha_num: Parser[str] = label(satisfy(str.isalnum), "letter or digit")
space: Parser[str] = label(satisfy(str.isspace), "space")
digit: Parser[str] = label(satisfy(lambda ch: "0" <= ch <= "9"), "digit")
hex_digit: Parser[str] = label(one_of("0123456789abcdefABCDEF"), "hex digit")
oct_digit: Parser[str] = label(one_of("01234567"), "oct digit")


def run_parser(source: str, parser: Parser[T]) -> T:
    """Run *parser* over *source* from position (1, 1).

    Raises:
        ParseError: If the parser fails.
    """
    result = parser(ParseState(source))
    if isinstance(result, Failure):
        raise result.error
    return result.value


# ################
# Implementation
# ################


def _merge_consumed(result: Result, consumed_before: bool) -> Result:
    """Carry a consumed flag from before a checkpoint into *result*."""
    if not consumed_before or result.state.consumed:
        return result
    state = result.state.with_consumed(True)
    if isinstance(result, Failure):
        return Failure(result.error, state)
    return Success(result.value, state)
