# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Combinator engine, indentation layer and token layer."""

from perspectives.parser.core import ParseError, Parser, ParseState, Position
from perspectives.parser.indent import run_indent_parser
from perspectives.parser.token import LanguageDef, TokenParser, make_token_parser

__all__ = [
    "LanguageDef",
    "ParseError",
    "ParseState",
    "Parser",
    "Position",
    "TokenParser",
    "make_token_parser",
    "run_indent_parser",
]
