"""Boolean query compiler and evaluator for transcript content.

Queries combine terms with ``AND``/``+``, ``OR`` and ``NOT``/``-``, with
parentheses for grouping:

    joão -maria
    "porto de lisboa" AND (carro OR mota)

Quoted phrases are matched as exact (normalized) substrings. Bare words go
through `match_term`, which also accepts near misses. Word operators are
case-insensitive.

Compilation turns the infix token stream into postfix form with the
shunting-yard algorithm; evaluation runs the postfix form on a stack.
Adjacent terms are implicitly AND-ed. Neither step ever raises:
unrecognized characters are dropped, a missing operand counts as False,
and an empty query matches everything, so a half-typed query still
returns something.

Typical usage:

    query = compile_query('"porto de lisboa" -carro')
    if query.evaluate(session.content):
        ...
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from .text import match_phrase, match_term, normalize_text


class TokenType(Enum):
    """Kind of query token."""

    PHRASE = "phrase"
    WORD = "word"
    OPERATOR = "op"


@dataclass(frozen=True)
class Token:
    """Single query token."""

    type: TokenType
    value: str

    @property
    def is_term(self) -> bool:
        return self.type is not TokenType.OPERATOR


# Word operators only count when they stand alone, so "orange" and
# "nothing" stay words.
_TOKEN_PATTERN = re.compile(
    r'"([^"]+)"|(\(|\)|(?:OR|AND|NOT)(?![^\s()"+\-])|\+|-)|([^\s()"+\-]+)',
    re.IGNORECASE,
)

PRECEDENCE: dict[str, int] = {
    "NOT": 3,
    "-": 3,
    "AND": 2,
    "+": 2,
    "OR": 1,
    "(": 0,
}

_NEGATION = frozenset({"NOT", "-"})
_CONJUNCTION = frozenset({"AND", "+"})


def tokenize(query: str) -> list[Token]:
    """Split a query string into phrase, word and operator tokens.

    Characters that fit no token (a lone quote, for instance) are dropped.

    Args:
        query: Raw query string.

    Returns:
        Tokens in input order.
    """
    tokens: list[Token] = []
    for match in _TOKEN_PATTERN.finditer(query):
        phrase, operator, word = match.groups()
        if phrase:
            tokens.append(Token(TokenType.PHRASE, phrase))
        elif operator:
            tokens.append(Token(TokenType.OPERATOR, operator.upper()))
        elif word:
            tokens.append(Token(TokenType.WORD, word))
    return tokens


def to_postfix(tokens: list[Token]) -> list[Token]:
    """Reorder infix tokens into postfix form (shunting-yard).

    Args:
        tokens: Tokens from `tokenize`.

    Returns:
        Postfix token list. Unbalanced parentheses are discarded.
    """
    output: list[Token] = []
    stack: list[str] = []

    for token in tokens:
        if token.is_term:
            output.append(token)
        elif token.value == "(":
            stack.append("(")
        elif token.value == ")":
            while stack and stack[-1] != "(":
                output.append(Token(TokenType.OPERATOR, stack.pop()))
            if stack:
                stack.pop()
        else:
            incoming = PRECEDENCE[token.value]
            while stack and PRECEDENCE[stack[-1]] >= incoming:
                output.append(Token(TokenType.OPERATOR, stack.pop()))
            stack.append(token.value)

    while stack:
        operator = stack.pop()
        if operator != "(":
            output.append(Token(TokenType.OPERATOR, operator))
    return output


@dataclass(frozen=True)
class CompiledQuery:
    """Query in postfix form, ready to evaluate against many documents.

    Attributes:
        source: Query string the postfix form was compiled from.
        postfix: Tokens in evaluation order.
        is_match_all: True for empty queries, which match every document.
    """

    source: str
    postfix: tuple[Token, ...] = ()
    is_match_all: bool = False

    MATCH_ALL: ClassVar["CompiledQuery"]

    def evaluate(self, content: str) -> bool:
        """Evaluate against raw content (normalized here)."""
        if self.is_match_all:
            return True
        return self.evaluate_normalized(normalize_text(content))

    def evaluate_normalized(self, normalized_content: str) -> bool:
        """Evaluate against content already passed through `normalize_text`.

        Adjacent terms with no operator between them are left side by side
        on the stack and are combined with AND, so "joao -maria" reads as
        "joao AND NOT maria".

        Args:
            normalized_content: Normalized document text.

        Returns:
            Conjunction of the values left on the stack, or False if
            nothing was pushed.
        """
        if self.is_match_all:
            return True

        stack: list[bool] = []
        for token in self.postfix:
            if token.type is TokenType.PHRASE:
                stack.append(match_phrase(normalized_content, token.value))
            elif token.type is TokenType.WORD:
                stack.append(match_term(normalized_content, token.value))
            elif token.value in _NEGATION:
                operand = stack.pop() if stack else False
                stack.append(not operand)
            else:
                right = stack.pop() if stack else False
                left = stack.pop() if stack else False
                if token.value in _CONJUNCTION:
                    stack.append(left and right)
                else:
                    stack.append(left or right)

        # Adjacent terms leave several values behind; they are implicitly AND-ed.
        return all(stack) if stack else False


CompiledQuery.MATCH_ALL = CompiledQuery(source="", is_match_all=True)


def compile_query(query: str | None) -> CompiledQuery:
    """Compile a query string.

    Args:
        query: Raw query; None, empty or whitespace-only matches everything.

    Returns:
        CompiledQuery.
    """
    if not query or not query.strip():
        return CompiledQuery.MATCH_ALL
    return CompiledQuery(source=query, postfix=tuple(to_postfix(tokenize(query))))


def evaluate_query(content: str, query: str | None) -> bool:
    """Compile and evaluate a query against one document."""
    return compile_query(query).evaluate(content)
