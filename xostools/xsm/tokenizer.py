"""Tokens of one machine instruction, with one token of lookahead."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from .registers import NAMES
from .word import atoi


class TokenType(enum.IntEnum):
    """Kinds of token an instruction is made of."""

    ERROR = -1
    END = 0
    REGISTER = 1
    NUMBER = 2
    STRING = 3
    DREF_L = 4
    DREF_R = 5
    INSTRUCTION = 6
    COMMA = 7


@dataclass(frozen=True)
class Token:
    """One token: its kind and its value (text, or an integer for numbers)."""

    type: TokenType
    value: object = None


_REGISTERS = frozenset(NAMES)

_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<string>"[^"]*")
    |(?P<number>-?[0-9]+)
    |(?P<word>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<dref_l>\[)
    |(?P<dref_r>\])
    |(?P<comma>,)
    |(?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_PUNCTUATION = {
    "dref_l": TokenType.DREF_L,
    "dref_r": TokenType.DREF_R,
    "comma": TokenType.COMMA,
    "other": TokenType.ERROR,
}

_END = Token(TokenType.END)


def tokenize(text):
    """Yield the tokens of ``text``; whitespace separates them and is dropped."""
    for match in _PATTERN.finditer(text):
        kind = match.lastgroup
        lexeme = match.group()
        if kind == "space":
            continue
        if kind == "string":
            yield Token(TokenType.STRING, lexeme[1:-1])
        elif kind == "number":
            yield Token(TokenType.NUMBER, atoi(lexeme))
        elif kind == "word":
            if lexeme.upper() in _REGISTERS:
                yield Token(TokenType.REGISTER, lexeme)
            else:
                yield Token(TokenType.INSTRUCTION, lexeme)
        else:
            yield Token(_PUNCTUATION[kind], lexeme)


class Tokenizer:
    """Reads the tokens of one instruction; yields END tokens once they run out."""

    def __init__(self, text):
        self._tokens = tokenize(text)
        self._lookahead = None

    def _pull(self):
        return next(self._tokens, _END)

    def next(self):
        """Consume and return the next token."""
        if self._lookahead is not None:
            token, self._lookahead = self._lookahead, None
            return token
        return self._pull()

    def peek(self):
        """Return the next token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self._pull()
        return self._lookahead

    def skip(self):
        """Consume the next token and return it."""
        return self.next()