"""Tokenizer for JSON(-LD) documents that keeps source spans and recovers from errors."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

__all__ = ["TokenKind", "Token", "Spanned", "SyntaxError_", "tokenize"]

T = TypeVar("T")
U = TypeVar("U")


class TokenKind(Enum):
    """The kinds of token that appear in a JSON document."""

    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    SQ_OPEN = "["
    SQ_CLOSE = "]"
    CURL_OPEN = "{"
    CURL_CLOSE = "}"
    COLON = ":"
    COMMA = ","
    STR = "string"
    NUMBER = "number"
    INVALID = "invalid"


_VALUELESS = {
    TokenKind.TRUE,
    TokenKind.FALSE,
    TokenKind.NULL,
    TokenKind.SQ_OPEN,
    TokenKind.SQ_CLOSE,
    TokenKind.CURL_OPEN,
    TokenKind.CURL_CLOSE,
    TokenKind.COLON,
    TokenKind.COMMA,
}


@dataclass(frozen=True)
class Token:
    """A single token; ``text`` holds the string contents or number literal."""

    kind: TokenKind
    text: str = ""

    @classmethod
    def string(cls, text: str) -> Token:
        return cls(TokenKind.STR, text)

    @classmethod
    def number(cls, text: str) -> Token:
        return cls(TokenKind.NUMBER, text)

    @classmethod
    def invalid(cls, text: str = "") -> Token:
        return cls(TokenKind.INVALID, text)

    @property
    def is_str(self) -> bool:
        return self.kind is TokenKind.STR

    def __str__(self) -> str:
        if self.kind in _VALUELESS:
            return self.kind.value
        if self.kind is TokenKind.STR:
            return json.dumps(self.text, ensure_ascii=False)
        return self.text


@dataclass(frozen=True)
class Spanned(Generic[T]):
    """A value together with the half-open character range ``[start, end)`` it covers."""

    value: T
    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    def map(self, func: Callable[[T], U]) -> Spanned[U]:
        return Spanned(func(self.value), self.start, self.end)


@dataclass(frozen=True)
class SyntaxError_:
    """A recoverable syntax problem found at ``[start, end)``."""

    start: int
    end: int
    message: str

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    def __str__(self) -> str:
        return f"{self.start}..{self.end}: {self.message}"


class _Mismatch(Exception):
    def __init__(self, pos: int, message: str) -> None:
        super().__init__(message)
        self.pos = pos
        self.message = message


_LITERALS = (
    ("true", TokenKind.TRUE),
    ("false", TokenKind.FALSE),
    ("null", TokenKind.NULL),
    ("]", TokenKind.SQ_CLOSE),
    ("{", TokenKind.CURL_OPEN),
    ("}", TokenKind.CURL_CLOSE),
    (":", TokenKind.COLON),
    (",", TokenKind.COMMA),
    ("[", TokenKind.SQ_OPEN),
)

_SIMPLE_ESCAPES = {
    "\\": "\\",
    "/": "/",
    '"': '"',
    "b": "\x08",
    "f": "\x0c",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_HEX = set("0123456789abcdefABCDEF")


def _skip_ws(src: str, pos: int) -> int:
    while pos < len(src) and src[pos].isspace():
        pos += 1
    return pos


def _digits(src: str, pos: int) -> Optional[int]:
    end = pos
    while end < len(src) and src[end].isnumeric():
        end += 1
    return end if end > pos else None


def _exponent(src: str, pos: int) -> Optional[int]:
    if pos >= len(src) or src[pos] not in "eE":
        return None
    pos += 1
    if pos < len(src) and src[pos] in "+-":
        pos += 1
    return _digits(src, pos)


def _no_dot(src: str, pos: int) -> Optional[int]:
    end = _digits(src, pos)
    return None if end is None else _exponent(src, end)


def _with_dot(src: str, pos: int) -> Optional[int]:
    if src.startswith(".", pos):
        return _no_dot(src, pos + 1)
    return None


def _before_dot(src: str, pos: int) -> Optional[int]:
    if pos < len(src) and src[pos] in "+-":
        pos += 1
    return _digits(src, pos)


def _before_then_with_dot(src: str, pos: int) -> Optional[int]:
    end = _before_dot(src, pos)
    return None if end is None else _with_dot(src, end)


def _number(src: str, pos: int) -> Optional[int]:
    """Return the end of a number starting at ``pos``; the first matching form wins."""
    for form in (_with_dot, _before_then_with_dot, _no_dot, _before_dot):
        end = form(src, pos)
        if end is not None:
            return end
    return None


def _string(src: str, pos: int, errors: list[SyntaxError_]) -> tuple[str, int]:
    """Read a double-quoted string starting at ``pos`` (which holds the opening quote)."""
    chars: list[str] = []
    i = pos + 1
    while i < len(src):
        c = src[i]
        if c == '"':
            return "".join(chars), i + 1
        if c != "\\":
            chars.append(c)
            i += 1
            continue
        esc = src[i + 1] if i + 1 < len(src) else None
        if esc in _SIMPLE_ESCAPES:
            chars.append(_SIMPLE_ESCAPES[esc])
            i += 2
            continue
        if esc == "u":
            digits = src[i + 2 : i + 6]
            if len(digits) == 4 and all(d in _HEX for d in digits):
                code = int(digits, 16)
                if 0xD800 <= code <= 0xDFFF:
                    errors.append(SyntaxError_(i + 2, i + 6, "invalid unicode character"))
                    chars.append("\ufffd")
                else:
                    chars.append(chr(code))
                i += 6
                continue
        # An invalid escape ends the string contents without a closing quote.
        raise _Mismatch(i, "expected '\"'")
    raise _Mismatch(len(src), "unexpected end of input, expected '\"'")


def _read_token(src: str, pos: int, errors: list[SyntaxError_]) -> tuple[Token, int]:
    for literal, kind in _LITERALS:
        if src.startswith(literal, pos):
            return Token(kind), pos + len(literal)

    end = _number(src, pos)
    if end is not None:
        return Token.number(src[pos:end]), end

    if src[pos] == '"':
        local: list[str] = []
        found: list[SyntaxError_] = []
        text, end = _string(src, pos, found)
        local.append(text)
        errors.extend(found)
        return Token.string(text), end

    raise _Mismatch(pos, f"unexpected character {src[pos]!r}")


def tokenize(source: str) -> tuple[list[Spanned[Token]], list[SyntaxError_]]:
    """Split ``source`` into spanned tokens.

    Tokenizing stops at the first piece of input that is not a token; the
    tokens read until then are returned together with the errors found.
    """
    tokens: list[Spanned[Token]] = []
    errors: list[SyntaxError_] = []
    pos = _skip_ws(source, 0)
    while pos < len(source):
        try:
            token, end = _read_token(source, pos, errors)
        except _Mismatch as err:
            errors.append(
                SyntaxError_(err.pos, min(err.pos + 1, len(source)), err.message)
            )
            break
        tokens.append(Spanned(token, pos, end))
        pos = _skip_ws(source, end)
    return tokens, errors