"""Error-tolerant JSON parser working on the tokens produced by :mod:`jsonldlang.tokenizer`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from jsonldlang.tokenizer import Spanned, SyntaxError_, Token, TokenKind

__all__ = [
    "Json",
    "JsonInvalid",
    "JsonToken",
    "JsonArray",
    "JsonObject",
    "ObjectMember",
    "JsonFormatError",
    "JsonFormatter",
    "parse",
]

_LEAVES = {
    TokenKind.NULL,
    TokenKind.TRUE,
    TokenKind.FALSE,
    TokenKind.STR,
    TokenKind.NUMBER,
}


class Json:
    """Base class of every parsed JSON value."""

    @property
    def token(self) -> Optional[Token]:
        """The token of a leaf value, or ``None`` for anything else."""
        return None


@dataclass(frozen=True)
class JsonInvalid(Json):
    """A value that could not be parsed."""


@dataclass(frozen=True)
class JsonToken(Json):
    """A leaf: string, number, ``true``, ``false`` or ``null``."""

    value: Token

    @property
    def token(self) -> Optional[Token]:
        return self.value


@dataclass(frozen=True)
class JsonArray(Json):
    """An array of spanned values."""

    items: tuple[Spanned[Json], ...] = ()


@dataclass(frozen=True)
class JsonObject(Json):
    """An object made of spanned members, in source order."""

    members: tuple[Spanned["ObjectMember"], ...] = ()


@dataclass(frozen=True)
class ObjectMember:
    """A key/value pair of an object; incomplete members have ``complete`` unset."""

    key: Spanned[Token]
    value: Optional[Spanned[Json]]
    colon: Optional[Spanned[None]] = None
    complete: bool = True

    def field(self) -> Spanned[Token]:
        """The member's key."""
        return self.key

    def json_value(self) -> Optional[Spanned[Json]]:
        """The member's value, if there is one."""
        return self.value


class JsonFormatError(ValueError):
    """Raised when a value holds invalid parts and cannot be formatted."""


@dataclass
class JsonFormatter:
    """Pretty-prints parsed JSON, one element per line."""

    indent: str = "  "
    inc: int = 0

    def format(self, json: Json) -> str:
        """Return ``json`` as text; raise :class:`JsonFormatError` on invalid parts."""
        out: list[str] = []
        self._format(json, self.inc, out)
        return "".join(out)

    def _line(self, depth: int, out: list[str]) -> None:
        out.append("\n")
        out.append(self.indent * depth)

    def _format(self, json: Json, depth: int, out: list[str]) -> None:
        if isinstance(json, JsonToken):
            out.append(str(json.value))
        elif isinstance(json, JsonArray):
            out.append("[")
            self._line(depth + 1, out)
            for position, item in enumerate(json.items):
                if position:
                    out.append(",")
                    self._line(depth + 1, out)
                self._format(item.value, depth + 1, out)
            self._line(depth, out)
            out.append("]")
        elif isinstance(json, JsonObject):
            out.append("{")
            self._line(depth + 1, out)
            for position, member in enumerate(json.members):
                if position:
                    out.append(",")
                    self._line(depth + 1, out)
                entry = member.value
                if not entry.complete or entry.value is None:
                    raise JsonFormatError("cannot format invalid json")
                out.append(f"{entry.key.value}: ")
                self._format(entry.value.value, depth + 1, out)
            self._line(depth, out)
            out.append("}")
        else:
            raise JsonFormatError("cannot format invalid json")


class _Fail(Exception):
    pass


_Part = Union[Spanned[Json], Spanned[Token]]


class _MemberCollector:
    """Turns a flat run of values, colons and commas into object members."""

    def __init__(self, span: tuple[int, int], errors: list[SyntaxError_]) -> None:
        self.out: list[Spanned[ObjectMember]] = []
        self.full_start = span[0]
        self.start = span[0]
        self.seen_comma = False
        self.seen_colon = False
        self.key: Optional[Spanned[Token]] = None
        self.value: Optional[Spanned[Json]] = None
        self.errors = errors

    def _emit(self, start: int, end: int, message: str) -> None:
        self.errors.append(SyntaxError_(start, end, message))

    def _invalid_key(self, start: int, end: int) -> Spanned[Token]:
        self._emit(start, end, "Expected valid token")
        return Spanned(Token.invalid(), start, end)

    def _invalid_json(self, start: int, end: int) -> Spanned[Json]:
        self._emit(start, end, "Expected valid json")
        return Spanned(JsonInvalid(), start, end)

    def eat(self, part: _Part) -> None:
        if isinstance(part.value, Json):
            self.eat_json(part)
        elif part.value.kind is TokenKind.COLON:
            self.eat_colon(part)
        elif part.value.kind is TokenKind.COMMA:
            self.eat_comma(part)
        else:
            self._emit(part.start, part.end, f"expected ':' or ',', found {part.value}")

    def eat_json(self, part: Spanned[Json]) -> None:
        if self.key is None:
            if isinstance(part.value, JsonToken):
                self.key = Spanned(part.value.value, part.start, part.end)
            else:
                self.key = self._invalid_key(self.start, part.start)
                self.value = part
            self.full_start = part.start
            self.start = part.end + 1
            return

        if self.value is None:
            if not self.seen_colon:
                self._emit(self.start - 1, self.start, "expected colon, didn't find one")
            self.start = part.end + 1
            self.value = part
            return

        # A complete member is followed by another value without a comma.
        self.flush(self.full_start, part.end, final=False)
        self.eat_json(part)

    def eat_colon(self, colon: Spanned[Token]) -> None:
        value = self.value
        if self.key is not None and value is not None and isinstance(value.value, JsonToken):
            # The previous value was really the key of the next member.
            self.value = None
            self.flush(colon.start, colon.end, final=False)
            self.key = Spanned(value.value.value, value.start, value.end)
        if self.seen_colon:
            self._emit(colon.start, colon.end, "Unexepected colon, already seen one")
        self.seen_colon = True
        if self.key is None:
            self.key = self._invalid_key(self.start, colon.start)
        self.start = colon.end

    def eat_comma(self, comma: Spanned[Token]) -> None:
        if self.seen_comma:
            self._emit(comma.start, comma.end, "Unexepected comma, already seen one")
        self.seen_comma = True
        self.flush(comma.start, comma.end, final=False)

    def flush(self, start: int, end: int, final: bool) -> None:
        if not final and not self.seen_comma:
            self._emit(end - 1, end, "Expected comma, but didn't find one")
        key = self.key if self.key is not None else self._invalid_key(start, end)
        value = self.value if self.value is not None else self._invalid_json(start, end)
        self.key = None
        self.value = None
        self.out.append(Spanned(ObjectMember(key, value), self.full_start, end))
        self.start = end + 1
        self.full_start = end + 1
        self.seen_colon = False
        self.seen_comma = False


class _Parser:
    def __init__(self, tokens: list[Spanned[Token]], eoi: int) -> None:
        self.tokens = tokens
        self.eoi = eoi
        self.furthest: Optional[tuple[int, str]] = None

    def _kind(self, index: int) -> Optional[TokenKind]:
        return self.tokens[index].value.kind if index < len(self.tokens) else None

    def fail(self, index: int, message: str) -> _Fail:
        if self.furthest is None or index >= self.furthest[0]:
            self.furthest = (index, message)
        return _Fail(message)

    def _found(self, index: int) -> str:
        return str(self.tokens[index].value) if index < len(self.tokens) else "end of input"

    def span(self, first: int, stop: int) -> tuple[int, int]:
        start = self.tokens[first].start if first < len(self.tokens) else self.eoi
        end = self.tokens[stop - 1].end if stop > 0 else self.eoi
        return start, end

    def error_at(self, index: int, message: str) -> SyntaxError_:
        if index < len(self.tokens):
            token = self.tokens[index]
            return SyntaxError_(token.start, token.end, message)
        return SyntaxError_(self.eoi, self.eoi, message)

    def value(self, index: int, errors: list[SyntaxError_]) -> tuple[Spanned[Json], int]:
        kind = self._kind(index)
        if kind is TokenKind.SQ_OPEN:
            json, stop = self.array(index, errors)
        elif kind is TokenKind.CURL_OPEN:
            json, stop = self.object(index, errors)
        elif kind in _LEAVES:
            json, stop = JsonToken(self.tokens[index].value), index + 1
        else:
            raise self.fail(index, f"expected array, object or leaf, found {self._found(index)}")
        return Spanned(json, *self.span(index, stop)), stop

    def _try_value(
        self, index: int, errors: list[SyntaxError_]
    ) -> Optional[tuple[Spanned[Json], int]]:
        local: list[SyntaxError_] = []
        try:
            result = self.value(index, local)
        except _Fail:
            return None
        errors.extend(local)
        return result

    def array(self, index: int, errors: list[SyntaxError_]) -> tuple[Json, int]:
        pos = index + 1
        items: list[Spanned[Json]] = []
        first = self._try_value(pos, errors)
        if first is not None:
            item, pos = first
            items.append(item)
            while True:
                local: list[SyntaxError_] = []
                kind = self._kind(pos)
                if kind is TokenKind.COMMA:
                    after = pos + 1
                elif kind is not None and kind is not TokenKind.SQ_CLOSE:
                    local.append(self.error_at(pos, f"expected ',', found {self._found(pos)}"))
                    after = pos
                else:
                    break
                following = self._try_value(after, local)
                if following is None:
                    break
                item, pos = following
                items.append(item)
                errors.extend(local)
        if self._kind(pos) is not TokenKind.SQ_CLOSE:
            raise self.fail(pos, f"expected ']', found {self._found(pos)}")
        return JsonArray(tuple(items)), pos + 1

    def object(self, index: int, errors: list[SyntaxError_]) -> tuple[Json, int]:
        first = pos = index + 1
        parts: list[_Part] = []
        while True:
            attempt = self._try_value(pos, errors)
            if attempt is not None:
                part, pos = attempt
                parts.append(part)
            elif self._kind(pos) in (TokenKind.COMMA, TokenKind.COLON):
                parts.append(self.tokens[pos])
                pos += 1
            else:
                break
        span = self.span(first, pos)
        collector = _MemberCollector(span, errors)
        for part in parts:
            collector.eat(part)
        collector.flush(*span, final=True)
        if self._kind(pos) is not TokenKind.CURL_CLOSE:
            raise self.fail(pos, f"expected '}}', found {self._found(pos)}")
        return JsonObject(tuple(collector.out)), pos + 1


def parse(
    source: str, tokens: Iterable[Spanned[Token]]
) -> tuple[Spanned[Json], list[SyntaxError_]]:
    """Parse a token stream into a spanned JSON value, collecting recoverable errors.

    When no value can be read at all, an invalid value spanning the whole
    source is returned.
    """
    parser = _Parser(list(tokens), len(source))
    errors: list[SyntaxError_] = []
    try:
        json, stop = parser.value(0, errors)
    except _Fail:
        index, message = parser.furthest if parser.furthest is not None else (0, "expected value")
        errors.append(parser.error_at(index, message))
        return Spanned(JsonInvalid(), 0, len(source)), errors
    if stop < len(parser.tokens):
        errors.append(
            parser.error_at(stop, f"expected end of input, found {parser._found(stop)}")
        )
    return json, errors