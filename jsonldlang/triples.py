"""Derive prefixes and RDF triples from a parsed JSON-LD document."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, Optional, Sequence
from urllib.parse import urljoin, urlsplit, urlunsplit

from jsonldlang.parser import Json, JsonArray, JsonObject, JsonToken, ObjectMember
from jsonldlang.tokenizer import Spanned, Token, TokenKind

__all__ = [
    "TermKind",
    "Term",
    "Quad",
    "Prefix",
    "Prefixes",
    "derive_prefixes",
    "derive_triples",
]

RDF_TYPE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_MAX_EXPANSION_STEPS = 5

Span = tuple[int, int]


class TermKind(Enum):
    """The kind of an RDF term."""

    IRI = "iri"
    BLANK_NODE = "blank_node"
    LITERAL = "literal"
    INVALID = "invalid"


@dataclass(frozen=True)
class Term:
    """An RDF term with the source span it came from (not part of equality)."""

    kind: TermKind
    value: str
    span: Span = field(default=(0, 0), compare=False)

    @classmethod
    def named_node(cls, value: str, span: Span) -> Term:
        return cls(TermKind.IRI, value, span)

    @classmethod
    def literal(cls, value: str, span: Span) -> Term:
        return cls(TermKind.LITERAL, value, span)

    @classmethod
    def blank_node(cls, value: str, span: Span) -> Term:
        return cls(TermKind.BLANK_NODE, value, span)

    @classmethod
    def invalid(cls, span: Span) -> Term:
        return cls(TermKind.INVALID, "", span)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Quad:
    """A triple plus the span of the source that produced it."""

    subject: Term
    predicate: Term
    object: Term
    span: Span


@dataclass(frozen=True)
class Prefix:
    """A prefix name bound to an absolute IRI."""

    prefix: str
    url: str


def _is_absolute(text: str) -> bool:
    return bool(_SCHEME.match(text))


def _resolve(base: str, reference: str) -> Optional[str]:
    """Resolve ``reference`` against ``base``; ``None`` when it cannot be done."""
    if _is_absolute(reference):
        return reference
    if not _is_absolute(base):
        return None
    parts = urlsplit(base)
    # Resolution is the same for every scheme; use one urljoin knows about.
    stand_in = urlunsplit(("http", parts.netloc, parts.path, parts.query, parts.fragment))
    joined = urlsplit(urljoin(stand_in, reference))
    return urlunsplit((parts.scheme, joined.netloc, joined.path, joined.query, joined.fragment))


@dataclass
class Prefixes:
    """The prefixes known in a document, with the document's base IRI."""

    items: list[Prefix]
    base: str

    def __iter__(self) -> Iterator[Prefix]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def find(self, name: str) -> Optional[Prefix]:
        return next((p for p in self.items if p.prefix == name), None)

    def expand_json(self, token: Token) -> Optional[str]:
        """Expand a string token to a full IRI using the prefixes and the base."""
        if token.kind is not TokenKind.STR:
            return None
        text = token.text
        name, colon, rest = text.partition(":")
        if colon:
            known = self.find(name)
            if known is not None:
                return known.url + rest
        else:
            known = self.find(text)
            if known is not None:
                return known.url
        return _resolve(self.base, text)


def _visit_objects(
    json: Spanned[Json],
    visit: Callable[[Sequence[Spanned[ObjectMember]], Span], None],
) -> None:
    value = json.value
    if isinstance(value, JsonArray):
        for item in value.items:
            _visit_objects(item, visit)
    elif isinstance(value, JsonObject):
        visit(value.members, json.span)


def _get_str(token: Token) -> Optional[str]:
    return token.text if token.kind is TokenKind.STR else None


def _find_field(
    members: Sequence[Spanned[ObjectMember]], name: str
) -> Optional[tuple[Spanned[Json], Span]]:
    for member in members:
        key = member.value.field()
        if _get_str(key.value) == name:
            value = member.value.json_value()
            return None if value is None else (value, key.span)
    return None


def _string_value(json: Optional[Spanned[Json]]) -> Optional[str]:
    if json is None:
        return None
    token = json.value.token
    return None if token is None else _get_str(token)


def derive_prefixes(json: Spanned[Json], base: str) -> Prefixes:
    """Collect the prefixes declared in every ``@context`` of ``json``."""
    options: list[list[str]] = []

    def from_context(members: Sequence[Spanned[ObjectMember]], _span: Span) -> None:
        for member in members:
            key = _get_str(member.value.field().value)
            if key is None:
                continue
            value = _string_value(member.value.json_value())
            if value is None:
                continue
            options.append([key, value])

    def from_object(members: Sequence[Spanned[ObjectMember]], _span: Span) -> None:
        found = _find_field(members, "@context")
        if found is not None:
            _visit_objects(found[0], from_context)

    _visit_objects(json, from_object)

    changed = True
    steps = 0
    while changed and steps < _MAX_EXPANSION_STEPS:
        changed = False
        for option in options:
            name, colon, rest = option[1].partition(":")
            if not colon:
                continue
            expansion = next((o[1] for o in options if o[0] == name), None)
            if expansion is None:
                continue
            option[1] = expansion + rest
            changed = True
        steps += 1

    items = [Prefix(key, value) for key, value in options if _is_absolute(value)]
    return Prefixes(items, base)


def _shorten(span: Span) -> Span:
    return (span[0] + 1, span[1] - 1)


def _derive(
    json: Spanned[Json],
    prefixes: Prefixes,
    out: list[Quad],
    blank: Callable[[Span], Term],
) -> Optional[Term]:
    subject_out: Optional[Term] = None

    def on_object(members: Sequence[Spanned[ObjectMember]], span: Span) -> None:
        nonlocal subject_out
        subject: Optional[Term] = None
        found_id = _find_field(members, "@id")
        if found_id is not None:
            id_json = found_id[0]
            token = id_json.value.token
            expanded = None if token is None else prefixes.expand_json(token)
            if expanded is not None:
                subject = Term.named_node(expanded, _shorten(id_json.span))
        if subject is None:
            subject = blank(span)

        graph = _find_field(members, "@graph")
        if graph is not None:
            _derive(graph[0], prefixes, out, blank)

        found_type = _find_field(members, "@type")
        if found_type is not None:
            type_json, field_span = found_type
            if isinstance(type_json.value, JsonToken):
                expanded = prefixes.expand_json(type_json.value.value)
                type_object = (
                    Term.named_node(expanded, type_json.span)
                    if expanded is not None
                    else Term.invalid(type_json.span)
                )
            else:
                type_object = _derive(type_json, prefixes, out, blank) or Term.invalid(
                    type_json.span
                )
            out.append(
                Quad(subject, Term.named_node(RDF_TYPE, field_span), type_object, type_json.span)
            )

        for member in members:
            key = member.value.field()
            name = _get_str(key.value)
            if name is not None and name.startswith("@"):
                continue
            predicate_iri = prefixes.expand_json(key.value) or name
            if predicate_iri is None:
                continue
            predicate = Term.named_node(predicate_iri, _shorten(key.span))

            value = member.value.json_value()
            if value is None:
                obj = Term.invalid((0, 0))
            elif isinstance(value.value, JsonToken):
                text = _get_str(value.value.value)
                obj = (
                    Term.literal(text, value.span)
                    if text is not None
                    else Term.invalid(value.span)
                )
            else:
                obj = _derive(value, prefixes, out, blank) or Term.invalid(value.span)

            out.append(Quad(subject, predicate, obj, member.span))

        subject_out = subject

    _visit_objects(json, on_object)
    return subject_out


def derive_triples(json: Spanned[Json], prefixes: Prefixes) -> list[Quad]:
    """Turn every object of ``json`` into triples, numbering blank nodes from zero."""
    counter = 0

    def blank(span: Span) -> Term:
        nonlocal counter
        term = Term.blank_node(f"_:{counter}", span)
        counter += 1
        return term

    out: list[Quad] = []
    _derive(json, prefixes, out, blank)
    return out