"""Run the full pipeline over a JSON-LD source: tokens, tree, prefixes and triples."""

from __future__ import annotations

from dataclasses import dataclass

from jsonldlang.parser import Json, parse
from jsonldlang.tokenizer import Spanned, SyntaxError_, Token, tokenize
from jsonldlang.triples import Prefixes, Quad, derive_prefixes, derive_triples

__all__ = ["Document", "process"]


@dataclass(frozen=True)
class Document:
    """Everything derived from one JSON-LD source.

    ``token_errors`` are the problems found while tokenizing, ``errors`` those
    found while parsing. A document with parse errors is ``dirty``; its tree,
    prefixes and triples are still derived from what could be recovered.
    """

    source: str
    base: str
    tokens: list[Spanned[Token]]
    token_errors: list[SyntaxError_]
    element: Spanned[Json]
    errors: list[SyntaxError_]
    prefixes: Prefixes
    triples: list[Quad]

    @property
    def dirty(self) -> bool:
        """Whether parsing reported any error."""
        return bool(self.errors)


def process(source: str, base: str) -> Document:
    """Tokenize and parse ``source``, then derive its prefixes and triples.

    ``base`` is the IRI of the document, used to resolve relative IRIs.
    """
    tokens, token_errors = tokenize(source)
    element, errors = parse(source, tokens)
    prefixes = derive_prefixes(element, base)
    triples = derive_triples(element, prefixes)
    return Document(
        source=source,
        base=base,
        tokens=tokens,
        token_errors=token_errors,
        element=element,
        errors=errors,
        prefixes=prefixes,
        triples=triples,
    )