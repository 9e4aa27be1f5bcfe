from typing import Optional

import pytest

from jsonldlang.parser import Json, parse
from jsonldlang.tokenizer import Spanned, Token, tokenize
from jsonldlang.triples import (
    Prefix,
    Prefixes,
    TermKind,
    derive_prefixes,
    derive_triples,
)

BASE = "memory://test.jsonld"
FOAF = "http://xmlns.com/foaf/0.1/"


def parse_json(source: str) -> Optional[Spanned[Json]]:
    tokens, errors = tokenize(source)
    if errors:
        return None
    json, errors = parse(source, tokens)
    if errors:
        return None
    return json


def load(source: str) -> Spanned[Json]:
    json = parse_json(source)
    assert json is not None, "valid json"
    return json


def test_simple_context_foaf_1():
    st = """ {
        "@context": {"foaf": "http://xmlns.com/foaf/0.1/"},
        "@id": "http://example.com/ns#me",
        "foaf:name": "Arthur"
    } """
    prefixes = derive_prefixes(load(st), BASE)
    assert len(prefixes) == 1
    assert prefixes.find("foaf").url == FOAF


def test_simple_context_foaf_2():
    st = """ {
        "@context": [ {"foaf": "http://xmlns.com/foaf/0.1/"} ],
        "@id": "http://example.com/ns#me",
        "foaf:name": "Arthur"
    } """
    prefixes = derive_prefixes(load(st), BASE)
    assert len(prefixes) == 1
    assert prefixes.find("foaf").url == FOAF


def test_simple_context_foaf_3():
    st = """ {
        "@context": {"foaf": "http://xmlns.com/foaf/0.1/", "name": "foaf:name"},
        "@id": "http://example.com/ns#me",
        "name": "Arthur"
    } """
    prefixes = derive_prefixes(load(st), BASE)
    assert len(prefixes) == 2
    assert prefixes.find("name").url == "http://xmlns.com/foaf/0.1/name"
    assert prefixes.find("foaf").url == FOAF


def test_simple_context_foaf_3_ignore_extra_ctx():
    st = """ {
        "@context": [ {"foaf": "http://xmlns.com/foaf/0.1/"}, "http://xmlns.com/foaf/0.1/context.jsonld" ],
        "@id": "http://example.com/ns#me",
        "foaf:name": "Arthur"
    } """
    prefixes = derive_prefixes(load(st), BASE)
    assert len(prefixes) == 1
    assert prefixes.find("foaf").url == FOAF


def test_context_values_that_are_not_iris_are_dropped():
    st = '{ "@context": {"foaf": "foaf_exp", "ex": "http://example.com/"} }'
    prefixes = derive_prefixes(load(st), BASE)
    assert [p.prefix for p in prefixes] == ["ex"]
    assert prefixes.base == BASE


def test_derive_simple_triples():
    st = """ {
        "@context": {"foaf": "http://xmlns.com/foaf/0.1/"} ,
        "@id": "http://example.com/ns#me",
        "foaf:name": "Arthur"
    } """
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, BASE))
    assert len(triples) == 1
    quad = triples[0]
    assert quad.subject.value == "http://example.com/ns#me"
    assert quad.subject.kind is TermKind.IRI
    assert quad.predicate.value == "http://xmlns.com/foaf/0.1/name"
    assert quad.predicate.kind is TermKind.IRI
    assert quad.object.value == "Arthur"
    assert quad.object.kind is TermKind.LITERAL


def test_derive_simple_triples_type():
    st = """ {
        "@context": {"foaf": "http://xmlns.com/foaf/0.1/"} ,
        "@id": "http://example.com/ns#me",
        "@type": "http://example.com/ns#my_type"
    } """
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, BASE))
    assert len(triples) == 1
    quad = triples[0]
    assert quad.subject.value == "http://example.com/ns#me"
    assert quad.subject.kind is TermKind.IRI
    assert quad.predicate.value == "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"
    assert quad.predicate.kind is TermKind.IRI
    assert quad.object.value == "http://example.com/ns#my_type"
    assert quad.object.kind is TermKind.IRI


def test_derive_type_with_prefix():
    st = '{ "@context": {"foaf": "http://xmlns.com/foaf/0.1/"}, "@type": "foaf:Document" }'
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, BASE))
    assert [q.object.value for q in triples] == ["http://xmlns.com/foaf/0.1/Document"]


def test_derive_simple_triples_bn():
    st = """ {
        "@context": {"foaf": "http://xmlns.com/foaf/0.1/"} ,
        "foaf:name": "Arthur"
    } """
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, BASE))
    assert len(triples) == 1
    quad = triples[0]
    assert quad.subject.kind is TermKind.BLANK_NODE
    assert quad.subject.value == "_:0"
    assert quad.predicate.value == "http://xmlns.com/foaf/0.1/name"
    assert quad.predicate.kind is TermKind.IRI
    assert quad.object.value == "Arthur"
    assert quad.object.kind is TermKind.LITERAL


def test_derive_simple_triples_graph():
    st = """ {
        "@context": {"foaf": "http://xmlns.com/foaf/0.1/"} ,
        "@graph": [ {
            "@id": "http://example.com/ns#me",
            "foaf:name": "Arthur"
        } ]
    } """
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, BASE))
    assert len(triples) == 1
    quad = triples[0]
    assert quad.subject.value == "http://example.com/ns#me"
    assert quad.subject.kind is TermKind.IRI
    assert quad.predicate.value == "http://xmlns.com/foaf/0.1/name"
    assert quad.object.value == "Arthur"
    assert quad.object.kind is TermKind.LITERAL


def test_derive_simple_triples_bn_graph():
    st = """ {
        "@context": {"foaf": "http://xmlns.com/foaf/0.1/"} ,
        "@graph": [ {
            "foaf:name": "Arthur"
        } ]
    } """
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, BASE))
    assert len(triples) == 1
    quad = triples[0]
    assert quad.subject.kind is TermKind.BLANK_NODE
    assert quad.predicate.value == "http://xmlns.com/foaf/0.1/name"
    assert quad.object.value == "Arthur"
    assert quad.object.kind is TermKind.LITERAL


def test_derive_simple_triples_deep():
    st = """ {
        "@context": {"foaf": "http://xmlns.com/foaf/0.1/"} ,
        "@id": "http://example.com/ns#me",
        "foaf:friend": {
            "foaf:name": "Arthur",
            "foaf:friend": {
                "foaf:name": "Julian"
            }
        }
    } """
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, BASE))
    assert len(triples) == 4

    mine = next(q for q in triples if q.subject.value == "http://example.com/ns#me")
    assert mine.subject.kind is TermKind.IRI
    assert mine.predicate.value == "http://xmlns.com/foaf/0.1/friend"
    assert mine.object.kind is TermKind.BLANK_NODE

    friend = [q for q in triples if q.subject == mine.object]
    assert len(friend) == 2
    name = next(q for q in friend if q.predicate.value == "http://xmlns.com/foaf/0.1/name")
    assert name.object.value == "Arthur"
    assert name.object.kind is TermKind.LITERAL

    friend_friend = next(
        q for q in friend if q.predicate.value == "http://xmlns.com/foaf/0.1/friend"
    ).object
    assert friend_friend.kind is TermKind.BLANK_NODE

    deepest = [q for q in triples if q.subject == friend_friend]
    assert len(deepest) == 1
    assert deepest[0].object.value == "Julian"
    assert deepest[0].object.kind is TermKind.LITERAL


def test_relative_id_resolves_against_base():
    st = '{ "@id": "meee", "http://example.com/p": "v" }'
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, "http://example.com/ns#"))
    assert triples[0].subject.value == "http://example.com/meee"
    assert triples[0].subject.kind is TermKind.IRI


def test_non_string_value_gives_invalid_object():
    st = '{ "@id": "http://example.com/s", "http://example.com/p": 42 }'
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, BASE))
    assert len(triples) == 1
    assert triples[0].object.kind is TermKind.INVALID


def test_predicate_span_excludes_quotes():
    st = '{"http://example.com/p": "v"}'
    json = load(st)
    triples = derive_triples(json, derive_prefixes(json, BASE))
    start, end = triples[0].predicate.span
    assert st[start:end] == "http://example.com/p"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("foaf:name", "http://xmlns.com/foaf/0.1/name"),
        ("foaf", FOAF),
        ("http://example.com/x", "http://example.com/x"),
        ("rel", "http://example.com/dir/rel"),
    ],
)
def test_expand_json(text, expected):
    prefixes = Prefixes([Prefix("foaf", FOAF)], "http://example.com/dir/doc")
    assert prefixes.expand_json(Token.string(text)) == expected


def test_expand_json_non_string_is_none():
    prefixes = Prefixes([Prefix("foaf", FOAF)], BASE)
    assert prefixes.expand_json(Token.number("1")) is None