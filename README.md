# jsonldlang

An error-tolerant reader for JSON-LD documents, built for editor tooling.
It keeps working on half-written documents. Missing commas, colons or values
are reported as errors, and the reader still builds as much structure as it can.

## Modules

- `jsonldlang.tokenizer`: `tokenize(source)` returns a list of
  `Spanned[Token]` and a list of `SyntaxError_`. A `Token` has a `kind`
  (a `TokenKind`) and, for strings and numbers, a `text`. Tokenizing stops at
  the first piece of input that is not a token. The tokens read before that
  point are returned together with an error.
- `jsonldlang.parser`: `parse(source, tokens)` builds a tree of `Json` values
  (`JsonInvalid`, `JsonToken`, `JsonArray`, `JsonObject`). Objects hold
  `ObjectMember`s, and each member has `field()` and `json_value()`. Malformed
  objects and arrays are recovered and the errors are collected. If no value
  can be read at all, the result is a `JsonInvalid` that spans the whole
  source. `JsonFormatter(indent="  ").format(json)` returns the tree as
  indented text. It raises `JsonFormatError` when the tree has invalid parts.
- `jsonldlang.triples`:
  - `derive_prefixes(json, base)` collects the string entries of every
    `@context` object into a `Prefixes`. It expands prefixed values in up to
    five passes and keeps only the entries that end up as absolute IRIs.
  - `derive_triples(json, prefixes)` turns every object into `Quad`s made of
    `Term`s: IRIs, literals, blank nodes, or invalid terms. Objects without an
    `@id` become blank nodes named `_:0`, `_:1`, and so on. The function
    follows `@graph` and `@type` and reads nested objects.
  - `Prefixes.expand_json(token)` expands a string token against the known
    prefixes. If no prefix matches, it resolves the token against the base IRI.
- `jsonldlang.document`: `process(source, base)` runs the whole pipeline and
  returns a `Document`. The document holds `tokens`, `token_errors`,
  `element`, `errors`, `prefixes` and `triples`, and it is `dirty` when
  parsing reported errors.

Every token and tree node is a `Spanned` value with `start` and `end`
character offsets into the source. Every `Term` and `Quad` has a `span`.
Editors can use these to map results back to positions in the text.

## Example

```python
from jsonldlang.document import process

source = """{
    "@context": {"foaf": "http://xmlns.com/foaf/0.1/"},
    "@id": "http://example.com/ns#me",
    "foaf:name": "Arthur"
}"""

doc = process(source, "http://example.com/ns#")
for quad in doc.triples:
    print(quad.subject, quad.predicate, quad.object)
```

## What it does not do

- It is a library only. It has no command line and no editor or
  language-server integration such as completion or highlighting.
- It does not fetch anything. Contexts given as URLs are ignored, and only
  prefixes declared inline in `@context` objects are used.
- It does not implement the full JSON-LD expansion algorithm. String values
  always become literals, and typed values, language tags and term
  definitions given as objects are not interpreted.

## Installation

```
pip install .
```

## Running the tests

```
pip install .[test]
pytest
```