"""Error-tolerant JSON-LD tokenizing, parsing and triple derivation."""

__version__ = "0.1.0"
__all__ = ["tokenizer", "parser", "triples", "document"]