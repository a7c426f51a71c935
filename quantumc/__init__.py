"""Tokenizer, parser and pipeline driver for a small C dialect with quantum extensions."""

__version__ = "0.1.0"

__all__ = ["tokens", "errors", "expressions", "tokenizer", "parser", "compiler"]