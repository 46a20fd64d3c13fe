"""A lexer, semantic analyzer and tree-walking interpreter for a small Pascal-like language."""

__version__ = "0.1.0"

__all__ = ["errors", "tokens", "lexer", "nodes", "records", "semantics", "interpreter"]