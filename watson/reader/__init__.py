from __future__ import annotations

from .lexer import Lexer, lex

__all__ = ["Lexer", "lex"]
