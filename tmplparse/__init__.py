"""Lexer, token stream and parser for Jinja-style templates, with small text helpers."""

__version__ = "1.5.4"