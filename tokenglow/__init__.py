"""Regex state-machine lexers that turn source text into typed tokens."""

__version__ = "0.1.0"

__all__ = ["lexer", "mutators", "registry", "remap", "tokens"]