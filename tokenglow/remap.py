"""Lexers that rewrite the tokens produced by another lexer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional

from .tokens import Token, TokenType

__all__ = ["RemappingLexer", "TypeMap", "type_remapping_lexer"]


class RemappingLexer:
    """Wraps a lexer, replacing each token with zero or more tokens."""

    def __init__(self, lexer: Any, mapper: Callable[[Token], Iterable[Token]]) -> None:
        self.lexer = lexer
        self.mapper = mapper

    @property
    def config(self) -> Any:
        """The configuration of the wrapped lexer."""
        return self.lexer.config

    def analyse_text(self, text: str) -> float:
        """Score ``text`` with the wrapped lexer."""
        return self.lexer.analyse_text(text)

    def set_analyser(self, analyser: Callable[[str], float]) -> RemappingLexer:
        """Set the analyser of the wrapped lexer."""
        self.lexer.set_analyser(analyser)
        return self

    def set_registry(self, registry: Any) -> RemappingLexer:
        """Set the registry of the wrapped lexer."""
        self.lexer.set_registry(registry)
        return self

    def tokenise(self, text: str, options: Optional[Any] = None) -> Iterator[Token]:
        """Tokenise ``text`` and remap each resulting token."""
        tokens = self.lexer.tokenise(text, options)
        return (mapped for token in tokens for mapped in self.mapper(token))


@dataclass(frozen=True)
class TypeMap:
    """Maps tokens of ``from_type`` to ``to_type``; with no words, all such tokens."""

    from_type: TokenType
    to_type: TokenType
    words: tuple[str, ...] = ()


def type_remapping_lexer(lexer: Any, mapping: Iterable[TypeMap]) -> RemappingLexer:
    """Wrap ``lexer`` so token types are remapped according to ``mapping``."""
    lookup: dict[TokenType, dict[str, TokenType]] = {}
    for entry in mapping:
        by_word = lookup.setdefault(entry.from_type, {})
        if not entry.words:
            by_word[""] = entry.to_type
        else:
            for word in entry.words:
                by_word[word] = entry.to_type

    def remap(token: Token) -> list[Token]:
        by_word = lookup.get(token.type)
        if by_word is not None:
            new_type = by_word.get(token.value, by_word.get(""))
            if new_type is not None:
                token = Token(new_type, token.value)
        return [token]

    return RemappingLexer(lexer, remap)