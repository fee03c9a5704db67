"""A registry of lexers, looked up by name, alias, filename, MIME type or content."""

from __future__ import annotations

import fnmatch
import os
from typing import Any, Iterable, Optional

__all__ = ["LexerRegistry"]

_IGNORED_SUFFIXES = (
    # Editor backups
    "~", ".bak", ".old", ".orig",
    # Debian and derivatives apt/dpkg/ucf backups
    ".dpkg-dist", ".dpkg-old", ".ucf-dist", ".ucf-new", ".ucf-old",
    # Red Hat and derivatives rpm backups
    ".rpmnew", ".rpmorig", ".rpmsave",
    # Build system input/template files
    ".in",
)


def _priority(lexer: Any) -> float:
    # An unset priority counts as 1, so a small explicit priority ranks lower.
    value = lexer.config.priority
    return value if value else 1.0


def _best(candidates: list[Any]) -> Optional[Any]:
    if not candidates:
        return None
    return sorted(candidates, key=_priority, reverse=True)[0]


def _base_name(filename: str) -> str:
    if not filename:
        return "."
    stripped = filename.rstrip("/")
    if not stripped:
        return "/"
    return os.path.basename(stripped)


def _glob_matches(glob: str, filename: str) -> bool:
    if fnmatch.fnmatchcase(filename, glob):
        return True
    return any(fnmatch.fnmatchcase(filename, glob + suffix) for suffix in _IGNORED_SUFFIXES)


class LexerRegistry:
    """A collection of lexers."""

    def __init__(self) -> None:
        self.lexers: list[Any] = []
        self._by_name: dict[str, Any] = {}
        self._by_alias: dict[str, Any] = {}

    def names(self, with_aliases: bool = False) -> list[str]:
        """Sorted names of all lexers, optionally with their aliases."""
        out: list[str] = []
        for lexer in self.lexers:
            config = lexer.config
            out.append(config.name)
            if with_aliases:
                out.extend(config.aliases)
        return sorted(out)

    def aliases(self, skip_without_aliases: bool = False) -> list[str]:
        """Sorted aliases of all lexers.

        Lexers without aliases contribute their name, unless skipped.
        """
        out: list[str] = []
        for lexer in self.lexers:
            config = lexer.config
            if not config.aliases:
                if skip_without_aliases:
                    continue
                out.append(config.name)
            out.extend(config.aliases)
        return sorted(out)

    def get(self, name: str) -> Optional[Any]:
        """A lexer by name, alias, file extension or filename, or None."""
        for key in (name, name.lower()):
            lexer = self._by_name.get(key) or self._by_alias.get(key)
            if lexer is not None:
                return lexer
        candidates = [
            lexer
            for lexer in (self.match("filename." + name), self.match(name))
            if lexer is not None
        ]
        return _best(candidates)

    def match_mime_type(self, mime_type: str) -> Optional[Any]:
        """The best lexer for ``mime_type``, or None."""
        matched = [
            lexer
            for lexer in self.lexers
            for candidate in lexer.config.mime_types
            if candidate == mime_type
        ]
        return _best(matched)

    def _match_globs(self, filename: str, primary: bool) -> list[Any]:
        matched = []
        for lexer in self.lexers:
            config = lexer.config
            globs: Iterable[str] = config.filenames if primary else config.alias_filenames
            matched.extend(lexer for glob in globs if _glob_matches(glob, filename))
        return matched

    def match(self, filename: str) -> Optional[Any]:
        """The best lexer for ``filename``, trying primary globs before alias globs."""
        filename = _base_name(filename)
        best = _best(self._match_globs(filename, primary=True))
        if best is not None:
            return best
        return _best(self._match_globs(filename, primary=False))

    def analyse(self, text: str) -> Optional[Any]:
        """The lexer whose analyser scores ``text`` highest, or None."""
        picked = None
        highest = 0.0
        for lexer in self.lexers:
            analyse_text = getattr(lexer, "analyse_text", None)
            if analyse_text is None:
                continue
            weight = analyse_text(text)
            if weight > highest:
                picked = lexer
                highest = weight
        return picked

    def register(self, lexer: Any) -> Any:
        """Add ``lexer``, replacing any registered lexer of the same name."""
        lexer.set_registry(self)
        config = lexer.config
        self._by_name[config.name] = lexer
        self._by_name[config.name.lower()] = lexer
        for alias in config.aliases:
            self._by_alias[alias] = lexer
            self._by_alias[alias.lower()] = lexer
        for index, existing in enumerate(self.lexers):
            if existing is not None and existing.config.name == config.name:
                self.lexers[index] = lexer
                break
        else:
            self.lexers.append(lexer)
        return lexer