"""The regular-expression driven lexer state machine."""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

import regex

from .mutators import LexerMutator, Mutator, Rule
from .tokens import EOF, Token, TokenType

__all__ = [
    "LexerError",
    "Config",
    "TokeniseOptions",
    "Rules",
    "CompiledRule",
    "LexerState",
    "RegexLexer",
    "new_lexer",
    "words",
    "tokenise",
    "ensure_lf",
]

_MATCH_TIMEOUT = 0.25
_QUOTE_META = set("\\.+*?()|[]{}^$")


class LexerError(Exception):
    """Raised when a lexer cannot be built, compiled or run."""


@dataclass
class Config:
    """Static description of a lexer."""

    name: str = ""
    aliases: list[str] = field(default_factory=list)
    filenames: list[str] = field(default_factory=list)
    alias_filenames: list[str] = field(default_factory=list)
    mime_types: list[str] = field(default_factory=list)
    case_insensitive: bool = False
    dot_all: bool = False
    not_multiline: bool = False
    ensure_nl: bool = False
    priority: float = 0.0


@dataclass
class TokeniseOptions:
    """Options controlling a single tokenisation run."""

    state: str = "root"
    nested: bool = False
    ensure_lf: bool = False


_DEFAULT_OPTIONS = TokeniseOptions(state="root", ensure_lf=True)


class Rules(dict):
    """Maps each state name to its sequence of rules."""

    def clone(self) -> Rules:
        """A copy whose rule lists may be changed independently."""
        return Rules({key: list(value) for key, value in self.items()})

    def rename(self, old_rule: str, new_rule: str) -> Rules:
        """A clone with state ``old_rule`` renamed to ``new_rule``."""
        out = self.clone()
        out[new_rule] = out.pop(old_rule, None)
        return out

    def merge(self, rules: Mapping[str, list]) -> Rules:
        """A clone of these rules with ``rules`` merged over them."""
        out = self.clone()
        for key, value in Rules(rules).clone().items():
            out[key] = value
        return out


@dataclass
class CompiledRule:
    """A rule together with its compiled regular expression."""

    pattern: str = ""
    type: Any = None
    mutator: Optional[Mutator] = None
    flags: str = field(default="", compare=False)
    regexp: Any = field(default=None, compare=False, repr=False)


def _as_rule(rule: Any) -> Rule:
    if isinstance(rule, Rule):
        return rule
    return Rule(*rule)


def _regex_flags(flags: str) -> int:
    value = regex.V0
    if "m" in flags:
        value |= regex.MULTILINE
    if "i" in flags:
        value |= regex.IGNORECASE
    if "s" in flags:
        value |= regex.DOTALL
    return value


def _match_rules(
    text: str, pos: int, rules: list[CompiledRule]
) -> Optional[tuple[int, CompiledRule, list[str], dict[str, str]]]:
    for index, rule in enumerate(rules):
        try:
            match = rule.regexp.match(text, pos, timeout=_MATCH_TIMEOUT)
        except TimeoutError:
            continue
        if match is None:
            continue
        groups = [match.group(0), *match.groups("")]
        named = {str(number): value for number, value in enumerate(groups)}
        named.update(match.groupdict(""))
        return index, rule, groups, named
    return None


class LexerState:
    """The state of a single run of a lexer over some text."""

    def __init__(
        self,
        lexer: RegexLexer,
        text: str,
        rules: dict[str, list[CompiledRule]],
        options: TokeniseOptions,
        newline_added: bool = False,
    ) -> None:
        self.lexer = lexer
        self.registry = lexer.registry
        self.text = text
        self.pos = 0
        self.rules = rules
        self.stack: list[str] = [options.state]
        self.state = options.state
        self.rule = 0
        self.groups: list[str] = []
        self.named_groups: dict[str, str] = {}
        self.mutator_context: dict[Any, Any] = {}
        self.options = options
        self._newline_added = newline_added
        self._iterators: list[Iterator[Token]] = []

    def set(self, key: Any, value: Any) -> None:
        """Store ``value`` in the mutator context."""
        self.mutator_context[key] = value

    def get(self, key: Any) -> Any:
        """Fetch a value from the mutator context, or None."""
        return self.mutator_context.get(key)

    def _drain(self) -> Optional[Token]:
        while self._iterators:
            token = next(self._iterators[-1], None)
            if token is None or token == EOF:
                self._iterators.pop()
                continue
            if token.type == TokenType.IGNORE:
                continue
            return token
        return None

    def next_token(self) -> Token:
        """Return the next token, or EOF when the text is exhausted."""
        end = len(self.text) - 1 if self._newline_added else len(self.text)
        while self.pos < end and self.stack:
            token = self._drain()
            if token is not None:
                return token

            self.state = self.stack[-1]
            if self.lexer.trace:
                print(f"{self.state}: pos={self.pos}, text={self.text[self.pos:]!r}", file=sys.stderr)
            try:
                selected = self.rules[self.state]
            except KeyError:
                raise LexerError(f"unknown state {self.state}") from None
            found = _match_rules(self.text, self.pos, selected)
            if found is None:
                # An unmatched newline resets the stack so lexing can recover.
                if self.text[self.pos] == "\n" and self.state != self.options.state:
                    self.stack = [self.options.state]
                    continue
                self.pos += 1
                return Token(TokenType.ERROR, self.text[self.pos - 1])
            self.rule, rule, self.groups, self.named_groups = found
            self.pos += len(self.groups[0])
            if rule.mutator is not None:
                rule.mutator.mutate(self)
            if rule.type is not None:
                self._iterators.append(iter(rule.type.emit(self.groups, self)))

        token = self._drain()
        if token is not None:
            return token

        if self.pos != len(self.text) and not self.stack:
            value = self.text[self.pos:]
            self.pos = len(self.text)
            return Token(TokenType.ERROR, value)
        return EOF

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token == EOF:
                return
            yield token


class RegexLexer:
    """A lexer driven by a state machine of regular-expression rules."""

    def __init__(self, config: Config, rules_func: Optional[Callable[[], Mapping[str, list]]]) -> None:
        self.config = config
        self.registry: Any = None
        self.trace = False
        self._analyser: Optional[Callable[[str], float]] = None
        self._rules_func = rules_func
        self._lock = threading.Lock()
        self._fetched = False
        self._compiled = False
        self._raw_rules: Rules = Rules()
        self._rules: dict[str, list[CompiledRule]] = {}

    def __str__(self) -> str:
        return self.config.name

    def set_trace(self, trace: bool) -> RegexLexer:
        """Enable or disable debug tracing to stderr."""
        self.trace = trace
        return self

    def rules(self) -> Rules:
        """The uncompiled rules of this lexer."""
        self._need_rules()
        return self._raw_rules

    def set_registry(self, registry: Any) -> RegexLexer:
        """Set the registry used to look up other lexers."""
        self.registry = registry
        return self

    def set_analyser(self, analyser: Callable[[str], float]) -> RegexLexer:
        """Set the function used to score text for this lexer."""
        self._analyser = analyser
        return self

    def analyse_text(self, text: str) -> float:
        """Score between 0 and 1 how likely ``text`` is for this lexer."""
        if self._analyser is not None:
            return self._analyser(text)
        return 0.0

    def set_config(self, config: Config) -> RegexLexer:
        """Replace the configuration of this lexer."""
        self.config = config
        return self

    def _fetch_rules(self) -> None:
        try:
            raw = Rules(self._rules_func())
        except Exception as exc:
            raise LexerError(f"{self.config.name}: failed to compile rules: {exc}") from exc
        if "root" not in raw:
            raise LexerError('no "root" state')
        flags = ""
        if not self.config.not_multiline:
            flags += "m"
        if self.config.case_insensitive:
            flags += "i"
        if self.config.dot_all:
            flags += "s"
        compiled: dict[str, list[CompiledRule]] = {}
        for state, state_rules in raw.items():
            raw[state] = [_as_rule(rule) for rule in state_rules]
            compiled[state] = [
                CompiledRule(rule.pattern, rule.type, rule.mutator, flags) for rule in raw[state]
            ]
        self._raw_rules = raw
        self._rules = compiled

    def _compile(self) -> None:
        for state, state_rules in self._rules.items():
            for index, rule in enumerate(state_rules):
                if rule.regexp is None:
                    try:
                        rule.regexp = regex.compile(rule.pattern, _regex_flags(rule.flags))
                    except regex.error as exc:
                        raise LexerError(f"failed to compile rule {state}.{index}: {exc}") from exc
        # Apply lexer mutators one at a time, rescanning since they may add or remove rules.
        while True:
            target = next(
                (
                    (state, index, rule.mutator)
                    for state, state_rules in self._rules.items()
                    for index, rule in enumerate(state_rules)
                    if isinstance(rule.mutator, LexerMutator)
                ),
                None,
            )
            if target is None:
                break
            state, index, mutator = target
            try:
                mutator.mutate_lexer(self._rules, state, index)
            except ValueError as exc:
                raise LexerError(str(exc)) from exc
        for state, state_rules in self._rules.items():
            for rule in state_rules:
                validate = getattr(rule.type, "validate_emitter", None)
                if validate is None:
                    continue
                try:
                    validate(rule)
                except Exception as exc:
                    raise LexerError(f"{self.config.name}: {state}: {rule.pattern}: {exc}") from exc

    def _need_rules(self) -> None:
        with self._lock:
            if self._rules_func is not None and not self._fetched:
                self._fetched = True
                self._fetch_rules()
            if not self._compiled:
                self._compile()
                self._compiled = True

    def tokenise(self, text: str, options: Optional[TokeniseOptions] = None) -> Iterator[Token]:
        """Return an iterator over the tokens of ``text``."""
        self._need_rules()
        if options is None:
            options = _DEFAULT_OPTIONS
        if options.ensure_lf:
            text = ensure_lf(text)
        newline_added = False
        if not options.nested and self.config.ensure_nl and not text.endswith("\n"):
            text += "\n"
            newline_added = True
        state = LexerState(self, text, self._rules, options, newline_added)
        return iter(state)


def _validate_glob(glob: str) -> None:
    chars = iter(glob)
    for char in chars:
        if char == "\\":
            if next(chars, None) is None:
                raise ValueError("syntax error in pattern")
        elif char == "[":
            count = 0
            closed = False
            for inner in chars:
                if inner == "^" and count == 0:
                    continue
                if inner == "]" and count > 0:
                    closed = True
                    break
                if inner == "\\" and next(chars, None) is None:
                    raise ValueError("syntax error in pattern")
                count += 1
            if not closed:
                raise ValueError("syntax error in pattern")


def new_lexer(
    config: Optional[Config], rules_func: Callable[[], Mapping[str, list]]
) -> RegexLexer:
    """Create a lexer whose rules are produced on first use by ``rules_func``."""
    if config is None:
        config = Config()
    for glob in [*config.filenames, *config.alias_filenames]:
        try:
            _validate_glob(glob)
        except ValueError as exc:
            raise LexerError(f"{config.name}: {glob!r} is not a valid glob: {exc}") from exc
    return RegexLexer(config, rules_func)


def _quote_meta(word: str) -> str:
    return "".join("\\" + char if char in _QUOTE_META else char for char in word)


def words(prefix: str, suffix: str, *args: str) -> str:
    """A pattern matching any of the literal words, longest first."""
    ordered = sorted(args, key=len, reverse=True)
    return prefix + "(" + "|".join(_quote_meta(word) for word in ordered) + ")" + suffix


def tokenise(lexer: Any, text: str, options: Optional[TokeniseOptions] = None) -> list[Token]:
    """Tokenise ``text`` with ``lexer`` into a list."""
    return list(lexer.tokenise(text, options))


def ensure_lf(text: str) -> str:
    """Replace ``\\r\\n`` and lone ``\\r`` with ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")