"""Rules and the mutators that change lexer state as rules match."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from .tokens import Token

__all__ = [
    "Rule",
    "Mutator",
    "LexerMutator",
    "MultiMutator",
    "IncludeMutator",
    "CombinedMutator",
    "PushMutator",
    "PopMutator",
    "mutators",
    "include",
    "combined",
    "push",
    "pop",
    "default",
    "stringify",
]


class Mutator(ABC):
    """Modifies the lexer state machine while it is processing."""

    kind: str = ""

    @abstractmethod
    def mutate(self, state: Any) -> None:
        """Mutate the lexer state."""


class LexerMutator(ABC):
    """A mutator that also rewrites the lexer's rules when it is compiled."""

    @abstractmethod
    def mutate_lexer(self, rules: dict[str, list[Any]], state: str, rule: int) -> None:
        """Rewrite ``rules``; ``state`` and ``rule`` locate the owning rule."""


@dataclass
class Rule:
    """The fundamental matching unit of the lexer state machine."""

    pattern: str = ""
    type: Any = None
    mutator: Optional[Mutator] = None


@dataclass(frozen=True)
class MultiMutator(Mutator):
    """Applies a sequence of mutators in order."""

    mutators: tuple[Mutator, ...] = ()
    kind = "mutators"

    def mutate(self, state: Any) -> None:
        for mutator in self.mutators:
            mutator.mutate(state)


@dataclass(frozen=True)
class IncludeMutator(Mutator, LexerMutator):
    """Splices the rules of another state in place of the owning rule."""

    state: str
    kind = "include"

    def mutate(self, state: Any) -> None:
        raise RuntimeError(f"should never reach here Include({self.state!r})")

    def mutate_lexer(self, rules: dict[str, list[Any]], state: str, rule: int) -> None:
        if self.state not in rules:
            raise ValueError(f"invalid include state {self.state!r}")
        included = list(rules[self.state])
        current = rules[state]
        rules[state] = current[:rule] + included + current[rule + 1:]


@dataclass(frozen=True)
class CombinedMutator(Mutator, LexerMutator):
    """Builds an anonymous state from several states and pushes it."""

    states: tuple[str, ...] = ()
    kind = "combined"

    def mutate(self, state: Any) -> None:
        raise RuntimeError(f"should never reach here Combined({list(self.states)})")

    def mutate_lexer(self, rules: dict[str, list[Any]], state: str, rule: int) -> None:
        name = "__combined_" + "__".join(self.states)
        if name not in rules:
            merged: list[Any] = []
            for source in self.states:
                if source not in rules:
                    raise ValueError(f"invalid combine state {source!r}")
                merged.extend(rules[source])
            rules[name] = merged
        rules[state][rule].mutator = push(name)


@dataclass(frozen=True)
class PushMutator(Mutator):
    """Pushes states onto the stack; with none given, re-pushes the current one."""

    states: tuple[str, ...] = ()
    kind = "push"

    def mutate(self, state: Any) -> None:
        if not self.states:
            state.stack.append(state.state)
            return
        for name in self.states:
            if name == "#pop":
                state.stack.pop()
            else:
                state.stack.append(name)


@dataclass(frozen=True)
class PopMutator(Mutator):
    """Pops ``depth`` states from the stack."""

    depth: int = 1
    kind = "pop"

    def mutate(self, state: Any) -> None:
        if not state.stack:
            raise IndexError("nothing to pop")
        if self.depth > len(state.stack):
            raise IndexError(f"cannot pop {self.depth} states from a stack of {len(state.stack)}")
        del state.stack[len(state.stack) - self.depth:]


def mutators(*args: Mutator) -> MultiMutator:
    """A mutator applying ``args`` in order."""
    return MultiMutator(tuple(args))


def include(state: str) -> Rule:
    """A rule that includes the rules of ``state``."""
    return Rule(mutator=IncludeMutator(state))


def combined(*args: str) -> CombinedMutator:
    """A mutator that pushes a new state combining ``args``."""
    return CombinedMutator(tuple(args))


def push(*args: str) -> PushMutator:
    """A mutator that pushes ``args`` onto the state stack."""
    return PushMutator(tuple(args))


def pop(depth: int) -> PopMutator:
    """A mutator that pops ``depth`` states when its rule matches."""
    return PopMutator(depth)


def default(*args: Mutator) -> Rule:
    """A rule that applies ``args`` without matching anything."""
    return Rule(mutator=mutators(*args))


def stringify(*args: Token) -> str:
    """The raw text of the given tokens joined together."""
    return "".join(token.value for token in args)