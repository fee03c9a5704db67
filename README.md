# tokenglow

`tokenglow` splits source text into typed tokens. Each lexer is a small
state machine built from regular-expression rules. The rules are compiled
with the `regex` library.

## Installation

```
pip install tokenglow
```

## Token types

`tokenglow.tokens.TokenType` is an `IntEnum` of token kinds. Examples are
`TokenType.KEYWORD`, `TokenType.NAME_FUNCTION`,
`TokenType.LITERAL_STRING_DOUBLE` and `TokenType.COMMENT`. There are also
short aliases such as `TokenType.STRING`, `TokenType.NUMBER` and
`TokenType.WHITESPACE`. Kinds are grouped into categories of 1000 and
sub-categories of 100. A type reports where it sits in that grouping through
`parent()`, `category()`, `sub_category()`, `in_category(other)` and
`in_sub_category(other)`. `str()` of a type gives its camel-case name, for
example `"LiteralStringDouble"`.

A `Token` is a frozen dataclass holding a `type` and a `value`. `EOF` is the
empty end-of-input token. `STANDARD_TYPES` maps types to their short class
names, for example `"k"` for keywords and `"s2"` for double-quoted strings.

## Writing a lexer

A lexer maps state names to lists of rules. A rule holds a pattern, an
emitter (usually a token type) and an optional mutator that changes the state
stack. You can give a rule as a `Rule` or as a plain tuple.

```python
from tokenglow.lexer import Config, Rules, new_lexer, tokenise
from tokenglow.mutators import Rule, pop, push
from tokenglow.tokens import TokenType

lexer = new_lexer(
    Config(name="Tiny", aliases=["tiny"], filenames=["*.tiny"]),
    lambda: Rules({
        "root": [
            Rule(r"\s+", TokenType.TEXT_WHITESPACE),
            Rule(r'"', TokenType.LITERAL_STRING, push("string")),
            Rule(r"\w+", TokenType.NAME),
        ],
        "string": [
            Rule(r'"', TokenType.LITERAL_STRING, pop(1)),
            Rule(r'[^"]+', TokenType.LITERAL_STRING),
        ],
    }),
)

for token in tokenise(lexer, 'say "hi"'):
    print(token.type, repr(token.value))
```

The lexer reads its rules on first use. `RegexLexer.tokenise(text, options)`
returns an iterator of tokens, and `tokenise(lexer, text, options)` returns
them as a list.

`TokeniseOptions` sets the following:

- `state`: the start state.
- `nested`: set this when lexing text embedded in another lexer's input.
- `ensure_lf`: normalise line endings.

If you pass no options, lexing starts in `"root"` and line endings are
normalised.

`Config` sets the following:

- Identification: the name, aliases, file globs, alias file globs, MIME types
  and priority.
- Pattern flags: `case_insensitive`, `dot_all` and `not_multiline`. Multi-line
  mode is on by default.
- `ensure_nl`: adds a trailing newline when the text lacks one.

`set_trace(True)` prints each step of the state machine to stderr.

Mutators in `tokenglow.mutators`:

- `push(*states)`: pushes states. With no arguments it re-pushes the current
  state, and `"#pop"` pops a state.
- `pop(depth)`: pops `depth` states.
- `include(state)`: a rule that splices in the rules of another state.
- `combined(*states)`: pushes a state built from several others.
- `mutators(*ms)` and `default(*ms)`: apply several mutators in turn.
- `stringify(*tokens)`: joins token values back into text.

`Rules` is a `dict` subclass with `clone()`, `rename(old, new)` and
`merge(other)`. `words(prefix, suffix, *words)` builds a pattern that matches
any of the given literal words, longest first. `ensure_lf(text)` turns `\r\n`
and lone `\r` into `\n`.

Text that no rule matches comes back as `TokenType.ERROR` tokens. An
unmatched newline outside the start state resets the stack to the start
state. `LexerError` is raised in these cases:

- a file glob in the configuration is invalid;
- there is no `"root"` state;
- a pattern fails to compile;
- an included or combined state is unknown;
- the lexer enters an unknown state.

## Registries

`tokenglow.registry.LexerRegistry` holds lexers. `register` adds a lexer, and
a lexer with the same name replaces the one already there. Lookups:

- `get(name)`: by name or alias, ignoring case, then by file extension or
  filename.
- `match(filename)`: by file name, trying primary globs before alias globs.
  Backup suffixes such as `.bak`, `.orig` or `~` are recognised.
- `match_mime_type(mime_type)`: by MIME type.
- `analyse(text)`: by content. It picks the lexer whose `set_analyser`
  function scores highest.

When more than one lexer matches, the one with the highest priority wins. An
unset priority counts as 1. `names(with_aliases)` and
`aliases(skip_without_aliases)` list what is registered.

## Remapping

`tokenglow.remap.type_remapping_lexer(lexer, mapping)` wraps a lexer and
changes the types of some of its tokens. `mapping` is a list of
`TypeMap(from_type, to_type, words)` entries. For example, this turns `NAME`
tokens whose text is `if` or `else` into `KEYWORD`:

```python
from tokenglow.remap import TypeMap, type_remapping_lexer
from tokenglow.tokens import TokenType

keywords = type_remapping_lexer(
    lexer,
    [TypeMap(TokenType.NAME, TokenType.KEYWORD, ("if", "else"))],
)
```

A `TypeMap` with no words remaps every token of its type.
`RemappingLexer(lexer, mapper)` accepts any function that takes a token and
returns a list of tokens.

## What it does not do

`tokenglow` ships the machinery only. It has no built-in language lexers, no
styles or formatters for rendering highlighted output, and no command-line
tool. It also cannot look up a `TokenType` from its name as a string; use
the enum members directly.