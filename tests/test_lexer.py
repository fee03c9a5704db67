from typing import Iterable

import pytest

from tokenglow.lexer import (
    Config,
    LexerError,
    Rules,
    TokeniseOptions,
    ensure_lf,
    new_lexer,
    tokenise,
    words,
)
from tokenglow.mutators import Rule, include, pop, push
from tokenglow.tokens import Token, TokenType as T


class _ByGroups:
    def __init__(self, *emitters):
        self.emitters = emitters

    def emit(self, groups, state):
        for emitter, group in zip(self.emitters, groups[1:]):
            yield from emitter.emit([group], state)


def _coalesce(tokens: Iterable[Token]) -> list[Token]:
    out: list[Token] = []
    for token in tokens:
        if not token.value:
            continue
        if out and out[-1].type == token.type:
            out[-1] = Token(token.type, out[-1].value + token.value)
        else:
            out.append(token)
    return out


def _lexer(rules, config=None):
    return new_lexer(config, lambda: rules)


def test_newline_at_end_of_file():
    rules = {"root": [Rule(r"(\w+)(\n)", _ByGroups(T.KEYWORD, T.WHITESPACE))]}
    lexer = _lexer(rules, Config(ensure_nl=True))
    assert _coalesce(lexer.tokenise("hello")) == [
        Token(T.KEYWORD, "hello"),
        Token(T.WHITESPACE, "\n"),
    ]
    lexer = _lexer(rules)
    assert _coalesce(lexer.tokenise("hello")) == [Token(T.ERROR, "hello")]


def test_matching_at_start():
    lexer = _lexer(
        {
            "root": [
                Rule(r"\s+", T.WHITESPACE),
                Rule(r"^-", T.PUNCTUATION, push("directive")),
                Rule(r"->", T.OPERATOR),
            ],
            "directive": [Rule("module", T.NAME_ENTITY, pop(1))],
        },
        Config(),
    )
    assert _coalesce(lexer.tokenise("-module ->")) == [
        Token(T.PUNCTUATION, "-"),
        Token(T.NAME_ENTITY, "module"),
        Token(T.WHITESPACE, " "),
        Token(T.OPERATOR, "->"),
    ]


def test_ensure_lf_option():
    rules = {"root": [Rule(r"(\w+)(\r?\n|\r)", _ByGroups(T.KEYWORD, T.WHITESPACE))]}
    lexer = _lexer(rules, Config())
    tokens = lexer.tokenise("hello\r\nworld\r", TokeniseOptions(state="root", ensure_lf=True))
    assert _coalesce(tokens) == [
        Token(T.KEYWORD, "hello"),
        Token(T.WHITESPACE, "\n"),
        Token(T.KEYWORD, "world"),
        Token(T.WHITESPACE, "\n"),
    ]
    lexer = _lexer(rules)
    tokens = lexer.tokenise("hello\r\nworld\r", TokeniseOptions(state="root", ensure_lf=False))
    assert _coalesce(tokens) == [
        Token(T.KEYWORD, "hello"),
        Token(T.WHITESPACE, "\r\n"),
        Token(T.KEYWORD, "world"),
        Token(T.WHITESPACE, "\r"),
    ]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", ""),
        ("abc", "abc"),
        ("\r", "\n"),
        ("a\r", "a\n"),
        ("\rb", "\nb"),
        ("a\rb", "a\nb"),
        ("\r\n", "\n"),
        ("a\r\n", "a\n"),
        ("\r\nb", "\nb"),
        ("a\r\nb", "a\nb"),
        ("\r\r\r\n\r", "\n\n\n\n"),
    ],
)
def test_ensure_lf_func(text, expected):
    assert ensure_lf(text) == expected


def test_ignore_token():
    lexer = _lexer(
        {"root": [Rule(r"(\s*)(\w+)(?:\1)(\n)", _ByGroups(T.IGNORE, T.KEYWORD, T.WHITESPACE))]},
        Config(ensure_nl=True),
    )
    assert _coalesce(lexer.tokenise("  hello  ")) == [
        Token(T.KEYWORD, "hello"),
        Token(T.TEXT_WHITESPACE, "\n"),
    ]


def test_missing_root_state_raises():
    lexer = _lexer({"other": [Rule("a", T.TEXT)]})
    with pytest.raises(LexerError, match="root"):
        lexer.tokenise("a")


def test_bad_pattern_raises():
    lexer = _lexer({"root": [Rule("(unclosed", T.TEXT)]})
    with pytest.raises(LexerError, match="root.0"):
        lexer.tokenise("x")


def test_invalid_glob_raises():
    with pytest.raises(LexerError, match="not a valid glob"):
        new_lexer(Config(name="Bad", filenames=["*.[ch"]), lambda: {"root": []})


def test_newline_resets_stack_to_initial_state():
    lexer = _lexer(
        {
            "root": [Rule("a", T.KEYWORD, push("inner"))],
            "inner": [Rule("b", T.NAME)],
        }
    )
    assert tokenise(lexer, "a\nb") == [
        Token(T.KEYWORD, "a"),
        Token(T.ERROR, "\n"),
        Token(T.ERROR, "b"),
    ]


def test_remaining_text_after_empty_stack_is_error():
    lexer = _lexer({"root": [Rule("a", T.KEYWORD, pop(1))]})
    assert tokenise(lexer, "abc") == [Token(T.KEYWORD, "a"), Token(T.ERROR, "bc")]


def test_include_is_resolved_when_compiled():
    lexer = _lexer(
        {
            "root": [include("words"), Rule(r"\s+", T.WHITESPACE)],
            "words": [Rule(r"\w+", T.NAME)],
        }
    )
    assert tokenise(lexer, "ab cd") == [
        Token(T.NAME, "ab"),
        Token(T.WHITESPACE, " "),
        Token(T.NAME, "cd"),
    ]
    raw = lexer.rules()
    assert raw["root"][0] == include("words")


def test_tuple_rules_are_accepted():
    lexer = _lexer({"root": [(r"\d+", T.NUMBER, None), (r".", T.TEXT, None)]})
    assert tokenise(lexer, "12x") == [Token(T.NUMBER, "12"), Token(T.TEXT, "x")]


def test_case_insensitive_config():
    lexer = _lexer({"root": [Rule("hello", T.KEYWORD)]}, Config(case_insensitive=True))
    assert tokenise(lexer, "HeLLo") == [Token(T.KEYWORD, "HeLLo")]


def test_words_sorted_longest_first_and_quoted():
    assert words(r"\b", r"\b", "a", "abc", "a.b") == r"\b(abc|a\.b|a)\b"


def test_rules_clone_rename_merge():
    original = Rules({"root": [Rule("a", T.TEXT)], "x": [Rule("b", T.NAME)]})
    clone = original.clone()
    clone["root"].append(Rule("c", T.TEXT))
    assert len(original["root"]) == 1

    renamed = original.rename("x", "y")
    assert set(renamed) == {"root", "y"}
    assert "x" in original

    merged = original.merge({"x": [Rule("z", T.KEYWORD)], "new": []})
    assert merged["x"] == [Rule("z", T.KEYWORD)]
    assert merged["new"] == []
    assert original["x"] == [Rule("b", T.NAME)]


def test_analyse_text_and_name():
    lexer = new_lexer(Config(name="Thing"), lambda: {"root": []})
    assert lexer.analyse_text("anything") == 0.0
    lexer.set_analyser(lambda text: 0.75 if "zz" in text else 0.1)
    assert lexer.analyse_text("a zz b") == 0.75
    assert str(lexer) == "Thing"


def test_mutator_context_set_and_get():
    seen = {}

    class _Recorder:
        def mutate(self, state):
            state.set("key", state.groups[0])
            seen["value"] = state.get("key")
            seen["missing"] = state.get("absent")

    lexer = _lexer({"root": [Rule(r"\w+", T.NAME, _Recorder())]})
    assert tokenise(lexer, "word") == [Token(T.NAME, "word")]
    assert seen == {"value": "word", "missing": None}


def test_named_groups_are_exposed():
    captured = {}

    class _Capture:
        def mutate(self, state):
            captured.update(state.named_groups)

    lexer = _lexer({"root": [Rule(r"(?<key>\w+)=(?<value>\w+)", T.TEXT, _Capture())]})
    assert tokenise(lexer, "abc=123") == [Token(T.TEXT, "abc=123")]
    assert captured["key"] == "abc"
    assert captured["value"] == "123"
    assert captured["0"] == "abc=123"