import pytest

from tokenglow.tokens import EOF, STANDARD_TYPES, Token, TokenType


@pytest.mark.parametrize(
    "value, member",
    [
        (-1, TokenType.BACKGROUND),
        (-14, TokenType.IGNORE),
        (1000, TokenType.KEYWORD),
        (3108, TokenType.LITERAL_STRING_DOUBLE),
        (8003, TokenType.TEXT_PUNCTUATION),
    ],
)
def test_pinned_values(value, member):
    assert TokenType(value) is member
    assert int(TokenType(value)) == value


def test_aliases_resolve_to_canonical_members():
    assert TokenType(TokenType.WHITESPACE.value) is TokenType.TEXT_WHITESPACE
    assert TokenType(TokenType.STRING.value) is TokenType.LITERAL_STRING
    assert TokenType(TokenType.NUMBER_OCT.value) is TokenType.LITERAL_NUMBER_OCT
    assert TokenType(TokenType.DATE.value) is TokenType.LITERAL_DATE


def test_member_count_excludes_aliases():
    members = list(TokenType)
    assert len(members) == 101
    assert all(TokenType(member.value) is member for member in members)


@pytest.mark.parametrize(
    "token_type, name",
    [
        (TokenType.LITERAL_STRING_DOUBLE, "LiteralStringDouble"),
        (TokenType.LINE_TABLE_TD, "LineTableTD"),
        (TokenType.EOF_TYPE, "EOFType"),
        (TokenType.TEXT_WHITESPACE, "TextWhitespace"),
        (TokenType.NAME_VARIABLE, "NameVariable"),
    ],
)
def test_str_names(token_type, name):
    assert str(token_type) == name
    assert f"{token_type}" == name


def test_parent():
    assert TokenType.LITERAL_STRING_DOUBLE.parent() is TokenType.LITERAL_STRING
    assert TokenType.LITERAL_STRING.parent() is TokenType.LITERAL
    assert TokenType.LITERAL.parent() is TokenType.EOF_TYPE
    assert TokenType.KEYWORD_TYPE.parent() is TokenType.KEYWORD
    assert TokenType.BACKGROUND.parent() is TokenType.EOF_TYPE


def test_category_and_sub_category():
    assert TokenType.NAME_VARIABLE_GLOBAL.category() is TokenType.NAME
    assert TokenType.NAME_VARIABLE_GLOBAL.sub_category() is TokenType.NAME_VARIABLE
    assert TokenType.COMMENT_PREPROC_FILE.sub_category() is TokenType.COMMENT_PREPROC
    assert TokenType.ERROR.category() is TokenType.EOF_TYPE
    assert TokenType.ERROR.sub_category() is TokenType.EOF_TYPE


def test_in_category():
    assert TokenType.LITERAL_NUMBER_HEX.in_category(TokenType.LITERAL)
    assert TokenType.LITERAL_NUMBER_HEX.in_category(TokenType.LITERAL_STRING)
    assert not TokenType.LITERAL_NUMBER_HEX.in_category(TokenType.NAME)
    assert TokenType.BACKGROUND.in_category(TokenType.EOF_TYPE)


def test_in_sub_category():
    assert TokenType.LITERAL_NUMBER_HEX.in_sub_category(TokenType.LITERAL_NUMBER)
    assert not TokenType.LITERAL_NUMBER_HEX.in_sub_category(TokenType.LITERAL_STRING)


@pytest.mark.parametrize("value", [member.value for member in TokenType])
def test_category_invariants(value):
    token_type = TokenType(value)
    assert token_type.in_category(token_type.category())
    assert token_type.in_sub_category(token_type.sub_category())
    assert token_type.sub_category().category() is token_type.category()


def test_emit_yields_single_token():
    tokens = list(TokenType.KEYWORD.emit(["hello", "h"], None))
    assert tokens == [Token(TokenType.KEYWORD, "hello")]


def test_token_equality_and_eof():
    assert Token(TokenType.NAME, "x") == Token(TokenType.NAME, "x")
    assert Token(TokenType.NAME, "x") != Token(TokenType.KEYWORD, "x")
    assert EOF == Token(TokenType.EOF_TYPE, "")
    assert str(Token(TokenType.NAME, "abc")) == "abc"


def test_token_is_immutable():
    token = Token(TokenType.NAME, "x")
    with pytest.raises(AttributeError):
        token.value = "y"
    assert token.value == "x"
    assert token.type is TokenType.NAME


def test_standard_types():
    assert STANDARD_TYPES[TokenType(-2)] == "chroma"
    assert STANDARD_TYPES[TokenType(8001)] == "w"
    assert STANDARD_TYPES[TokenType(3108)] == "s2"
    assert STANDARD_TYPES[TokenType(8000)] == ""