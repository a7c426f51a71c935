import pytest

from quantumc.errors import (
    CompileError,
    MultipleIdentifiersError,
    UnclosedParenthesesError,
    UnclosedSquareBracketsError,
    UnexpectedTokenError,
    UnrecognizedTokenError,
)
from quantumc.tokens import Token, TokenType


def test_unrecognized_token_message():
    error = UnrecognizedTokenError("the file", 3, 5, "int @x;")
    assert str(error) == "In the file;\nUnrecognized token at:3:5\n\tint @x;"
    assert (error.line, error.column) == (3, 5)


def test_unexpected_token_message():
    token = Token(TokenType.SEMICOLON, ";", line=2, column=9)
    error = UnexpectedTokenError(token)
    assert str(error) == "In the file;\nUnexpected token <;> at:2:9"
    assert error.token is token


def test_unclosed_parentheses_at_eof():
    error = UnclosedParenthesesError(Token(TokenType.SYS_EOF))
    assert str(error) == "Expected ' ) ' but reached end of file!"


def test_unclosed_parentheses_other_token():
    token = Token(TokenType.SEMICOLON, ";", line=4, column=12)
    assert str(UnclosedParenthesesError(token)) == "Expected ' ) ' but got ' ; ' at: 4:12"


def test_unclosed_square_brackets_at_eof():
    error = UnclosedSquareBracketsError(Token(TokenType.SYS_EOF))
    assert str(error) == "Expected ' ] ' but reached end of file!"


def test_unclosed_square_brackets_other_token():
    token = Token(TokenType.IDENTIFIER, "y", line=1, column=2)
    assert str(UnclosedSquareBracketsError(token)) == "Expected ' ] ' but got ' y ' at: 1:2"


def test_multiple_identifiers_message():
    token = Token(TokenType.IDENTIFIER, "b", line=7, column=3)
    assert str(MultipleIdentifiersError(token)) == "More than one identifiers ' b ' at:7:3"


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (UnrecognizedTokenError("f", 1, 1, "x"), "In f;\nUnrecognized token at:1:1\n\tx"),
        (
            UnexpectedTokenError(Token(TokenType.COMMA, ",", line=5, column=6)),
            "In the file;\nUnexpected token <,> at:5:6",
        ),
        (UnclosedParenthesesError(Token(TokenType.SYS_EOF)), "Expected ' ) ' but reached end of file!"),
        (
            UnclosedSquareBracketsError(Token(TokenType.SYS_EOF)),
            "Expected ' ] ' but reached end of file!",
        ),
        (
            MultipleIdentifiersError(Token(TokenType.IDENTIFIER, "z", line=2, column=4)),
            "More than one identifiers ' z ' at:2:4",
        ),
    ],
)
def test_all_are_compile_errors(error, message):
    with pytest.raises(CompileError) as caught:
        raise error
    assert caught.value is error
    assert str(caught.value) == message