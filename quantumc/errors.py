"""Errors raised while tokenizing and parsing."""

from __future__ import annotations

from quantumc.tokens import Token, TokenType


class CompileError(Exception):
    """Base class of every error the compiler reports."""


class UnrecognizedTokenError(CompileError):
    """Input holds a character that starts no token."""

    def __init__(self, file: str, line: int, column: int, text: str) -> None:
        self.file = file
        self.line = line
        self.column = column
        self.text = text
        super().__init__(
            f"In {file};\nUnrecognized token at:{line}:{column}\n\t{text}"
        )


class UnexpectedTokenError(CompileError):
    """A token appeared where the grammar does not allow it."""

    def __init__(self, token: Token) -> None:
        self.token = token
        super().__init__(
            f"In the file;\nUnexpected token <{token.name}> at:"
            f"{token.line}:{token.column}"
        )


class _UnclosedError(CompileError):
    closer = ""

    def __init__(self, token: Token) -> None:
        self.token = token
        if token.kind == TokenType.SYS_EOF:
            message = f"Expected ' {self.closer} ' but reached end of file!"
        else:
            message = (
                f"Expected ' {self.closer} ' but got ' {token.name} ' at: "
                f"{token.line}:{token.column}"
            )
        super().__init__(message)


class UnclosedParenthesesError(_UnclosedError):
    """A '(' was not matched by ')'."""

    closer = ")"


class UnclosedSquareBracketsError(_UnclosedError):
    """A '[' was not matched by ']'."""

    closer = "]"


class MultipleIdentifiersError(CompileError):
    """A declarator named more than one identifier."""

    def __init__(self, token: Token) -> None:
        self.token = token
        super().__init__(
            f"More than one identifiers ' {token.name} ' at:"
            f"{token.line}:{token.column}"
        )