"""Token kinds, the token record and the binary token stream format.

A token on the wire is laid out little-endian as::

    u32 name length, name bytes,
    u32 file name length, file name bytes,
    i32 kind, i32 line, i32 column, i32 start offset, i32 end offset,
    u8 synthetic flag

Names are stored byte for byte, so text is encoded as latin-1.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import BinaryIO, Iterator, Optional

ENCODING = "latin-1"

_LENGTH = struct.Struct("<I")
_TAIL = struct.Struct("<5i?")


class TokenType(IntEnum):
    """Every kind of token the tokenizer can produce."""

    TYPE = 0
    STRUCT = auto()
    IDENTIFIER = auto()
    NUMBER_LITERAL = auto()
    CHAR_LITERAL = auto()
    STRING_LITERAL = auto()

    SPACE = auto()

    KEY_IF = auto()
    KEY_FOR = auto()
    KEY_WHILE = auto()
    KEY_ELSE = auto()
    KEY_DO = auto()
    KEY_SWITCH = auto()
    KEY_CASE = auto()
    KEY_DEFAULT = auto()
    KEY_BREAK = auto()
    KEY_CONTINUE = auto()
    KEY_GOTO = auto()
    KEY_SIZEOF = auto()
    KEY_TYPEDEF = auto()
    KEY_CONST = auto()
    KEY_VOLATILE = auto()
    KEY_EXTERN = auto()
    KEY_STATIC = auto()
    KEY_REGISTER = auto()
    KEY_INLINE = auto()
    KEY_ENUM = auto()
    KEY_UNION = auto()
    KEY_QUANTUM = auto()

    DEL_PARANL = auto()  # (
    DEL_PARANR = auto()  # )
    DEL_CBRACL = auto()  # {
    DEL_CBRACR = auto()  # }
    DEL_SBRACL = auto()  # [
    DEL_SBRACR = auto()  # ]

    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    COLON = auto()
    SEMICOLON = auto()
    MOD = auto()
    QUESTION = auto()

    INC = auto()
    DEC = auto()
    ARROW = auto()
    ELLIPSIS = auto()
    ASSIGN = auto()
    ASSIGN_PLUS = auto()
    ASSIGN_MINUS = auto()
    ASSIGN_MUL = auto()
    ASSIGN_DIV = auto()
    ASSIGN_MOD = auto()
    ASSIGN_AND = auto()
    ASSIGN_OR = auto()
    ASSIGN_XOR = auto()
    ASSIGN_SHL = auto()
    ASSIGN_SHR = auto()
    ASSIGN_SWAP = auto()  # <>

    OP_EQEQ = auto()
    OP_NEQ = auto()
    OP_LT = auto()
    OP_RT = auto()
    OP_LTE = auto()
    OP_RTE = auto()

    OP_AND = auto()
    OP_OR = auto()
    OP_NOT = auto()

    OP_BIT_AND = auto()
    OP_BIT_OR = auto()
    OP_XOR = auto()
    NEG = auto()
    SHL = auto()
    SHR = auto()

    COMMA = auto()
    DOT = auto()

    KEY_RETURN = auto()

    SYS_SKIP = auto()
    SYS_EOF = auto()


@dataclass
class Token:
    """One lexical token with its position in the source."""

    kind: TokenType
    name: str = ""
    file_name: str = ""
    line: int = 0
    column: int = 0
    start_offset: int = 0
    end_offset: int = 0
    synthetic: bool = False


def write_token(stream: BinaryIO, token: Token) -> None:
    """Write one token to a binary stream."""
    name = token.name.encode(ENCODING)
    file_name = token.file_name.encode(ENCODING)
    stream.write(_LENGTH.pack(len(name)))
    stream.write(name)
    stream.write(_LENGTH.pack(len(file_name)))
    stream.write(file_name)
    stream.write(
        _TAIL.pack(
            int(token.kind),
            token.line,
            token.column,
            token.start_offset,
            token.end_offset,
            token.synthetic,
        )
    )


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise EOFError("token stream ends inside a token")
    return data


def _read_optional(stream: BinaryIO) -> Optional[Token]:
    head = stream.read(_LENGTH.size)
    if not head:
        return None
    if len(head) != _LENGTH.size:
        raise EOFError("token stream ends inside a token")
    (name_len,) = _LENGTH.unpack(head)
    name = _read_exact(stream, name_len).decode(ENCODING)
    (file_len,) = _LENGTH.unpack(_read_exact(stream, _LENGTH.size))
    file_name = _read_exact(stream, file_len).decode(ENCODING)
    kind, line, column, start, end, synthetic = _TAIL.unpack(
        _read_exact(stream, _TAIL.size)
    )
    try:
        token_type = TokenType(kind)
    except ValueError as exc:
        raise ValueError(f"unknown token type {kind}") from exc
    return Token(token_type, name, file_name, line, column, start, end, synthetic)


def read_token(stream: BinaryIO) -> Token:
    """Read one token; raise EOFError when the stream has none left."""
    token = _read_optional(stream)
    if token is None:
        raise EOFError("no more tokens in stream")
    return token


def iter_tokens(stream: BinaryIO) -> Iterator[Token]:
    """Yield every token until the stream is exhausted."""
    while (token := _read_optional(stream)) is not None:
        yield token