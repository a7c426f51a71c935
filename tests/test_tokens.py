import io

import pytest

from quantumc.tokens import Token, TokenType, iter_tokens, read_token, write_token


def _encode(*tokens):
    buffer = io.BytesIO()
    for token in tokens:
        write_token(buffer, token)
    return buffer.getvalue()


def test_kind_is_written_as_its_ordinal():
    type_data = _encode(Token(TokenType.TYPE, ""))
    identifier_data = _encode(Token(TokenType.IDENTIFIER, ""))
    assert type_data[8:12] == b"\x00\x00\x00\x00"
    assert identifier_data[8:12] == b"\x02\x00\x00\x00"


def test_wire_layout():
    token = Token(TokenType.IDENTIFIER, "ab", "", 1, 3, 0, 2, False)
    expected = (
        b"\x02\x00\x00\x00ab"
        b"\x00\x00\x00\x00"
        b"\x02\x00\x00\x00"
        b"\x01\x00\x00\x00"
        b"\x03\x00\x00\x00"
        b"\x00\x00\x00\x00"
        b"\x02\x00\x00\x00"
        b"\x00"
    )
    assert _encode(token) == expected


def test_round_trip_single():
    token = Token(TokenType.STRING_LITERAL, "hi\nthere", "main.qc", 4, 7, 30, 40, True)
    assert read_token(io.BytesIO(_encode(token))) == token


def test_round_trip_binary_name():
    name = "".join(chr(c) for c in range(256))
    token = Token(TokenType.NUMBER_LITERAL, name)
    assert read_token(io.BytesIO(_encode(token))).name == name


def test_iter_tokens_reads_all_in_order():
    tokens = [
        Token(TokenType.TYPE, "int", line=1),
        Token(TokenType.IDENTIFIER, "x", line=1),
        Token(TokenType.SEMICOLON, ";", line=1),
        Token(TokenType.SYS_EOF),
    ]
    assert list(iter_tokens(io.BytesIO(_encode(*tokens)))) == tokens


def test_iter_tokens_empty_stream():
    assert list(iter_tokens(io.BytesIO(b""))) == []


def test_read_token_empty_stream_raises():
    with pytest.raises(EOFError):
        read_token(io.BytesIO(b""))


def test_truncated_token_raises():
    data = _encode(Token(TokenType.IDENTIFIER, "abc"))
    with pytest.raises(EOFError):
        read_token(io.BytesIO(data[:-3]))


def test_truncated_length_raises():
    with pytest.raises(EOFError):
        list(iter_tokens(io.BytesIO(b"\x01\x00")))


def test_unknown_kind_raises():
    data = bytearray(_encode(Token(TokenType.IDENTIFIER, "")))
    data[8:12] = (1000).to_bytes(4, "little")
    with pytest.raises(ValueError):
        read_token(io.BytesIO(bytes(data)))


def test_sequential_reads_consume_stream():
    first = Token(TokenType.DEL_PARANL, "(")
    second = Token(TokenType.DEL_PARANR, ")")
    stream = io.BytesIO(_encode(first, second))
    assert read_token(stream) == first
    assert read_token(stream) == second
    with pytest.raises(EOFError):
        read_token(stream)