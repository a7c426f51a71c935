"""Lexical analysis of preprocessed source text into tokens."""

from __future__ import annotations

import re
import struct
import sys
from contextlib import ExitStack
from string import ascii_letters, digits, hexdigits
from typing import BinaryIO, Iterator, List, Optional, Sequence

from quantumc.errors import UnrecognizedTokenError
from quantumc.tokens import ENCODING, Token, TokenType, write_token

_TYPE_NAMES = frozenset(
    {"angle", "bit", "bool", "char", "short", "int", "float", "double", "long", "void"}
)

_WORDS = {
    "struct": TokenType.STRUCT,
    "if": TokenType.KEY_IF,
    "for": TokenType.KEY_FOR,
    "while": TokenType.KEY_WHILE,
    "return": TokenType.KEY_RETURN,
    "else": TokenType.KEY_ELSE,
    "do": TokenType.KEY_DO,
    "switch": TokenType.KEY_SWITCH,
    "case": TokenType.KEY_CASE,
    "default": TokenType.KEY_DEFAULT,
    "break": TokenType.KEY_BREAK,
    "continue": TokenType.KEY_CONTINUE,
    "goto": TokenType.KEY_GOTO,
    "sizeof": TokenType.KEY_SIZEOF,
    "typedef": TokenType.KEY_TYPEDEF,
    "const": TokenType.KEY_CONST,
    "volatile": TokenType.KEY_VOLATILE,
    "extern": TokenType.KEY_EXTERN,
    "static": TokenType.KEY_STATIC,
    "register": TokenType.KEY_REGISTER,
    "inline": TokenType.KEY_INLINE,
    "enum": TokenType.KEY_ENUM,
    "union": TokenType.KEY_UNION,
    "quantum": TokenType.KEY_QUANTUM,
}

_SYMBOLS = {
    "(": TokenType.DEL_PARANL,
    ")": TokenType.DEL_PARANR,
    "{": TokenType.DEL_CBRACL,
    "}": TokenType.DEL_CBRACR,
    "[": TokenType.DEL_SBRACL,
    "]": TokenType.DEL_SBRACR,
    "=": TokenType.ASSIGN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    "%": TokenType.MOD,
    "?": TokenType.QUESTION,
    "==": TokenType.OP_EQEQ,
    "!=": TokenType.OP_NEQ,
    "<": TokenType.OP_LT,
    ">": TokenType.OP_RT,
    "<=": TokenType.OP_LTE,
    ">=": TokenType.OP_RTE,
    "&&": TokenType.OP_AND,
    "||": TokenType.OP_OR,
    "!": TokenType.OP_NOT,
    "&": TokenType.OP_BIT_AND,
    "|": TokenType.OP_BIT_OR,
    "^": TokenType.OP_XOR,
    "~": TokenType.NEG,
    "<<": TokenType.SHL,
    ">>": TokenType.SHR,
    "<>": TokenType.ASSIGN_SWAP,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "++": TokenType.INC,
    "--": TokenType.DEC,
    "->": TokenType.ARROW,
    "...": TokenType.ELLIPSIS,
    "+=": TokenType.ASSIGN_PLUS,
    "-=": TokenType.ASSIGN_MINUS,
    "*=": TokenType.ASSIGN_MUL,
    "/=": TokenType.ASSIGN_DIV,
    "%=": TokenType.ASSIGN_MOD,
    "&=": TokenType.ASSIGN_AND,
    "|=": TokenType.ASSIGN_OR,
    "^=": TokenType.ASSIGN_XOR,
    "<<=": TokenType.ASSIGN_SHL,
    ">>=": TokenType.ASSIGN_SHR,
}

_SYMBOL_START = frozenset(name[0] for name in _SYMBOLS)
_LONGEST_SYMBOL = max(len(name) for name in _SYMBOLS)

_IDENT_START = frozenset(ascii_letters + "_")
_IDENT_CHARS = frozenset(ascii_letters + digits + "_")
_WHITESPACE = frozenset(" \t\n")
_DIGITS = {
    2: frozenset("01"),
    8: frozenset("01234567"),
    10: frozenset(digits),
    16: frozenset(hexdigits),
}

_CHAR_ESCAPES = {"n": "\n", "t": "\t", "0": "\0", "\\": "\\", "'": "'"}
_STRING_ESCAPES = {"n": "\n", "t": "\t", "0": "\0", "\\": "\\", '"': '"'}

_NUMBER = struct.Struct("<QQ")
_MASK = (1 << 64) - 1

_LINE_MARKER = re.compile(r'#\s*(\d+)\s*(?:"([^"]*)")?((?:\s+\d+)*)\s*')
_SYSTEM_HEADER_FLAG = 3

_ERROR_FILE = "the file"


def classify_word(name: str) -> TokenType:
    """Return the kind of an identifier-shaped word: type, keyword or identifier."""
    if name in _TYPE_NAMES:
        return TokenType.TYPE
    return _WORDS.get(name, TokenType.IDENTIFIER)


def classify_symbol(name: str) -> TokenType:
    """Return the kind of an operator or delimiter; ValueError if unknown."""
    try:
        return _SYMBOLS[name]
    except KeyError:
        raise ValueError(f"unknown symbol {name!r}") from None


def _encode_number(is_fraction: bool, number: int, fraction: int) -> str:
    prefix = "f" if is_fraction else "i"
    return prefix + _NUMBER.pack(number & _MASK, fraction & _MASK).decode(ENCODING)


class Tokenizer:
    """Splits preprocessed source text into tokens.

    Line markers of the form ``# <line> "<file>" <flags>`` left by the
    preprocessor set the current line and file; flag 3 marks a system header.
    Number literals are encoded as ``i`` or ``f`` followed by the integer
    part and the fraction digits, each as a little-endian 64-bit value.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.current_file = ""
        self.in_system_header = False
        self._pos = 0
        self._line = 1
        self._line_beg = 0

    def tokens(self) -> Iterator[Token]:
        """Yield every token of the text, ending with an end-of-file token."""
        self._pos = 0
        self._line = 1
        self._line_beg = 0
        self.current_file = ""
        self.in_system_header = False
        text = self.text

        while self._pos < len(text):
            ch = text[self._pos]
            if ch == "#":
                self._line_marker()
                continue
            if ch in _WHITESPACE:
                self._skip_whitespace()
                continue
            if ch == "\0":
                break
            if ch in _IDENT_START:
                token = self._word()
            elif ch in digits or (ch == "." and self._peek(1) in _DIGITS[10]):
                token = self._number()
            elif ch == "'":
                token = self._char()
            elif ch == '"':
                token = self._string()
            elif ch in _SYMBOL_START:
                token = self._symbol()
            else:
                raise self._unrecognized()
            token.file_name = self.current_file
            yield token

        yield Token(TokenType.SYS_EOF)

    def _peek(self, ahead: int = 0) -> str:
        index = self._pos + ahead
        return self.text[index] if index < len(self.text) else ""

    def _column(self, offset: int) -> int:
        return offset - self._line_beg + 1

    def _rest_of_line(self) -> str:
        end = self.text.find("\n", self._pos)
        return self.text[self._pos:] if end < 0 else self.text[self._pos:end]

    def _unrecognized(self) -> UnrecognizedTokenError:
        return UnrecognizedTokenError(
            _ERROR_FILE, self._line, self._column(self._pos), self._rest_of_line()
        )

    def _make(self, kind: TokenType, name: str, start: int) -> Token:
        return Token(
            kind,
            name,
            line=self._line,
            column=self._column(start),
            start_offset=start,
            end_offset=self._pos,
        )

    def _line_marker(self) -> None:
        match = _LINE_MARKER.fullmatch(self._rest_of_line())
        if match is None:
            raise self._unrecognized()
        line, file_name, flags = match.groups()
        if file_name is not None:
            self.current_file = file_name
        self.in_system_header = _SYSTEM_HEADER_FLAG in (int(f) for f in flags.split())
        self._line = int(line)
        self._pos += match.end() + 1
        self._line_beg = self._pos

    def _skip_whitespace(self) -> None:
        while (ch := self._peek()) and ch in _WHITESPACE:
            self._pos += 1
            if ch == "\n":
                self._line += 1
                self._line_beg = self._pos

    def _word(self) -> Token:
        start = self._pos
        while (ch := self._peek()) and ch in _IDENT_CHARS:
            self._pos += 1
        name = self.text[start:self._pos]
        return self._make(classify_word(name), name, start)

    def _number(self) -> Token:
        start = self._pos
        base = 10
        if self._peek() == "0":
            marker = self._peek(1)
            if marker in ("x", "X"):
                base = 16
                self._pos += 2
            elif marker in ("b", "B"):
                base = 2
                self._pos += 2
            else:
                base = 8
                self._pos += 1
        allowed = _DIGITS[base]
        number = fraction = 0
        is_fraction = False
        while ch := self._peek():
            if ch == "_":
                pass
            elif ch == ".":
                is_fraction = True
            elif ch in allowed:
                if is_fraction:
                    fraction = fraction * base + int(ch, 16)
                else:
                    number = number * base + int(ch, 16)
            else:
                break
            self._pos += 1
        name = _encode_number(is_fraction, number, fraction)
        return self._make(TokenType.NUMBER_LITERAL, name, start)

    def _char(self) -> Token:
        start = self._pos
        self._pos += 1
        ch = self._peek()
        if ch == "\\":
            self._pos += 1
            ch = self._peek()
            ch = _CHAR_ESCAPES.get(ch, ch)
        if not ch:
            self._pos = start
            raise self._unrecognized()
        self._pos += 1
        if self._peek() != "'":
            self._pos = start
            raise self._unrecognized()
        self._pos += 1
        return self._make(TokenType.CHAR_LITERAL, ch, start)

    def _string(self) -> Token:
        start = self._pos
        self._pos += 1
        parts: List[str] = []
        while (ch := self._peek()) and ch != '"':
            self._pos += 1
            if ch == "\\":
                escaped = self._peek()
                if escaped:
                    self._pos += 1
                parts.append(_STRING_ESCAPES.get(escaped, "\\" + escaped))
            else:
                parts.append(ch)
        if ch == '"':
            self._pos += 1
        return self._make(TokenType.STRING_LITERAL, "".join(parts), start)

    def _symbol(self) -> Token:
        start = self._pos
        for size in range(_LONGEST_SYMBOL, 0, -1):
            name = self.text[start:start + size]
            if len(name) == size and name in _SYMBOLS:
                self._pos += size
                return self._make(_SYMBOLS[name], name, start)
        raise self._unrecognized()


def tokenize(text: str) -> List[Token]:
    """Return all tokens of the text, the last being end of file."""
    return list(Tokenizer(text).tokens())


def _read_source(path: Optional[str]) -> str:
    if path is None:
        return sys.stdin.buffer.read().decode(ENCODING)
    with open(path, "rb") as handle:
        return handle.read().decode(ENCODING)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Tokenize a file or standard input into a binary token stream."""
    args = sys.argv[1:] if argv is None else list(argv)
    source: Optional[str] = None
    output: Optional[str] = None

    remaining = iter(args)
    for arg in remaining:
        if arg == "-o":
            path = next(remaining, None)
            if path is None:
                print("File path not given after '-o' option", file=sys.stderr)
                return 1
            if path != "-":
                output = path
        else:
            source = arg

    try:
        text = _read_source(source)
    except OSError:
        print(f"Can't open the file: {source}", file=sys.stderr)
        return 1

    with ExitStack() as stack:
        out: BinaryIO
        if output is None:
            out = sys.stdout.buffer
        else:
            try:
                out = stack.enter_context(open(output, "wb"))
            except OSError:
                print(f"Can't open the file: {output}", file=sys.stderr)
                return 1
        try:
            for token in Tokenizer(text).tokens():
                write_token(out, token)
        except UnrecognizedTokenError as exc:
            print(exc, file=sys.stderr)
            return 1
        finally:
            out.flush()
    return 0