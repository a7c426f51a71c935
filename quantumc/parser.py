"""Recursive-descent parser turning a token stream into a syntax tree."""

from __future__ import annotations

import sys
import warnings
from contextlib import ExitStack
from dataclasses import replace
from enum import IntFlag
from itertools import chain, repeat
from typing import BinaryIO, Iterable, List, Optional, Sequence, TextIO

from quantumc.errors import (
    CompileError,
    UnclosedParenthesesError,
    UnclosedSquareBracketsError,
    UnexpectedTokenError,
)
from quantumc.expressions import (
    BinaryExpression,
    BlockStatement,
    DeclarationStatement,
    Expression,
    ExpressionStatement,
    LiteralExpression,
    LiteralKind,
    Operator,
    ReturnStatement,
    Specifier,
    Statement,
    TupleExpression,
    Typer,
    UnaryExpression,
    VariableExpression,
    VarType,
)
from quantumc.tokens import Token, TokenType, iter_tokens


class LogOption(IntFlag):
    """What the parser reports as it consumes tokens."""

    NONE = 0
    EAT = 1
    SKIP = 2


DEFAULT_LOG = LogOption.EAT | LogOption.SKIP

_PRIMITIVES = {
    "angle": VarType.ANGLE,
    "bit": VarType.BIT,
    "bool": VarType.BOOL,
    "char": VarType.CHAR,
    "short": VarType.SHORT,
    "int": VarType.INT,
    "float": VarType.FLOAT,
    "double": VarType.DOUBLE,
    "long": VarType.LONG,
    "void": VarType.VOID,
}

# A following ``long`` widens these to the next VarType.
_WIDENABLE = frozenset({VarType.LONG, VarType.DOUBLE, VarType.INT})

_QUALIFIERS = {
    TokenType.KEY_QUANTUM: Specifier.QUANTUM,
    TokenType.KEY_CONST: Specifier.CONST,
    TokenType.KEY_INLINE: Specifier.INLINE,
    TokenType.KEY_EXTERN: Specifier.EXTERN,
    TokenType.KEY_VOLATILE: Specifier.VOLATILE,
}

_LITERALS = {
    TokenType.NUMBER_LITERAL: LiteralKind.NUMBER,
    TokenType.CHAR_LITERAL: LiteralKind.CHAR,
    TokenType.STRING_LITERAL: LiteralKind.STRING,
}

_MULTIPLICATIVE = {
    TokenType.STAR: Operator.MUL,
    TokenType.SLASH: Operator.DIV,
    TokenType.MOD: Operator.MOD,
}

_ADDITIVE = {
    TokenType.PLUS: Operator.ADD,
    TokenType.MINUS: Operator.SUB,
}

_MULTIPLE_TYPES = "Declaration with multiple types, last one will be count!!"
_NEEDS_DECLARATION = "Required a variable declaration!"


class Parser:
    """Builds a block of statements from tokens.

    Every consumed token is reported to ``out`` when ``log_options`` holds
    ``LogOption.EAT``; every optional terminator that was not required is
    reported when it holds ``LogOption.SKIP``.
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        log_options: LogOption = DEFAULT_LOG,
        out: Optional[TextIO] = None,
    ) -> None:
        self._tokens = chain(tokens, repeat(Token(TokenType.SYS_EOF)))
        self.log_options = LogOption(log_options)
        self.out = out
        self.token = Token(TokenType.SYS_EOF)

    def parse(self) -> BlockStatement:
        """Parse every statement up to end of file and return the root block."""
        root = BlockStatement()
        self.token = next(self._tokens)
        self._body(root, TokenType.SYS_EOF)
        return root

    # Token consumption

    def _log(self, message: str) -> None:
        print(message, file=self.out if self.out is not None else sys.stdout)

    def _eat(self, kind: TokenType) -> bool:
        name = self.token.name
        if kind == TokenType.SYS_EOF:
            name = " < End of File >"
        elif kind in _LITERALS:
            name = " < Literal > " + name

        if kind == TokenType.SYS_SKIP:
            if LogOption.SKIP in self.log_options:
                self._log(f"Skip: {self.token.line}:{name}")
            return True

        if self.token.kind == kind:
            if LogOption.EAT in self.log_options:
                self._log(f"Eat : {self.token.line}:{name}")
            self.token = next(self._tokens)
            return True
        return False

    # Statements

    def _body(self, block: BlockStatement, end: TokenType) -> None:
        while self._statement(block):
            pass
        if not self._eat(end):
            raise UnexpectedTokenError(self.token)

    def _statement(self, block: BlockStatement) -> bool:
        """Parse one statement into ``block``; False when none starts here."""
        if self._eat(TokenType.DEL_CBRACL):
            self._body(block, TokenType.DEL_CBRACR)
            return True

        if self._declarations(block.children):
            return True

        if self._eat(TokenType.KEY_RETURN):
            block.children.append(ReturnStatement(self._eval_until(TokenType.SYS_SKIP)))
            return True

        expr = self._eval_until(TokenType.SYS_SKIP)
        if expr is not None:
            block.children.append(ExpressionStatement(expr))
            return True

        return self._eat(TokenType.SEMICOLON)

    # Declarations

    def _qualify(self, typer: Typer, typed: bool) -> Optional[bool]:
        """Consume one type name or qualifier into ``typer``.

        Returns the updated "type already given" flag, or None when the
        current token is neither.
        """
        if self.token.kind == TokenType.TYPE:
            vtype = _PRIMITIVES.get(self.token.name, VarType.UNDEFINED)
            self._eat(TokenType.TYPE)
            if vtype == VarType.LONG and typer.vtype in _WIDENABLE:
                typer.vtype = VarType(typer.vtype + 1)
                return typed
            if typed:
                warnings.warn(_MULTIPLE_TYPES, stacklevel=4)
            typer.vtype = vtype
            return True
        for kind, spec in _QUALIFIERS.items():
            if self._eat(kind):
                typer.spec |= spec
                return typed
        return None

    def _base_type(self) -> Typer:
        typer = Typer()
        typed = False
        while (result := self._qualify(typer, typed)) is not None:
            typed = result
        return typer

    def _declarator(self, typer: Typer) -> Typer:
        """Wrap ``typer`` with pointers, a name and array or function suffixes."""
        typed = False
        inner: Optional[Typer] = None
        hole: Optional[Typer] = None
        while True:
            result = self._qualify(typer, typed)
            if result is not None:
                typed = result
            elif self._eat(TokenType.STAR):
                typer = Typer(vtype=VarType.POINTER, respect_typer=typer)
            elif self._eat(TokenType.DEL_PARANL):
                hole = Typer()
                inner = self._declarator(hole)
                if not self._eat(TokenType.DEL_PARANR):
                    raise UnclosedParenthesesError(self.token)
                break
            elif self.token.kind == TokenType.IDENTIFIER:
                inner = Typer(var_name=self.token.name, vtype=VarType.DEC)
                self._eat(TokenType.IDENTIFIER)
                break
            else:
                break

        head: Optional[Typer] = None
        tail: Optional[Typer] = None
        while True:
            if self._eat(TokenType.DEL_SBRACL):
                link = Typer(vtype=VarType.ARRAY)
                if not self._eat(TokenType.DEL_SBRACR):
                    link.sizer = self._eval_until(TokenType.DEL_SBRACR)
            elif self._eat(TokenType.DEL_PARANL):
                link = Typer(vtype=VarType.FUN)
                if not self._eat(TokenType.DEL_PARANR):
                    self._declarations(link.func_params)
                    if not self._eat(TokenType.DEL_PARANR):
                        raise UnclosedParenthesesError(self.token)
            else:
                break
            if head is None:
                head = link
            else:
                tail.respect_typer = link
            tail = link

        if head is not None:
            tail.respect_typer = typer
            typer = head

        if inner is not None:
            link = inner
            while link.respect_typer is not hole and link.respect_typer is not None:
                link = link.respect_typer
            link.respect_typer = typer
            typer = inner
        return typer

    def _complete(self, typer: Typer) -> None:
        """Attach an initializer or a function body to a declared name."""
        if typer.vtype != VarType.DEC:
            return
        target = typer.respect_typer
        if self._eat(TokenType.ASSIGN):
            if target is not None and target.vtype == VarType.FUN:
                typer.respect_typer = Typer(vtype=VarType.POINTER, respect_typer=target)
            typer.initializer = ExpressionStatement(
                BinaryExpression(
                    VariableExpression(typer.var_name),
                    Operator.ASSIGN,
                    self._eval_single(TokenType.SYS_SKIP),
                )
            )
        elif target is not None and target.vtype == VarType.FUN:
            body = BlockStatement()
            self._statement(body)
            typer.initializer = body

    def _declarations(self, children: List[Statement]) -> bool:
        """Parse a comma separated declaration list; False when none starts here."""
        base = self._base_type()
        if base.vtype == VarType.UNDEFINED:
            return False
        while True:
            typer = self._declarator(replace(base, func_params=list(base.func_params)))
            if typer.vtype != VarType.DEC:
                raise CompileError(_NEEDS_DECLARATION)
            self._complete(typer)
            children.append(DeclarationStatement(typer))
            if not self._eat(TokenType.COMMA):
                return True

    # Expressions

    def _primary(self) -> Optional[Expression]:
        if self._eat(TokenType.INC):
            operand = self._primary()
            return None if operand is None else UnaryExpression(operand, Operator.INCB)
        if self._eat(TokenType.DEC):
            operand = self._primary()
            return None if operand is None else UnaryExpression(operand, Operator.DECB)

        if self.token.kind == TokenType.IDENTIFIER:
            variable = VariableExpression(self.token.name)
            self._eat(TokenType.IDENTIFIER)
            if self._eat(TokenType.DEL_SBRACL):
                param = self._eval_until(TokenType.DEL_SBRACR)
                return UnaryExpression(variable, Operator.MEMA, param=param)
            if self._eat(TokenType.DEL_PARANL):
                arguments = self._tuple(TokenType.DEL_PARANR)
                return UnaryExpression(variable, Operator.FUNCALL, tuple=arguments)
            if self._eat(TokenType.INC):
                return UnaryExpression(variable, Operator.INCA)
            if self._eat(TokenType.DEC):
                return UnaryExpression(variable, Operator.DECA)
            return variable

        if self._eat(TokenType.DEL_PARANL):
            return self._eval_until(TokenType.DEL_PARANR)
        if self._eat(TokenType.DEL_SBRACL):
            return self._tuple(TokenType.DEL_SBRACR)

        kind = _LITERALS.get(self.token.kind)
        if kind is not None:
            value = self.token.name
            self._eat(self.token.kind)
            return LiteralExpression(kind, value)
        return None

    def _binary_level(self, operand, operators, again) -> Optional[Expression]:
        left = operand()
        if left is None:
            return None
        for kind, op in operators.items():
            if self._eat(kind):
                return BinaryExpression(left, op, again())
        return left

    def _term(self) -> Optional[Expression]:
        return self._binary_level(self._primary, _MULTIPLICATIVE, self._term)

    def _sum(self) -> Optional[Expression]:
        return self._binary_level(self._term, _ADDITIVE, self._sum)

    def _assignment(self) -> Optional[Expression]:
        left = self._sum()
        if left is not None and self._eat(TokenType.ASSIGN):
            return BinaryExpression(left, Operator.ASSIGN, self._assignment())
        return left

    def _expect(self, till: TokenType) -> None:
        if self._eat(till):
            return
        if till == TokenType.DEL_PARANR:
            raise UnclosedParenthesesError(self.token)
        if till == TokenType.DEL_SBRACR:
            raise UnclosedSquareBracketsError(self.token)
        raise UnexpectedTokenError(self.token)

    def _eval_single(self, till: TokenType) -> Optional[Expression]:
        expr = self._assignment()
        self._expect(till)
        return expr

    def _tuple(self, till: TokenType) -> TupleExpression:
        result = TupleExpression()
        while True:
            expr = self._eval_single(TokenType.SYS_SKIP)
            if expr is None:
                break
            result.expressions.append(expr)
            if not self._eat(TokenType.COMMA):
                break
        self._expect(till)
        return result

    def _eval_until(self, till: TokenType) -> Optional[Expression]:
        expr = self._eval_single(TokenType.SYS_SKIP)
        if expr is not None:
            while self._eat(TokenType.COMMA):
                expr = BinaryExpression(
                    expr, Operator.COMMA, self._eval_single(TokenType.SYS_SKIP)
                )
        self._expect(till)
        return expr


def parse(tokens: Iterable[Token], log_options: LogOption = DEFAULT_LOG) -> BlockStatement:
    """Parse tokens into a root block, logging to standard output."""
    return Parser(tokens, log_options).parse()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse a binary token stream from a file or standard input."""
    args = sys.argv[1:] if argv is None else list(argv)

    with ExitStack() as stack:
        stream: Optional[BinaryIO] = None
        remaining = iter(args)
        for arg in remaining:
            if arg == "-o":
                path = next(remaining, None)
                if path is None:
                    print("File path not given after '-o' option", file=sys.stderr)
                    return 1
                if path == "-":
                    continue
            else:
                path = arg
            try:
                handle = stack.enter_context(open(path, "wb" if arg == "-o" else "rb"))
            except OSError:
                print(f"Can't open the file: {path}", file=sys.stderr)
                return 1
            if arg != "-o":
                stream = handle

        if stream is None:
            stream = sys.stdin.buffer

        try:
            Parser(iter_tokens(stream), LogOption.EAT).parse()
        except (CompileError, EOFError, ValueError) as exc:
            print(exc, file=sys.stderr)
            return 1
    return 0