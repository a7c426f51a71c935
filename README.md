# quantumc

quantumc is the front end of a compiler for a small C dialect. The dialect
adds a `quantum` qualifier, the `angle` and `bit` types and the swap
operator `<>`. The package has two stages and a driver that chains them.

1. **Tokenizer** (`tokenizer`): reads preprocessed C text, including
   `# <line> "<file>" <flags>` line markers, and writes a binary stream of
   tokens.
2. **Parser** (`tokenparser`): reads that token stream and builds a tree of
   declarations, statements and expressions. As it consumes each token it
   prints a line such as `Eat : 3:x` to standard output.

## Installation

```
pip install .
```

This installs three commands: `tokenizer`, `tokenparser` and `quantumc`.

For the test suite:

```
pip install ".[test]"
pytest
```

## Command line

Tokenize a preprocessed file. With no file argument it reads standard
input. The token stream goes to the file named by `-o`; with `-o -` or no
`-o` it goes to standard output:

```
tokenizer input.i -o input.tok
```

Parse a token stream. With no file argument it reads standard input:

```
tokenparser input.tok
```

Run the whole chain with the driver:

```
quantumc program.qc -o a.out
```

The driver runs `cc -E -x c` on the source (or on standard input when no
source is given), pipes the result into `tokenizer`, and pipes that into
`tokenparser -o <output>`. It looks for `tokenizer` and `tokenparser` in the
directory the `quantumc` command itself lives in; `-o` defaults to `a.out`.
It exits with 1 if any stage fails.

All three commands print `File path not given after '-o' option` and exit
with 1 when `-o` has no path after it, and `Can't open the file: <path>` when
a file cannot be opened. Tokenizer and parser errors are printed to standard
error with exit status 1.

## Library use

```python
from quantumc.tokenizer import tokenize
from quantumc.parser import parse, LogOption

tokens = tokenize("quantum bit a = 0, b = 1;\n")
root = parse(tokens, LogOption.NONE)
for statement in root.children:
    print(statement)
```

The modules are:

- `quantumc.tokens`: `TokenType`, the `Token` dataclass, and `write_token`,
  `read_token` and `iter_tokens`, which write and read the binary token
  format (little-endian lengths, latin-1 names, five 32-bit integers and a
  synthetic flag per token).
- `quantumc.tokenizer`: `Tokenizer` (its `tokens()` generator ends with an
  end-of-file token), `tokenize`, `classify_word`, `classify_symbol` and the
  `main` behind the `tokenizer` command. Number literals become a token whose
  name is `i` or `f` followed by the integer part and the fraction digits as
  two little-endian 64-bit values; `0x`, `0b` and leading-`0` octal forms are
  read.
- `quantumc.expressions`: the syntax tree (`BinaryExpression`,
  `UnaryExpression`, `TupleExpression`, `LiteralExpression`,
  `VariableExpression`, `DeclarationStatement`, `BlockStatement`,
  `ExpressionStatement`, `ReturnStatement`, `IfStatement`, `WhileStatement`,
  `ForStatement`), the type description `Typer` with `VarType` and
  `Specifier`, the `Operator` and `LiteralKind` enums, and
  `ExpressionVisitor`, which dispatches each node to a `visit_<kind>` method
  (`visit_binary`, `visit_declaration`, `visit_block` and so on) or to
  `generic_visit`, which walks the children.
- `quantumc.parser`: `Parser`, `parse`, `LogOption` (`NONE`, `EAT`, `SKIP`)
  and the `main` behind the `tokenparser` command.
- `quantumc.errors`: `CompileError` and its subclasses
  `UnrecognizedTokenError`, `UnexpectedTokenError`,
  `UnclosedParenthesesError`, `UnclosedSquareBracketsError` and
  `MultipleIdentifiersError`.
- `quantumc.compiler`: `build_command`, which returns the three pipeline
  stages as argument lists, and the `main` behind the `quantumc` command.

## What the parser understands

- Declarations: the type names `angle`, `bit`, `bool`, `char`, `short`,
  `int`, `float`, `double`, `long` and `void` (`long` widens `int`, `long`
  and `double`), the qualifiers `quantum`, `const`, `inline`, `extern` and
  `volatile`, pointers, arrays, function declarators with parameter lists,
  parenthesised declarators, comma separated names, `= <expression>`
  initializers and function bodies. Giving two types in one declaration
  issues a Python warning.
- Statements: `{ ... }` blocks, `return <expression>`, expression
  statements and empty `;`.
- Expressions: `=`, `+`, `-`, `*`, `/`, `%`, the comma operator, prefix and
  postfix `++` and `--`, indexing `a[i]`, calls `f(x, y)`, parentheses,
  `[a, b]` tuples, and number, character and string literals.

## What it does not do

quantumc stops after building the syntax tree. It generates no code: the
`-o` file given to `tokenparser` (and so the output of `quantumc`) is
created but left empty. The tree classes for `if`, `while` and `for` exist,
but the parser does not build them; keywords such as `if`, `while`, `for`,
`switch`, `struct` and operators such as `==`, `<`, `&&` and `<>` are
tokenized but rejected by the parser with `UnexpectedTokenError`.