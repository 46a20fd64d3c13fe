# psi

`psi` is a small interpreter for a Pascal-like language. It has a lexer, a semantic analyzer and a tree-walking evaluator. It is a library that you use from Python code. It installs no command.

## Modules

- `psi.tokens` has the token types (`TokenType`), the `Token` record and the reserved-word lookup `keyword_type`. It also has `token_symbol` and `token_type_name`.
- `psi.lexer` turns source text into tokens with `Lexer` or `tokenize`.
- `psi.nodes` has the syntax tree:
  - values: `Integer`, `Real`, `Boolean`, `Char`, `String`
  - expressions: `BinaryOp`, `UnaryOp`, `Op`, `Var`
  - statements: `Assign`, `Compound`, `IfStatement`, `WhileLoop`, `ForLoop`, `RepeatUntil`, `ProcedureCall`, `FunctionCall`, `NoOp`
  - declarations: `Program`, `Block`, `VarDecl`, `Type`, `Param`, `ProcedureDeclaration`, `FunctionDeclaration`
- `psi.semantics` has the symbols and `ScopedSymbolTable`, and checks a tree with `SemanticAnalyzer`.
- `psi.records` has the runtime `ActivationRecord` and `CallStack`.
- `psi.interpreter` runs a checked tree with `Interpreter`. Its `default_value` function gives the starting value for a type name.
- `psi.errors` has `ErrorCode`, `error_message` and the exceptions. Every failure is a `PsiError`. The subclasses are `LexerError`, `SemanticError` and `InterpreterError`.

## What the package does not do

The package has no parser. It cannot turn the token stream into a syntax tree, so you build trees from the classes in `psi.nodes`. There is also no command-line program that reads a source file and runs it.

## Tokenizing

```python
from psi.lexer import tokenize

tokens = tokenize("x := 10 DIV 3;")
print(tokens[0])   # <TokenType.ID, x, 1:1>
print(tokens[-1])  # <TokenType.END_OF_FILE, END_OF_FILE, 1:15>
```

The lexer works like this:

- Reserved words match without regard to case. They come back in upper case with their own token type. The word `DIV` shares `TokenType.DIV` with `/`.
- Identifiers keep their case.
- Whitespace is skipped.
- Comments in `{ ... }` are skipped.
- String literals are written in double quotes.
- Numbers become `INTEGER_CONST` or `REAL_CONST`.
- These cases raise `LexerError`, with the line and column in the message:
  - a character that starts no token
  - a lone `!`
  - an unterminated comment
  - an unterminated string

## Building, checking and running a tree

```python
import io

from psi.interpreter import Interpreter
from psi.nodes import (
    Assign, BinaryOp, Block, Compound, Integer, Op, ProcedureCall, Program,
    Type, Var, VarDecl,
)
from psi.semantics import SemanticAnalyzer
from psi.tokens import Token, TokenType


def var(name):
    return Var(Token(TokenType.ID, name, 1, 1))


tree = Program("demo", Block(
    [VarDecl(var("x"), Type(TokenType.INTEGER))],
    Compound([
        Assign(var("x"), Token(TokenType.ASSIGN, ":=", 1, 1),
               BinaryOp(Integer(7), Op("DIV"), Integer(2))),
        ProcedureCall("writeln", [var("x")], Token(TokenType.ID, "writeln", 1, 1)),
    ]),
))

SemanticAnalyzer().visit(tree)

output = io.StringIO()
Interpreter(tree, io.StringIO(""), output).interpret()
assert output.getvalue() == "3\n"
```

### Semantic checks

`SemanticAnalyzer.visit` walks the tree and checks that:

- every name is declared in the current scope or an enclosing one
- no variable is declared twice in the same scope
- each assignment and binary operation has matching types (a numeric result may go into an `INTEGER` or `REAL` variable)
- the conditions of `IF`, `WHILE` and `REPEAT` are `BOOLEAN`
- procedure and function calls pass the number of arguments declared
- the body of a `FOR` loop does not assign to its counter

While it walks, it records on the tree the variable types and the procedure and function symbols that the interpreter needs. Run it before you interpret. When a check fails it raises `SemanticError`.

### Running

`Interpreter(tree, stdin, stdout)` runs the tree. If you leave out the streams, it uses `sys.stdin` and `sys.stdout`.

**Output.** The built-in procedures `writeln` and `write` print their arguments. Values print like this:

- a `Real` prints with six decimals
- a `Boolean` prints as `true` or `false`

**Input.** `read` and `readln` read into the variables you pass them:

- `read` reads one whitespace-separated word for each variable.
- `readln` does the same, except that a `STRING` variable in last place takes the rest of the line.
- `readln` with no arguments reads and discards one word.
- You can read into `INTEGER`, `REAL`, `CHAR` and `STRING` variables.

**Arithmetic.**

- `+`, `-` and `*` give a `Real` if either operand is real.
- `/` always gives a `Real`.
- `DIV` gives an `Integer` truncated toward zero.

**Strings.**

- `+` joins strings.
- `length` returns the length of a string.

**Loops.** A `ForLoop` with increment 1 counts up to its target inclusive. Any other increment counts down.

**Functions.** A function returns the value assigned to its own name. That value starts as `default_value` of the return type.

Runtime failures raise `InterpreterError`. Some examples:

- a condition that is not a `BOOLEAN`
- division by zero
- reading a variable that has no value
- an unknown type name in `default_value`

## Running the tests

The tests use pytest. Install the package's `test` extra to get it.