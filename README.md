# letalg

`letalg` lowers a tiny ML-style expression language into a small
in-memory let-algebra IR, then runs two passes over it: closure
conversion and lifting of local declarations.

The language has integer literals, `+` and `-`, variables, `let`
bindings, named functions declared with `let`, function calls and
`if ... then ... else`:

```
let a = 1 in let f x = x + a + 10 in f 2
```

## Installing

```
pip install .
```

## Command line

```
letalg
```

With no argument the command compiles a built-in example program (the
one shown above). Give it a program as a single quoted argument to
compile that instead:

```
letalg "let x = 1 in let y = 2 in x + y"
```

It prints the tokens, the parsed expression and then the IR after
closure conversion and local lifting. The exit status is 1 if the
program cannot be parsed or translated, if closure conversion fails, or
if the resulting module does not verify; otherwise it is 0.

## Library

```python
from letalg.parser import parse
from letalg.cli import build_module, compile_source
from letalg.ir import print_ir

expr = parse("let f x = x + 10 in f 2")
print(expr.dump())

module = build_module(expr)
print(print_ir(module))

print(print_ir(compile_source("let x = 1 in if x then x + 10 else 0")))
```

The modules:

- `letalg.nodes` holds the expression tree (`NumberExpr`, `VarExpr`,
  `BinopExpr`, `LetExpr`, `LambdaExpr`, `SeqExpr`, `CallExpr`, `IfExpr`,
  `PrintExpr`), each with an `ExprKind` and a `dump()` method.
- `letalg.parser` provides `tokenize` and `parse`; input it cannot make
  sense of raises `ParseError`.
- `letalg.ir` provides the IR objects (`IntegerType`, `FunctionType`,
  `Value`, `BlockArgument`, `OpResult`, `Block`, `Region`, `Operation`,
  `Builder`) together with `print_ir`, which renders a module as text,
  and `verify`, which raises `ValueError` when an operand is used outside
  the scope that defines it.
- `letalg.translate` lowers an expression with `translate` (or
  `translate_expr` with an explicit `TranslateContext`), raising
  `TranslationError` for unknown variables, calls of non-functions and
  unsupported expressions.
- `letalg.closure_conversion.closure_conversion` and
  `letalg.lift_locals.lift_locals` rewrite a module in place;
  `closure_conversion` raises `ClosureConversionError` when a captured
  value cannot be passed through to its users.
- `letalg.cli` provides `build_module`, `compile_source` and `main`.

## What it does not do

The package stops at the IR: it does not lower it further, generate
machine code or run programs. Only `+` and `-` are parsed as operators;
other punctuation such as `*` is split into its own token but is not
given a meaning. `SeqExpr` and `PrintExpr` exist in the expression tree
but the parser never produces them and `translate` rejects them.

## Running the tests

```
pip install .[test]
pytest
```