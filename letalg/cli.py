"""Command line entry: parse a program, lower it and print the IR."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from .closure_conversion import ClosureConversionError, closure_conversion
from .ir import Builder, FunctionType, Operation, print_ir, verify
from .lift_locals import lift_locals
from .nodes import ExprNode
from .parser import ParseError, parse, tokenize
from .translate import TranslationError, translate

_DEFAULT_SOURCE = "let a = 1 in let f x = x + a + 10 in f 2"


def build_module(expr: ExprNode) -> Operation:
    """Wrap the lowered expression in a module holding one function."""
    builder = Builder()
    module = builder.create("builtin.module", num_regions=1)
    builder.create_block(module.regions[0])
    func = builder.create(
        "func.func",
        attributes={"sym_name": "test_function", "function_type": FunctionType()},
        num_regions=1,
    )
    builder.create_block(func.regions[0])
    last = translate(builder, expr)
    builder.create("letalg.yield", [last], [last.type])
    return module


def _run_passes(module: Operation) -> Operation:
    closure_conversion(module)
    lift_locals(module)
    return module


def compile_source(text: str) -> Operation:
    """Parse, lower and transform a program, returning the module."""
    return _run_passes(build_module(parse(text)))


def main(argv: Optional[Sequence[str]] = None) -> int:
    arg_parser = argparse.ArgumentParser(
        prog="letalg", description="Lower a let-language program to IR."
    )
    arg_parser.add_argument("source", nargs="?", default=_DEFAULT_SOURCE,
                            help="program text")
    args = arg_parser.parse_args(argv)

    print("===== tokens =====")
    for tok in tokenize(args.source):
        print(tok)
    try:
        expr = parse(args.source)
    except ParseError as exc:
        print(f"Parse failed: {exc}", file=sys.stderr)
        return 1
    print("===== ast =====")
    print(expr.dump())

    try:
        module = build_module(expr)
    except TranslationError as exc:
        print(f"Translation failed: {exc}", file=sys.stderr)
        return 1
    try:
        _run_passes(module)
    except ClosureConversionError as exc:
        print(f"Pass run failed: {exc}", file=sys.stderr)
        return 1

    print("Generated MLIR:")
    print(print_ir(module))
    print()

    try:
        verify(module)
    except ValueError as exc:
        print(f"Module verification failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())