"""Lowering of expression trees into let-algebra IR."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .ir import Builder, FunctionType, IntegerType, Region, Value
from .nodes import (
    BinopExpr,
    CallExpr,
    ExprNode,
    IfExpr,
    LambdaExpr,
    LetExpr,
    NumberExpr,
    VarExpr,
)

I32 = IntegerType(32)


class TranslationError(ValueError):
    """Raised when an expression cannot be lowered."""


@dataclass
class TranslateContext:
    """Names visible in one scope during lowering."""

    variables: list[str] = field(default_factory=list)
    values: list[Value] = field(default_factory=list)
    region: Optional[Region] = None
    parent: Optional["TranslateContext"] = None

    def push(self, name: str, value: Value) -> None:
        self.variables.append(name)
        self.values.append(value)

    def find(self, name: str) -> Optional[Value]:
        """Look a name up; let scopes search only their own bindings."""
        if self.values:
            for var, value in zip(self.variables, self.values):
                if var == name:
                    return value
            return None
        if self.region is None:
            raise TranslationError("region not set in translate context")
        for i, var in enumerate(self.variables):
            if var == name:
                return self.region.argument(i)
        return self.parent.find(name) if self.parent else None


def _translate_let(builder: Builder, let: LetExpr, parent: TranslateContext) -> Value:
    op = builder.create("letalg.let", result_types=[I32],
                        attributes={"decl_cnt": 0}, num_regions=1)
    region = op.regions[0]
    builder.create_block(region)
    ctx = TranslateContext(region=region, parent=parent)
    node: ExprNode = let
    while isinstance(node, LetExpr):
        ctx.push(node.var, translate_expr(builder, node.decl, ctx))
        node = node.body
    op.attributes["decl_cnt"] = len(ctx.values)
    v = translate_expr(builder, node, ctx)
    builder.create("letalg.yield", [v], [v.type])
    op.result.type = v.type
    builder.set_insertion_point_after(op)
    return op.result


def _translate_lambda(builder: Builder, lam: LambdaExpr, parent: TranslateContext) -> Value:
    op = builder.create("letalg.lambda", result_types=[I32],
                        attributes={"fn": lam.fn}, num_regions=1)
    region = op.regions[0]
    block = builder.create_block(region)
    ctx = TranslateContext(region=region, parent=parent)
    for arg in lam.args:
        ctx.variables.append(arg)
        region.add_argument(I32)
    builder.set_insertion_point_to_start(block)
    v = translate_expr(builder, lam.body, ctx)
    builder.create("letalg.yield", [v], [v.type])
    op.result.type = FunctionType(tuple(I32 for _ in lam.args), (v.type,))
    builder.set_insertion_point_after(op)
    return op.result


def _translate_call(builder: Builder, call: CallExpr, ctx: TranslateContext) -> Value:
    fn = translate_expr(builder, call.fn, ctx)
    args = [translate_expr(builder, a, ctx) for a in call.args]
    ft = fn.type
    if not isinstance(ft, FunctionType):
        raise TranslationError(f"apply fn is not function type: {call.dump()}")
    ret = ft.results[0]
    if len(args) != len(ft.inputs):
        ret = FunctionType(tuple(ft.inputs[len(args):]), (ret,))
    return builder.create("letalg.apply", [fn, *args], [ret]).result


def _translate_if(builder: Builder, node: IfExpr, ctx: TranslateContext) -> Value:
    cond = translate_expr(builder, node.cond, ctx)
    op = builder.create("scf.if", [cond], [I32], num_regions=2)
    types = []
    for region, branch in zip(op.regions, (node.then, node.els)):
        builder.create_block(region)
        v = translate_expr(builder, branch, ctx)
        builder.create("scf.yield", [v])
        types.append(v.type)
    op.result.type = types[0]
    builder.set_insertion_point_after(op)
    return op.result


def translate_expr(builder: Builder, expr: ExprNode, ctx: TranslateContext) -> Value:
    """Lower ``expr`` at the builder's insertion point and return its value."""
    if isinstance(expr, LetExpr):
        return _translate_let(builder, expr, ctx)
    if isinstance(expr, LambdaExpr):
        return _translate_lambda(builder, expr, ctx)
    if isinstance(expr, CallExpr):
        return _translate_call(builder, expr, ctx)
    if isinstance(expr, IfExpr):
        return _translate_if(builder, expr, ctx)
    if isinstance(expr, VarExpr):
        found = ctx.find(expr.name)
        if found is None:
            raise TranslationError(f"variable not found {expr.dump()}")
        return found
    if isinstance(expr, NumberExpr):
        return builder.create("arith.constant", result_types=[I32],
                              attributes={"value": expr.value}).result
    if isinstance(expr, BinopExpr):
        left = translate_expr(builder, expr.left, ctx)
        right = translate_expr(builder, expr.right, ctx)
        name = "arith.subi" if expr.op == "-" else "arith.addi"
        return builder.create(name, [left, right], [left.type]).result
    raise TranslationError(f"unsupported expr to translate {expr.dump()}")


def translate(builder: Builder, expr: ExprNode) -> Value:
    """Lower a whole expression in a fresh top-level scope."""
    return translate_expr(builder, expr, TranslateContext())