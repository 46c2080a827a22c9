"""Closure conversion: pass captured outer values as explicit arguments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .ir import Operation, Region, Value

_SCOPE_OPS = frozenset({"letalg.let", "letalg.lambda"})


class ClosureConversionError(ValueError):
    """Raised when a captured value cannot be threaded through its users."""


@dataclass
class _Closure:
    op: Operation
    region: Region


class _ClosureConverter:
    """Tracks the open scopes while the module is walked in pre-order."""

    def __init__(self) -> None:
        self.closures: list[_Closure] = []

    def pop_to(self, region: Optional[Region]) -> None:
        while self.closures and self.closures[-1].region is not region:
            self.closures.pop()

    def search(self, region: Optional[Region]) -> Optional[_Closure]:
        return next((c for c in self.closures if c.region is region), None)

    def bind(self, op: Operation, use: Value) -> None:
        op.regions[0].insert_argument(0, use.type)
        for user in op.users:
            if user.name != "letalg.apply":
                raise ClosureConversionError("user of lambda is not apply op")
            if use.parent_region is user.parent_region:
                user.insert_operands(1, [use])
                continue
            scope = user.parent_region
            closure = self.search(scope)
            if closure is None or scope is None:
                raise ClosureConversionError(
                    "apply of a capturing lambda is outside any open scope"
                )
            self.bind(closure.op, use)
            user.insert_operands(1, [scope.argument(0)])

    def bind_use(self, use: Value) -> Optional[Value]:
        if not self.closures:
            return None
        top = self.closures[-1]
        if use.parent_region is top.region:
            return None
        self.bind(top.op, use)
        return top.region.argument(0)

    def run(self, module: Operation) -> None:
        for op in module.walk():
            if op.name in _SCOPE_OPS:
                self.closures.append(_Closure(op, op.regions[0]))
                continue
            self.pop_to(op.parent_region)
            replaced = False
            operands: list[Value] = []
            for value in op.operands:
                bound = self.bind_use(value)
                if bound is not None:
                    operands.append(bound)
                    replaced = True
                else:
                    operands.append(value)
            if replaced:
                op.set_operands(operands)


def closure_conversion(module: Operation) -> None:
    """Rewrite uses of outer values inside lambdas into extra lambda arguments."""
    _ClosureConverter().run(module)