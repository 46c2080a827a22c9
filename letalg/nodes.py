"""Expression tree produced by the parser."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar


class ExprKind(Enum):
    """The kind of an expression node."""

    NUM = auto()
    VAR = auto()
    BINOP = auto()
    LET = auto()
    LAMBDA = auto()
    SEQ = auto()
    CALL = auto()
    IF = auto()
    PRINT = auto()


class ExprNode(ABC):
    """Base class of every expression node."""

    kind: ClassVar[ExprKind]

    @abstractmethod
    def dump(self) -> str:
        """Render the expression as readable text."""

    def __str__(self) -> str:
        return self.dump()


@dataclass
class NumberExpr(ExprNode):
    """An integer literal."""

    value: int
    kind: ClassVar[ExprKind] = ExprKind.NUM

    def dump(self) -> str:
        return str(self.value)


@dataclass
class VarExpr(ExprNode):
    """A reference to a named variable."""

    name: str
    kind: ClassVar[ExprKind] = ExprKind.VAR

    def dump(self) -> str:
        return self.name


@dataclass
class BinopExpr(ExprNode):
    """A binary operation such as ``a + b``."""

    op: str
    left: ExprNode
    right: ExprNode
    kind: ClassVar[ExprKind] = ExprKind.BINOP

    def dump(self) -> str:
        return f"{self.left.dump()}{self.op}{self.right.dump()}"


@dataclass
class LetExpr(ExprNode):
    """Binds ``var`` to ``decl`` while evaluating ``body``."""

    var: str
    decl: ExprNode
    body: ExprNode
    kind: ClassVar[ExprKind] = ExprKind.LET

    def dump(self) -> str:
        return f"let({self.var}={self.decl.dump()}) {{{self.body.dump()}}}"


@dataclass
class LambdaExpr(ExprNode):
    """A named function with parameters and a body."""

    fn: str
    args: list[str]
    body: ExprNode
    kind: ClassVar[ExprKind] = ExprKind.LAMBDA

    def dump(self) -> str:
        return f"lambda {self.fn}({', '.join(self.args)}) {{{self.body.dump()}}}"


@dataclass
class SeqExpr(ExprNode):
    """Two expressions evaluated one after the other."""

    head: ExprNode
    tail: ExprNode
    kind: ClassVar[ExprKind] = ExprKind.SEQ

    def dump(self) -> str:
        return f"{self.head.dump()};\n{self.tail.dump()}"


@dataclass
class CallExpr(ExprNode):
    """Application of a function to arguments."""

    fn: ExprNode
    args: list[ExprNode]
    kind: ClassVar[ExprKind] = ExprKind.CALL

    def dump(self) -> str:
        rendered = ", ".join(arg.dump() for arg in self.args)
        return f"call {self.fn.dump()}({rendered})"


@dataclass
class IfExpr(ExprNode):
    """A conditional with both branches."""

    cond: ExprNode
    then: ExprNode
    els: ExprNode
    kind: ClassVar[ExprKind] = ExprKind.IF

    def dump(self) -> str:
        return (
            f"if ({self.cond.dump()})\n"
            f"  {{{self.then.dump()}}}\n"
            f"  {{{self.els.dump()}}}"
        )


@dataclass
class PrintExpr(ExprNode):
    """Prints the value of an expression."""

    expr: ExprNode
    kind: ClassVar[ExprKind] = ExprKind.PRINT

    def dump(self) -> str:
        return f"print({self.expr.dump()})"