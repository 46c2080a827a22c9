"""A small in-memory SSA IR holding the let-algebra operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Union


@dataclass(frozen=True)
class IntegerType:
    """A signless integer type of a given bit width."""

    width: int = 32

    def __str__(self) -> str:
        return f"i{self.width}"


@dataclass(frozen=True)
class FunctionType:
    """The type of a function value."""

    inputs: tuple = ()
    results: tuple = ()

    def __str__(self) -> str:
        ins = ", ".join(str(t) for t in self.inputs)
        outs = ", ".join(str(t) for t in self.results)
        if len(self.results) == 1:
            return f"({ins}) -> {outs}"
        return f"({ins}) -> ({outs})"


Type = Union[IntegerType, FunctionType]


class Value:
    """An SSA value with a type and the operations that use it."""

    def __init__(self, type: Type) -> None:
        self.type = type
        self.uses: list[Operation] = []

    @property
    def parent_region(self) -> Optional["Region"]:
        raise NotImplementedError

    def replace_all_uses_with(self, other: "Value") -> None:
        """Make every user of this value use ``other`` instead."""
        for op in list(dict.fromkeys(self.uses)):
            op.set_operands([other if v is self else v for v in op.operands])


class BlockArgument(Value):
    """A value introduced as an argument of a block."""

    def __init__(self, type: Type, block: "Block") -> None:
        super().__init__(type)
        self.block = block

    @property
    def index(self) -> int:
        return next(i for i, a in enumerate(self.block.arguments) if a is self)

    @property
    def parent_region(self) -> Optional["Region"]:
        return self.block.region


class OpResult(Value):
    """A value produced by an operation."""

    def __init__(self, type: Type, owner: "Operation", index: int) -> None:
        super().__init__(type)
        self.owner = owner
        self.index = index

    @property
    def parent_region(self) -> Optional["Region"]:
        return self.owner.parent_region


class Block:
    """A list of operations with block arguments."""

    def __init__(self, region: Optional["Region"] = None) -> None:
        self.region = region
        self.arguments: list[BlockArgument] = []
        self.operations: list[Operation] = []


class Region:
    """A list of blocks owned by an operation."""

    def __init__(self, parent: Optional["Operation"] = None) -> None:
        self.parent = parent
        self.blocks: list[Block] = []

    def _entry(self) -> Block:
        if not self.blocks:
            self.blocks.append(Block(self))
        return self.blocks[0]

    @property
    def arguments(self) -> list[BlockArgument]:
        return self._entry().arguments

    def add_argument(self, type: Type) -> BlockArgument:
        """Append an argument to the entry block."""
        block = self._entry()
        arg = BlockArgument(type, block)
        block.arguments.append(arg)
        return arg

    def insert_argument(self, index: int, type: Type) -> BlockArgument:
        """Insert an argument into the entry block at ``index``."""
        block = self._entry()
        arg = BlockArgument(type, block)
        block.arguments.insert(index, arg)
        return arg

    def argument(self, index: int) -> BlockArgument:
        """Return the entry block's argument at ``index``."""
        return self._entry().arguments[index]


class Operation:
    """A named operation with operands, results, attributes and regions."""

    def __init__(
        self,
        name: str,
        operands: Iterable[Value] = (),
        result_types: Iterable[Type] = (),
        attributes: Optional[dict[str, Any]] = None,
        num_regions: int = 0,
    ) -> None:
        self.name = name
        self.operands: list[Value] = []
        self.results = [OpResult(t, self, i) for i, t in enumerate(result_types)]
        self.attributes: dict[str, Any] = dict(attributes or {})
        self.regions = [Region(self) for _ in range(num_regions)]
        self.block: Optional[Block] = None
        self.set_operands(list(operands))

    @property
    def result(self) -> OpResult:
        return self.results[0]

    @property
    def parent_region(self) -> Optional[Region]:
        return self.block.region if self.block else None

    @property
    def parent_op(self) -> Optional["Operation"]:
        region = self.parent_region
        return region.parent if region else None

    @property
    def users(self) -> list["Operation"]:
        seen: dict[int, Operation] = {}
        for res in self.results:
            for op in res.uses:
                seen.setdefault(id(op), op)
        return list(seen.values())

    def set_operands(self, values: Iterable[Value]) -> None:
        """Replace the operand list."""
        for v in self.operands:
            v.uses.remove(self)
        self.operands = list(values)
        for v in self.operands:
            v.uses.append(self)

    def insert_operands(self, index: int, values: Iterable[Value]) -> None:
        """Insert operands at ``index``."""
        ops = list(self.operands)
        ops[index:index] = list(values)
        self.set_operands(ops)

    def _detach(self) -> None:
        if self.block is not None:
            self.block.operations.remove(self)
            self.block = None

    def move_before(self, other: "Operation") -> None:
        """Move this operation to just before ``other``."""
        if other.block is None:
            raise ValueError("target operation is not in a block")
        self._detach()
        block = other.block
        block.operations.insert(block.operations.index(other), self)
        self.block = block

    def walk(self) -> Iterator["Operation"]:
        """Yield this operation and all nested ones in pre-order."""
        yield self
        for region in self.regions:
            for block in list(region.blocks):
                for op in list(block.operations):
                    yield from op.walk()


class Builder:
    """Creates operations at an insertion point."""

    def __init__(self) -> None:
        self.block: Optional[Block] = None
        self.index = 0

    def create_block(self, region: Region) -> Block:
        """Append a block to ``region`` and insert at its end."""
        block = Block(region)
        region.blocks.append(block)
        self.block, self.index = block, 0
        return block

    def set_insertion_point_to_start(self, block: Block) -> None:
        self.block, self.index = block, 0

    def set_insertion_point_after(self, op: Operation) -> None:
        if op.block is None:
            raise ValueError("operation is not in a block")
        self.block = op.block
        self.index = op.block.operations.index(op) + 1

    def create(self, name, operands=(), result_types=(), attributes=None, num_regions=0):
        """Create an operation and insert it at the insertion point."""
        op = Operation(name, operands, result_types, attributes, num_regions)
        if self.block is not None:
            self.block.operations.insert(self.index, op)
            op.block = self.block
            self.index += 1
        return op


class _Printer:
    def __init__(self) -> None:
        self.names: dict[int, str] = {}
        self.results = 0
        self.args = 0

    def name(self, v: Value) -> str:
        key = id(v)
        if key not in self.names:
            if isinstance(v, BlockArgument):
                self.names[key] = f"%arg{self.args}"
                self.args += 1
            else:
                self.names[key] = f"%{self.results}"
                self.results += 1
        return self.names[key]

    def op(self, op: Operation, indent: int) -> list[str]:
        pad = "  " * indent
        head = ""
        if op.results:
            head = ", ".join(self.name(r) for r in op.results) + " = "
        opnds = ", ".join(self.name(v) if id(v) in self.names else "<<unknown>>"
                          for v in op.operands)
        text = f'{pad}{head}"{op.name}"({opnds})'
        lines: list[str] = []
        if op.regions:
            text += " ("
            lines.append(text + "{")
            for ri, region in enumerate(op.regions):
                if ri:
                    lines.append(pad + "}, {")
                for block in region.blocks:
                    if block.arguments:
                        args = ", ".join(f"{self.name(a)}: {a.type}" for a in block.arguments)
                        lines.append(f"{pad}^bb0({args}):")
                    for inner in block.operations:
                        lines.extend(self.op(inner, indent + 1))
            text = pad + "})"
        if op.attributes:
            attrs = ", ".join(f"{k} = {v!r}" for k, v in op.attributes.items())
            text += f" {{{attrs}}}"
        ins = ", ".join(str(v.type) for v in op.operands)
        outs = ", ".join(str(r.type) for r in op.results)
        if len(op.results) != 1:
            outs = f"({outs})"
        text += f" : ({ins}) -> {outs}"
        lines.append(text)
        return lines


def print_ir(op: Operation) -> str:
    """Render an operation and everything nested in it as text."""
    return "\n".join(_Printer().op(op, 0))


def _encloses(region: Optional[Region], op: Operation) -> bool:
    current = op.parent_region
    while current is not None:
        if current is region:
            return True
        parent = current.parent
        current = parent.parent_region if parent else None
    return False


def verify(op: Operation) -> None:
    """Check that every operand is visible where it is used; raise ValueError if not."""
    for inner in op.walk():
        for v in inner.operands:
            if isinstance(v, OpResult):
                owner = v.owner
                if owner is inner or owner.block is None:
                    raise ValueError(f"operand of {inner.name} is not defined in scope")
                # find the ancestor of inner that lives in owner's block
                anc: Optional[Operation] = inner
                while anc is not None and anc.block is not owner.block:
                    anc = anc.parent_op
                if anc is None:
                    raise ValueError(f"operand of {inner.name} is not defined in scope")
                ops = owner.block.operations
                if ops.index(owner) >= ops.index(anc):
                    raise ValueError(f"operand of {inner.name} used before definition")
            elif isinstance(v, BlockArgument):
                if v not in v.block.arguments or not _encloses(v.block.region, inner):
                    raise ValueError(f"block argument used outside its region by {inner.name}")