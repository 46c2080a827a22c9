"""Lift the declarations of let scopes out in front of the scope."""

from __future__ import annotations

from itertools import islice

from .ir import Operation, Value


def lift_locals(module: Operation) -> None:
    """Move each let's declaring operations before it and pass their values in."""
    for op in module.walk():
        if op.name != "letalg.let":
            continue
        region = op.regions[0]
        count = op.attributes.get("decl_cnt", 0)
        decls = list(
            islice(
                (inner for block in region.blocks for inner in block.operations),
                count,
            )
        )
        inputs: list[Value] = []
        for decl in decls:
            decl.move_before(op)
            value = decl.results[0]
            inputs.append(value)
            arg = region.add_argument(value.type)
            value.replace_all_uses_with(arg)
        op.insert_operands(0, inputs)