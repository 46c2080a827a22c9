import pytest

from letalg.ir import (
    BlockArgument,
    Builder,
    FunctionType,
    IntegerType,
    OpResult,
    Operation,
    Region,
    print_ir,
    verify,
)

I32 = IntegerType(32)


def _func():
    b = Builder()
    fn = b.create("func.func", num_regions=1)
    b.create_block(fn.regions[0])
    return b, fn


def test_type_strings():
    assert str(I32) == "i32"
    assert str(FunctionType((I32,), (I32,))) == "(i32) -> i32"


def test_builder_inserts_in_order():
    b, fn = _func()
    c1 = b.create("arith.constant", result_types=[I32])
    c2 = b.create("arith.constant", result_types=[I32])
    add = b.create("arith.addi", [c1.result, c2.result], [I32])
    assert fn.regions[0].blocks[0].operations == [c1, c2, add]
    assert isinstance(add.result, OpResult)
    assert c1.result.uses == [add]


def test_insertion_after():
    b, fn = _func()
    a = b.create("x")
    c = b.create("z")
    b.set_insertion_point_after(a)
    m = b.create("y")
    assert [o.name for o in fn.regions[0].blocks[0].operations] == ["x", "y", "z"]
    assert m.parent_op is fn


def test_replace_all_uses():
    b, _ = _func()
    c1 = b.create("c", result_types=[I32])
    c2 = b.create("c", result_types=[I32])
    use = b.create("u", [c1.result, c1.result])
    c1.result.replace_all_uses_with(c2.result)
    assert use.operands == [c2.result, c2.result]
    assert c1.result.uses == []
    assert len(c2.result.uses) == 2


def test_region_arguments():
    r = Region()
    a = r.add_argument(I32)
    f = r.insert_argument(0, FunctionType())
    assert r.argument(0) is f
    assert r.argument(1) is a
    assert isinstance(a, BlockArgument) and a.index == 1


def test_insert_and_move():
    b, fn = _func()
    c = b.create("c", result_types=[I32])
    d = b.create("d", result_types=[I32])
    op = b.create("u", [c.result])
    op.insert_operands(0, [d.result])
    assert op.operands == [d.result, c.result]
    d.move_before(c)
    assert fn.regions[0].blocks[0].operations[0] is d


def test_walk_preorder():
    b, fn = _func()
    outer = b.create("outer", num_regions=1)
    b.create_block(outer.regions[0])
    inner = b.create("inner")
    assert list(fn.walk()) == [fn, outer, inner]


def test_verify_and_print():
    b, fn = _func()
    c = b.create("c", result_types=[I32])
    b.create("u", [c.result])
    verify(fn)
    text = print_ir(fn)
    assert '"func.func"' in text and '"u"(%0)' in text


def test_verify_use_before_def():
    b, fn = _func()
    c = b.create("c", result_types=[I32])
    u = b.create("u", [c.result])
    u.move_before(c)
    with pytest.raises(ValueError):
        verify(fn)


def test_verify_arg_out_of_scope():
    b, fn = _func()
    lam = b.create("lam", num_regions=1)
    arg = lam.regions[0].add_argument(I32)
    b.set_insertion_point_after(lam)
    b.create("u", [arg])
    with pytest.raises(ValueError):
        verify(fn)


def test_detached_operation():
    op = Operation("x", result_types=[I32])
    assert op.parent_region is None
    with pytest.raises(ValueError):
        Builder().set_insertion_point_after(op)