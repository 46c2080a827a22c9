from letalg.cli import build_module, compile_source, main
from letalg.ir import verify
from letalg.nodes import NumberExpr

EXAMPLE = "let a = 1 in let f x = x + a + 10 in f 2"


def _func(module):
    return module.regions[0].blocks[0].operations[0]


def test_build_module_wraps_expression_in_function():
    module = build_module(NumberExpr(5))
    assert module.name == "builtin.module"
    func = _func(module)
    assert func.name == "func.func"
    assert func.attributes["sym_name"] == "test_function"
    names = [op.name for op in func.regions[0].blocks[0].operations]
    assert names == ["arith.constant", "letalg.yield"]
    const = func.regions[0].blocks[0].operations[0]
    assert const.attributes["value"] == 5


def test_compile_source_lifts_and_converts():
    module = compile_source(EXAMPLE)
    func_ops = _func(module).regions[0].blocks[0].operations
    assert [op.name for op in func_ops] == [
        "arith.constant",
        "letalg.lambda",
        "letalg.let",
        "letalg.yield",
    ]
    lam = func_ops[1]
    assert len(lam.regions[0].arguments) == 2
    let_op = func_ops[2]
    assert let_op.operands == [func_ops[0].result, lam.result]
    verify(module)


def test_main_prints_generated_ir(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "===== tokens =====" in out
    assert "===== ast =====" in out
    assert "Generated MLIR:" in out
    assert '"letalg.apply"' in out


def test_main_reports_unknown_variable(capsys):
    assert main(["let x = 1 in y"]) == 1
    err = capsys.readouterr().err
    assert "variable not found y" in err


def test_main_reports_empty_program(capsys):
    assert main([""]) == 1
    err = capsys.readouterr().err
    assert "Parse failed" in err