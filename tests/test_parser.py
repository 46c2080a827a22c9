import pytest

from letalg.nodes import (
    BinopExpr,
    CallExpr,
    IfExpr,
    LambdaExpr,
    LetExpr,
    NumberExpr,
    VarExpr,
)
from letalg.parser import ParseError, parse, tokenize


def test_tokenize_words():
    assert tokenize("let x = 1 in x + y") == [
        "let", "x", "=", "1", "in", "x", "+", "y",
    ]


def test_tokenize_punctuation_stands_alone():
    tokens = tokenize("f(x)+{y}-a*b/c^d!e~g>h<i")
    for ch in "(){}+-*/^!~><":
        assert ch in tokens
    assert all(len(t) == 1 for t in tokens)


def test_tokenize_drops_separators():
    text = "let a = 1;\nin  a"
    tokens = tokenize(text)
    assert "".join(tokens) == text.replace(" ", "").replace("\n", "").replace(";", "")
    assert ";" not in tokens
    assert all(t for t in tokens)


def test_tokenize_empty():
    assert tokenize("  \n ;") == []


def test_parse_nested_lets():
    tree = parse("let x = 1 in let y = 2 in x + y")
    assert tree == LetExpr(
        "x",
        NumberExpr(1),
        LetExpr("y", NumberExpr(2), BinopExpr("+", VarExpr("x"), VarExpr("y"))),
    )


def test_parse_function_call():
    tree = parse("let f x = x + 10 in f 2")
    assert tree == LetExpr(
        "f",
        LambdaExpr("f", ["x"], BinopExpr("+", VarExpr("x"), NumberExpr(10))),
        CallExpr(VarExpr("f"), [NumberExpr(2)]),
    )


def test_parse_partial_application():
    tree = parse("let f x y = x + y + 10 in f 2")
    assert isinstance(tree, LetExpr)
    lam = tree.decl
    assert isinstance(lam, LambdaExpr)
    assert lam.args == ["x", "y"]
    assert lam.body == BinopExpr(
        "+", BinopExpr("+", VarExpr("x"), VarExpr("y")), NumberExpr(10)
    )
    assert tree.body == CallExpr(VarExpr("f"), [NumberExpr(2)])


def test_parse_closure_over_outer_variable():
    tree = parse("let a = 1 in let f x = x + a + 10 in f 2")
    assert tree == LetExpr(
        "a",
        NumberExpr(1),
        LetExpr(
            "f",
            LambdaExpr(
                "f",
                ["x"],
                BinopExpr(
                    "+", BinopExpr("+", VarExpr("x"), VarExpr("a")), NumberExpr(10)
                ),
            ),
            CallExpr(VarExpr("f"), [NumberExpr(2)]),
        ),
    )


def test_parse_call_with_variable_argument():
    tree = parse("let a = 1 in let f x = x + 10 in f a")
    inner = tree.body
    assert isinstance(inner, LetExpr)
    assert inner.body == CallExpr(VarExpr("f"), [VarExpr("a")])


def test_parse_if():
    tree = parse("let x = 1 in if x then x + 10 else 0")
    assert tree == LetExpr(
        "x",
        NumberExpr(1),
        IfExpr(
            VarExpr("x"),
            BinopExpr("+", VarExpr("x"), NumberExpr(10)),
            NumberExpr(0),
        ),
    )


def test_parse_binary_operators_left_associative():
    tree = parse("1 - 2 + 3")
    assert tree == BinopExpr(
        "+", BinopExpr("-", NumberExpr(1), NumberExpr(2)), NumberExpr(3)
    )


def test_parse_number_with_trailing_letters():
    assert parse("12abc") == NumberExpr(12)


def test_parse_single_variable():
    assert parse("value") == VarExpr("value")


def test_parse_empty_input():
    with pytest.raises(ParseError):
        parse("")


def test_parse_missing_operand():
    with pytest.raises(ParseError):
        parse("1 +")


def test_parse_truncated_let():
    with pytest.raises(ParseError):
        parse("let")


def test_parse_function_without_equals():
    with pytest.raises(ParseError):
        parse("let f x")


def test_parse_number_out_of_range():
    with pytest.raises(ParseError):
        parse("99999999999")


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse("let x =")