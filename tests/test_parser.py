import pytest

from arithcalc.expression import BinaryOperation, BinaryOperator, Expression, Num, format_expression
from arithcalc.parser import ParserError, _fold, parse
from arithcalc.tokenizer import CalcSyntaxError, Token, TokenizerError, TokenType


@pytest.mark.parametrize("digits", ["0", "7", "007", "42", "123456789", "9007199254740993", "1" * 40])
def test_digit_sequence_parses_to_num(digits: str) -> None:
    assert parse(digits) == Num(float(digits))


@pytest.mark.parametrize(
    "code, expected_ast",
    [
        pytest.param(
            "1 - 2 - 3",
            BinaryOperation(
                BinaryOperator.SUB, BinaryOperation(BinaryOperator.SUB, Num(1.0), Num(2.0)), Num(3.0)
            ),
        ),
        pytest.param(
            "8 / 4 * 2",
            BinaryOperation(
                BinaryOperator.MUL, BinaryOperation(BinaryOperator.DIV, Num(8.0), Num(4.0)), Num(2.0)
            ),
        ),
        pytest.param(
            "2 ^ 3 ^ 2",
            BinaryOperation(
                BinaryOperator.POW, Num(2.0), BinaryOperation(BinaryOperator.POW, Num(3.0), Num(2.0))
            ),
        ),
        pytest.param(
            "1 + 2 * 3",
            BinaryOperation(
                BinaryOperator.ADD, Num(1.0), BinaryOperation(BinaryOperator.MUL, Num(2.0), Num(3.0))
            ),
        ),
        pytest.param(
            " ( 1 + 2 ) * 3 ",
            BinaryOperation(
                BinaryOperator.MUL, BinaryOperation(BinaryOperator.ADD, Num(1.0), Num(2.0)), Num(3.0)
            ),
        ),
        pytest.param("((5))", Num(5.0)),
    ],
)
def test_parse_tree_shape(code: str, expected_ast: Expression) -> None:
    assert parse(code) == expected_ast


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("2 ^ 3 ^ 2", "(2 ^ (3 ^ 2))"),
        pytest.param("8-3-2", "((8 - 3) - 2)"),
        pytest.param("1 + 2 * 3 ^ 4", "(1 + (2 * (3 ^ 4)))"),
    ],
)
def test_format_expression(code: str, expected: str) -> None:
    assert format_expression(parse(code)) == expected


@pytest.mark.parametrize(
    "code, error_type, remainder",
    [
        pytest.param("", ParserError, ""),
        pytest.param("   ", ParserError, "   "),
        pytest.param("2 +", ParserError, ""),
        pytest.param("(1+2", ParserError, "(1+2"),
        pytest.param("1+2)", ParserError, ")"),
        pytest.param("()", ParserError, ")"),
        pytest.param("(1 2)", ParserError, "2)"),
        pytest.param("1 2", ParserError, "2"),
        pytest.param("* 3", ParserError, "* 3"),
        pytest.param("-1", ParserError, "-1"),
        pytest.param("2 * * 3", ParserError, "* 3"),
        pytest.param("abc", TokenizerError, "abc"),
        pytest.param("1 + x", TokenizerError, "x"),
        pytest.param("1.5", TokenizerError, ".5"),
    ],
)
def test_malformed_input_is_rejected(code: str, error_type: type, remainder: str) -> None:
    with pytest.raises(error_type) as exc_info:
        parse(code)
    assert isinstance(exc_info.value, CalcSyntaxError)
    assert exc_info.value.remainder == remainder


@pytest.mark.parametrize("depth", [200, 300, 5000])
def test_deep_nesting(depth: int) -> None:
    assert parse("(" * depth + "7" + ")" * depth) == Num(7.0)


def test_deep_nesting_keeps_grouping() -> None:
    depth = 2000
    code = "(2 ^ " * depth + "1" + ")" * depth
    assert format_expression(parse(code)) == "(2 ^ " * depth + "1" + ")" * depth


@pytest.mark.parametrize(
    "code, remainder",
    [
        pytest.param("(" * 5000 + "1" + ")" * 4999, "(" * 5000 + "1" + ")" * 4999),
        pytest.param("(" * 300 + "1" + ")" * 301, ")"),
    ],
)
def test_deep_nesting_unbalanced(code: str, remainder: str) -> None:
    with pytest.raises(ParserError) as exc_info:
        parse(code)
    assert exc_info.value.remainder == remainder


def test_fold_rejects_non_operator_token() -> None:
    with pytest.raises(ParserError) as exc_info:
        _fold(Token(TokenType.BRACKET_OPEN, "(", 3), Num(1.0), Num(2.0), code="1 2 (")
    assert exc_info.value.error_char_idx == 3


def test_parser_error_rendering() -> None:
    with pytest.raises(ParserError) as exc_info:
        parse("1 + 2 )")
    assert str(exc_info.value) == "\n".join(["[Parser error] Unmatched closing bracket", "1 + 2 )", "      ^"])


def test_long_line_error_rendering_is_windowed() -> None:
    code = "1 + " * 10 + "x" + " + 1" * 10
    with pytest.raises(TokenizerError) as exc_info:
        parse(code)
    _, source_window, caret = str(exc_info.value).split("\n")
    assert source_window.startswith("...") and source_window.endswith("...")
    assert source_window[caret.index("^")] == "x"
