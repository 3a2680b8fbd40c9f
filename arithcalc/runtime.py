import math
from dataclasses import dataclass
from typing import Callable

from arithcalc.expression import BinaryOperation, BinaryOperator, Expression, Num


@dataclass
class CalcRuntimeError(Exception):
    errmsg: str

    def __str__(self) -> str:
        return f"[Runtime error] {self.errmsg}"


def evaluate(expression: Expression, strict: bool = False) -> float:
    """Reduces an expression tree to a number.

    By default, division by zero and out-of-domain powers follow IEEE-754 and
    produce inf, -inf or nan. With strict=True any operation producing a
    non-finite value raises CalcRuntimeError instead.

    The tree is walked post-order with an explicit stack, so long chains like
    1 + 1 + ... + 1 are not bounded by the interpreter's recursion limit.
    """
    results: list[float] = []
    pending: list[tuple[Expression, bool]] = [(expression, False)]
    while pending:
        node, operands_done = pending.pop()
        if isinstance(node, Num):
            results.append(node.value)
        elif isinstance(node, BinaryOperation):
            if operands_done:
                right_res = results.pop()
                left_res = results.pop()
                results.append(eval_binary_operation(node.operator, left_res, right_res, strict))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        else:
            raise CalcRuntimeError(f"Unexpected expression type: {node!r}")
    return results.pop()


def eval_binary_operation(operator: BinaryOperator, a: float, b: float, strict: bool) -> float:
    if operator not in BINARY_OPERATION_IMPLS:
        raise CalcRuntimeError(f"Unexpected binary operator: {operator}")
    op_name, impl = BINARY_OPERATION_IMPLS[operator]
    result = impl(a, b)
    if strict and not math.isfinite(result):
        raise CalcRuntimeError(_describe_non_finite(operator, op_name, a, b, result))
    return result


def _describe_non_finite(operator: BinaryOperator, op_name: str, a: float, b: float, result: float) -> str:
    if operator is BinaryOperator.DIV and b == 0.0:
        return "Division by zero"
    if math.isnan(result):
        return f"{op_name} is not defined for {format_result(a)} and {format_result(b)}"
    return f"{op_name} of {format_result(a)} and {format_result(b)} overflows"


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and x % 2 == 1


def _divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _power(a: float, b: float) -> float:
    # math.pow raises where C pow returns a special value
    try:
        return math.pow(a, b)
    except OverflowError:
        return -math.inf if a < 0 and _is_odd_integer(b) else math.inf
    except ValueError:
        if a == 0.0 and b < 0:
            return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
        return math.nan


BinaryOperationImpl = Callable[[float, float], float]

BINARY_OPERATION_IMPLS: dict[BinaryOperator, tuple[str, BinaryOperationImpl]] = {
    BinaryOperator.ADD: ("Addition", lambda a, b: a + b),
    BinaryOperator.SUB: ("Subtraction", lambda a, b: a - b),
    BinaryOperator.MUL: ("Multiplication", lambda a, b: a * b),
    BinaryOperator.DIV: ("Division", _divide),
    BinaryOperator.POW: ("Power", _power),
}


def format_result(value: float) -> str:
    """7.0 => 7, 3.5 => 3.5, special values as inf / -inf / nan"""
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)
