import enum
from dataclasses import dataclass


class BinaryOperator(enum.Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Num:
    value: float


@dataclass(frozen=True)
class BinaryOperation:
    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


Expression = Num | BinaryOperation


def format_expression(expression: Expression) -> str:
    """Fully parenthesized rendering, e.g. 2 ^ 3 ^ 2 => (2 ^ (3 ^ 2))"""
    rendered: list[str] = []
    pending: list[tuple[Expression, bool]] = [(expression, False)]
    while pending:
        node, operands_done = pending.pop()
        if isinstance(node, Num):
            rendered.append(str(int(node.value)) if node.value.is_integer() else repr(node.value))
        elif operands_done:
            right = rendered.pop()
            left = rendered.pop()
            rendered.append(f"({left} {node.operator} {right})")
        else:
            pending.append((node, True))
            pending.append((node.right, False))
            pending.append((node.left, False))
    return rendered.pop()
