from dataclasses import dataclass, field
from typing import Optional

from arithcalc.expression import BinaryOperation, BinaryOperator, Expression, Num
from arithcalc.tokenizer import CalcSyntaxError, Token, TokenType, tokenize


class ParserError(CalcSyntaxError):
    label = "Parser error"


OPERATOR_TOKENS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
    TokenType.CARET: BinaryOperator.POW,
}

ADDITIVE_TOKENS = (TokenType.PLUS, TokenType.MINUS)
MULTIPLICATIVE_TOKENS = (TokenType.STAR, TokenType.SLASH)


def parse(code: str) -> Expression:
    """Parses a single line into an expression tree.

    Raises CalcSyntaxError (either TokenizerError or ParserError) if the line
    does not match the grammar as a whole; no partial tree is ever returned.
    """
    return parse_tokens(tokenize(code), code)


@dataclass
class _Group:
    """Partially folded expr / term / factor of one bracket level.

    Brackets push a new group instead of recursing, so nesting depth is not
    bounded by the interpreter's recursion limit.
    """

    open_position: int
    expr: Optional[Expression] = None
    expr_operator: Optional[Token] = None
    term: Optional[Expression] = None
    term_operator: Optional[Token] = None
    # bases of a ^ b ^ ... still waiting for their exponent
    pow_chain: list[tuple[Expression, Token]] = field(default_factory=list)

    def add_operand(self, operand: Expression, next_token: Token, code: str) -> bool:
        """Folds the operand in; True if next_token is an operator continuing this group"""
        if next_token.type is TokenType.CARET:
            self.pow_chain.append((operand, next_token))
            return True

        factor = operand
        while self.pow_chain:
            # folding from the right makes a ^ b ^ c group as a ^ (b ^ c)
            base, caret = self.pow_chain.pop()
            factor = _fold(caret, base, factor, code)

        if self.term is None or self.term_operator is None:
            self.term = factor
        else:
            self.term = _fold(self.term_operator, self.term, factor, code)
        if next_token.type in MULTIPLICATIVE_TOKENS:
            self.term_operator = next_token
            return True

        if self.expr is None or self.expr_operator is None:
            self.expr = self.term
        else:
            self.expr = _fold(self.expr_operator, self.expr, self.term, code)
        self.term, self.term_operator = None, None
        if next_token.type in ADDITIVE_TOKENS:
            self.expr_operator = next_token
            return True
        return False


def parse_tokens(tokens: list[Token], code: str) -> Expression:
    if tokens[0].type is TokenType.EXPR_END:
        raise ParserError("Empty expression", code=code, error_char_idx=0)

    groups = [_Group(open_position=0)]
    i = 0
    while True:
        operand, i = _consume_operand(tokens, i, groups, code)
        while not groups[-1].add_operand(operand, tokens[i], code):
            group = groups.pop()
            if group.expr is None:
                raise ParserError("Internal error, no expression parsed", code=code, error_char_idx=tokens[i].position)
            if not groups:
                if tokens[i].type is TokenType.EXPR_END:
                    return group.expr
                if tokens[i].type is TokenType.BRACKET_CLOSE:
                    errmsg = "Unmatched closing bracket"
                else:
                    errmsg = f"Binary operator expected, found {tokens[i].type}"
                raise ParserError(errmsg, code=code, error_char_idx=tokens[i].position)
            if tokens[i].type is TokenType.EXPR_END:
                raise ParserError("Unclosed bracket", code=code, error_char_idx=group.open_position)
            if tokens[i].type is not TokenType.BRACKET_CLOSE:
                raise ParserError(
                    f"Closing bracket expected, found {tokens[i].type}", code=code, error_char_idx=tokens[i].position
                )
            operand = group.expr
            i += 1  # skipping closing bracket
        i += 1  # skipping operator


def _fold(operator_token: Token, left: Expression, right: Expression, code: str) -> Expression:
    operator = OPERATOR_TOKENS.get(operator_token.type)
    if operator is None:
        raise ParserError(
            f"Internal error, not a binary operator: {operator_token.type}",
            code=code,
            error_char_idx=operator_token.position,
        )
    return BinaryOperation(operator=operator, left=left, right=right)


def _consume_operand(tokens: list[Token], i: int, groups: list[_Group], code: str) -> tuple[Expression, int]:
    """Opens a group per leading bracket, then consumes the number inside"""
    while tokens[i].type is TokenType.BRACKET_OPEN:
        if tokens[i + 1].type is TokenType.BRACKET_CLOSE:
            raise ParserError("Empty parenthesis", code=code, error_char_idx=tokens[i + 1].position)
        groups.append(_Group(open_position=tokens[i].position))
        i += 1

    first = tokens[i]
    if first.type is TokenType.NUMBER:
        try:
            return Num(float(first.lexeme)), i + 1
        except ValueError:
            raise ParserError(f"Invalid number: {first.lexeme!r}", code=code, error_char_idx=first.position) from None
    elif first.type is TokenType.EXPR_END:
        raise ParserError("Unexpected end of expression", code=code, error_char_idx=first.position)
    else:
        raise ParserError(f"Number or bracket expected, found {first.type}", code=code, error_char_idx=first.position)
