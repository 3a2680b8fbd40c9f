import enum
import string
from dataclasses import dataclass
from typing import ClassVar


@dataclass
class CalcSyntaxError(Exception):
    errmsg: str
    code: str
    error_char_idx: int

    label: ClassVar[str] = "Syntax error"

    @property
    def remainder(self) -> str:
        return self.code[self.error_char_idx :]

    def __str__(self) -> str:
        print_start_idx = max(0, self.error_char_idx - 10)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(self.code), self.error_char_idx + 10)
        print_ellipsis_post = print_end_idx < len(self.code)
        return "\n".join(
            [
                f"[{self.label}] {self.errmsg}",
                (
                    ("..." if print_ellipsis_pre else "")
                    + f"{self.code[print_start_idx:print_end_idx]}"
                    + ("..." if print_ellipsis_post else "")
                ),
                " " * (self.error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


class TokenizerError(CalcSyntaxError):
    label = "Tokenizer error"


class TokenType(enum.Enum):
    NUMBER = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    CARET = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    EXPR_END = enum.auto()

    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


@dataclass
class Token:
    type: TokenType
    lexeme: str
    position: int

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "^": TokenType.CARET,
    "(": TokenType.BRACKET_OPEN,
    ")": TokenType.BRACKET_CLOSE,
}


def _is_valid_in_number(s: str) -> bool:
    # str.isdigit() also accepts things like superscripts, which float() rejects
    return s in string.digits


def tokenize(code: str) -> list[Token]:
    i = 0
    tokens: list[Token] = []
    while i < len(code):
        if _is_valid_in_number(code[i]):
            number_end_idx = i + 1
            while number_end_idx < len(code) and _is_valid_in_number(code[number_end_idx]):
                number_end_idx += 1
            tokens.append(Token(type=TokenType.NUMBER, lexeme=code[i:number_end_idx], position=i))
            i = number_end_idx - 1  # to account for += 1 later
        elif code[i] in SINGLE_CHAR_TOKENS:
            tokens.append(Token(type=SINGLE_CHAR_TOKENS[code[i]], lexeme=code[i], position=i))
        elif code[i].isspace():
            pass
        else:
            raise TokenizerError(f"Unexpected character: {code[i]!r}", code=code, error_char_idx=i)
        i += 1

    tokens.append(Token(type=TokenType.EXPR_END, lexeme="", position=len(code)))
    return tokens


def untokenize(tokens: list[Token]) -> str:
    return " ".join(t.lexeme for t in tokens if t.type is not TokenType.EXPR_END)
