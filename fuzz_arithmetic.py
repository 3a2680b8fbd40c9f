import math
import random
import re
import string
import warnings

from arithcalc.parser import parse
from arithcalc.runtime import evaluate
from arithcalc.tokenizer import CalcSyntaxError

warnings.filterwarnings("ignore")

# an operator (or line start) followed by + or - means a unary operator, which we don't support
UNARY_OPERATOR_PATT = r"(^|[-+*/^(])\s*[-+]"


def eval_py(code: str) -> float | str:
    try:
        return eval(code.replace("^", "**"))
    except Exception as e:
        return str(e)


def eval_my(code: str) -> float | str:
    try:
        return evaluate(parse(code))
    except CalcSyntaxError as e:
        return str(e)


if __name__ == "__main__":
    alphabet = string.digits + "()+-*/^ "

    def generate(length: int) -> str:
        return "".join(random.choices(alphabet, k=length))

    while True:
        code = generate(10)

        if re.findall(r"\*\s*\*", code):
            continue  # avoid generating python powers (10**4)

        if re.findall(r"/\s*/", code):
            continue  # avoid generating int devision (10 // 3)

        if code.count("^") > 1:
            continue  # 9^9^9 takes forever with python ints

        res_py = eval_py(code)
        res_my = eval_my(code)
        if isinstance(res_py, (int, float)) and isinstance(res_my, float):
            try:
                if math.isclose(float(res_py), res_my):
                    continue
            except OverflowError:
                if math.isinf(res_my):
                    continue
        if isinstance(res_py, str) and isinstance(res_my, (str, float)):
            continue  # python raises where we follow IEEE-754 (1/0), or rejects leading zeros
        if isinstance(res_my, str) and re.search(UNARY_OPERATOR_PATT, code):
            continue
        if isinstance(res_py, complex) and isinstance(res_my, float) and math.isnan(res_my):
            continue
        print(f"{code!r}\npy: {res_py}\nmy: {res_my}\n\n")
