from arithcalc.expression import format_expression
from arithcalc.parser import ParserError, parse_tokens
from arithcalc.runtime import CalcRuntimeError, evaluate, format_result
from arithcalc.tokenizer import TokenizerError, tokenize, untokenize

for code in [
    "5",
    "1 + 1",
    "4 + 6 * 3",
    "(4 + 6)",
    "(4+6) * 3",
    "8 - 3 - 2",
    "2 ^ 3 ^ 2",
    "7/6/2000",
    "1 / 0",
    "0 / 0",
    "(0 - 8) ^ (1 / 3)",
    "10 ^ 400",
    "(1 + 14 * (54^2))",
    "-1",
    "2 +",
    "(1 + 2",
    "1 + 2)",
    "1.5",
    "",
]:
    print("=" * 10)
    print(f"code: {code!r}")
    try:
        tokens = tokenize(code)
    except TokenizerError as e:
        print(e)
        continue

    print(f"tokens: {' '.join(str(t) for t in tokens)}")
    print(f"untokenized: {untokenize(tokens)!r}")

    try:
        expression = parse_tokens(tokens, code)
    except ParserError as e:
        print(e)
        continue
    print(f"ast: {expression}")
    print(f"parenthesized: {format_expression(expression)}")

    print(f"result: {format_result(evaluate(expression))}")
    try:
        print(f"strict result: {format_result(evaluate(expression, strict=True))}")
    except CalcRuntimeError as e:
        print(f"strict result: {e}")
