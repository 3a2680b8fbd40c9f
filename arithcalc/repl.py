import argparse
import sys
from typing import Callable, Iterable, Optional

try:
    import readline

    is_rl_available = True
except ModuleNotFoundError:
    is_rl_available = False

from arithcalc.expression import format_expression
from arithcalc.parser import parse
from arithcalc.runtime import CalcRuntimeError, evaluate, format_result
from arithcalc.tokenizer import CalcSyntaxError

__version__ = "0.1.0"

PROMPT = ">> "
DEFAULT_HISTORY_FILE = "history.txt"

FEATURES = """\
operators, from loosest to tightest binding:
  +  addition          -  subtraction      (left-associative)
  *  multiplication    /  division         (left-associative)
  ^  power                                 (right-associative)
parentheses group sub-expressions; numbers are non-negative integers"""


def evaluate_line(line: str, strict: bool = False, show_tree: bool = False) -> str:
    expression = parse(line)
    result = format_result(evaluate(expression, strict=strict))
    if show_tree:
        return f"{format_expression(expression)}\n{result}"
    return result


def run(read_line: Callable[[str], str] = input, strict: bool = False, show_tree: bool = False) -> None:
    """Interactive loop, ends on Ctrl-C or Ctrl-D"""
    while True:
        try:
            line = read_line(PROMPT)
        except KeyboardInterrupt:
            print("CTRL-C")
            break
        except EOFError:
            print("CTRL-D")
            break

        try:
            print(evaluate_line(line, strict=strict, show_tree=show_tree))
        except (CalcSyntaxError, CalcRuntimeError) as e:
            print(e)


def run_batch(lines: Iterable[str], strict: bool = False, show_tree: bool = False) -> int:
    failed = False
    for line in lines:
        try:
            print(evaluate_line(line.rstrip("\n"), strict=strict, show_tree=show_tree))
        except (CalcSyntaxError, CalcRuntimeError) as e:
            print(e)
            failed = True
    return 1 if failed else 0


def load_history(path: str) -> None:
    try:
        readline.read_history_file(path)
    except FileNotFoundError:
        print("No previous history.")
    except OSError as e:
        print(f"Could not load history from {path}: {e}")


def save_history(path: str) -> None:
    try:
        readline.write_history_file(path)
    except OSError as e:
        print(f"Could not save history to {path}: {e}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="arithcalc",
        description="an interactive arithmetic calculator",
        epilog=FEATURES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--history-file", default=DEFAULT_HISTORY_FILE, help="where to keep the command history")
    parser.add_argument("--no-history", action="store_true", help="neither load nor save the command history")
    parser.add_argument("--strict", action="store_true", help="report division by zero and overflow as errors")
    parser.add_argument("--show-tree", action="store_true", help="print the parsed expression before its value")
    parser.add_argument("-v", "--version", action="version", version=f"arithcalc {__version__}")
    args = parser.parse_args(argv)

    if not sys.stdin.isatty():
        return run_batch(sys.stdin, strict=args.strict, show_tree=args.show_tree)

    keep_history = is_rl_available and not args.no_history
    if keep_history:
        load_history(args.history_file)
    try:
        run(strict=args.strict, show_tree=args.show_tree)
    finally:
        if keep_history:
            save_history(args.history_file)
    return 0
