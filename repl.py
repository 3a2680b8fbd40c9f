import sys

from arithcalc.repl import main

if __name__ == "__main__":
    sys.exit(main())
