"""
Read-eval-print loop and command line entry point for a2lisp.

Transcript per top-level form: the prompt, then a newline, the printed value
and a newline; or a `*** message` line when the form fails. A failing form is
abandoned and the loop reads the next one.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from a2lisp import config
from a2lisp.errors import LispAllocationExhausted, LispError
from a2lisp.interpreter import Interpreter

logger = logging.getLogger(__name__)

PROMPT = "> "
ERROR_PREFIX = "*** "


def run(interp: Interpreter, stdin: TextIO, stdout: TextIO, prompt: str = PROMPT) -> int:
    """Run the loop until end of input; return the number of forms that failed.

    LispAllocationExhausted is not handled here.
    """
    reader = interp.reader(stdin)
    failures = 0
    while True:
        stdout.write(prompt)
        stdout.flush()
        try:
            expr = reader.read()
            if expr is None:
                stdout.write("\n")
                break
            interp.last_value = result = interp.evaluate(expr)
            stdout.write("\n")
            stdout.write(interp.write(result))
            stdout.write("\n")
        except LispAllocationExhausted:
            raise
        except LispError as ex:
            failures += 1
            logger.debug("Form abandoned: %s", ex)
            stdout.write(f"{ERROR_PREFIX}{ex}\n")
        except RecursionError:
            failures += 1
            logger.debug("Form abandoned: recursion too deep")
            stdout.write(f"{ERROR_PREFIX}Recursion too deep.\n")
    return failures


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="a2lisp", description="A tiny S-expression interpreter")
    parser.add_argument("files", nargs="*", help="source files to run instead of reading stdin")
    parser.add_argument("--load", action="append", default=[], metavar="FILE",
                        help="evaluate FILE silently before starting (repeatable)")
    parser.add_argument("--heap-cells", type=int, default=None, metavar="N",
                        help="initial heap capacity in cells")
    parser.add_argument("--max-heap-cells", type=int, default=None, metavar="N",
                        help="heap capacity ceiling in cells")
    parser.add_argument("--no-prompt", action="store_true", help="do not print the prompt")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level or config.get_log_level(),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.setrecursionlimit(max(sys.getrecursionlimit(), config.get_recursion_limit()))

    prompt = "" if args.no_prompt else PROMPT
    try:
        interp = Interpreter(args.heap_cells, args.max_heap_cells)
        for path in args.load:
            interp.load(path)
        if not args.files:
            run(interp, sys.stdin, sys.stdout, prompt)
            return 0
        for path in args.files:
            with open(path, encoding="ascii", errors="replace") as stream:
                run(interp, stream, sys.stdout, prompt)
        return 0
    except LispAllocationExhausted as ex:
        logger.critical("%s", ex)
        sys.stdout.write(f"{ERROR_PREFIX}{ex}\n")
        return 1
    except (LispError, OSError) as ex:
        # errors while loading --load files
        logger.error("%s", ex)
        sys.stderr.write(f"{ERROR_PREFIX}{ex}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
