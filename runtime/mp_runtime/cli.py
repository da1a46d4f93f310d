"""Command line driver: run an Mp file, or stdin when no file is given."""

import argparse
import logging
import sys
from typing import List, Optional

from termcolor import colored

from .config import RuntimeConfig
from .errors import MpError
from .host import ConsoleHost
from .runtime import MpRuntime
from .values import display

ERROR = "red"


def diagnose(source: str, error: MpError) -> Optional[str]:
    """Offending source line with a caret under the error column"""
    if error.span is None:
        return None
    lines = source.splitlines()
    if not 1 <= error.span.line <= len(lines):
        return None
    line = lines[error.span.line - 1]
    caret = " " * (error.span.column - 1) + colored("^", ERROR, attrs=["bold"])
    return f"  {line}\n  {caret}"


def report(source: str, error: MpError, name: str):
    """Print error to stderr as 'file:line:col: error: [CODE] message'"""
    location = name
    if error.span is not None:
        location += f":{error.span}"
    message = colored(f"{location}: ", attrs=["bold"])
    message += colored("error: ", ERROR, attrs=["bold"])
    message += f"[{error.code}] {error.message}"
    print(message, file=sys.stderr)

    diagnosis = diagnose(source, error)
    if diagnosis:
        print(diagnosis, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mp", description="Run an Mp program")
    parser.add_argument("file", nargs="?", help="source file to run (reads stdin if omitted)")
    parser.add_argument("--while-yields", action="store_true",
                        help="while loops yield an array of iteration values instead of nil")
    parser.add_argument("--recursion-limit", type=int, metavar="N",
                        help="host recursion limit for deeply recursive programs")
    parser.add_argument("--echo", action="store_true", help="print the program's result")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the mp console script"""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = RuntimeConfig.from_env()
    if args.while_yields:
        config.while_yields_values = True
    if args.recursion_limit is not None:
        config.recursion_limit = args.recursion_limit
    if args.echo:
        config.echo_result = True

    if config.recursion_limit is not None:
        sys.setrecursionlimit(config.recursion_limit)

    if args.file is not None:
        name = args.file
        try:
            with open(args.file, encoding="utf-8") as f:
                source = f.read()
        except OSError as e:
            print(colored("error: ", ERROR, attrs=["bold"]) + f"cannot read {args.file}: {e.strerror}",
                  file=sys.stderr)
            return 1
        # Program input() still comes from stdin
        host = ConsoleHost()
    else:
        name = "<stdin>"
        source = sys.stdin.read()
        # stdin holds the program itself, so input() sees end of stream
        host = ConsoleHost(stdin=_Exhausted())

    runtime = MpRuntime(config=config, host=host)
    try:
        result = runtime.execute(source)
    except MpError as e:
        report(source, e, name)
        return 1

    if config.echo_result:
        print(display(result))
    return 0


class _Exhausted:
    """Input stream that is always at end"""

    def readline(self) -> str:
        return ''


__all__ = ['main', 'build_parser', 'report', 'diagnose']
