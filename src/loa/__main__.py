#!/usr/bin/env python3
"""
CLI for the Loa interpreter.

Usage:
    loa run FILE            Execute a Loa source file
    loa repl                Start the interactive interpreter
    loa tokens FILE         Print the token stream of a file
    loa ast FILE            Print the parsed syntax tree of a file
    loa help                Show commands
    loa --version | -V      Show the interpreter version

Colour output is disabled with --no-color or the NO_COLOR environment
variable.

Examples:
    python -m loa run examples/hello.loa
    python -m loa --no-color repl
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from termcolor import colored

from . import __version__


def _paint(text: str, color: str, args) -> str:
    return colored(text, color, attrs=["bold"], no_color=args.no_color or None)


def _read_source(args) -> Optional[str]:
    """Read the file named on the command line, reporting failures."""
    source_path = Path(args.file)
    if not source_path.is_file():
        print(f"{_paint('Error:', 'red', args)} File not found: {source_path}", file=sys.stderr)
        return None
    try:
        return source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"{_paint('Error:', 'red', args)} Cannot read {source_path}: {e}", file=sys.stderr)
        return None


def cmd_run(args):
    """Tokenize, parse and execute a Loa file."""
    from . import tokenize, parse, Interpreter, LexerError, LoaRuntimeError

    source = _read_source(args)
    if source is None:
        return 1

    try:
        tokens = tokenize(source)
    except LexerError as e:
        print(e, file=sys.stderr)
        return 1

    program = parse(tokens, source)
    if program is None:
        print(_paint("Failed to parse Loa code", "red", args), file=sys.stderr)
        return 1

    try:
        Interpreter().execute(program, source)
    except LoaRuntimeError as e:
        print(e, file=sys.stderr)
        return 1

    return 0


def cmd_tokens(args):
    """Print one token per line."""
    from . import tokenize, LexerError

    source = _read_source(args)
    if source is None:
        return 1

    try:
        tokens = tokenize(source)
    except LexerError as e:
        print(e, file=sys.stderr)
        return 1

    for token in tokens:
        print(f"{token.line:>4}  {token}")
    return 0


def cmd_ast(args):
    """Print the syntax tree of a file."""
    from . import tokenize, parse, print_ast, LexerError

    source = _read_source(args)
    if source is None:
        return 1

    try:
        program = parse(tokenize(source), source)
    except LexerError as e:
        print(e, file=sys.stderr)
        return 1

    if program is None:
        return 1
    try:
        print_ast(program)
    except RecursionError:
        print(f"{_paint('Error:', 'red', args)} Syntax tree too deep to print", file=sys.stderr)
        return 1
    return 0


def cmd_repl(args):
    """Start the interactive interpreter."""
    from .shell import Shell

    try:
        Shell(color=not args.no_color).cmdloop()
    except KeyboardInterrupt:
        print()
    return 0


def cmd_help(args):
    """Print the command summary."""
    sections = (
        ("Commands:", (
            ("run <file>", "Execute the specified Loa file"),
            ("repl", "Start the interactive interpreter"),
            ("tokens <file>", "Print the token stream of a file"),
            ("ast <file>", "Print the parsed syntax tree of a file"),
            ("help", "Show this message"),
        )),
        ("Options:", (
            ("-V, --version", "Show the interpreter version"),
            ("--no-color", "Disable coloured output"),
        )),
    )
    for title, entries in sections:
        print(_paint(title, "yellow", args))
        for name, text in entries:
            print(f"  {_paint(name.ljust(14), 'blue', args)} {text}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='loa',
        description='Loa language interpreter',
    )
    parser.add_argument('-V', '--version', action='store_true',
                        help='Show the interpreter version')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable coloured output')

    subparsers = parser.add_subparsers(dest='action')

    run_parser = subparsers.add_parser('run', help='Execute a Loa file')
    run_parser.add_argument('file', help='Loa source file')

    subparsers.add_parser('repl', help='Start the interactive interpreter')

    tokens_parser = subparsers.add_parser('tokens', help='Print the token stream of a file')
    tokens_parser.add_argument('file', help='Loa source file')

    ast_parser = subparsers.add_parser('ast', help='Print the syntax tree of a file')
    ast_parser.add_argument('file', help='Loa source file')

    subparsers.add_parser('help', help='Show commands')

    args = parser.parse_args(argv)

    if args.version:
        print(_paint(__version__, 'green', args))
        return 0

    if args.action == 'run':
        return cmd_run(args)
    elif args.action == 'repl':
        return cmd_repl(args)
    elif args.action == 'tokens':
        return cmd_tokens(args)
    elif args.action == 'ast':
        return cmd_ast(args)
    elif args.action == 'help':
        return cmd_help(args)
    else:
        print(f"{_paint('Usage:', 'red', args)} loa <command> [arguments]", file=sys.stderr)
        print("Use 'loa help' to list commands.", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
