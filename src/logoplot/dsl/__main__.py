#!/usr/bin/env python3
"""
CLI for the logoplot turtle language.

Usage:
    python -m logoplot.dsl run FILE OUTPUT [WIDTH HEIGHT] [--contain-block-errors]
    python -m logoplot.dsl check FILE [--ast] [--json]
    python -m logoplot.dsl tokens FILE

Examples:
    # Check syntax
    python -m logoplot.dsl check examples/square.lg

    # Draw on the default 500 x 500 canvas, writing square.dxf
    python -m logoplot.dsl run examples/square.lg square

    # Draw on a larger canvas with debug logging
    python -m logoplot.dsl -v run examples/spiral.lg spiral.dxf 800 800
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from ..drawable import DEFAULT_WIDTH, DEFAULT_HEIGHT

logger = logging.getLogger("logoplot")


def configure_logging(verbose: bool) -> logging.Handler:
    """Send logoplot log records to stderr; returns the installed handler."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return handler


def read_source(path_arg: str):
    """Read a script, or report why it can't be read and return None."""
    source_path = Path(path_arg)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return None
    return source_path.read_text()


def cmd_tokens(args):
    """Print the token stream of a file with positions."""
    from . import Lexer, TokenType

    source = read_source(args.file)
    if source is None:
        return 1

    errors = 0
    for token in Lexer(source, args.file):
        marker = ""
        if token.type == TokenType.ERROR:
            marker = "  <-- unrecognized input"
            errors += 1
        print(f"{token.span.start.line}:{token.span.start.column}\t{token.type.name}\t{token.lexeme!r}{marker}")

    return 1 if errors else 0


def cmd_check(args):
    """Check a file for syntax errors."""
    from . import parse_source, print_ast, ParserError, DiagnosticCollector

    source = read_source(args.file)
    if source is None:
        return 1

    try:
        program = parse_source(source, args.file)
    except ParserError as e:
        if args.json:
            diagnostics = DiagnosticCollector()
            diagnostics.add_error(e)
            print(json.dumps(diagnostics.to_json(), indent=2))
        else:
            print(str(e), file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(DiagnosticCollector().to_json(), indent=2))
    else:
        print(f"OK: {Path(args.file).name} - {len(program.statements)} statement(s), no errors")
    if args.ast:
        print_ast(program)
    return 0


def cmd_run(args):
    """Run a file and write the drawing to a DXF file."""
    from . import parse_source, Interpreter, ParserError
    from ..ezdxf_drawable import ezdxfDraw

    if (args.width is None) != (args.height is None):
        print("Error: WIDTH and HEIGHT must be given together", file=sys.stderr)
        return 1
    width = DEFAULT_WIDTH if args.width is None else args.width
    height = DEFAULT_HEIGHT if args.height is None else args.height

    source = read_source(args.file)
    if source is None:
        return 1

    try:
        canvas = ezdxfDraw(width, height)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        program = parse_source(source, args.file)
    except ParserError as e:
        print(str(e), file=sys.stderr)
        return 1

    interpreter = Interpreter(canvas, contain_block_errors=args.contain_block_errors)
    result = interpreter.run(program, source)

    if result.diagnostics.diagnostics:
        print(result.diagnostics.format_all(), file=sys.stderr)
    if not result.success:
        return 1

    canvas.saveas(args.output)
    name = canvas.display()
    print(f"OK: {len(canvas.segments)} segment(s) written to {name}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='python -m logoplot.dsl',
        description='logoplot turtle language runner',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log interpreter activity to stderr')

    subparsers = parser.add_subparsers(dest='action', required=True)

    # run command
    run_parser = subparsers.add_parser('run', help='Run a script and save the drawing as DXF')
    run_parser.add_argument('file', help='Turtle source file')
    run_parser.add_argument('output', help='Output file (.dxf is appended if missing)')
    run_parser.add_argument('width', nargs='?', type=int, help=f'Canvas width (default {DEFAULT_WIDTH})')
    run_parser.add_argument('height', nargs='?', type=int, help=f'Canvas height (default {DEFAULT_HEIGHT})')
    run_parser.add_argument('--contain-block-errors', action='store_true',
                            help='Report errors inside IF blocks as warnings and carry on')

    # check command
    check_parser = subparsers.add_parser('check', help='Check a script for syntax errors')
    check_parser.add_argument('file', help='Turtle source file')
    check_parser.add_argument('--ast', action='store_true', help='Print the parsed tree')
    check_parser.add_argument('--json', action='store_true', help='Print diagnostics as JSON')

    # tokens command
    tokens_parser = subparsers.add_parser('tokens', help='Print the token stream of a script')
    tokens_parser.add_argument('file', help='Turtle source file')

    args = parser.parse_args(argv)
    handler = configure_logging(args.verbose)
    try:
        if args.action == 'run':
            return cmd_run(args)
        elif args.action == 'check':
            return cmd_check(args)
        elif args.action == 'tokens':
            return cmd_tokens(args)
        else:
            parser.print_help()
            return 1
    finally:
        logger.removeHandler(handler)


if __name__ == '__main__':
    sys.exit(main())
