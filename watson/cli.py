"""
Watson command line

Usage:
    watson run <file|-> [--trace] [--no-color]
    watson disasm <file|->
    watson asm <file|-> [-o <output>]
    watson --version

Options:
    -v, --verbose        Debug logging
    --trace              Log every op as it runs
    -o, --output FILE    Where assembled bytes go (stdout by default)
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import BinaryIO, Sequence

from watson import __version__
from watson.debug_utils.pprint import format_value
from watson.errors import WatsonError
from watson.interpreter import Interpreter
from watson.log import setup_logging
from watson.reader.lexer import Lexer
from watson.vm.asm import assemble, disassemble, parse_op_names

logger = logging.getLogger(__name__)


def _open_input(path: str) -> BinaryIO:
    if path == '-':
        return sys.stdin.buffer
    return open(path, 'rb')


def cmd_run(args) -> int:
    interp = Interpreter(trace=args.trace or None)
    stream = _open_input(args.input)
    try:
        value = interp.run(stream)
    except WatsonError as err:
        where = f"byte {err.offset}" if err.offset is not None else "end of program"
        op = f" ({err.op.name})" if err.op is not None else ""
        print(f"error at {where}{op}: {err}", file=sys.stderr)
        return 1
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()
    print(format_value(value, color=args.color and sys.stdout.isatty()))
    return 0


def cmd_disasm(args) -> int:
    stream = _open_input(args.input)
    try:
        ops = list(Lexer(stream))
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()
    if ops:
        print(disassemble(ops))
    return 0


def cmd_asm(args) -> int:
    stream = _open_input(args.input)
    try:
        source = stream.read().decode('utf-8')
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()
    try:
        ops = parse_op_names(source)
    except WatsonError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    data = assemble(ops)
    if args.output:
        with open(args.output, 'wb') as f:
            f.write(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    logger.info("assembled %d op(s)", len(ops))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='watson', description='Watson bytecode interpreter')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    p_run = sub.add_parser('run', help='run a program and print the top of the stack')
    p_run.add_argument('input', help="program file, or '-' for stdin")
    p_run.add_argument('--trace', action='store_true', help='log every op')
    p_run.add_argument('--no-color', dest='color', action='store_false', help='plain output')
    p_run.set_defaults(func=cmd_run)

    p_dis = sub.add_parser('disasm', help='list the ops of a program')
    p_dis.add_argument('input', help="program file, or '-' for stdin")
    p_dis.set_defaults(func=cmd_disasm)

    p_asm = sub.add_parser('asm', help='assemble op names into a program')
    p_asm.add_argument('input', help="op name listing, or '-' for stdin")
    p_asm.add_argument('-o', '--output', help='output file (default: stdout)')
    p_asm.set_defaults(func=cmd_asm)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose or getattr(args, 'trace', False) else None)
    try:
        return args.func(args)
    except UnicodeDecodeError as err:
        print(f"error: {args.input} is not UTF-8 text: {err.reason}", file=sys.stderr)
        return 1
    except OSError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
