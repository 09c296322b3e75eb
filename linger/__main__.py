"""CLI entry point for the Linger interpreter.

Usage:
    python -m linger [-v|-vv|-vvv] <program_file>
    python -m linger --tokens <program_file>
    python -m linger [-v...] --emit-ast <program_file>
    python -m linger [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the token stream of the given .ling file
  --emit-ast    Parse and desugar the given .ling file and emit the core AST as JSON
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. The value of `main` is printed on its own
line unless it is nil.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import ast_to_obj, program_from_obj
from .desugar import desugar
from .errors import LingerError
from .interpreter import Interpreter
from .parser import parse_program
from .tokens import tokenize
from .types import NIL, to_string

# Recursive Linger procedures recurse in the host interpreter too
sys.setrecursionlimit(10000)


def read_source(path: str) -> str:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as e:
        print(f"error opening {path}: {e.strerror or e}", file=sys.stderr)
        sys.exit(1)


class TrackingWriter:
    """Text sink that remembers the last character written through it."""
    def __init__(self, stream):
        self.stream = stream
        self.last = ''

    def write(self, text: str) -> int:
        if text:
            self.last = text[-1]
        return self.stream.write(text)

    def flush(self):
        self.stream.flush()


def emit_path(program_file: Path) -> Path:
    if program_file.suffix != '':
        return program_file.with_suffix(program_file.suffix + '.ast.json')
    return program_file.with_name(program_file.name + '.ast.json')


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='linger', description="Linger language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='LING_FILE', help='print the tokens of the given .ling file')
    group.add_argument('--emit-ast', metavar='LING_FILE', help='emit core AST JSON for the given .ling file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Linger program file (.ling) to execute')
    args = parser.parse_args(argv)

    try:
        # Token dump mode
        if args.tokens:
            for token in tokenize(read_source(args.tokens)):
                print(token)
            return

        # Emit AST mode
        if args.emit_ast:
            program = desugar(parse_program(read_source(args.emit_ast)))
            out_path = emit_path(Path(args.emit_ast))
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return

        # Execute from AST JSON
        if args.ast:
            try:
                data = json.loads(read_source(args.ast))
            except json.JSONDecodeError as e:
                print(f"invalid AST JSON in {args.ast}: {e}", file=sys.stderr)
                sys.exit(1)
            program = program_from_obj(data)
        else:
            if not args.program:
                parser.error('missing program file; or use --tokens/--emit-ast/--ast')
            program = desugar(parse_program(read_source(args.program)))

        sink = TrackingWriter(sys.stdout)
        interpreter = Interpreter(out=sink, debug_level=args.v)
        result = interpreter.run(program)
    except LingerError as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)

    if result is not NIL:
        # the result goes on its own line after any program output
        if sink.last not in ('', '\n'):
            print()
        print(to_string(result))


if __name__ == '__main__':
    main()
