# Linger language package
# This package provides a parser, desugarer and interpreter for the Linger language.
from .errors import LingerError
from .interpreter import Interpreter, interpret, run_program
from .parser import parse_program
from .desugar import desugar

__all__ = [
    'run_program',
    'interpret',
    'parse_program',
    'desugar',
    'Interpreter',
    'LingerError',
]
