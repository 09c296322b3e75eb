"""Error types raised by the Linger toolchain.

Every failure the lexer, parser or interpreter can produce derives from
`LingerError`, so callers (the CLI in particular) can report all of them the
same way. `kind` is the tag of the failure and `str(error)` is the message
shown to users.
"""

from __future__ import annotations

from typing import Any, List

from .types import to_string as _show


class LingerError(Exception):
    """Base class of all Linger failures."""
    stage = 'error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


###############################################################################
# Lex errors
###############################################################################


class LexError(LingerError):
    stage = 'lex'

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.line = line
        self.column = column


class UnknownToken(LexError):
    def __init__(self, text: str, line: int = 0, column: int = 0):
        super().__init__(f"unknown token: {text}", line, column)
        self.text = text


class UnterminatedStringLiteral(LexError):
    def __init__(self, line: int = 0, column: int = 0):
        super().__init__("unterminated string literal", line, column)


class InvalidEscapeSequence(LexError):
    def __init__(self, char: str, line: int = 0, column: int = 0):
        super().__init__(f'invalid escape sequence "\\{char}"', line, column)
        self.char = char


###############################################################################
# Parse errors
###############################################################################


class ParseError(LingerError):
    stage = 'parse'


class NoMain(ParseError):
    def __init__(self):
        super().__init__("main procedure not found")


class MultipleSameNamedProcs(ParseError):
    def __init__(self, name: str):
        super().__init__(f'multiple procedures with name "{name}"')
        self.name = name


class UnexpectedToken(ParseError):
    def __init__(self, token: Any):
        super().__init__(f'unexpected token "{token.text}" @ ({token.line}, {token.column})')
        self.token = token


class UnexpectedEOF(ParseError):
    def __init__(self):
        super().__init__("unexpected end of file")


class Expected(ParseError):
    def __init__(self, expected: str, token: Any):
        super().__init__(
            f'expected token "{expected}" @ ({token.line}, {token.column}), '
            f'instead got "{token.text}"'
        )
        self.expected = expected
        self.token = token


def _at(token: Any) -> str:
    if token is None:
        return ''
    return f' @ ({token.line}, {token.column})'


class KeywordAsVar(ParseError):
    def __init__(self, keyword: str, token: Any = None):
        super().__init__(f'keyword "{keyword}" used as variable{_at(token)}')
        self.keyword = keyword
        self.token = token


class KeywordAsProc(ParseError):
    def __init__(self, keyword: str):
        super().__init__(f'keyword "{keyword}" used as procedure name')
        self.keyword = keyword


class KeywordAsParam(ParseError):
    def __init__(self, keyword: str):
        super().__init__(f'keyword "{keyword}" used as parameter name')
        self.keyword = keyword


class ExpectedStatement(ParseError):
    def __init__(self, token: Any = None):
        got = f', instead got "{token.text}"' if token is not None else ''
        super().__init__(f"expected a statement{_at(token)}{got}")
        self.token = token


class ExpectedBlock(ParseError):
    def __init__(self, token: Any = None):
        got = f', instead got "{token.text}"' if token is not None else ''
        super().__init__(f"expected a block{_at(token)}{got}")
        self.token = token


class MalformedAst(ParseError):
    """A JSON document that does not describe a Linger program."""
    def __init__(self, reason: str):
        super().__init__(f"malformed AST: {reason}")
        self.reason = reason


class ExpectedAssignment(ParseError):
    def __init__(self):
        super().__init__("expected an assignment statement")


class ExpectedAssignmentOrInitialization(ParseError):
    def __init__(self):
        super().__init__("expected an assignment or initialization statement")


###############################################################################
# Runtime errors
###############################################################################


class EvalError(LingerError):
    stage = 'runtime'


class UnknownVariable(EvalError):
    def __init__(self, name: str):
        super().__init__(f'unknown variable "{name}"')
        self.name = name


class BadArg(EvalError):
    def __init__(self, value: Any):
        super().__init__(f'bad argument "{_show(value)}"')
        self.value = value


class BadArgs(EvalError):
    def __init__(self, values: List[Any]):
        super().__init__('bad args: [' + ', '.join(_show(v) for v in values) + ']')
        self.values = values


class ArgMismatch(EvalError):
    def __init__(self, name: str, expected: int, actual: int):
        super().__init__(f'procedure "{name}" expected {expected} args, instead got {actual}')
        self.name = name
        self.expected = expected
        self.actual = actual


class ExpectedBool(EvalError):
    def __init__(self, value: Any):
        super().__init__(f"expected boolean value, instead got {_show(value)}")
        self.value = value


class ExpectedInteger(EvalError):
    def __init__(self, value: Any):
        super().__init__(
            f'expected an integer but got "{_show(value)}", which is not an integer'
        )
        self.value = value


class ExpectedList(EvalError):
    def __init__(self, value: Any):
        super().__init__(f"expected a list, instead got {_show(value)}, which is not a list")
        self.value = value


class BinaryAsUnary(EvalError):
    def __init__(self, op: str):
        super().__init__(f'binary operator "{op}" used as unary operator')
        self.op = op


class UnaryAsBinary(EvalError):
    def __init__(self, op: str):
        super().__init__(f'unary operator "{op}" used as binary operator')
        self.op = op


class BreakNotInLoop(EvalError):
    def __init__(self):
        super().__init__("break statement found outside of a loop")


class ContinueNotInLoop(EvalError):
    def __init__(self):
        super().__init__("continue statement found outside of a loop")


class InvalidAssignmentTarget(EvalError):
    def __init__(self):
        super().__init__("invalid assignment target")


class ReassignConstant(EvalError):
    def __init__(self, name: str):
        super().__init__(f'cannot assign to "{name}" because it is a constant')
        self.name = name


class ReassignTopLevelProc(EvalError):
    def __init__(self, name: str):
        super().__init__(f'cannot assign to top-level procedure "{name}"')
        self.name = name


class NotIndexable(EvalError):
    def __init__(self, value: Any):
        super().__init__(f'"{_show(value)}" is not indexable')
        self.value = value


class IndexOutOfBounds(EvalError):
    def __init__(self, index: int):
        super().__init__(f"index {index} is out of bounds")
        self.index = index


class DivisionByZero(EvalError):
    def __init__(self, op: str = '/'):
        super().__init__("division by zero" if op == '/' else "modulo by zero")
        self.op = op
