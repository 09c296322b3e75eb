"""Tree-walking interpreter for the core Linger AST.

Statements evaluate to a `(value, Signal)` pair. A signal other than NORMAL
stops the enclosing block, which then writes its reassignments back into the
surrounding scope and hands the signal up unchanged. Loops consume BREAK and
CONTINUE; procedure calls consume RETURN. Whether a statement sits inside a
loop body is passed down explicitly, so a stray `break` or `continue` is
reported where it happens instead of unwinding silently.
"""

from __future__ import annotations

import math
import sys
from enum import Enum
from typing import Any, List, Optional, TextIO, Tuple

from .ast import (
    Program, ExprStmt, VarDecl, Assign, Block, IfStmt, WhileStmt,
    BreakStmt, ContinueStmt, ReturnStmt, Literal, Ident, BinaryOp, UnaryOp,
    BuiltinCall, Call, Lambda, Index, Node, INCREMENT_OPS,
)
from .builtins import BUILTINS
from .desugar import desugar
from .environment import Environment
from .errors import (
    ArgMismatch, BadArg, BadArgs, BinaryAsUnary, BreakNotInLoop,
    ContinueNotInLoop, DivisionByZero, ExpectedBool, ExpectedInteger,
    IndexOutOfBounds, InvalidAssignmentTarget, NotIndexable, UnaryAsBinary,
)
from .parser import parse_program
from .types import NIL, ProcVal, is_integral, is_number, to_string, values_equal


class Signal(Enum):
    NORMAL = 'normal'
    RETURN = 'return'
    BREAK = 'break'
    CONTINUE = 'continue'


ARITHMETIC_OPS = ('+', '-', '*', '/', '%')
COMPARISON_OPS = ('<', '>', '<=', '>=')
EQUALITY_OPS = ('==', '!=')
LOGICAL_OPS = ('&&', '||')
BINARY_OPS = ARITHMETIC_OPS + COMPARISON_OPS + EQUALITY_OPS + LOGICAL_OPS
UNARY_OPS = ('-', '!') + INCREMENT_OPS


class Interpreter:
    """Core interpreter that executes a desugared Linger program."""
    def __init__(self, out: Optional[TextIO] = None, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.out = out if out is not None else sys.stdout
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0 and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    # Public API
    def run(self, program: Program) -> Any:
        """Evaluate the body of `main` and return its value."""
        env = Environment.for_program(program.others)
        self.debug(f"run main with procedures {sorted(env.procedures)}")
        try:
            value, _ = self.execute(program.main.body, env, in_loop=False)
            return value
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    # Statements
    def execute(self, node: Node, env: Environment, in_loop: bool) -> Tuple[Any, Signal]:
        if isinstance(node, ExprStmt):
            return self.evaluate(node.expr, env), Signal.NORMAL
        if isinstance(node, VarDecl):
            value = self.evaluate(node.expr, env)
            env.insert_new(node.name, value, mutable=not node.is_const)
            if self.debug_level >= 2:
                kind = 'const' if node.is_const else 'let'
                self.debug(f"{kind} {node.name} = {to_string(value)}")
            return NIL, Signal.NORMAL
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.reassign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} = {to_string(value)}")
            return NIL, Signal.NORMAL
        if isinstance(node, Block):
            return self.execute_block(node, env, in_loop)
        if isinstance(node, IfStmt):
            cond = self.ensure_bool(self.evaluate(node.condition, env))
            if self.debug_level >= 3:
                self.debug(f"if condition -> {to_string(cond)}")
            if cond:
                return self.execute(node.then_block, env, in_loop)
            if node.else_block is not None:
                return self.execute(node.else_block, env, in_loop)
            return NIL, Signal.NORMAL
        if isinstance(node, WhileStmt):
            return self.execute_while(node, env)
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else NIL
            return value, Signal.RETURN
        if isinstance(node, BreakStmt):
            return NIL, Signal.BREAK
        if isinstance(node, ContinueStmt):
            return NIL, Signal.CONTINUE
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def execute_block(self, block: Block, env: Environment, in_loop: bool) -> Tuple[Any, Signal]:
        block_env = env.child()
        for stmt in block.statements:
            value, signal = self.execute(stmt, block_env, in_loop)
            if signal is Signal.NORMAL:
                continue
            if signal is Signal.BREAK and not in_loop:
                raise BreakNotInLoop()
            if signal is Signal.CONTINUE and not in_loop:
                raise ContinueNotInLoop()
            env.merge_reassignments(block_env)
            return value, signal
        env.merge_reassignments(block_env)
        return NIL, Signal.NORMAL

    def execute_while(self, node: WhileStmt, env: Environment) -> Tuple[Any, Signal]:
        while True:
            cond = self.ensure_bool(self.evaluate(node.condition, env))
            if self.debug_level >= 3:
                self.debug(f"while condition -> {to_string(cond)}")
            if not cond:
                return NIL, Signal.NORMAL
            value, signal = self.execute(node.body, env, in_loop=True)
            if signal is Signal.RETURN:
                return value, signal
            if signal is Signal.BREAK:
                return NIL, Signal.NORMAL

    # Expressions
    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Ident):
            return env.get(node.name)
        if isinstance(node, BinaryOp):
            return self.evaluate_binary(node, env)
        if isinstance(node, UnaryOp):
            return self.evaluate_unary(node, env)
        if isinstance(node, Lambda):
            return ProcVal('<lambda>', node.params, node.body, env.child())
        if isinstance(node, Call):
            return self.call_procedure(node, env)
        if isinstance(node, BuiltinCall):
            return self.call_builtin(node, env)
        if isinstance(node, Index):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            return self.index_value(target, index)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def evaluate_binary(self, node: BinaryOp, env: Environment) -> Any:
        op = node.op
        if op not in BINARY_OPS:
            if op in UNARY_OPS:
                raise UnaryAsBinary(op)
            raise NotImplementedError(f"unknown operator {op}")
        # && and || only evaluate the right operand when it decides the result
        if op in LOGICAL_OPS:
            left = self.evaluate(node.left, env)
            if not isinstance(left, bool):
                raise BadArg(left)
            if (op == '&&' and not left) or (op == '||' and left):
                return left
            right = self.evaluate(node.right, env)
            if not isinstance(right, bool):
                raise BadArg(right)
            return right
        left = self.evaluate(node.left, env)
        right = self.evaluate(node.right, env)
        return self.apply_binary_op(op, left, right)

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == '+':
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            if isinstance(a, list) and isinstance(b, list):
                return a + b
        if op in EQUALITY_OPS:
            if not any(isinstance(a, t) and isinstance(b, t) for t in (bool, float, str)):
                raise BadArgs([a, b])
            eq = values_equal(a, b)
            return eq if op == '==' else not eq
        if not is_number(a):
            raise BadArg(a) if op in ('+', '-') else BadArgs([a, b])
        if not is_number(b):
            raise BadArg(b) if op in ('+', '-') else BadArgs([a, b])
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0.0:
                raise DivisionByZero('/')
            return a / b
        if op == '%':
            if b == 0.0:
                raise DivisionByZero('%')
            # remainder takes the sign of the dividend
            return math.fmod(a, b)
        if op == '<':
            return a < b
        if op == '>':
            return a > b
        if op == '<=':
            return a <= b
        if op == '>=':
            return a >= b
        raise NotImplementedError(f"unknown operator {op}")

    def evaluate_unary(self, node: UnaryOp, env: Environment) -> Any:
        op = node.op
        if op in INCREMENT_OPS:
            return self.evaluate_increment(node, env)
        if op == '-':
            value = self.evaluate(node.operand, env)
            if not is_number(value):
                raise BadArg(value)
            return -value
        if op == '!':
            value = self.evaluate(node.operand, env)
            if not isinstance(value, bool):
                raise BadArg(value)
            return not value
        if op in BINARY_OPS:
            raise BinaryAsUnary(op)
        raise NotImplementedError(f"unknown operator {op}")

    def evaluate_increment(self, node: UnaryOp, env: Environment) -> float:
        if not isinstance(node.operand, Ident):
            raise InvalidAssignmentTarget()
        name = node.operand.name
        old = env.get(name)
        if not is_number(old):
            raise BadArg(old)
        new = old + 1.0 if node.op.endswith('++') else old - 1.0
        env.reassign(name, new)
        return new if node.op.startswith('pre') else old

    def call_procedure(self, node: Call, env: Environment) -> Any:
        name = node.func.name if isinstance(node.func, Ident) else '<lambda>'
        func = self.evaluate(node.func, env)
        if not isinstance(func, ProcVal):
            raise BadArg(func)
        if len(node.args) != len(func.params):
            raise ArgMismatch(name, len(func.params), len(node.args))
        args = [self.evaluate(arg, env) for arg in node.args]
        if self.debug_level >= 2:
            self.debug(f"call {name}({', '.join(to_string(a) for a in args)})")
        call_env = func.env.extend(zip(func.params, args))
        value, signal = self.execute(func.body, call_env, in_loop=False)
        if signal is Signal.RETURN:
            return value
        return NIL

    def call_builtin(self, node: BuiltinCall, env: Environment) -> Any:
        builtin = BUILTINS[node.name]
        if builtin.arity is not None and len(node.args) != builtin.arity:
            raise ArgMismatch(builtin.name, builtin.arity, len(node.args))
        args: List[Any] = [self.evaluate(arg, env) for arg in node.args]
        return builtin.fn(args, self.out)

    def index_value(self, target: Any, index: Any) -> Any:
        if not isinstance(target, (list, str)):
            raise NotIndexable(target)
        if not is_integral(index):
            raise ExpectedInteger(index)
        i = int(index)
        if i < 0 or i >= len(target):
            raise IndexOutOfBounds(i)
        return target[i]

    @staticmethod
    def ensure_bool(value: Any) -> bool:
        if not isinstance(value, bool):
            raise ExpectedBool(value)
        return value


def interpret(program: Program, out: Optional[TextIO] = None) -> Any:
    """Run a desugared program and return the value of `main`."""
    return Interpreter(out=out).run(program)


def run_program(source: str, out: Optional[TextIO] = None, debug_level: int = 0) -> Any:
    """Convenience function to parse, desugar and run Linger source code."""
    program = desugar(parse_program(source))
    interpreter = Interpreter(out=out, debug_level=debug_level)
    return interpreter.run(program)
