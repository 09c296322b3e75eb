"""Recursive-descent parser for the Linger language.

The parser consumes the token list produced by `linger.tokens.tokenize` and
builds the *sugared* AST: `for` loops, `+=`/`-=` and `else if` chains are
kept as written and only lowered later by `linger.desugar`.

Statements are recognised by looking at their leading tokens. Expressions
are parsed with one method per precedence level, lowest first:

    ||  &&  == !=  < > <= >=  + -  * % /  unary  call/index  primary

Each binary level loops over operators of the same precedence, so all of
them associate to the left.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Set

from .ast import (
    Program, ProcDecl, ExprStmt, VarDecl, Assign, CompoundAssign, Block,
    IfChain, WhileStmt, ForStmt, BreakStmt, ContinueStmt, ReturnStmt,
    Literal, Ident, BinaryOp, UnaryOp, BuiltinCall, Call, Lambda, Index,
    Node, INCREMENT_OPS,
)
from .builtins import BUILTINS
from .errors import (
    ParseError, NoMain, MultipleSameNamedProcs, UnexpectedToken, UnexpectedEOF,
    Expected, KeywordAsVar, KeywordAsProc, KeywordAsParam, ExpectedStatement,
    ExpectedBlock, ExpectedAssignment, ExpectedAssignmentOrInitialization,
)
from .tokens import Token, IDENT, NUMBER, STRING, KEYWORD, tokenize
from .types import NIL


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tokens
        self.pos = 0

    # Token cursor helpers

    def peek(self, offset: int = 0) -> Optional[Token]:
        if self.pos + offset < len(self.tokens):
            return self.tokens[self.pos + offset]
        return None

    def match(self, expected: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        if token is None:
            return False
        return token.is_(expected)

    def match_any(self, expected: Sequence[str]) -> bool:
        return any(self.match(e) for e in expected)

    def consume(self, expected: str) -> Token:
        token = self.peek()
        if token is None:
            raise UnexpectedEOF()
        if not token.is_(expected):
            raise Expected(expected, token)
        self.pos += 1
        return token

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            raise UnexpectedEOF()
        self.pos += 1
        return token

    def unexpected(self) -> ParseError:
        """The error for the token under the cursor, or end of input."""
        token = self.peek()
        if token is None:
            return UnexpectedEOF()
        return UnexpectedToken(token)

    # Procedures

    def parse_program(self) -> Program:
        procedures: List[ProcDecl] = []
        seen: Set[str] = set()
        while self.peek() is not None:
            proc = self.parse_proc()
            if proc.name in seen:
                raise MultipleSameNamedProcs(proc.name)
            seen.add(proc.name)
            procedures.append(proc)
        if 'main' not in seen:
            raise NoMain()
        return Program(procedures)

    def parse_proc(self) -> ProcDecl:
        if not self.match('proc'):
            raise self.unexpected()
        self.consume('proc')
        name_token = self.advance()
        if name_token.kind == KEYWORD:
            raise KeywordAsProc(name_token.text)
        if name_token.kind != IDENT:
            raise UnexpectedToken(name_token)
        self.consume('(')
        params = self.parse_params()
        body = self.parse_body()
        return ProcDecl(name_token.text, params, body)

    def parse_params(self) -> List[str]:
        """Parse `p1, p2, ...)` after an opening parenthesis."""
        params: List[str] = []
        if self.match(')'):
            self.consume(')')
            return params
        while True:
            token = self.peek()
            if token is None:
                raise UnexpectedEOF()
            if token.kind == KEYWORD:
                raise KeywordAsParam(token.text)
            if token.kind != IDENT:
                raise UnexpectedToken(token)
            self.pos += 1
            params.append(token.text)
            if self.match(')'):
                self.consume(')')
                return params
            if self.match(',') and not self.match(')', 1):
                self.consume(',')
                continue
            raise self.unexpected()

    def parse_body(self) -> Block:
        if not self.match('{'):
            if self.peek() is None:
                raise UnexpectedEOF()
            raise ExpectedBlock(self.peek())
        return self.parse_block()

    # Statements

    def parse_block(self) -> Block:
        self.consume('{')
        statements: List[Node] = []
        while not self.match('}'):
            if self.peek() is None:
                raise UnexpectedEOF()
            statements.append(self.parse_statement())
        self.consume('}')
        return Block(statements)

    def parse_statement(self, terminated: bool = True) -> Node:
        """Parse one statement.

        `terminated` is false only for the step clause of a `for` header,
        which is closed by `)` instead of `;`.
        """
        token = self.peek()
        if token is None:
            raise UnexpectedEOF()
        if token.kind == KEYWORD and self.match('=', 1):
            raise KeywordAsVar(token.text, token)
        if token.is_('let') or token.is_('const'):
            return self.parse_var_decl(terminated)
        if token.is_('if'):
            return self.parse_if_stmt()
        if token.is_('while'):
            return self.parse_while_stmt()
        if token.is_('for'):
            return self.parse_for_stmt()
        if token.is_('return'):
            return self.parse_return_stmt()
        if token.is_('break'):
            self.consume('break')
            self.consume(';')
            return BreakStmt()
        if token.is_('continue'):
            self.consume('continue')
            self.consume(';')
            return ContinueStmt()
        if token.is_('{'):
            return self.parse_block()
        if token.kind == IDENT and self.match('=', 1):
            self.pos += 2
            value = self.parse_expression()
            self.end_statement(terminated)
            return Assign(token.text, value)
        if token.kind == IDENT and (self.match('+=', 1) or self.match('-=', 1)):
            op = self.tokens[self.pos + 1].text[0]
            self.pos += 2
            value = self.parse_expression()
            self.end_statement(terminated)
            return CompoundAssign(op, token.text, value)
        expr = self.parse_expression()
        self.end_statement(terminated)
        return ExprStmt(expr)

    def end_statement(self, terminated: bool):
        if terminated:
            self.consume(';')

    def parse_var_decl(self, terminated: bool = True) -> VarDecl:
        is_const = self.advance().text == 'const'
        name_token = self.peek()
        if name_token is None:
            raise UnexpectedEOF()
        if name_token.kind == KEYWORD:
            raise KeywordAsVar(name_token.text, name_token)
        if name_token.kind != IDENT:
            raise UnexpectedToken(name_token)
        self.pos += 1
        self.consume('=')
        expr = self.parse_expression()
        self.end_statement(terminated)
        return VarDecl(name_token.text, expr, is_const)

    def parse_if_stmt(self) -> IfChain:
        self.consume('if')
        self.consume('(')
        condition = self.parse_expression()
        self.consume(')')
        then_block = self.parse_body()
        else_ifs = []
        while self.match('else') and self.match('if', 1):
            self.pos += 2
            self.consume('(')
            else_if_condition = self.parse_expression()
            self.consume(')')
            else_ifs.append((else_if_condition, self.parse_body()))
        else_block = None
        if self.match('else'):
            self.consume('else')
            else_block = self.parse_body()
        return IfChain(condition, then_block, else_ifs, else_block)

    def parse_while_stmt(self) -> WhileStmt:
        self.consume('while')
        self.consume('(')
        condition = self.parse_expression()
        self.consume(')')
        body = self.parse_body()
        return WhileStmt(condition, body)

    def parse_for_stmt(self) -> ForStmt:
        self.consume('for')
        self.consume('(')
        if self.match(';'):
            raise ExpectedStatement(self.peek())
        init = self.parse_statement()
        if not is_assignment_or_initialization(init):
            raise ExpectedAssignmentOrInitialization()
        stop = self.parse_expression()
        self.consume(';')
        if self.match(')'):
            raise ExpectedStatement(self.peek())
        step = self.parse_statement(terminated=False)
        if not is_assignment(step):
            raise ExpectedAssignment()
        self.consume(')')
        body = self.parse_body()
        return ForStmt(init, stop, step, body)

    def parse_return_stmt(self) -> ReturnStmt:
        self.consume('return')
        if self.match(';'):
            self.consume(';')
            return ReturnStmt(None)
        value = self.parse_expression()
        self.consume(';')
        return ReturnStmt(value)

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_logic_or()

    def parse_binary(self, operand: Callable[[], Node], operators: Sequence[str]) -> Node:
        node = operand()
        while self.match_any(operators):
            op_token = self.advance()
            right = operand()
            node = BinaryOp(op_token.text, node, right)
        return node

    def parse_logic_or(self) -> Node:
        return self.parse_binary(self.parse_logic_and, ['||'])

    def parse_logic_and(self) -> Node:
        return self.parse_binary(self.parse_equality, ['&&'])

    def parse_equality(self) -> Node:
        return self.parse_binary(self.parse_comparison, ['==', '!='])

    def parse_comparison(self) -> Node:
        return self.parse_binary(self.parse_term, ['<', '>', '<=', '>='])

    def parse_term(self) -> Node:
        return self.parse_binary(self.parse_factor, ['+', '-'])

    def parse_factor(self) -> Node:
        return self.parse_binary(self.parse_unary, ['*', '%', '/'])

    def parse_unary(self) -> Node:
        if self.match_any(['-', '!']):
            op_token = self.advance()
            operand = self.parse_unary()
            return UnaryOp(op_token.text, operand)
        if self.match_any(['++', '--']):
            op_token = self.advance()
            operand = self.parse_postfix()
            return UnaryOp('pre' + op_token.text, operand)
        node = self.parse_postfix()
        if isinstance(node, Ident) and self.match_any(['++', '--']):
            op_token = self.advance()
            return UnaryOp('post' + op_token.text, node)
        return node

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        while True:
            if self.match('('):
                self.consume('(')
                args = self.parse_args()
                if isinstance(node, Ident) and node.name in BUILTINS:
                    node = BuiltinCall(node.name, args)
                else:
                    node = Call(node, args)
                continue
            if self.match('['):
                self.consume('[')
                index_expr = self.parse_expression()
                self.consume(']')
                node = Index(node, index_expr)
                continue
            break
        return node

    def parse_args(self) -> List[Node]:
        """Parse `a1, a2, ...)` after an opening parenthesis."""
        args: List[Node] = []
        if self.match(')'):
            self.consume(')')
            return args
        while True:
            args.append(self.parse_expression())
            if self.match(')'):
                self.consume(')')
                return args
            if self.match(',') and not self.match(')', 1):
                self.consume(',')
                continue
            raise self.unexpected()

    def parse_primary(self) -> Node:
        token = self.peek()
        if token is None:
            raise UnexpectedEOF()
        if token.kind == NUMBER or token.kind == STRING:
            self.pos += 1
            return Literal(token.value)
        if token.is_('true'):
            self.pos += 1
            return Literal(True)
        if token.is_('false'):
            self.pos += 1
            return Literal(False)
        if token.is_('nil'):
            self.pos += 1
            return Literal(NIL)
        if token.kind == KEYWORD:
            raise KeywordAsVar(token.text, token)
        if token.kind == IDENT:
            self.pos += 1
            return Ident(token.text)
        if token.is_('('):
            self.consume('(')
            params = self.try_parse_lambda_params()
            if params is not None:
                return Lambda(params, self.parse_body())
            expr = self.parse_expression()
            self.consume(')')
            return expr
        raise UnexpectedToken(token)

    def try_parse_lambda_params(self) -> Optional[List[str]]:
        """Trial-parse `p1, ...) ->` after `(`.

        Returns the parameter names with the arrow consumed, or None with the
        cursor restored when the tokens do not form a lambda header.
        """
        saved_pos = self.pos
        try:
            params = self.parse_params()
            self.consume('->')
            return params
        except ParseError:
            self.pos = saved_pos
            return None


def is_assignment(statement: Node) -> bool:
    if isinstance(statement, (Assign, CompoundAssign)):
        return True
    if isinstance(statement, ExprStmt):
        expr = statement.expr
        return isinstance(expr, UnaryOp) and expr.op in INCREMENT_OPS
    return False


def is_assignment_or_initialization(statement: Node) -> bool:
    return isinstance(statement, VarDecl) or is_assignment(statement)


def parse(tokens: Sequence[Token]) -> Program:
    """Parse a token list into a sugared Program."""
    return Parser(tokens).parse_program()


def parse_program(source: str) -> Program:
    """Tokenize and parse Linger source code into a sugared Program."""
    return parse(tokenize(source))
