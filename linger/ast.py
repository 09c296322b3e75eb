"""Abstract Syntax Tree (AST) definitions for the Linger language.

The parser produces a *sugared* tree. The desugarer lowers it into a *core*
tree that the interpreter executes. Both trees are built from the classes in
this module; the sugar-only classes are `ForStmt`, `CompoundAssign` and
`IfChain`, and the core-only class is `IfStmt`. Every other class appears in
both trees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Any

from .errors import NoMain


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class ProcDecl(Node):
    name: str
    params: List[str]
    body: 'Block'


@dataclass
class Program(Node):
    procedures: List[ProcDecl] = field(default_factory=list)

    @property
    def main(self) -> ProcDecl:
        for proc in self.procedures:
            if proc.name == 'main':
                return proc
        raise NoMain()

    @property
    def others(self) -> List[ProcDecl]:
        return [proc for proc in self.procedures if proc.name != 'main']


# Statements


@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class VarDecl(Node):
    name: str
    expr: Node
    is_const: bool = False


@dataclass
class Assign(Node):
    name: str
    value: Node


@dataclass
class CompoundAssign(Node):
    """`name += value` or `name -= value` (sugar)."""
    op: str  # '+' or '-'
    name: str
    value: Node


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class IfChain(Node):
    """`if` with any number of `else if` branches and an optional `else` (sugar)."""
    condition: Node
    then_block: Block
    else_ifs: List[Tuple[Node, Block]]
    else_block: Optional[Block]


@dataclass
class IfStmt(Node):
    """Core conditional; `else_block` may itself be an IfStmt."""
    condition: Node
    then_block: Node
    else_block: Optional[Node]


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Block


@dataclass
class ForStmt(Node):
    """`for (init; stop; step) { body }` (sugar)."""
    init: Node
    stop: Node
    step: Node
    body: Block


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class ContinueStmt(Node):
    pass


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


# Expressions


@dataclass
class Literal(Node):
    value: Any  # float, bool, str or NIL


@dataclass
class Ident(Node):
    name: str


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    # '-', '!', 'pre++', 'pre--', 'post++', 'post--'
    op: str
    operand: Node


@dataclass
class BuiltinCall(Node):
    name: str
    args: List[Node]


@dataclass
class Call(Node):
    func: Node
    args: List[Node]


@dataclass
class Lambda(Node):
    params: List[str]
    body: Block


@dataclass
class Index(Node):
    target: Node
    index: Node


INCREMENT_OPS = ('pre++', 'pre--', 'post++', 'post--')
