"""Lowering of the sugared Linger AST into the core AST.

The rewrites are:

* `for (init; stop; step) { body }` becomes
  `{ init; while (stop) { body; step; } }`, so the loop variable lives in
  its own block and the step runs after the body on every iteration;
* `if (c) {..} else if (c1) {..} ... else {..}` becomes right-nested
  `IfStmt`s; without a final `else` the innermost `IfStmt` has no else
  branch at all;
* `x += e` / `x -= e` becomes `x = x + e` / `x = x - e`.

Everything else is copied node by node with its children lowered. Any tree
the parser can build can be lowered, so there is no failure path here.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Program, ProcDecl, ExprStmt, VarDecl, Assign, CompoundAssign, Block,
    IfChain, IfStmt, WhileStmt, ForStmt, BreakStmt, ContinueStmt, ReturnStmt,
    Literal, Ident, BinaryOp, UnaryOp, BuiltinCall, Call, Lambda, Index, Node,
)


def desugar(program: Program) -> Program:
    """Lower every procedure body of a sugared program."""
    return Program([desugar_proc(proc) for proc in program.procedures])


def desugar_proc(proc: ProcDecl) -> ProcDecl:
    return ProcDecl(proc.name, list(proc.params), desugar_block(proc.body))


def desugar_block(block: Block) -> Block:
    return Block(desugar_statements(block.statements))


def desugar_statements(statements: List[Node]) -> List[Node]:
    return [desugar_statement(s) for s in statements]


def desugar_statement(node: Node) -> Node:
    if isinstance(node, ExprStmt):
        return ExprStmt(desugar_expression(node.expr))
    if isinstance(node, VarDecl):
        return VarDecl(node.name, desugar_expression(node.expr), node.is_const)
    if isinstance(node, Assign):
        return Assign(node.name, desugar_expression(node.value))
    if isinstance(node, CompoundAssign):
        return Assign(
            node.name,
            BinaryOp(node.op, Ident(node.name), desugar_expression(node.value)),
        )
    if isinstance(node, Block):
        return desugar_block(node)
    if isinstance(node, IfChain):
        # fold the else-if branches from the last one outwards
        nested: Optional[Node] = None
        if node.else_block is not None:
            nested = desugar_block(node.else_block)
        for condition, block in reversed(node.else_ifs):
            nested = IfStmt(desugar_expression(condition), desugar_block(block), nested)
        return IfStmt(desugar_expression(node.condition), desugar_block(node.then_block), nested)
    if isinstance(node, IfStmt):
        else_block = desugar_statement(node.else_block) if node.else_block is not None else None
        return IfStmt(desugar_expression(node.condition), desugar_statement(node.then_block), else_block)
    if isinstance(node, WhileStmt):
        return WhileStmt(desugar_expression(node.condition), desugar_block(node.body))
    if isinstance(node, ForStmt):
        loop_body = desugar_statements(node.body.statements)
        loop_body.append(desugar_statement(node.step))
        loop = WhileStmt(desugar_expression(node.stop), Block(loop_body))
        return Block([desugar_statement(node.init), loop])
    if isinstance(node, ReturnStmt):
        value = desugar_expression(node.value) if node.value is not None else None
        return ReturnStmt(value)
    if isinstance(node, BreakStmt):
        return BreakStmt()
    if isinstance(node, ContinueStmt):
        return ContinueStmt()
    raise NotImplementedError(f"desugar: unexpected statement type {type(node).__name__}")


def desugar_expression(node: Node) -> Node:
    if isinstance(node, Literal):
        return Literal(node.value)
    if isinstance(node, Ident):
        return Ident(node.name)
    if isinstance(node, BinaryOp):
        return BinaryOp(node.op, desugar_expression(node.left), desugar_expression(node.right))
    if isinstance(node, UnaryOp):
        return UnaryOp(node.op, desugar_expression(node.operand))
    if isinstance(node, BuiltinCall):
        return BuiltinCall(node.name, [desugar_expression(a) for a in node.args])
    if isinstance(node, Call):
        return Call(desugar_expression(node.func), [desugar_expression(a) for a in node.args])
    if isinstance(node, Lambda):
        return Lambda(list(node.params), desugar_block(node.body))
    if isinstance(node, Index):
        return Index(desugar_expression(node.target), desugar_expression(node.index))
    raise NotImplementedError(f"desugar: unexpected expression type {type(node).__name__}")
