"""JSON serialization/deserialization for the Linger AST.

This module converts between Linger AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Both the sugared and the
core node types round-trip; the CLI uses it to dump the core program
(`--emit-ast`) and to run such a dump again (`--ast`). `nil` literals are
stored as JSON `null`.
"""

from __future__ import annotations

from typing import Any

from .ast import (
    Program,
    ProcDecl,
    ExprStmt,
    VarDecl,
    Assign,
    CompoundAssign,
    Block,
    IfChain,
    IfStmt,
    WhileStmt,
    ForStmt,
    BreakStmt,
    ContinueStmt,
    ReturnStmt,
    Literal,
    Ident,
    BinaryOp,
    UnaryOp,
    BuiltinCall,
    Call,
    Lambda,
    Index,
)
from .builtins import BUILTINS
from .errors import MalformedAst, NoMain
from .types import NIL


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None:
        return None
    if isinstance(node, (float, str, bool)):
        return node

    # Node types
    if isinstance(node, Program):
        return {"type": "Program", "procedures": [ast_to_obj(p) for p in node.procedures]}
    if isinstance(node, ProcDecl):
        return {
            "type": "ProcDecl",
            "name": node.name,
            "params": list(node.params),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, VarDecl):
        return {
            "type": "VarDecl",
            "name": node.name,
            "expr": ast_to_obj(node.expr),
            "is_const": node.is_const,
        }
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, CompoundAssign):
        return {"type": "CompoundAssign", "op": node.op, "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, IfChain):
        return {
            "type": "IfChain",
            "condition": ast_to_obj(node.condition),
            "then_block": ast_to_obj(node.then_block),
            "else_ifs": [[ast_to_obj(c), ast_to_obj(b)] for (c, b) in node.else_ifs],
            "else_block": ast_to_obj(node.else_block),
        }
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_block": ast_to_obj(node.then_block),
            "else_block": ast_to_obj(node.else_block),
        }
    if isinstance(node, WhileStmt):
        return {"type": "WhileStmt", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, ForStmt):
        return {
            "type": "ForStmt",
            "init": ast_to_obj(node.init),
            "stop": ast_to_obj(node.stop),
            "step": ast_to_obj(node.step),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, BreakStmt):
        return {"type": "BreakStmt"}
    if isinstance(node, ContinueStmt):
        return {"type": "ContinueStmt"}
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "value": ast_to_obj(node.value)}
    if isinstance(node, Literal):
        value = None if node.value is NIL else ast_to_obj(node.value)
        return {"type": "Literal", "value": value}
    if isinstance(node, Ident):
        return {"type": "Ident", "name": node.name}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, BuiltinCall):
        return {"type": "BuiltinCall", "name": node.name, "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, Call):
        return {"type": "Call", "func": ast_to_obj(node.func), "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, Lambda):
        return {"type": "Lambda", "params": list(node.params), "body": ast_to_obj(node.body)}
    if isinstance(node, Index):
        return {"type": "Index", "target": ast_to_obj(node.target), "index": ast_to_obj(node.index)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (str, bool)):
        return obj
    # JSON has a single number type; Linger numbers are always floats
    if isinstance(obj, (int, float)):
        return float(obj)
    if not isinstance(obj, dict):
        raise MalformedAst(f"expected a node object, instead got {type(obj).__name__}")
    t = obj.get("type")
    if t == "Program":
        return Program(procedures=[ast_from_obj(p) for p in obj["procedures"]])
    if t == "ProcDecl":
        return ProcDecl(name=obj["name"], params=list(obj["params"]), body=ast_from_obj(obj["body"]))
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]))
    if t == "VarDecl":
        return VarDecl(
            name=obj["name"],
            expr=ast_from_obj(obj["expr"]),
            is_const=bool(obj.get("is_const", False)),
        )
    if t == "Assign":
        return Assign(name=obj["name"], value=ast_from_obj(obj["value"]))
    if t == "CompoundAssign":
        return CompoundAssign(op=obj["op"], name=obj["name"], value=ast_from_obj(obj["value"]))
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "IfChain":
        return IfChain(
            condition=ast_from_obj(obj["condition"]),
            then_block=ast_from_obj(obj["then_block"]),
            else_ifs=[(ast_from_obj(c), ast_from_obj(b)) for (c, b) in obj.get("else_ifs", [])],
            else_block=ast_from_obj(obj.get("else_block")),
        )
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_block=ast_from_obj(obj["then_block"]),
            else_block=ast_from_obj(obj.get("else_block")),
        )
    if t == "WhileStmt":
        return WhileStmt(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "ForStmt":
        return ForStmt(
            init=ast_from_obj(obj["init"]),
            stop=ast_from_obj(obj["stop"]),
            step=ast_from_obj(obj["step"]),
            body=ast_from_obj(obj["body"]),
        )
    if t == "BreakStmt":
        return BreakStmt()
    if t == "ContinueStmt":
        return ContinueStmt()
    if t == "ReturnStmt":
        return ReturnStmt(value=ast_from_obj(obj.get("value")))
    if t == "Literal":
        value = obj.get("value")
        return Literal(value=NIL if value is None else ast_from_obj(value))
    if t == "Ident":
        return Ident(name=obj["name"])
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "UnaryOp":
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]))
    if t == "BuiltinCall":
        if obj["name"] not in BUILTINS:
            raise MalformedAst(f"unknown builtin {obj['name']!r}")
        return BuiltinCall(name=obj["name"], args=[ast_from_obj(a) for a in obj["args"]])
    if t == "Call":
        return Call(func=ast_from_obj(obj["func"]), args=[ast_from_obj(a) for a in obj["args"]])
    if t == "Lambda":
        return Lambda(params=list(obj["params"]), body=ast_from_obj(obj["body"]))
    if t == "Index":
        return Index(target=ast_from_obj(obj["target"]), index=ast_from_obj(obj["index"]))

    raise MalformedAst(f"unknown node type {t!r}")


def program_from_obj(obj: Any) -> Program:
    """Rebuild a Program from decoded JSON, rejecting anything else."""
    try:
        program = ast_from_obj(obj)
    except KeyError as e:
        raise MalformedAst(f"missing field {e.args[0]!r}") from None
    except (TypeError, ValueError, AttributeError) as e:
        raise MalformedAst(str(e)) from None
    if not isinstance(program, Program):
        raise MalformedAst("top-level node is not a Program")
    for proc in program.procedures:
        if not isinstance(proc, ProcDecl):
            raise MalformedAst("program contains a non-procedure node")
        if not isinstance(proc.body, Block):
            raise MalformedAst(f"body of procedure {proc.name!r} is not a block")
    if not any(proc.name == 'main' for proc in program.procedures):
        raise NoMain()
    return program
