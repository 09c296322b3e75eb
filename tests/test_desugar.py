from linger.ast import (
    Assign, BinaryOp, Block, BuiltinCall, Call, CompoundAssign, ExprStmt,
    ForStmt, Ident, IfChain, IfStmt, Lambda, Literal, ReturnStmt, UnaryOp,
    VarDecl, WhileStmt,
)
from linger.desugar import desugar, desugar_statement
from linger.parser import parse_program


def core_main(body_source):
    program = desugar(parse_program('proc main() {' + body_source + '}'))
    return program.main.body.statements


def num(n):
    return Literal(float(n))


def test_for_becomes_block_with_while():
    (stmt,) = core_main('for (let i = 0; i < 3; i = i + 1) { print(i); }')
    assert stmt == Block([
        VarDecl('i', num(0)),
        WhileStmt(
            BinaryOp('<', Ident('i'), num(3)),
            Block([
                ExprStmt(BuiltinCall('print', [Ident('i')])),
                Assign('i', BinaryOp('+', Ident('i'), num(1))),
            ]),
        ),
    ])


def test_for_matches_hand_written_while():
    lowered = core_main('for (let i = 0; i < 3; i = i + 1) { print(i); }')
    manual = core_main('{ let i = 0; while (i < 3) { print(i); i = i + 1; } }')
    assert lowered == manual


def test_compound_assignment():
    assert core_main('x += 2; x -= y;') == [
        Assign('x', BinaryOp('+', Ident('x'), num(2))),
        Assign('x', BinaryOp('-', Ident('x'), Ident('y'))),
    ]


def test_compound_step_in_for():
    (stmt,) = core_main('for (let i = 0; i < 3; i += 1) { }')
    loop = stmt.statements[1]
    assert loop.body.statements == [Assign('i', BinaryOp('+', Ident('i'), num(1)))]


def test_else_if_chain_is_right_nested():
    (stmt,) = core_main('if (a) { 1; } else if (b) { 2; } else if (c) { 3; } else { 4; }')
    assert stmt == IfStmt(
        Ident('a'),
        Block([ExprStmt(num(1))]),
        IfStmt(
            Ident('b'),
            Block([ExprStmt(num(2))]),
            IfStmt(Ident('c'), Block([ExprStmt(num(3))]), Block([ExprStmt(num(4))])),
        ),
    )


def test_else_if_without_else_has_no_synthetic_branch():
    (stmt,) = core_main('if (a) { } else if (b) { }')
    assert stmt == IfStmt(Ident('a'), Block([]), IfStmt(Ident('b'), Block([]), None))


def test_lambda_bodies_and_call_args_are_lowered():
    (stmt,) = core_main('f((x) -> { x += 1; return x; });')
    assert stmt == ExprStmt(Call(Ident('f'), [
        Lambda(['x'], Block([
            Assign('x', BinaryOp('+', Ident('x'), num(1))),
            ReturnStmt(Ident('x')),
        ])),
    ]))


def test_increments_are_kept():
    assert core_main('i++;') == [ExprStmt(UnaryOp('post++', Ident('i')))]


def test_no_sugar_survives():
    program = desugar(parse_program(
        'proc helper(n) { for (let i = 0; i < n; i++) { if (i == 1) { } else if (i == 2) { n -= 1; } } }'
        'proc main() { helper(3); }'
    ))
    seen = []

    def walk(node):
        seen.append(type(node))
        for value in vars(node).values():
            items = value if isinstance(value, (list, tuple)) else [value]
            for item in items:
                if hasattr(item, '__dataclass_fields__'):
                    walk(item)

    walk(program)
    assert ForStmt not in seen
    assert CompoundAssign not in seen
    assert IfChain not in seen
    assert IfStmt in seen


def test_core_nodes_pass_through():
    stmt = IfStmt(Ident('a'), Block([]), None)
    assert desugar_statement(stmt) == stmt
