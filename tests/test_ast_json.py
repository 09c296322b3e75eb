import json

import pytest

from linger.ast import Literal, Program
from linger.ast_json import ast_from_obj, ast_to_obj, program_from_obj
from linger.desugar import desugar
from linger.errors import LingerError, MalformedAst, NoMain
from linger.interpreter import interpret
from linger.parser import parse_program
from linger.types import NIL

SOURCE = '''
proc pick(xs, i) {
    if (i < 0) {
        return nil;
    } else if (i == 0) {
        return head(xs);
    }
    return xs[i];
}

proc main() {
    const f = (a, b) -> { return a + b; };
    let total = 0;
    for (let i = 0; i < 3; i += 1) {
        total = f(total, pick(list(1, 2, 3), i));
    }
    print(total, "done", !false, -total);
}
'''


@pytest.mark.parametrize('lower', [False, True])
def test_round_trip_through_json_text(lower):
    program = parse_program(SOURCE)
    if lower:
        program = desugar(program)
    text = json.dumps(ast_to_obj(program))
    assert ast_from_obj(json.loads(text)) == program


def test_nil_literal_stored_as_null():
    obj = ast_to_obj(Literal(NIL))
    assert obj == {"type": "Literal", "value": None}
    assert ast_from_obj(obj).value is NIL


def test_reloaded_program_runs(capsys):
    obj = json.loads(json.dumps(ast_to_obj(desugar(parse_program(SOURCE)))))
    interpret(ast_from_obj(obj))
    assert capsys.readouterr().out == '6 done true -6'


def test_integer_json_numbers_become_floats():
    node = ast_from_obj({"type": "Literal", "value": 3})
    assert node.value == 3.0
    assert isinstance(node.value, float)


def test_unknown_node_type():
    with pytest.raises(MalformedAst):
        ast_from_obj({"type": "Nope"})
    with pytest.raises(TypeError):
        ast_to_obj(object())


def test_program_shape():
    obj = ast_to_obj(Program([]))
    assert obj == {"type": "Program", "procedures": []}


def test_program_without_main_is_rejected():
    with pytest.raises(NoMain):
        program_from_obj({"type": "Program", "procedures": []})


@pytest.mark.parametrize('obj', [
    [],
    {"type": "Literal", "value": 1},
    {"type": "Program"},
    {"type": "Program", "procedures": [{"type": "Ident", "name": "main"}]},
    {"type": "Program", "procedures": [{"type": "ProcDecl", "name": "main", "params": [], "body": 7}]},
    {"type": "Program", "procedures": [{
        "type": "ProcDecl", "name": "main", "params": [],
        "body": {"type": "Block", "statements": [
            {"type": "ExprStmt", "expr": {"type": "BuiltinCall", "name": "launch", "args": []}},
        ]},
    }]},
])
def test_malformed_programs_raise_linger_errors(obj):
    with pytest.raises(MalformedAst) as excinfo:
        program_from_obj(obj)
    assert isinstance(excinfo.value, LingerError)
    assert str(excinfo.value).startswith('malformed AST: ')
