from pathlib import Path

from linger.desugar import desugar
from linger.interpreter import Interpreter
from linger.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_hello(capsys):
    with open(EXAMPLES / 'hello.ling', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = desugar(parse_program(source))
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'
