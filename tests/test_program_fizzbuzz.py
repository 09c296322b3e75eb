from pathlib import Path

from linger.desugar import desugar
from linger.interpreter import Interpreter
from linger.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_fizzbuzz_else_if_chain(capsys):
    with open(EXAMPLES / 'fizzbuzz.ling', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = desugar(parse_program(source))
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == '1 2 Fizz 4 Buzz Fizz 7 8 Fizz Buzz 11 Fizz 13 14 FizzBuzz'
