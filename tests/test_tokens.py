import pytest

from linger.errors import InvalidEscapeSequence, UnknownToken, UnterminatedStringLiteral
from linger.tokens import IDENT, KEYWORD, NUMBER, OP, PUNCT, STRING, tokenize


def kinds_and_texts(source):
    return [(t.kind, t.text) for t in tokenize(source)]


def test_declaration_tokens():
    assert kinds_and_texts('let x = 1.5;') == [
        (KEYWORD, 'let'),
        (IDENT, 'x'),
        (OP, '='),
        (NUMBER, '1.5'),
        (PUNCT, ';'),
    ]


def test_number_values_are_floats():
    tokens = tokenize('42 3.25')
    assert [t.value for t in tokens] == [42.0, 3.25]
    assert all(isinstance(t.value, float) for t in tokens)


def test_positions_are_one_based():
    tokens = tokenize('proc main() {\n  return 1;\n}')
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    ret = tokens[5]
    assert ret.text == 'return'
    assert (ret.line, ret.column) == (2, 3)


def test_longest_operator_wins():
    assert [t.text for t in tokenize('a++ b-- c += 1 d -= 2 (x) -> e <= f && g || !h')] == [
        'a', '++', 'b', '--', 'c', '+=', '1', 'd', '-=', '2',
        '(', 'x', ')', '->', 'e', '<=', 'f', '&&', 'g', '||', '!', 'h',
    ]


def test_keywords_and_identifiers():
    tokens = tokenize('while whilex nil nil_value')
    assert [t.kind for t in tokens] == [KEYWORD, IDENT, KEYWORD, IDENT]


def test_comments_and_whitespace_ignored():
    tokens = tokenize('// a comment\nx // trailing\n')
    assert [t.text for t in tokens] == ['x']


def test_string_escapes_decoded():
    (token,) = tokenize(r'"a\nb\t\"c\"\\"')
    assert token.kind == STRING
    assert token.value == 'a\nb\t"c"\\'


def test_unterminated_string():
    with pytest.raises(UnterminatedStringLiteral):
        tokenize('print("abc);')


def test_invalid_escape_sequence():
    with pytest.raises(InvalidEscapeSequence) as excinfo:
        tokenize(r'"bad \q"')
    assert excinfo.value.char == 'q'


def test_unknown_token():
    with pytest.raises(UnknownToken) as excinfo:
        tokenize('let x = 1 @ 2;')
    assert excinfo.value.text == '@'
    assert excinfo.value.column == 11
