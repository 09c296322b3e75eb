"""Tokenizer for the Linger language.

Lexing is delegated to a Lark basic lexer configured with the Linger
terminals; this module turns the Lark tokens into `Token` objects the parser
consumes and translates Lark's failures into `LexError`s. Identifiers that
are reserved words come out as KEYWORD tokens, number literals carry their
float value and string literals carry their decoded text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .errors import InvalidEscapeSequence, UnknownToken, UnterminatedStringLiteral


KEYWORDS = frozenset({
    'proc', 'let', 'const', 'if', 'else', 'while', 'for',
    'return', 'break', 'continue', 'true', 'false', 'nil',
})

# Token kinds
IDENT = 'IDENT'
NUMBER = 'NUMBER'
STRING = 'STRING'
OP = 'OP'
PUNCT = 'PUNCT'
KEYWORD = 'KEYWORD'

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '0': '\0',
    '\\': '\\',
    '"': '"',
}


LINGER_TOKENS = r"""
    start: (NUMBER | STRING | NAME | OPERATOR | PUNCT)*

    NUMBER: /\d+(\.\d+)?/
    STRING: /"(\\.|[^"\\])*"/
    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    OPERATOR: /\+\+|--|\+=|-=|->|==|!=|<=|>=|&&|\|\||[-+*\/%<>=!]/
    PUNCT: /[(){}\[\],;]/

    COMMENT: /\/\/[^\n]*/
    %import common.WS
    %ignore WS
    %ignore COMMENT
"""


LINGER_LEXER = Lark(
    LINGER_TOKENS,
    parser='lalr',
    lexer='basic',
)


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    value: Any
    line: int = 0
    column: int = 0

    def is_(self, expected: str) -> bool:
        """True if the token has kind `expected` or is the symbol/keyword `expected`."""
        if self.kind == expected:
            return True
        return self.kind in (OP, PUNCT, KEYWORD) and self.text == expected

    def __str__(self) -> str:
        return f"{self.kind} {self.text!r} @ ({self.line}, {self.column})"


def decode_string(raw: str, line: int, column: int) -> str:
    """Strip the quotes of a string literal and resolve its escapes."""
    body = raw[1:-1]
    out: List[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == '\\':
            escaped = body[i + 1]
            if escaped not in ESCAPES:
                raise InvalidEscapeSequence(escaped, line, column)
            out.append(ESCAPES[escaped])
            i += 2
            continue
        out.append(c)
        i += 1
    return ''.join(out)


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens."""
    tokens: List[Token] = []
    try:
        for tok in LINGER_LEXER.lex(source):
            text = str(tok)
            if tok.type == 'NAME':
                kind = KEYWORD if text in KEYWORDS else IDENT
                tokens.append(Token(kind, text, text, tok.line, tok.column))
            elif tok.type == 'NUMBER':
                tokens.append(Token(NUMBER, text, float(text), tok.line, tok.column))
            elif tok.type == 'STRING':
                value = decode_string(text, tok.line, tok.column)
                tokens.append(Token(STRING, text, value, tok.line, tok.column))
            elif tok.type == 'OPERATOR':
                tokens.append(Token(OP, text, text, tok.line, tok.column))
            else:
                tokens.append(Token(PUNCT, text, text, tok.line, tok.column))
    except UnexpectedCharacters as e:
        if e.char == '"':
            raise UnterminatedStringLiteral(e.line, e.column) from None
        raise UnknownToken(e.char, e.line, e.column) from None
    return tokens
