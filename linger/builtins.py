"""Builtin primitives of the Linger language.

A call whose callee is a bare identifier naming one of these builtins is
parsed into a `BuiltinCall` node and evaluated by the interpreter without
going through procedure dispatch. Each primitive receives its already
evaluated arguments and the output sink.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TextIO

from .errors import ExpectedList
from .types import NIL, to_string


@dataclass
class BuiltinFunction:
    name: str
    arity: Optional[int]  # None means variadic
    fn: Callable[[List[Any], TextIO], Any]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


def ensure_list(value: Any) -> List[Any]:
    if not isinstance(value, list):
        raise ExpectedList(value)
    return value


def builtin_print(args: List[Any], out: TextIO) -> Any:
    out.write(' '.join(to_string(a) for a in args))
    return NIL


def builtin_list(args: List[Any], out: TextIO) -> Any:
    return list(args)


def builtin_is_empty(args: List[Any], out: TextIO) -> Any:
    return len(ensure_list(args[0])) == 0


def builtin_is_nil(args: List[Any], out: TextIO) -> Any:
    return args[0] is NIL


def builtin_head(args: List[Any], out: TextIO) -> Any:
    items = ensure_list(args[0])
    if not items:
        return NIL
    return items[0]


def builtin_rest(args: List[Any], out: TextIO) -> Any:
    items = ensure_list(args[0])
    if not items:
        return NIL
    return items[1:]


BUILTINS: Dict[str, BuiltinFunction] = {
    'print': BuiltinFunction('print', None, builtin_print),
    'list': BuiltinFunction('list', None, builtin_list),
    'is_empty': BuiltinFunction('is_empty', 1, builtin_is_empty),
    'is_nil': BuiltinFunction('is_nil', 1, builtin_is_nil),
    'head': BuiltinFunction('head', 1, builtin_head),
    'rest': BuiltinFunction('rest', 1, builtin_rest),
}
