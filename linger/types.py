"""Runtime values of the Linger language.

Linger values map onto Python values as follows:

* numbers are always `float` (double precision),
* booleans are `bool`,
* strings are `str`,
* lists are Python `list` objects; the interpreter never mutates a list in
  place, so list values can be shared freely,
* `nil` is the `NIL` singleton,
* procedures (top-level procedures and lambdas) are `ProcVal` instances.

Because `bool` is a subclass of `int` and numbers are always floats, use
`is_number` rather than `isinstance(value, (int, float))`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List


class NilVal:
    """Marker object for the Linger `nil` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()


@dataclass
class ProcVal:
    """A callable procedure value.

    `env` is the Environment snapshot captured when the value was created.
    For top-level procedures it holds no bindings of its own.
    """
    name: str
    params: List[str]
    body: Any
    env: Any

    def __repr__(self) -> str:
        return f"<proc {self.name}>"


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def is_integral(value: Any) -> bool:
    return is_number(value) and value.is_integer()


def format_number(n: float) -> str:
    """Render a number without a trailing `.0` when it is integral."""
    if n.is_integer():
        return str(int(n))
    return repr(n)


def to_string(value: Any) -> str:
    """Convert a Linger value to its display form.

    This is what `print` writes and what the CLI shows for the result of
    `main`. Strings are shown verbatim, also inside lists.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return '[' + ', '.join(to_string(item) for item in value) + ']'
    if isinstance(value, ProcVal):
        return '<lambda>'
    if value is NIL or value is None:
        return 'nil'
    return str(value)


def values_equal(a: Any, b: Any) -> bool:
    """Equality for values of matching primitive types."""
    return type(a) is type(b) and a == b
