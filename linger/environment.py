from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Set, Tuple

from .ast import ProcDecl
from .errors import ReassignConstant, ReassignTopLevelProc, UnknownVariable
from .types import ProcVal


@dataclass(frozen=True)
class Binding:
    value: Any
    mutable: bool
    reassigned: bool = False


class Environment:
    """A scope mapping names to bindings.

    Scopes are snapshots rather than parent-linked frames: `child()` copies
    every visible binding, and `merge_reassignments()` writes the changes a
    block made to pre-existing names back into the scope it was copied
    from. Names declared in the child itself never flow back.

    Top-level procedures live in a separate read-only table shared by every
    scope; local bindings shadow them.
    """
    def __init__(self, procedures: Optional[Mapping[str, ProcDecl]] = None):
        self.procedures: Mapping[str, ProcDecl] = procedures if procedures is not None else {}
        self.values: Dict[str, Binding] = {}
        self.declared: Set[str] = set()

    @classmethod
    def for_program(cls, procedures: Iterable[ProcDecl]) -> 'Environment':
        return cls({proc.name: proc for proc in procedures})

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name].value
        if name in self.procedures:
            proc = self.procedures[name]
            return ProcVal(proc.name, proc.params, proc.body, Environment(self.procedures))
        raise UnknownVariable(name)

    def insert_new(self, name: str, value: Any, mutable: bool = True):
        self.values[name] = Binding(value, mutable)
        self.declared.add(name)

    def reassign(self, name: str, value: Any):
        binding = self.values.get(name)
        if binding is None:
            if name in self.procedures:
                raise ReassignTopLevelProc(name)
            raise UnknownVariable(name)
        if not binding.mutable:
            raise ReassignConstant(name)
        self.values[name] = replace(binding, value=value, reassigned=True)

    def child(self) -> 'Environment':
        env = Environment(self.procedures)
        env.values = dict(self.values)
        return env

    def extend(self, bindings: Iterable[Tuple[str, Any]]) -> 'Environment':
        """Return a child scope with `bindings` added as constants."""
        env = self.child()
        for name, value in bindings:
            env.insert_new(name, value, mutable=False)
        return env

    def merge_reassignments(self, child: 'Environment'):
        for name, binding in child.values.items():
            if name in child.declared or name not in self.values:
                continue
            if binding.reassigned:
                self.reassign(name, binding.value)

    def __contains__(self, name: str) -> bool:
        return name in self.values or name in self.procedures

    def __repr__(self) -> str:
        names = ', '.join(sorted(self.values))
        return f"<Environment {names}>"
