# hc_core/common/transitions.py
from __future__ import annotations

from typing import Iterable, Mapping


class InvalidTransition(Exception):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change status from {current} to {target}")


class StatusMachine:
    """
    Explicit transition table for a resource status.

    Setting a status to its current value is always allowed, so repeating
    the same update is a no-op instead of an error. A status with no entry
    in the table is terminal.
    """

    def __init__(self, transitions: Mapping[str, Iterable[str]]):
        self._transitions = {str(k): frozenset(str(v) for v in vs) for k, vs in transitions.items()}

    @property
    def states(self) -> frozenset[str]:
        out = set(self._transitions)
        for targets in self._transitions.values():
            out.update(targets)
        return frozenset(out)

    def allowed(self, current: str) -> frozenset[str]:
        return self._transitions.get(str(current), frozenset())

    def can(self, current: str, target: str) -> bool:
        return str(current) == str(target) or str(target) in self.allowed(current)

    def check(self, current: str, target: str) -> None:
        if not self.can(current, target):
            raise InvalidTransition(str(current), str(target))

    def is_terminal(self, status: str) -> bool:
        return not self.allowed(status)
