"""Fake Stack — a tiny business object whose pop reports failure as data."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class Err:
    reason: str


class Stack:
    """Ordered sequence with push/pop; pop on empty returns Err instead of raising."""

    def __init__(self, items=None):
        self.els = list(items or [])

    def push(self, el) -> None:
        self.els.append(el)

    def pop(self) -> Ok | Err:
        if not self.els:
            return Err("empty")
        return Ok(self.els.pop())


def undo_pop(stack: Stack, popped: Ok | Err) -> None:
    """Re-push only if something was actually removed."""
    if isinstance(popped, Ok):
        stack.push(popped.value)


class UnrelatedFailure(Exception):
    pass


def may_fail() -> None:
    raise UnrelatedFailure("downstream step failed")
