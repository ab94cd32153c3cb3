"""Detached Staging — guards with no container behind them.

Invariants:
    - stage() touches no external state: abandoning it discards the value, nothing else
    - The caller writes a committed value to its destination; the guard never does
    - snapshot() never compares values; abandon() always hands the original back

Design Decisions:
    - stage() does not copy: callers pass the copy they intend to edit
    - snapshot() deep-copies the original so in-place edits cannot reach it
"""

import copy
from typing import Any, Callable, TypeVar

from revertible.core.action_protocols import DetachedUndo
from revertible.core.pending_result import PendingResult

T = TypeVar("T")


def _discard(_value: Any) -> None:
    return None


def guard(value: T, undo: DetachedUndo[T]) -> PendingResult[T]:
    """Wrap `value` with an undo action that receives it if the guard is abandoned."""
    return PendingResult(value, undo)


def stage(value: T) -> PendingResult[T]:
    """Stage a replacement value for conditional adoption.

        with stage(person.name) as name:
            name.value = "Sasha"
            validate(name.value)             # raising here leaves person untouched
            person.name = name.commit()
    """
    return guard(value, _discard)


def snapshot(value: T, restore: Callable[[T], Any] | None = None) -> PendingResult[T]:
    """Stage `value` for in-place editing, keeping a copy of how it started.

    commit() returns the edited value; abandon() returns restore(original),
    or the original itself when no restore function is given.
    """
    original = copy.deepcopy(value)
    rebuild = restore or (lambda kept: kept)
    return guard(value, lambda _edited: rebuild(original))
