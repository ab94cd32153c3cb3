"""Reversible Operations — decorator pairing a mutation with its inverse.

Invariants:
    - The decorated function runs through Container.run_with_undo (exactly once, eagerly)
    - The inverse runs only if the returned guard is abandoned

Design Decisions:
    - Inverse given as a method name (called with no arguments, e.g. push -> "pop")
      or as a callable (target, result) for inverses that need the result
"""

import functools
from typing import Any, Callable

from revertible.core.container import Container
from revertible.core.pending_result import PendingResult


def _inverse_action(inverse: str | Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
    if isinstance(inverse, str):
        return lambda target, _result: getattr(target, inverse)()
    if callable(inverse):
        return inverse
    raise TypeError(f"inverse must be a method name or a callable, got {type(inverse).__name__}")


def reversible(inverse: str | Callable[[Any, Any], Any]):
    """Turn `fn(target, *args)` into `fn(container, *args) -> PendingResult`.

        @reversible(inverse="pop")
        def push(stack, item):
            stack.append(item)

        with push(container, 5) as pushed:
            ...
    """
    undo = _inverse_action(inverse)

    def decorate(fn: Callable[..., Any]) -> Callable[..., PendingResult]:
        @functools.wraps(fn)
        def wrapper(container: Container, *args: Any, **kwargs: Any) -> PendingResult:
            return container.run_with_undo(
                lambda target: fn(target, *args, **kwargs), undo,
            )
        return wrapper

    return decorate
