"""Action Protocols — call contracts for user-supplied operations and undo actions.

Invariants:
    - The core never inspects an operation's result; it is opaque data
    - Undo actions must accept every result the paired operation can produce

Design Decisions:
    - Protocol over ABC: any function, lambda or bound method fits structurally
"""

from typing import Protocol, TypeVar

T_contra = TypeVar("T_contra", contravariant=True)
R_contra = TypeVar("R_contra", contravariant=True)
R_co = TypeVar("R_co", covariant=True)


class Operation(Protocol[T_contra, R_co]):
    """Runs once against the owned value and produces a result."""
    def __call__(self, target: T_contra, /) -> R_co: ...


class BoundUndo(Protocol[T_contra, R_contra]):
    """Reverses an operation given the owned value and the operation's result."""
    def __call__(self, target: T_contra, result: R_contra, /) -> object: ...


class DetachedUndo(Protocol[R_contra]):
    """Reverses a detached guard given only its pending value."""
    def __call__(self, value: R_contra, /) -> object: ...
