"""Protected Container — exclusive owner of a value whose mutations must be reversible.

Invariants:
    - At most one live guard holds the container at a time
    - Reading, unwrapping or copying the value while a guard is live raises BorrowConflictError
    - After into_inner() every access raises ContainerConsumedError
    - The operation runs synchronously, exactly once, before run_with_undo returns
    - If the operation raises, no guard exists and the container is released again
    - The container never inspects the operation's result

Design Decisions:
    - Runtime-checked borrow (holder GuardId) in place of compile-time ownership
    - The guard, not the container, decides when undo runs; the container only lends
      the value to its current holder (GuardOwner protocol in pending_result.py)
"""

import copy
import logging
from typing import Any, Generic, TypeVar
from uuid import UUID

from revertible.core.action_protocols import BoundUndo, Operation
from revertible.core.domain_types import AccessMode, GuardId
from revertible.core.errors import BorrowConflictError, ContainerConsumedError
from revertible.core.pending_result import PendingResult

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Holder while the operation runs and no guard exists yet
_OPERATION_RUNNING = GuardId(UUID(int=0))


class Container(Generic[T]):
    """Owns one value and hands out guards that know how to undo changes to it."""

    def __init__(self, value: T):
        self._value = value
        self._holder: GuardId | None = None
        self._consumed = False

    @property
    def is_borrowed(self) -> bool:
        return self._holder is not None

    @property
    def value(self) -> T:
        """Read access to the owned value while no guard holds the container."""
        self._ensure_free("read the value")
        return self._value

    def into_inner(self) -> T:
        """Give up the container and return the owned value."""
        self._ensure_free("unwrap the container")
        value = self._value
        self._value = None  # type: ignore[assignment]
        self._consumed = True
        return value

    # --- Guarded operations ----------------------------------------------------

    def run_with_undo(
        self, operation: Operation[T, R], undo: BoundUndo[T, R],
    ) -> PendingResult[R]:
        """Run `operation` on the value now; return a guard that runs `undo` if abandoned.

        `undo` receives the value and the operation's result, whatever that
        result is, and decides for itself whether anything needs reversing.
        Open the returned guard in a `with` block.
        """
        return self._run(operation, undo, AccessMode.EXCLUSIVE)

    def run(
        self, operation: Operation[T, R], undo: BoundUndo[T, R],
    ) -> PendingResult[R]:
        """Like run_with_undo, for operations that only read the value."""
        return self._run(operation, undo, AccessMode.SHARED)

    def _run(self, operation: Any, undo: Any, mode: AccessMode) -> PendingResult:
        self._ensure_free("start a guarded operation")
        # Held while the operation runs: the operation must not re-enter.
        self._holder = _OPERATION_RUNNING
        try:
            result = operation(self._value)
            guard: PendingResult = PendingResult(result, undo, owner=self)
        except BaseException:
            self._holder = None
            logger.debug(
                f"{mode.value} operation failed before a guard existed; container released",
            )
            raise
        self._holder = guard.guard_id
        return guard

    # --- GuardOwner ------------------------------------------------------------

    def lend_to(self, guard_id: GuardId) -> T:
        """Hand the value to the guard currently holding the container."""
        if self._holder != guard_id:
            raise BorrowConflictError(
                f"lend the value to guard {guard_id}", self._holder or guard_id,
            )
        return self._value

    def release(self, guard_id: GuardId) -> None:
        if self._holder == guard_id:
            self._holder = None

    # --- Helpers ---------------------------------------------------------------

    def _ensure_free(self, attempted: str) -> None:
        if self._consumed:
            raise ContainerConsumedError(attempted)
        if self._holder is not None:
            raise BorrowConflictError(attempted, self._holder)

    def __copy__(self) -> "Container[T]":
        self._ensure_free("copy the container")
        return Container(copy.copy(self._value))

    def __deepcopy__(self, memo: dict) -> "Container[T]":
        self._ensure_free("copy the container")
        return Container(copy.deepcopy(self._value, memo))

    def __repr__(self) -> str:
        if self._consumed:
            return "Container(<consumed>)"
        if self._holder is not None:
            return f"Container(<held by {self._holder}>)"
        return f"Container({self._value!r})"

