"""Pending Result Guard — a result paired with the undo plan that reverses it.

Invariants:
    - ARMED -> DISARMED happens exactly once, by commit() or by abandonment
    - The undo action runs at most once and never after commit()
    - State flips to DISARMED before the undo action is called (a failing undo cannot rerun)
    - A container-bound guard releases its container once resolved, even if undo raised
    - commit()/abandon() on a DISARMED guard raise DoubleResolutionError, never no-op

Design Decisions:
    - Context manager over __del__ alone: exception tracebacks keep frames (and guards)
      alive, so only `with` gives a deterministic scope-exit hook
    - __del__ kept as a fallback for guards used without `with`, behind a setting; invalid settings
      fall back to the default so a leaked guard still releases its container
    - Owner reached through the GuardOwner protocol: no import of container.py
"""

import logging
from types import TracebackType
from typing import Any, Generic, Protocol, TypeVar
from uuid import uuid4

from pydantic import ValidationError

from revertible.config import get_settings
from revertible.core.domain_types import GuardId, GuardState, Resolution
from revertible.core.errors import (
    DoubleResolutionError, ErrorContext, GuardResolvedError, UndoActionError,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")


class GuardOwner(Protocol):
    """Container side of the back-reference held by a bound guard."""
    def lend_to(self, guard_id: GuardId) -> Any: ...
    def release(self, guard_id: GuardId) -> None: ...


class PendingResult(Generic[R]):
    """Holds a not-yet-accepted result and the undo action that reverses it.

    Always open it in a `with` block:

        with container.run_with_undo(operation, undo) as pending:
            ...                      # any exit from here undoes
            result = pending.commit()

    Leaving the block while the guard is still armed (fall-through, return,
    break, or an exception) abandons it: the undo action runs once with the
    pending value. A committed guard is inert.
    """

    def __init__(self, value: R, undo: Any, *, owner: GuardOwner | None = None):
        self._guard_id = GuardId(uuid4())
        self._resolution: Resolution | None = None
        self._value: R | None = value
        self._undo = undo
        self._owner = owner
        self._owner_kind = "detached" if owner is None else type(owner).__name__
        logger.debug(
            f"Guard {self._guard_id} armed",
            extra=self._log_extra(),
        )
        # Armed last: a guard whose construction failed is never finalized as armed
        self._state = GuardState.ARMED

    # --- Lifecycle -------------------------------------------------------------

    @property
    def guard_id(self) -> GuardId:
        return self._guard_id

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def is_armed(self) -> bool:
        return self._state is GuardState.ARMED

    @property
    def resolution(self) -> Resolution | None:
        """COMMITTED or ABANDONED once disarmed, None while armed."""
        return self._resolution

    # --- Peek ------------------------------------------------------------------

    @property
    def value(self) -> R:
        """The pending result. Mutate it in place, or assign a replacement."""
        self._ensure_armed()
        return self._value  # type: ignore[return-value]

    @value.setter
    def value(self, new_value: R) -> None:
        self._ensure_armed()
        self._value = new_value

    # --- Resolution ------------------------------------------------------------

    def commit(self) -> R:
        """Accept the result: disarm without undoing and hand the value back."""
        if self._state is GuardState.DISARMED:
            raise DoubleResolutionError("commit", self._error_context())
        value, owner = self._value, self._owner
        self._disarm(Resolution.COMMITTED)
        if owner is not None:
            owner.release(self._guard_id)
        logger.debug(f"Guard {self._guard_id} committed", extra=self._log_extra())
        return value  # type: ignore[return-value]

    def abandon(self) -> Any:
        """Reject the result now: run the undo action and return what it returned."""
        if self._state is GuardState.DISARMED:
            raise DoubleResolutionError("abandon", self._error_context())
        return self._abandon(in_flight=None)

    def _abandon(self, in_flight: BaseException | None) -> Any:
        value, undo, owner = self._value, self._undo, self._owner
        self._disarm(Resolution.ABANDONED)
        try:
            if owner is None:
                outcome = undo(value)
            else:
                outcome = undo(owner.lend_to(self._guard_id), value)
        except Exception as e:
            logger.error(
                f"Undo action failed for guard {self._guard_id}: {e}",
                extra={**self._log_extra(), "error_code": "UNDO_FAILED"},
            )
            raise UndoActionError(self._guard_id, in_flight) from e
        finally:
            if owner is not None:
                owner.release(self._guard_id)
        logger.debug(f"Guard {self._guard_id} abandoned", extra=self._log_extra())
        return outcome

    def _disarm(self, resolution: Resolution) -> None:
        self._state = GuardState.DISARMED
        self._resolution = resolution
        self._value = None
        self._undo = None
        self._owner = None

    # --- Scope exit ------------------------------------------------------------

    def __enter__(self) -> "PendingResult[R]":
        self._ensure_armed()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        if self._state is GuardState.ARMED:
            self._abandon(in_flight=exc_val)
        return False

    def __del__(self) -> None:
        if getattr(self, "_state", GuardState.DISARMED) is not GuardState.ARMED:
            return
        try:
            enabled = get_settings().finalizer_undo
        except ValidationError as e:
            # Unusable settings must not keep the owner held: fall back to the default
            logger.warning(
                f"Settings invalid while finalizing guard {self._guard_id}: {e}",
                extra={**self._log_extra(), "error_code": "SETTINGS_INVALID"},
            )
            enabled = True
        if not enabled:
            logger.warning(
                f"Guard {self._guard_id} collected while armed; undo skipped",
                extra=self._log_extra(),
            )
            return
        logger.warning(
            f"Guard {self._guard_id} collected while armed; abandoning",
            extra=self._log_extra(),
        )
        self._abandon(in_flight=None)

    # --- Helpers ---------------------------------------------------------------

    def _ensure_armed(self) -> None:
        if self._state is GuardState.DISARMED:
            raise GuardResolvedError(context=self._error_context())

    def _error_context(self) -> ErrorContext:
        return ErrorContext(guard_id=self._guard_id, resolution=self._resolution)

    def _log_extra(self) -> dict:
        return {
            "guard_id": str(self._guard_id),
            "resolution": self._resolution.value if self._resolution else None,
            "owner": self._owner_kind,
        }

    def __repr__(self) -> str:
        if self._state is GuardState.ARMED:
            return f"PendingResult(armed, value={self._value!r})"
        return f"PendingResult({self._resolution.value})"  # type: ignore[union-attr]
