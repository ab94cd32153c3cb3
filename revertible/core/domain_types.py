"""Domain Types — rich types for guard identity and lifecycle.

Invariants:
    - GuardId wraps a UUID — never use a bare UUID or id() to name a guard
    - A guard is either ARMED or DISARMED; there is no third state
    - Resolution is recorded only once the guard is DISARMED

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize into JSON log records without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

GuardId = NewType("GuardId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class GuardState(str, Enum):
    """Guard lifecycle states. ARMED -> DISARMED happens exactly once."""
    ARMED = "armed"
    DISARMED = "disarmed"


class Resolution(str, Enum):
    """How a guard left the ARMED state."""
    COMMITTED = "committed"
    ABANDONED = "abandoned"


class AccessMode(str, Enum):
    """How the operation passed to a Container sees the owned value."""
    SHARED = "shared"
    EXCLUSIVE = "exclusive"
