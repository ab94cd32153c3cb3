"""Error Hierarchy — verifies codes, categories and the log envelope.

Tests:
    - Every guard error is a RevertibleError
    - DoubleResolutionError is a GuardResolvedError
    - to_dict() carries code, category, severity and guard context
    - UndoActionError is critical and keeps the in-flight exception
"""

from uuid import uuid4

from revertible.core.domain_types import GuardId, Resolution
from revertible.core.errors import (
    BorrowConflictError, ContainerConsumedError, DoubleResolutionError,
    ErrorCategory, ErrorContext, ErrorSeverity, GuardResolvedError, RevertibleError, UndoActionError,
)


def test_all_errors_share_base():
    gid = GuardId(uuid4())
    for err in (
        GuardResolvedError(),
        DoubleResolutionError("commit"),
        BorrowConflictError("read the value", gid),
        UndoActionError(gid),
        ContainerConsumedError("read the value"),
    ):
        assert isinstance(err, RevertibleError)


def test_double_resolution_is_guard_resolved():
    assert issubclass(DoubleResolutionError, GuardResolvedError)


def test_double_resolution_names_previous_resolution():
    ctx = ErrorContext(resolution=Resolution.COMMITTED)
    err = DoubleResolutionError("commit", ctx)
    assert err.message == "Cannot commit guard: it was already committed."
    assert err.attempted == "commit"
    assert err.category == ErrorCategory.USAGE


def test_borrow_conflict_records_holder():
    gid = GuardId(uuid4())
    err = BorrowConflictError("read the value", gid)
    assert err.holder == gid
    assert err.context.guard_id == gid
    assert err.category == ErrorCategory.BORROW
    assert str(gid) in err.message


def test_to_dict_envelope():
    gid = GuardId(uuid4())
    err = BorrowConflictError("read the value", gid)
    body = err.to_dict()["error"]
    assert body["code"] == "BORROW_CONFLICT"
    assert body["category"] == "borrow"
    assert body["severity"] == "error"
    assert body["context"]["guard_id"] == str(gid)
    assert body["context"]["resolution"] is None


def test_undo_action_error_is_critical():
    gid = GuardId(uuid4())
    boom = RuntimeError("boom")
    err = UndoActionError(gid, in_flight=boom)
    assert err.severity == ErrorSeverity.CRITICAL
    assert err.in_flight is boom
    assert err.to_dict()["error"]["context"]["resolution"] == "abandoned"
