"""Detached Staging — tests for stage(), guard() and snapshot().

Tests cover:
    - stage round-trip: mutate then commit returns the mutated value
    - Staged field replacement abandoned on failed validation leaves the field alone
    - stage never writes anywhere and never compares values
    - guard() hands the value to its undo on abandonment
    - snapshot() returns the original on abandon and the edited value on commit
"""

from dataclasses import dataclass

import pytest

from revertible.core.staging import guard, snapshot, stage


@dataclass
class Person:
    name: str


class ValidationFailed(Exception):
    pass


def rename(person: Person, new_name: str, allowed: bool) -> None:
    with stage(person.name) as name:
        name.value = new_name
        if not allowed:
            raise ValidationFailed(name.value)
        person.name = name.commit()


# ─── stage ───────────────────────────────────────────────────────

def test_stage_commit_returns_mutated_value():
    with stage([1, 2]) as staged:
        staged.value.append(3)
        assert staged.commit() == [1, 2, 3]


def test_staged_rename_abandoned_keeps_original_field():
    person = Person("Sarah")
    with pytest.raises(ValidationFailed):
        rename(person, "Sasha", allowed=False)
    assert person.name == "Sarah"


def test_staged_rename_committed_is_adopted_by_caller():
    person = Person("Sarah")
    rename(person, "Sasha", allowed=True)
    assert person.name == "Sasha"


def test_stage_commit_leaves_source_untouched():
    person = Person("Sarah")
    with stage(person.name) as name:
        name.value = "Sasha"
        assert name.commit() == "Sasha"
    assert person.name == "Sarah"


def test_stage_commit_of_unchanged_value_still_returns_it():
    with stage("same") as staged:
        assert staged.commit() == "same"


def test_stage_abandon_returns_nothing():
    staged = stage("value")
    assert staged.abandon() is None


# ─── guard ───────────────────────────────────────────────────────

def test_guard_undo_receives_value_on_abandon():
    scoped = {"value": 12}
    with guard(scoped, lambda v: v.update(value=0)):
        pass
    assert scoped == {"value": 0}


def test_guard_commit_skips_undo():
    scoped = {"value": 12}
    with guard(scoped, lambda v: v.update(value=13)) as g:
        g.commit()
    assert scoped == {"value": 12}


# ─── snapshot ────────────────────────────────────────────────────

def test_snapshot_abandon_returns_original():
    items = snapshot(["a", "b"])
    items.value.clear()
    assert items.value == []
    assert items.abandon() == ["a", "b"]


def test_snapshot_commit_returns_edited_value():
    with snapshot(["a", "b"]) as items:
        items.value.append("c")
        assert items.commit() == ["a", "b", "c"]


def test_snapshot_applies_restore_function():
    items = snapshot(["a", "b"], restore=lambda original: tuple(original))
    items.value.pop()
    assert items.abandon() == ("a", "b")


def test_snapshot_original_isolated_from_nested_edits():
    items = snapshot({"tags": ["x"]})
    items.value["tags"].append("y")
    assert items.abandon() == {"tags": ["x"]}
