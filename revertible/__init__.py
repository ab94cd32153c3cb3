"""Revertible — scoped commit-or-undo guards for reversible mutations.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports from revertible.core.* only, no star exports
"""
