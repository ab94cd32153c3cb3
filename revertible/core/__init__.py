"""Core Layer — guard primitives, no IO beyond logging.

Invariants:
    - No module in core/ imports from infrastructure/
    - Every guard resolves exactly once: commit xor undo

Design Decisions:
    - Guards are context managers: `with` is the scope-exit hook Python guarantees
"""
