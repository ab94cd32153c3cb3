"""Infrastructure Layer — cross-cutting concerns for applications embedding the core.

Invariants:
    - Infrastructure never changes guard semantics

Design Decisions:
    - Logging setup lives here, not in core: the library never configures handlers on import
"""
