"""quietbackend — owner-scoped, soft-deletable posts over a pluggable store.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
