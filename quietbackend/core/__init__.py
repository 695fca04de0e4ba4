"""Core Layer — pure domain logic, no IO, no web framework, no DB.

Invariants:
    - No module in core/ imports from api/, infrastructure/, models/ or db/
    - Evaluator and compiler are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell
"""
