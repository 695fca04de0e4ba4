"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON; all errors use the TwoFaceError envelope

Design Decisions:
    - Thin routes delegate to the injected PostStore
"""
