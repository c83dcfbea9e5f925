"""Core Layer — pure ordering rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (clock passed in by callers)

Design Decisions:
    - Rules separated from route handlers so they can be tested without a database
"""
