"""Core Layer — pure listing rules: field parsing, pagination, search, ownership, upload planning.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO, no async; ids and clocks are injected where needed

Design Decisions:
    - Functional core separated from the imperative shell in services/
"""
