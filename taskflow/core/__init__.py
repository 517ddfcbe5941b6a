"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Decisions are pure functions; time-dependent rules take `now` as a parameter

Design Decisions:
    - Functional core, imperative shell: handlers load rows, ask core for decisions
      (authorization, validation, events, notifications), then write
"""
