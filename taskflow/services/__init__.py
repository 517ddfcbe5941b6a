"""Services Layer — request pipeline, handlers, event publishing and notification fan-out.

Invariants:
    - Handlers split by resource (one class per handle_*.py module)
    - Request dispatch uses an explicit dict mapping (no auto-discovery)
    - Handlers own the commit; events are published after it

Design Decisions:
    - Imperative shell around the pure core/ layer
"""
