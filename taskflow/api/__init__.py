"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes translate HTTP input into request objects and hand them to the dispatch

Design Decisions:
    - Thin routes: every rule lives in core/ or services/
"""
