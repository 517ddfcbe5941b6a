"""Infrastructure Layer — database, credentials, event transport, push channel and logging.

Invariants:
    - Implementations of the Protocols in core/repository_protocols.py live here
    - All database errors mapped to DatabaseError

Design Decisions:
    - Concrete collaborators wired once per process in runtime.py
"""
