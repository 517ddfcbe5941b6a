"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or reuse a production secret
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
