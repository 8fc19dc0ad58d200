"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or reuse a real token secret
os.environ.setdefault("TOKEN_SECRET", "test-token-secret")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")
