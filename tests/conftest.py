"""Root conftest — shared test configuration."""

import os

# Settings are read once (lru_cache): set test values before any app import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("JWT_SECRET", "test-secret-key-not-for-production-use")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
