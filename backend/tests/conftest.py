"""Root conftest — shared test configuration."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("LOG_FORMAT", "text")
