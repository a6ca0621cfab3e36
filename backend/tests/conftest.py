"""Root conftest: shared test configuration."""

import os

# Importing app.main builds the default app; keep it off real databases
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("STATIC_DIR", "tests-no-static")
