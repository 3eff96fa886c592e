"""Global pytest configuration."""

import os

# Settings are read lazily; the app engine falls back to this URL when a
# test does not override get_async_engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
