"""Root conftest — shared test configuration."""

import os
import tempfile

# Tests never touch a real database or the working directory's uploads/
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="ventytime-uploads-"))
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-ventytime-tests-only")
os.environ.setdefault("LOG_FORMAT", "text")
