"""Token Stores — where the client keeps its JWT and the signed-in user's identity.

Invariants:
    - get_token() returns None when signed out, never an empty string
    - clear() removes the token and the cached identity together
    - FileTokenStore writes JSON atomically (temp file + replace)
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    def get_token(self) -> str | None: ...
    def get_identity(self) -> dict: ...
    def save(self, token: str, identity: dict | None = None) -> None: ...
    def clear(self) -> None: ...


class MemoryTokenStore:
    """Keeps the token for the lifetime of the process."""

    def __init__(self):
        self._token: str | None = None
        self._identity: dict = {}

    def get_token(self) -> str | None:
        return self._token or None

    def get_identity(self) -> dict:
        return dict(self._identity)

    def save(self, token: str, identity: dict | None = None) -> None:
        self._token = token
        self._identity = dict(identity or {})

    def clear(self) -> None:
        self._token = None
        self._identity = {}


class FileTokenStore:
    """Persists the token as JSON on disk (survives process restarts)."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict:
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return {}

    def get_token(self) -> str | None:
        return self._read().get("token") or None

    def get_identity(self) -> dict:
        return dict(self._read().get("identity") or {})

    def save(self, token: str, identity: dict | None = None) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({"token": token, "identity": identity or {}})
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".token-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
