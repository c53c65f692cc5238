"""
Session store implementations
"""

import json
import logging
from pathlib import Path
from typing import Optional

from kampyn.domain.repositories.session_store import SessionStore


class InMemorySessionStore(SessionStore):
    """Token kept for the lifetime of the process"""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class JsonFileSessionStore(SessionStore):
    """Token persisted to a small JSON document between runs"""

    def __init__(self, path: str):
        self._path = Path(path)
        self._logger = logging.getLogger(self.__class__.__name__)

    def get(self) -> Optional[str]:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self._logger.warning("⚠️ UNREADABLE SESSION FILE %s: %s", self._path, e)
            return None
        return data.get("token") if isinstance(data, dict) else None

    def set(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"token": token}), encoding="utf-8")

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()
