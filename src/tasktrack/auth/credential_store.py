# src/tasktrack/auth/credential_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from ..core.errors import MalformedPersistedState
from .models import Session

logger = logging.getLogger(__name__)

SESSION_KEY = "currentUser"


class CredentialStore:
    """
    File-backed single-slot store for the current Session.

    The file is a small JSON document holding one record under SESSION_KEY.
    - save(): atomic write (tmp + os.replace), file made private (it holds a bearer token)
    - load(): missing or malformed data is "no session", never an exception
    - clear(): removes the record

    Only SessionManager is supposed to call save()/clear().
    """

    def __init__(self, path: str | Path, *, key: str = SESSION_KEY) -> None:
        self._path = Path(path)
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    def save(self, session: Session) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps({self._key: session.to_record()}, ensure_ascii=False), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)
        logger.debug("Session saved for user=%s path=%s", session.username, self._path)

    def load(self) -> Session | None:
        if not self._path.exists():
            return None
        try:
            return self._decode(self._path.read_bytes())
        except MalformedPersistedState as e:
            logger.warning("Ignoring malformed persisted session at %s: %s", self._path, e)
            return None
        except OSError:
            logger.exception("Failed to read persisted session from %s", self._path)
            return None

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
        logger.debug("Session cleared path=%s", self._path)

    def _decode(self, raw: bytes) -> Session | None:
        try:
            data = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise MalformedPersistedState(f"not UTF-8: {e}") from e
        except (ValueError, RecursionError) as e:
            raise MalformedPersistedState(f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedPersistedState("top-level value is not an object")
        record = data.get(self._key)
        if record is None:
            return None
        try:
            return Session.from_record(record)
        except ValueError as e:
            raise MalformedPersistedState(str(e)) from e
