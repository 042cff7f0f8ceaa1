"""
JSON File Storage Implementation

DESIGN DECISION: Each key is a JSON file in the data directory:
- finance_transactions.json
- finance_recurring.json
- finance_currency.json

TRADEOFFS:
- The whole collection is rewritten on every save (fine for personal use)
- No cross-key transaction; each key is replaced atomically on its own

Writes go to a temporary file in the same directory which then replaces the
target with os.replace, so a crash mid-write leaves the old file intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.config import StorageSettings
from finance_tracker.services.storage.interface import StorageWriteError
from finance_tracker.services.storage.keyvalue import KeyValueStorage

logger = structlog.get_logger(__name__)


class JsonFileStorage(KeyValueStorage):
    """
    File-per-key implementation of the storage interface.

    The data directory is created on first save.
    """

    def __init__(
        self,
        data_dir: Optional[Path | str] = None,
        settings: Optional[StorageSettings] = None,
        default_currency: Optional[str] = None,
    ):
        super().__init__(settings=settings, default_currency=default_currency)
        self._data_dir = Path(data_dir) if data_dir else self._settings.data_dir

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def _read(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def _write(self, key: str, payload: bytes) -> None:
        path = self.path_for(key)
        retrying = Retrying(
            stop=stop_after_attempt(self._settings.write_attempts),
            wait=wait_exponential(
                multiplier=self._settings.write_backoff_seconds,
                max=self._settings.write_backoff_seconds * 10,
            ),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            retrying(self._atomic_write, path, payload)
        except OSError as e:
            raise StorageWriteError(f"Failed to write {path}: {e}") from e

    def _atomic_write(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except OSError:
            logger.warning("storage_write_attempt_failed", path=str(path))
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
