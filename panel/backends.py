"""
Persistence backends - Key-value storage for serialized blobs

Both backends expose the same three calls:

    get(key)        -> str or None when the key is absent
    set(key, value) -> raises StorageWriteError on capacity/access failure
    remove(key)     -> no-op when the key is absent

FileBackend keeps one file per key under <repo>/data/. Writes go to a
temporary file in the same directory and are moved into place with
os.replace, so a failed write leaves the previous value readable.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote

from .errors import StorageWriteError


logger = logging.getLogger(__name__)


class FileBackend:
    """Stores each key as a JSON file inside the repository."""

    def __init__(self, repo_path: str):
        """
        Initialize file backend.

        Args:
            repo_path: Path to the promptpanel repository
        """
        self.repo_path = Path(repo_path)
        self.data_dir = self.repo_path / "data"

    def _path(self, key: str) -> Path:
        """Map a key to its file; percent-encoding keeps distinct keys distinct."""
        return self.data_dir / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageWriteError(
                f"Could not save '{key}': storage may be full or inaccessible ({e})"
            ) from e

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageWriteError(f"Could not remove '{key}': {e}") from e


class MemoryBackend:
    """
    In-memory backend.

    An optional quota (total characters across all values) makes set()
    fail the way a full browser storage area does.
    """

    def __init__(self, quota: Optional[int] = None):
        self.quota = quota
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(value) > self.quota:
                raise StorageWriteError(
                    f"Could not save '{key}': storage quota of {self.quota} exceeded"
                )
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
