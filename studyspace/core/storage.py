# studyspace/core/storage.py
import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, PositiveInt, TypeAdapter, ValidationError

from studyspace.core.state import DocumentKind, Theme


class StorageKey(str, Enum):
    THEME = "study-theme"
    LAST_DOCUMENT = "study-last-doc"
    CURRENT_PAGE = "study-current-page"
    RECENT_DOCUMENTS = "study-recent-docs"


class StoredDocument(BaseModel):
    kind: DocumentKind
    source: Optional[str] = None
    title: str


class RecentDocumentEntry(StoredDocument):
    timestamp: datetime
    last_page: PositiveInt = 1


_ADAPTERS: Dict[StorageKey, TypeAdapter] = {
    StorageKey.THEME: TypeAdapter(Theme),
    StorageKey.LAST_DOCUMENT: TypeAdapter(StoredDocument),
    StorageKey.CURRENT_PAGE: TypeAdapter(PositiveInt),
    StorageKey.RECENT_DOCUMENTS: TypeAdapter(List[RecentDocumentEntry]),
}


class StorageAdapter:
    """Key-value store for the handful of values that outlive a session.

    Each value is kept as JSON text under its key, either in a JSON file on disk
    or, when no path is given, in memory. Reads never raise: a missing file, a
    corrupt file or a value that does not validate for its key all read back as
    None, which callers treat as "no prior state".
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._memory: Dict[str, str] = {}
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if self.path is None:
            return dict(self._memory)
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        if self.path is None:
            self._memory = data
            return
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        # Readers must only ever see a complete file.
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".storage-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def get(self, key: StorageKey) -> Optional[Any]:
        key = StorageKey(key)
        try:
            raw = self._read_all().get(key.value)
        except (OSError, ValueError) as e:
            logging.warning(f"Storage unavailable while reading {key.value}: {e}")
            return None
        if raw is None:
            return None
        try:
            return _ADAPTERS[key].validate_json(raw)
        except ValidationError as e:
            logging.warning(f"Ignoring malformed stored value for {key.value}: {e.error_count()} error(s)")
            return None

    def set(self, key: StorageKey, value: Any) -> None:
        key = StorageKey(key)
        raw = _ADAPTERS[key].dump_json(value).decode("utf-8")
        with self._lock:
            try:
                data = self._read_all()
            except OSError as e:
                logging.error(f"Could not persist {key.value}, storage unavailable: {e}")
                return
            except ValueError as e:
                logging.warning(f"Storage file is corrupt, starting a fresh one: {e}")
                data = {}
            data[key.value] = raw
            try:
                self._write_all(data)
            except OSError as e:
                logging.error(f"Could not persist {key.value}: {e}")

    def delete(self, key: StorageKey) -> None:
        key = StorageKey(key)
        with self._lock:
            try:
                data = self._read_all()
            except (OSError, ValueError) as e:
                logging.warning(f"Storage unavailable while deleting {key.value}: {e}")
                return
            if data.pop(key.value, None) is None:
                return
            try:
                self._write_all(data)
            except OSError as e:
                logging.error(f"Could not delete {key.value}: {e}")
