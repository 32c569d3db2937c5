import copy
import json
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import StoreNotFoundError, StoreParseError, StoreWriteError

Record = Dict[str, Any]


def record_id(record: Any) -> Optional[int]:
    """Return the record's ``id`` as an int, or None when it isn't one.

    Generic JSON decoding may hand back ``3`` or ``3.0`` for the same id;
    both normalise to ``3``. Booleans, strings and fractional numbers are
    not ids.
    """
    if not isinstance(record, dict):
        return None
    value = record.get("id")
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class DocumentStore:
    """All collections in memory, mirrored to a single JSON file."""

    def __init__(self, path, data: Optional[Dict[str, List[Record]]] = None):
        self.path = Path(path)
        self.data: Dict[str, List[Record]] = data if data is not None else {}
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path) -> "DocumentStore":
        p = Path(path)
        if not p.is_file():
            raise StoreNotFoundError(f"database file not found: {p}", path=p)
        try:
            with p.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreParseError(f"cannot read database file {p}: {e}", path=p) from e
        _check_shape(data, p)
        return cls(p, data)

    def persist(self):
        """Rewrite the whole file from memory."""
        try:
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=1, ensure_ascii=False)
        except OSError as e:
            raise StoreWriteError(f"cannot write database file {self.path}: {e}", path=self.path) from e

    # --- reads ---

    def has_collection(self, collection: str) -> bool:
        return collection in self.data

    def list_records(self, collection: str) -> List[Record]:
        return list(self.data.get(collection, []))

    def find_index(self, collection: str, rid: int) -> Optional[int]:
        # Duplicate ids resolve to the first occurrence
        for i, record in enumerate(self.data.get(collection, [])):
            if record_id(record) == rid:
                return i
        return None

    def get_record(self, collection: str, rid: int) -> Optional[Record]:
        idx = self.find_index(collection, rid)
        if idx is None:
            return None
        return self.data[collection][idx]

    def snapshot(self) -> Dict[str, List[Record]]:
        return copy.deepcopy(self.data)

    # --- mutations ---
    # Each one changes memory first and then persists. A failed persist
    # raises StoreWriteError and leaves the in-memory change in place.

    def create(self, collection: str, record: Record) -> Record:
        with self._lock:
            items = self.data.setdefault(collection, [])
            if "id" not in record:
                # Count based, so it can repeat an id freed by a delete
                record["id"] = len(items) + 1
            items.append(record)
            self.persist()
        return record

    def replace(self, collection: str, rid: int, record: Record) -> Optional[Record]:
        with self._lock:
            idx = self.find_index(collection, rid)
            if idx is None:
                return None
            record["id"] = rid
            self.data[collection][idx] = record
            self.persist()
        return record

    def delete(self, collection: str, rid: int) -> bool:
        with self._lock:
            idx = self.find_index(collection, rid)
            if idx is None:
                return False
            del self.data[collection][idx]
            self.persist()
        return True


def _check_shape(data: Any, path: Path):
    if not isinstance(data, dict):
        raise StoreParseError(f"{path}: top level must be an object of collections", path=path)
    for name, items in data.items():
        if not isinstance(items, list):
            raise StoreParseError(f"{path}: collection {name!r} must be an array", path=path)
        for item in items:
            if not isinstance(item, dict):
                raise StoreParseError(f"{path}: collection {name!r} must hold only objects", path=path)
