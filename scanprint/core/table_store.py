# scanprint/core/table_store.py
from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional
import json

from loguru import logger

from scanprint.core import config
from scanprint.core.models import ProductRecord


class KeyValueStorage:
    """
    String slots persisted in one JSON file: {"<key>": "<string value>", ...}.
    Every write rewrites the whole file.
    """
    def __init__(self, path: Path = config.STORAGE_FILE):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Storage file unreadable, starting empty: {self.path} ({e})")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file is not an object, starting empty: {self.path}")
            return {}
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        tmp.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class ProductTable:
    """Ordered, append-only list of scanned rows mirrored to a storage slot."""

    def __init__(self, storage: KeyValueStorage, key: str = config.STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._rows: List[ProductRecord] = self._restore()

    def _restore(self) -> List[ProductRecord]:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("stored value is not a list")
            rows = [ProductRecord.from_dict(item) for item in items]
        except ValueError as e:
            logger.warning(f"Discarding corrupt '{self.key}' slot: {e}")
            return []
        logger.info(f"Restored {len(rows)} rows from storage")
        return rows

    def _persist(self) -> None:
        payload = json.dumps([r.to_dict() for r in self._rows], ensure_ascii=False)
        self.storage.set_item(self.key, payload)

    # ---------- read ----------
    @property
    def records(self) -> List[ProductRecord]:
        return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def get(self, index: int) -> Optional[ProductRecord]:
        if 0 <= index < len(self._rows):
            return self._rows[index]
        return None

    # ---------- mutations ----------
    def append(self, record: ProductRecord) -> int:
        self._rows.append(record)
        self._persist()
        return len(self._rows) - 1

    def patch_status(self, index: int, status: str) -> None:
        row = self.get(index)
        if row is None:
            raise IndexError(f"no row at index {index}")
        row.status = status
        self._persist()

    def patch_last_status(self, status: str) -> None:
        self.patch_status(len(self._rows) - 1, status)

    def clear(self) -> None:
        self._rows = []
        self.storage.remove_item(self.key)
