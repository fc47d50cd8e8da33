"""JSON file backend: one document per collection under a data directory."""

import json
import os
from pathlib import Path
import tempfile

from devspace.errors import StorageUnavailable
from devspace.logging import get_logger

from .base import Record, check_collection, require_id

logger = get_logger(__name__)


class JsonFileStore:
    """Local store backed by ``<data_dir>/<collection>.json``.

    Each write replaces the whole document through a temp file and
    ``os.replace``, so readers see either the old or the new collection.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, collection: str) -> Path:
        check_collection(collection)
        return self.data_dir / f"{collection}.json"

    def _read(self, collection: str) -> list[Record]:
        path = self._path(collection)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("store_read_failed", collection=collection, path=str(path), error=str(e))
            raise StorageUnavailable(f"Cannot read {collection} from {path}: {e}") from e

        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            logger.error("store_corrupt", collection=collection, path=str(path))
            raise StorageUnavailable(f"Stored {collection} at {path} is not a list of records")
        return data

    def _write(self, collection: str, records: list[Record]) -> None:
        path = self._path(collection)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.data_dir,
                prefix=f".{collection}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(records, tmp, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("store_write_failed", collection=collection, path=str(path), error=str(e))
            raise StorageUnavailable(f"Cannot write {collection} to {path}: {e}") from e

    def get(self, collection: str) -> list[Record]:
        return self._read(collection)

    def put(self, collection: str, record: Record) -> None:
        rid = require_id(record)
        records = self._read(collection)
        for index, existing in enumerate(records):
            if existing.get("id") == rid:
                records[index] = record
                break
        else:
            records.append(record)
        self._write(collection, records)
        logger.debug("store_put", collection=collection, record_id=rid)

    def delete(self, collection: str, record_id: str) -> bool:
        records = self._read(collection)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        self._write(collection, remaining)
        logger.debug("store_delete", collection=collection, record_id=record_id)
        return True
