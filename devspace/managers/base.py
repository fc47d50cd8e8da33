from collections.abc import Callable
from datetime import UTC, datetime
from typing import Generic, TypeVar
import uuid

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from devspace.errors import StorageUnavailable
from devspace.store import LocalStore

M = TypeVar("M", bound=BaseModel)


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    # No dashes: ids are embedded in ai-engineer-{id}-{name} branch names
    return uuid.uuid4().hex


class RecordManager(Generic[M]):
    """Typed access to one collection of the local store."""

    collection: str
    model: type[M]

    def __init__(
        self,
        store: LocalStore,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self.store = store
        self._clock = clock or utcnow
        self._id_factory = id_factory or new_id

    def _load_all(self) -> list[M]:
        records = self.store.get(self.collection)
        try:
            return [self.model.model_validate(r) for r in records]
        except PydanticValidationError as e:
            raise StorageUnavailable(f"Stored {self.collection} contain an invalid record") from e

    def _find(self, record_id: str) -> M | None:
        return next((r for r in self._load_all() if r.id == record_id), None)

    def _save(self, record: M) -> None:
        self.store.put(self.collection, record.model_dump(mode="json"))
