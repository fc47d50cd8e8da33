from typing import Any, Protocol

ENGINEERS = "engineers"
TASKS = "tasks"
GITHUB_CONNECTION = "github_connection"

COLLECTIONS = frozenset({ENGINEERS, TASKS, GITHUB_CONNECTION})

# The connection collection holds at most this one record
CONNECTION_RECORD_ID = "github_connection"

Record = dict[str, Any]


class LocalStore(Protocol):
    """Persisted collections of JSON records, ordered by first insertion.

    Every call is synchronous and either fully applied or rejected with
    ``StorageUnavailable``. There are no transactions across collections.
    """

    def get(self, collection: str) -> list[Record]: ...

    def put(self, collection: str, record: Record) -> None:
        """Insert or replace the record with the same ``id``.

        A replaced record keeps its original position.
        """
        ...

    def delete(self, collection: str, record_id: str) -> bool:
        """Remove a record. Returns False if no record had that id."""
        ...


def check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")


def require_id(record: Record) -> str:
    rid = record.get("id")
    if not isinstance(rid, str) or not rid:
        raise ValueError("Record must carry a non-empty string 'id'")
    return rid
