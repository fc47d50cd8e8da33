"""Redis backend for the local store.

Each collection is a hash (id -> JSON record) plus a list holding the ids in
insertion order. Both keys are updated in one MULTI/EXEC transaction; upserts
WATCH the hash so the order list never gets a duplicate id.
"""

import json

import redis

from devspace.errors import StorageUnavailable
from devspace.logging import get_logger

from .base import Record, check_collection, require_id

logger = get_logger(__name__)


class RedisStore:
    """Local store backed by a (synchronous) Redis client."""

    def __init__(self, client: redis.Redis, prefix: str = "devspace"):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, redis_url: str, prefix: str = "devspace") -> "RedisStore":
        return cls(redis.from_url(redis_url, decode_responses=True), prefix=prefix)

    def _keys(self, collection: str) -> tuple[str, str]:
        check_collection(collection)
        base = f"{self.prefix}:{collection}"
        return base, f"{base}:order"

    def get(self, collection: str) -> list[Record]:
        hash_key, order_key = self._keys(collection)
        try:
            ids = self.client.lrange(order_key, 0, -1)
            raw = self.client.hmget(hash_key, ids) if ids else []
        except redis.RedisError as e:
            logger.error("store_read_failed", collection=collection, error=str(e))
            raise StorageUnavailable(f"Cannot read {collection} from Redis: {e}") from e

        records: list[Record] = []
        for rid, payload in zip(ids, raw):
            if payload is None:
                # Order entry left behind by an external writer
                logger.warning("store_orphan_order_entry", collection=collection, record_id=rid)
                continue
            try:
                records.append(json.loads(payload))
            except json.JSONDecodeError as e:
                raise StorageUnavailable(
                    f"Stored {collection} record {rid} is not valid JSON"
                ) from e
        return records

    def put(self, collection: str, record: Record) -> None:
        rid = require_id(record)
        hash_key, order_key = self._keys(collection)
        payload = json.dumps(record)

        def upsert(pipe: redis.client.Pipeline) -> None:
            # Runs under WATCH on the hash; a concurrent insert makes EXEC fail and retry
            is_new = not pipe.hexists(hash_key, rid)
            pipe.multi()
            pipe.hset(hash_key, rid, payload)
            if is_new:
                pipe.rpush(order_key, rid)

        try:
            self.client.transaction(upsert, hash_key)
        except redis.RedisError as e:
            logger.error("store_write_failed", collection=collection, record_id=rid, error=str(e))
            raise StorageUnavailable(f"Cannot write {collection} to Redis: {e}") from e
        logger.debug("store_put", collection=collection, record_id=rid)

    def delete(self, collection: str, record_id: str) -> bool:
        hash_key, order_key = self._keys(collection)
        try:
            pipe = self.client.pipeline(transaction=True)
            pipe.hdel(hash_key, record_id)
            pipe.lrem(order_key, 0, record_id)
            removed, _ = pipe.execute()
        except redis.RedisError as e:
            logger.error(
                "store_write_failed", collection=collection, record_id=record_id, error=str(e)
            )
            raise StorageUnavailable(f"Cannot delete from {collection} in Redis: {e}") from e
        if removed:
            logger.debug("store_delete", collection=collection, record_id=record_id)
        return bool(removed)
