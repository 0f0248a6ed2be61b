from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from redis import Redis

from mockdb_shared.data_models import Message

logger = logging.getLogger(__name__)


class RedisManager:
    """
    High-level Redis utilities for JSON lists keyed per chat session.

    This class is designed for dependency injection: callers provide a configured
    Redis client (e.g., via Redis.from_url or Redis(host=..., ...)) and optional
    configuration such as the key namespace and transcript TTL.

    Args:
        redis_client (Redis): A configured Redis client instance.
        namespace (str): Key namespace/prefix for generated keys.
        default_transcript_ttl (int | None): TTL in seconds refreshed on every append.
            None keeps transcripts until cleared.
    """

    def __init__(
        self,
        redis_client: Redis,
        *,
        namespace: str = "mockdb:chat",
        default_transcript_ttl: int | None = 86400,
    ) -> None:
        self._redis: Redis = redis_client
        self._namespace: str = namespace.rstrip(":")
        self._default_transcript_ttl: int | None = default_transcript_ttl

    # -----------------------------
    # Key helpers
    # -----------------------------
    def get_transcript_key(self, session_id: str) -> str:
        """
        Build a namespaced transcript key for a given chat session.

        Args:
            session_id (str): Chat session identifier.

        Returns:
            str: A namespaced Redis key holding the session's messages.
        """
        return f"{self._namespace}:transcript:{session_id}"

    # -----------------------------
    # JSON list helpers
    # -----------------------------
    def append_json(self, key: str, value: dict[str, Any], ttl: int | None = None) -> int:
        """
        Append a JSON value to the list at `key` and refresh its TTL.

        Args:
            key (str): The Redis list key.
            value (dict[str, Any]): The JSON-serializable mapping to append.
            ttl (int | None): TTL in seconds; defaults to the manager's transcript TTL.

        Returns:
            int: Length of the list after the append.
        """
        length = int(self._redis.rpush(key, json.dumps(value)))
        ttl_to_use = ttl if ttl is not None else self._default_transcript_ttl
        if ttl_to_use is not None:
            self._redis.expire(key, ttl_to_use)
        return length

    def list_json(self, key: str) -> list[dict[str, Any]]:
        """
        Read every JSON value from the list at `key`, in insertion order.

        Entries that are not valid JSON objects are skipped.

        Args:
            key (str): The Redis list key.

        Returns:
            list[dict[str, Any]]: Parsed entries; empty if the key is missing.
        """
        items: list[dict[str, Any]] = []
        for raw in self._redis.lrange(key, 0, -1):
            try:
                parsed = json.loads(raw)
            except (TypeError, ValueError):
                logger.warning(f"Skipping unparseable entry in {key}")
                continue
            if isinstance(parsed, dict):
                items.append(parsed)
        return items

    def delete(self, key: str) -> None:
        self._redis.delete(key)


class TranscriptStore:
    """
    Append-only message history for one chat session.
    """

    def __init__(self, redis_manager: RedisManager, session_id: str) -> None:
        if not session_id:
            raise ValueError("session_id is required")
        self._manager = redis_manager
        self._key = redis_manager.get_transcript_key(session_id)

    def append(self, message: Message) -> list[Message]:
        """Stamp and append `message`, returning the full history."""
        data = message.to_dict()
        data.setdefault("timestamp", datetime.now(UTC).isoformat())
        self._manager.append_json(self._key, data)
        return self.read_all()

    def read_all(self) -> list[Message]:
        messages: list[Message] = []
        for data in self._manager.list_json(self._key):
            try:
                messages.append(Message.from_dict(data))
            except ValueError as e:
                logger.warning(f"Skipping invalid message in {self._key}: {e}")
        return messages

    def clear(self) -> None:
        self._manager.delete(self._key)


def build_redis_manager(
    redis_url: str | None = None,
    *,
    redis_client: Redis | None = None,
    namespace: str = "mockdb:chat",
    default_transcript_ttl: int | None = 86400,
    decode_responses: bool = True,
) -> RedisManager:
    """
    Factory to create a RedisManager with sensible defaults.

    You can provide either `redis_url` (preferred) and this function will initialize
    the client, or pass an existing `redis_client` (for tests/advanced use).

    Args:
        redis_url (str | None): Redis connection URL (e.g., "redis://:pwd@host:6379/0").
        redis_client (Redis | None): Pre-configured Redis client instance.
        namespace (str): Key namespace/prefix for generated keys.
        default_transcript_ttl (int | None): Default TTL for transcripts.
        decode_responses (bool): If creating the client, whether to decode responses.

    Returns:
        RedisManager: Configured manager instance.
    """
    if redis_client is None:
        if not redis_url:
            raise ValueError("Provide either redis_url or redis_client")
        # Use literal True/False to satisfy type checker's overload selection
        if decode_responses:
            redis_client = Redis.from_url(redis_url, decode_responses=True)
        else:
            redis_client = Redis.from_url(redis_url, decode_responses=False)

    return RedisManager(
        redis_client,
        namespace=namespace,
        default_transcript_ttl=default_transcript_ttl,
    )
