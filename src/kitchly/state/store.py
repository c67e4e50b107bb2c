"""Redis-backed kitchen context store.

One JSON record per conversation. Reads never fail (a broken or missing
record is a fresh conversation); writes are read-merge-write at top-level
field granularity.
"""

import asyncio
import contextlib
import weakref
from collections.abc import Mapping
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from kitchly.config import get_settings
from kitchly.logging_config import get_logger
from kitchly.schemas import KitchenState

logger = get_logger(__name__)

KITCHEN_STATE_KEY = "kitchen_state:{conversation_id}"


def create_redis_client(redis_url: str | None = None) -> Redis:
    """Create an async Redis client for the kitchen state cache."""
    return Redis.from_url(redis_url or get_settings().redis_url, decode_responses=True)


class KitchenContextStore:
    """Keyed store of KitchenState records."""

    def __init__(
        self,
        redis: Redis,
        ttl_seconds: int | None = None,
        serialize_conversations: bool | None = None,
    ):
        settings = get_settings()
        self.redis = redis
        self.ttl_seconds = ttl_seconds or settings.kitchen_state_ttl_seconds
        self.serialize_conversations = (
            settings.serialize_conversations
            if serialize_conversations is None
            else serialize_conversations
        )
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @staticmethod
    def cache_key(conversation_id: str) -> str:
        """Get the cache key for a conversation."""
        return KITCHEN_STATE_KEY.format(conversation_id=conversation_id)

    def conversation_lock(
        self, conversation_id: str
    ) -> asyncio.Lock | contextlib.nullcontext[None]:
        """
        Get the in-process lock serializing handlers of one conversation.

        Returns a no-op context manager when serialization is disabled.
        """
        if not self.serialize_conversations:
            return contextlib.nullcontext()
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    async def get(self, conversation_id: str) -> KitchenState:
        """
        Get the kitchen state for a conversation.

        Returns:
            The stored state, or an empty state on a miss or any read error.
        """
        key = self.cache_key(conversation_id)
        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            logger.warning(f"Kitchen state read failed for {key}: {e}")
            return KitchenState()

        if not raw:
            return KitchenState()

        try:
            return KitchenState.model_validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable kitchen state for {key}: {e}")
            return KitchenState()

    async def merge(self, conversation_id: str, patch: Mapping[str, Any]) -> KitchenState:
        """
        Merge a partial update into the stored state.

        Each field present in ``patch`` replaces the stored field; an explicit
        None clears it.

        Args:
            conversation_id: Conversation the state belongs to.
            patch: Top-level KitchenState field names to new values.

        Returns:
            The merged state as written.

        Raises:
            ValueError: If the patch names an unknown field.
            RedisError: If the write fails.
        """
        unknown = set(patch) - set(KitchenState.model_fields)
        if unknown:
            raise ValueError(f"Unknown kitchen state fields: {sorted(unknown)}")

        current = await self.get(conversation_id)
        merged = KitchenState.model_validate({**current.model_dump(), **patch})

        key = self.cache_key(conversation_id)
        await self.redis.set(key, merged.model_dump_json(exclude_none=True), ex=self.ttl_seconds)
        logger.debug(f"Kitchen state updated for {key}: fields={sorted(patch)}")
        return merged

    async def clear(self, conversation_id: str) -> None:
        """Delete all kitchen state for a conversation."""
        await self.redis.delete(self.cache_key(conversation_id))
