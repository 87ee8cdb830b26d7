"""Cached plugin update information"""
from typing import Dict, Optional, Protocol

from redis.exceptions import RedisError

from plugin_endpoints.config import settings
from plugin_endpoints.core.redis_client import RedisClient
from plugin_endpoints.logger import logger
from plugin_endpoints.models import UpdateInfo


class UpdateCache(Protocol):
    async def get_update_info(self, file_identifier: str) -> Optional[UpdateInfo]:
        ...


class RedisUpdateCache:
    """
    Update cache stored as one JSON document in Redis.

    The document mirrors the host's ``update_plugins`` transient::

        {"response": {"hello-dolly/hello.php": {"new_version": "1.7.3",
                                                "package": "https://..."}}}

    It is fetched once per instance, so one request sees one snapshot.
    """

    def __init__(self, key: str = None):
        self.key = key or settings.UPDATE_CACHE_KEY
        self._updates: Optional[Dict[str, dict]] = None

    async def _load(self) -> Dict[str, dict]:
        if self._updates is None:
            try:
                document = await RedisClient.get_json(self.key) or {}
            except (RedisError, ValueError) as e:
                logger.warning(f"Update cache unavailable, assuming no updates: {e}")
                document = {}
            response = document.get("response") if isinstance(document, dict) else None
            self._updates = response if isinstance(response, dict) else {}
        return self._updates

    async def get_update_info(self, file_identifier: str) -> Optional[UpdateInfo]:
        updates = await self._load()
        entry = updates.get(file_identifier)
        if not isinstance(entry, dict):
            return None
        return UpdateInfo.from_dict(entry)
