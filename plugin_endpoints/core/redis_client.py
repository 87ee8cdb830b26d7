import redis.asyncio as redis
from plugin_endpoints.config import settings
from typing import Optional
import json


class RedisClient:

    @classmethod
    def get_instance(cls) -> redis.Redis:
        """Get a Redis connection; callers close it after use"""
        return redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            encoding="utf-8"
        )

    @classmethod
    async def get_json(cls, key: str) -> Optional[dict]:
        client = cls.get_instance()
        try:
            value = await client.get(key)
            if value:
                return json.loads(value)
            return None
        finally:
            # Always close the connection after use
            await client.aclose()

    @classmethod
    async def ping(cls) -> bool:
        client = cls.get_instance()
        try:
            return await client.ping()
        finally:
            await client.aclose()
