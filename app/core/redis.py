from typing import Dict

from redis.asyncio import Redis

from .config import settings


class RedisManager:
    """One shared client; the stream transport and /health use it."""

    _instance = None

    @classmethod
    def get_client(cls) -> Redis:
        if cls._instance is None:
            cls._instance = Redis.from_url(settings.REDIS_URL, decode_responses=True)
        return cls._instance

    @classmethod
    async def close(cls):
        if cls._instance is not None:
            await cls._instance.aclose()
            cls._instance = None


async def append_to_stream(stream: str, fields: Dict[str, str]) -> str:
    """XADD and return the entry id; errors reach the caller."""
    return await RedisManager.get_client().xadd(stream, fields)


async def check_connection() -> bool:
    try:
        return bool(await RedisManager.get_client().ping())
    except Exception:
        return False
