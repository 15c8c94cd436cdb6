import asyncio
import socket
import traceback
from typing import Any, Callable
from loguru import logger
import redis.asyncio as redis
from redis.exceptions import RedisError


FAIL_OPEN_EXCEPTIONS = (
    RedisError,
    ConnectionError,
    OSError,
    socket.timeout,
    asyncio.TimeoutError,
)


def _describe(exc: BaseException) -> str:
    detail = str(exc)
    return detail if detail.strip() else traceback.format_exc()


class SafeRedis:
    """
    Fail-open wrapper for redis.asyncio.Redis.

    The client lookup cache is an optimization only, so any connectivity problem
    degrades to a cache miss (or a no-op write) instead of failing the request.
    """

    def __init__(
        self,
        url: str = "redis://127.0.0.1:6379/0",
        *,
        timeout: float = 2.5,
        default: Any = None,
    ):
        self.default = default
        self.timeout = timeout
        self._client = redis.Redis.from_url(
            url,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
        )

    @property
    def client(self) -> redis.Redis:
        return self._client

    def __getattr__(self, name: str) -> Callable[..., Any]:
        attr = getattr(self._client, name)
        if not callable(attr):
            return attr

        async def safe_call(*args, **kwargs):
            try:
                result = attr(*args, **kwargs)
                if asyncio.iscoroutine(result):
                    result = await asyncio.wait_for(result, self.timeout)
                return result
            except FAIL_OPEN_EXCEPTIONS as exc:
                logger.error(f"SafeRedis: fail-open on {name}: {_describe(exc)}")
                return self.default

        return safe_call

    async def close(self):
        try:
            await self._client.aclose()
        except FAIL_OPEN_EXCEPTIONS as exc:
            logger.warning(f"SafeRedis: close() fail-open: {_describe(exc)}")
