"""
限时请求客户端
封装带硬截止时间的单次 HTTP GET，并把各类失败转换为统一的异常类型
"""
import asyncio
import time
from typing import Any, Dict, Optional

import httpx

from core.exceptions import (
    FetchTimeoutError,
    MalformedResponseError,
    TransportError,
    UpstreamStatusError,
)
from core.log import get_logger, log_upstream_request

logger = get_logger(__name__)


class BoundedFetcher:
    """
    对单个 URL 发起 GET 请求，超过截止时间即中止，已收到的部分数据被丢弃
    """

    def __init__(self, default_timeout: float = 15.0):
        self.default_timeout = default_timeout

    async def _get(self, url: str, headers: Optional[Dict[str, str]], timeout: float) -> httpx.Response:
        async with httpx.AsyncClient(headers=headers, timeout=httpx.Timeout(timeout)) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response

    async def fetch_json(self, url: str, headers: Optional[Dict[str, str]] = None, timeout: Optional[float] = None) -> Any:
        """
        请求 URL 并解析 JSON 响应

        :param url: 请求地址
        :param headers: 请求头
        :param timeout: 截止时间（秒），缺省使用 default_timeout
        :return: 解析后的 JSON 数据
        :raises FetchTimeoutError: 超过截止时间
        :raises UpstreamStatusError: 非 2xx 响应
        :raises TransportError: 连接等传输层错误，或 URL 无法解析
        :raises MalformedResponseError: 响应体不是合法 JSON
        """
        timeout = timeout or self.default_timeout
        started = time.monotonic()

        def elapsed_ms() -> float:
            return (time.monotonic() - started) * 1000

        try:
            response = await asyncio.wait_for(self._get(url, headers, timeout), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            log_upstream_request(url, "timeout", elapsed_ms())
            raise FetchTimeoutError(url, timeout) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            log_upstream_request(url, f"HTTP {status}", elapsed_ms())
            raise UpstreamStatusError(url, status) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log_upstream_request(url, f"transport error: {type(e).__name__}", elapsed_ms())
            raise TransportError(f"请求失败: {url}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            log_upstream_request(url, "malformed json", elapsed_ms())
            raise MalformedResponseError(f"响应不是合法的JSON: {url}") from e

        log_upstream_request(url, "ok", elapsed_ms())
        return data
