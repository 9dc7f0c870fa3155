"""
备用中转客户端
主代理请求失败后，通过公共中转服务获取目标地址的内容。
中转服务把原始响应包装在 {"contents": "<字符串>"} 中，需要二次解析。
"""
import json
from typing import Any, Dict, Optional

from clients.base_client import BoundedFetcher
from core.exceptions import AresTVError, FallbackExhaustedError
from core.log import get_logger
from models.source import encode_component

logger = get_logger(__name__)


class FallbackGateway:
    """公共中转备用通道"""

    def __init__(self, relay_url: str = "https://api.allorigins.win/get?url=", fetcher: Optional[BoundedFetcher] = None):
        self.relay_url = relay_url
        self.fetcher = fetcher or BoundedFetcher()

    def relay_target(self, url: str) -> str:
        return self.relay_url + encode_component(url)

    async def fetch_json(self, url: str, headers: Optional[Dict[str, str]] = None, timeout: Optional[float] = None) -> Any:
        """
        经中转获取目标地址并解包

        :param url: 目标外部地址（未经代理）
        :param headers: 请求头
        :param timeout: 截止时间（秒）
        :return: contents 字段再次解析后的 JSON 数据
        :raises FallbackExhaustedError: 中转请求失败，或包装体缺失、无法解析
        """
        relay_url = self.relay_target(url)
        try:
            envelope = await self.fetcher.fetch_json(relay_url, headers=headers, timeout=timeout)
        except AresTVError as e:
            raise FallbackExhaustedError(f"备用中转请求失败: {e}") from e

        contents = envelope.get("contents") if isinstance(envelope, dict) else None
        if not isinstance(contents, str) or not contents.strip():
            raise FallbackExhaustedError("备用中转未返回有效的 contents")

        try:
            return json.loads(contents)
        except ValueError as e:
            raise FallbackExhaustedError("备用中转返回的 contents 不是合法的JSON") from e
