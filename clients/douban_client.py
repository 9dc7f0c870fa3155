"""
豆瓣推荐客户端
按 分类 + 标签 + 偏移量 获取豆瓣的推荐列表。
主代理失败时尝试一次备用中转；两者都失败则抛出 RecommendationUnavailableError，
让调用方能区分“获取失败”与“该分类暂无数据”。
"""
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlencode

from clients.base_client import BoundedFetcher
from clients.fallback_client import FallbackGateway
from core.config import AresTVConfig
from core.exceptions import (
    AresTVError,
    FallbackExhaustedError,
    MalformedResponseError,
    RecommendationUnavailableError,
    ValidationError,
)
from core.log import get_logger
from core.normalizer import normalize_douban_subject
from core.proxy import PasswordProxyAuth, ProxyAuth, ProxyAuthority
from models.items import RecommendationEntry
from models.request import Category, RecommendationRequest

logger = get_logger(__name__)


class DoubanClient:
    """豆瓣推荐客户端"""

    def __init__(self, proxy: ProxyAuthority, fallback: FallbackGateway, fetcher: Optional[BoundedFetcher] = None,
                 endpoint: str = "https://movie.douban.com/j/search_subjects",
                 headers: Optional[Dict[str, str]] = None, timeout: float = 10.0):
        self.proxy = proxy
        self.fallback = fallback
        self.fetcher = fetcher or BoundedFetcher(default_timeout=timeout)
        self.endpoint = endpoint
        self.headers = headers or {}
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: AresTVConfig, proxy_auth: Optional[ProxyAuth] = None,
                    fetcher: Optional[BoundedFetcher] = None) -> "DoubanClient":
        """根据配置组装客户端及其依赖"""
        if proxy_auth is None and config.proxy_password:
            proxy_auth = PasswordProxyAuth(config.proxy_password)
        fetcher = fetcher or BoundedFetcher(default_timeout=config.douban.timeout_seconds)
        return cls(
            proxy=ProxyAuthority(config.proxy_url, proxy_auth),
            fallback=FallbackGateway(config.fallback_relay_url, fetcher=fetcher),
            fetcher=fetcher,
            endpoint=config.douban.endpoint,
            headers=config.douban.headers,
            timeout=config.douban.timeout_seconds,
        )

    def build_url(self, request: RecommendationRequest) -> str:
        params = {
            "type": request.category.value,
            "tag": request.tag,
            "sort": "recommend",
            "page_limit": request.page_limit,
            "page_start": request.page_start,
        }
        return f"{self.endpoint}?{urlencode(params)}"

    async def _fetch_primary(self, url: str) -> Dict[str, Any]:
        proxied_url = await self.proxy.proxied_url(url)
        data = await self.fetcher.fetch_json(proxied_url, headers=self.headers, timeout=self.timeout)
        if not isinstance(data, dict):
            raise MalformedResponseError("豆瓣响应不是JSON对象")
        return data

    async def _fetch_with_fallback(self, url: str) -> Dict[str, Any]:
        try:
            return await self._fetch_primary(url)
        except AresTVError as e:
            logger.error(f"AresTV[DoubanClient]: 豆瓣 API 请求失败（直接代理）: {e}")

        try:
            data = await self.fallback.fetch_json(url, headers=self.headers, timeout=self.timeout)
        except FallbackExhaustedError as e:
            logger.error(f"AresTV[DoubanClient]: 豆瓣 API 备用请求也失败: {e}")
            raise RecommendationUnavailableError("获取豆瓣数据失败，请稍后重试", cause=e) from e

        if not isinstance(data, dict):
            error = FallbackExhaustedError("备用中转返回的数据不是JSON对象")
            raise RecommendationUnavailableError("获取豆瓣数据失败，请稍后重试", cause=error) from error
        logger.info("AresTV[DoubanClient]: 已通过备用中转获取豆瓣数据。")
        return data

    async def fetch(self, request: RecommendationRequest) -> List[RecommendationEntry]:
        """
        按请求对象获取推荐列表

        :param request: RecommendationRequest
        :return: 推荐条目列表；subjects 为空时返回空列表
        :raises RecommendationUnavailableError: 主代理与备用中转均失败
        """
        data = await self._fetch_with_fallback(self.build_url(request))
        subjects = data.get("subjects")
        if not isinstance(subjects, list) or not subjects:
            logger.info(f"AresTV[DoubanClient]: 分类 {request.category.value} 标签 '{request.tag}' 暂无数据。")
            return []
        return [normalize_douban_subject(subject, request.category.value) for subject in subjects]

    async def recommend(self, category: Union[str, Category], tag: str, page_limit: int = 16,
                        page_start: int = 0) -> List[RecommendationEntry]:
        """
        获取豆瓣推荐

        :param category: 'movie' 或 'tv'
        :param tag: 标签，例如 '热门'
        :param page_limit: 每批数量
        :param page_start: 偏移量
        :return: 推荐条目列表
        :raises ValidationError: 参数不合法
        :raises RecommendationUnavailableError: 主代理与备用中转均失败
        """
        try:
            request = RecommendationRequest(
                category=category,
                tag=tag,
                page_limit=page_limit,
                page_start=page_start,
            )
        except ValueError as e:
            raise ValidationError(f"推荐请求参数不合法: {e}") from e
        return await self.fetch(request)
