"""
资源站API客户端，用于抓取单个数据源的某一页搜索结果。
响应格式: {"list": [...], "pagecount": N}
"""
from typing import Any, Dict, List, Optional

from clients.base_client import BoundedFetcher
from core.exceptions import AresTVError, MalformedResponseError
from core.log import get_logger
from core.proxy import ProxyAuthority
from models.results import PageResult
from models.source import SourceDescriptor

logger = get_logger(__name__)


def parse_page_count(value: Any) -> int:
    """解析上游报告的总页数，缺失或不合法时视为 1"""
    if isinstance(value, bool):
        return 1
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 1
    return count if count >= 1 else 1


class VodApiClient:
    """资源站客户端"""

    def __init__(self, proxy: ProxyAuthority, fetcher: Optional[BoundedFetcher] = None,
                 headers: Optional[Dict[str, str]] = None, timeout: float = 15.0):
        self.proxy = proxy
        self.fetcher = fetcher or BoundedFetcher(default_timeout=timeout)
        self.headers = headers or {}
        self.timeout = timeout

    async def fetch_page(self, source: SourceDescriptor, query: str, page: int = 1,
                         timeout: Optional[float] = None) -> PageResult:
        """
        抓取数据源的某一页。任何失败都不会抛出，而是记录在返回的 PageResult.error 中。

        :param source: 数据源描述
        :param query: 搜索关键词
        :param page: 页码，从 1 开始
        :param timeout: 覆盖默认的截止时间（秒）
        :return: PageResult；失败时 raw_items 为 None
        """
        target = source.search_url(query) if page == 1 else source.page_url(query, page)
        try:
            url = await self.proxy.proxied_url(target)
            data = await self.fetcher.fetch_json(url, headers=self.headers, timeout=timeout or self.timeout)
            items = self._extract_items(data)
        except AresTVError as e:
            logger.warning(f"AresTV[VodApiClient]: 数据源 {source.id} 第{page}页搜索失败: {e}")
            return PageResult(page=page, error=e)
        except Exception as e:
            logger.error(f"AresTV[VodApiClient]: 数据源 {source.id} 第{page}页发生未知错误: {e}", exc_info=True)
            return PageResult(page=page, error=e)

        return PageResult(page=page, raw_items=items, page_count=parse_page_count(data.get("pagecount")))

    @staticmethod
    def _extract_items(data: Any) -> List[Dict[str, Any]]:
        if not isinstance(data, dict):
            raise MalformedResponseError("响应不是JSON对象")
        items = data.get("list")
        if not isinstance(items, list):
            raise MalformedResponseError("响应缺少 list 字段")
        return items
