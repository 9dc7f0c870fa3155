"""
AresTV 影视聚合 - 多源分页搜索聚合器
对每个数据源先抓第1页，依据上游报告的总页数并发抓取后续页，
再按 数据源顺序 -> 页码 -> 页内顺序 合并。任何单页失败只影响该页。
"""
import asyncio
from typing import List, Optional, Tuple

from clients.base_client import BoundedFetcher
from clients.vod_client import VodApiClient
from core.config import AresTVConfig
from core.log import get_logger
from core.normalizer import normalize_vod_item
from core.proxy import PasswordProxyAuth, ProxyAuth, ProxyAuthority
from core.exceptions import UnknownSourceError
from core.source_catalog import SourceCatalog
from core.validators import validate_query
from models.items import CanonicalItem
from models.request import SearchRequest, dedupe_source_ids
from models.results import PageResult, SearchReport, SourceFailure
from models.source import SourceDescriptor

logger = get_logger(__name__)


class SearchAggregator:
    """
    多源搜索聚合器。
    search() 永远不会因为上游失败而抛出；被吞掉的失败可通过 search_with_report() 查看。
    """

    def __init__(self, catalog: SourceCatalog, client: VodApiClient, max_pages: int = 5, max_concurrency: Optional[int] = 16):
        """
        :param catalog: 数据源目录
        :param client: 单页抓取客户端
        :param max_pages: 每个数据源最多抓取的页数（含第1页）
        :param max_concurrency: 单次搜索同时在途的请求上限，0 或 None 表示不限制
        """
        self.catalog = catalog
        self.client = client
        self.max_pages = max(1, max_pages)
        self.max_concurrency = max_concurrency

    @classmethod
    def from_config(cls, config: AresTVConfig, proxy_auth: Optional[ProxyAuth] = None,
                    fetcher: Optional[BoundedFetcher] = None) -> "SearchAggregator":
        """根据配置组装聚合器及其依赖"""
        if proxy_auth is None and config.proxy_password:
            proxy_auth = PasswordProxyAuth(config.proxy_password)
        proxy = ProxyAuthority(config.proxy_url, proxy_auth)
        client = VodApiClient(
            proxy=proxy,
            fetcher=fetcher,
            headers=config.search.headers,
            timeout=config.search.timeout_seconds,
        )
        return cls(
            catalog=SourceCatalog.from_config(config),
            client=client,
            max_pages=config.search.max_pages,
            max_concurrency=config.search.max_concurrency,
        )

    def _new_limiter(self) -> Optional[asyncio.Semaphore]:
        if not self.max_concurrency:
            return None
        return asyncio.Semaphore(self.max_concurrency)

    async def _fetch_page(self, source: SourceDescriptor, query: str, page: int, timeout: Optional[float],
                          limiter: Optional[asyncio.Semaphore]) -> PageResult:
        if limiter is None:
            return await self.client.fetch_page(source, query, page, timeout=timeout)
        async with limiter:
            return await self.client.fetch_page(source, query, page, timeout=timeout)

    async def _collect_source(self, source_id: str, query: str, max_pages: int, timeout: Optional[float],
                              limiter: Optional[asyncio.Semaphore]) -> Tuple[List[CanonicalItem], List[SourceFailure]]:
        """抓取单个数据源的全部页面，返回 (条目, 失败记录)"""
        try:
            source = self.catalog.require(source_id)
        except UnknownSourceError as e:
            logger.warning(f"AresTV[SearchAggregator]: {e}，跳过。")
            return [], [SourceFailure(source_id=source_id, page=0, error=str(e))]

        first = await self._fetch_page(source, query, 1, timeout, limiter)
        if not first.ok:
            return [], [SourceFailure(source_id=source_id, page=1, error=str(first.error))]

        pages = [first]
        if first.raw_items:
            extra_pages = min(first.page_count - 1, max_pages - 1)
            if extra_pages > 0:
                logger.debug(f"AresTV[SearchAggregator]: 数据源 {source_id} 共 {first.page_count} 页，追加抓取 {extra_pages} 页。")
                # gather 按参数顺序返回，与完成先后无关
                pages.extend(await asyncio.gather(*[
                    self._fetch_page(source, query, page, timeout, limiter)
                    for page in range(2, extra_pages + 2)
                ]))

        items: List[CanonicalItem] = []
        failures: List[SourceFailure] = []
        for result in pages:
            if not result.ok:
                failures.append(SourceFailure(source_id=source_id, page=result.page, error=str(result.error)))
                continue
            items.extend(normalize_vod_item(raw, source) for raw in result.raw_items)
        return items, failures

    @validate_query()
    async def search_source(self, source_id: str, query: str) -> List[CanonicalItem]:
        """
        搜索单个数据源

        :param source_id: 数据源ID
        :param query: 搜索关键词
        :return: 该数据源的规范化条目；未知源或失败时为空列表
        """
        items, _ = await self._collect_source(source_id, query, self.max_pages, None, self._new_limiter())
        return items

    @validate_query(empty=SearchReport)
    async def search_with_report(self, query: str, source_ids: List[str], max_pages: Optional[int] = None,
                                 timeout: Optional[float] = None) -> SearchReport:
        """
        并发搜索多个数据源，并附带失败明细

        :param query: 搜索关键词
        :param source_ids: 数据源ID列表，重复项只保留第一次出现
        :param max_pages: 覆盖默认的每源最大页数
        :param timeout: 覆盖默认的单次请求截止时间（秒）
        :return: SearchReport
        """
        ordered_ids = dedupe_source_ids(source_ids)
        pages_limit = max(1, max_pages or self.max_pages)
        limiter = self._new_limiter()
        logger.info(f"AresTV[SearchAggregator]: 开始搜索 '{query}'，数据源: {ordered_ids}")

        results = await asyncio.gather(
            *[self._collect_source(source_id, query, pages_limit, timeout, limiter) for source_id in ordered_ids],
            return_exceptions=True
        )

        report = SearchReport()
        for source_id, result in zip(ordered_ids, results):
            if isinstance(result, Exception):
                logger.error(f"AresTV[SearchAggregator]: 数据源 {source_id} 搜索时出错: {result}")
                report.failures.append(SourceFailure(source_id=source_id, page=0, error=str(result)))
                continue
            items, failures = result
            report.items.extend(items)
            report.failures.extend(failures)

        if report.failures:
            logger.info(f"AresTV[SearchAggregator]: 以下数据源存在失败页面: {report.failed_source_ids}")
        logger.info(f"AresTV[SearchAggregator]: 搜索 '{query}' 完成，共 {len(report.items)} 条结果。")
        return report

    async def search(self, query: str, source_ids: List[str]) -> List[CanonicalItem]:
        """
        并发搜索多个数据源，按 source_ids 的顺序拼接结果。
        失败的数据源不贡献任何条目，也不会出现错误标记。
        """
        report = await self.search_with_report(query, source_ids)
        return report.items

    async def run(self, request: SearchRequest) -> SearchReport:
        """按 SearchRequest 执行搜索"""
        return await self.search_with_report(
            request.query, request.source_ids,
            max_pages=request.max_pages, timeout=request.timeout_seconds
        )
