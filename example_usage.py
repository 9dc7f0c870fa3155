"""
示例脚本，演示如何使用 roles/search_aggregator.py 和 clients/douban_client.py
进行多源搜索并获取豆瓣推荐。

用法: python example_usage.py [关键词] [数据源ID ...]
"""

import asyncio
import sys

from clients.douban_client import DoubanClient
from core.config import AresTVConfig
from core.exceptions import RecommendationUnavailableError
from core.log import setup_request_logger
from roles.browse_session import BrowseSession
from roles.search_aggregator import SearchAggregator


async def main(query: str, source_ids: list):
    """主函数，执行搜索与推荐流程。"""
    config_dict = {"request_log_enabled": True}
    config = AresTVConfig.from_dict(config_dict)
    setup_request_logger(config.model_dump())

    # 1. 多源搜索
    aggregator = SearchAggregator.from_config(config)
    source_ids = source_ids or aggregator.catalog.source_ids()
    print(f"Searching '{query}' in {source_ids}...")
    report = await aggregator.search_with_report(query, source_ids)

    print(f"Found {len(report.items)} results.")
    for i, item in enumerate(report.items[:20]):
        print(f"  {i+1}. [{item.source_name}] {item.title} {item.year} {item.remark}")
    if report.failures:
        print(f"Sources with failed pages: {report.failed_source_ids}")

    # 2. 豆瓣推荐
    client = DoubanClient.from_config(config)
    session = BrowseSession(page_size=config.douban.page_size)
    print(f"\nFetching Douban recommendations ({session.category.value} / {session.current_tag})...")
    try:
        entries = await session.fetch(client)
    except RecommendationUnavailableError as e:
        print(f"Recommendations unavailable: {e}")
        return

    if not entries:
        print("No recommendations for this tag.")
        return
    for entry in entries:
        print(f"  ★ {entry.rating or '暂无'}  {entry.title}  {entry.url}")


# 确保此脚本作为主程序运行时才执行
if __name__ == "__main__":
    keyword = sys.argv[1] if len(sys.argv) > 1 else "流浪地球"
    asyncio.run(main(keyword, sys.argv[2:]))
