"""
AresTV 影视聚合 - Pytest 配置和共享 Fixtures
"""
import asyncio
import sys
import os
from typing import Any, Dict, Optional

# 将项目根目录添加到 Python 路径中，使未安装时也能直接运行 pytest
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

import pytest

from core.exceptions import FetchTimeoutError
from core.source_catalog import CustomSourceRegistry, SourceCatalog

# --- Fakes ---

class FakeFetcher:
    """
    按 URL 返回预设响应的假 BoundedFetcher，完全匹配优先，其次子串匹配。
    routes 的值可以是 JSON 数据、异常实例，或 (延迟秒数, 值) 元组。
    calls 与 timeouts 按调用顺序记录请求地址和截止时间。
    """
    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes = routes or {}
        self.calls = []
        self.timeouts = []

    async def fetch_json(self, url, headers=None, timeout=None):
        self.calls.append(url)
        self.timeouts.append(timeout)
        if url in self.routes:
            return await self._respond(self.routes[url])
        for fragment, value in self.routes.items():
            if fragment in url:
                return await self._respond(value)
        raise FetchTimeoutError(url, timeout or 0)

    async def _respond(self, value):
        if isinstance(value, tuple):
            delay, value = value
            await asyncio.sleep(delay)
        if isinstance(value, Exception):
            raise value
        return value


# --- Pytest Fixtures ---

@pytest.fixture
def catalog():
    """提供两个内置源与一个自定义源的目录"""
    registry = CustomSourceRegistry([{"url": "https://custom.example.com/api", "name": "自定义源"}])
    return SourceCatalog(
        api_sites={
            "p1": {"api": "https://p1.example.com/api", "name": "资源一"},
            "p2": {"api": "https://p2.example.com/api", "name": "资源二"},
        },
        custom_registry=registry,
    )

@pytest.fixture
def fetcher_factory():
    """提供构造带路由假抓取器的工厂"""
    return FakeFetcher
