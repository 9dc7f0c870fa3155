"""
AresTV 影视聚合 - DoubanClient 单元测试
"""
import json

import pytest

from clients.base_client import BoundedFetcher
from clients.douban_client import DoubanClient
from clients.fallback_client import FallbackGateway
from core.config import AresTVConfig
from core.exceptions import (
    FetchTimeoutError,
    RecommendationUnavailableError,
    TransportError,
    UpstreamStatusError,
    ValidationError,
)
from core.proxy import ProxyAuthority

SUBJECTS = [
    {"title": "霸王别姬", "rate": "9.6", "cover": "https://img.example.com/1.jpg",
     "url": "https://movie.douban.com/subject/1291546/", "id": "1291546"},
    {"title": "", "rate": "", "cover": None, "url": "https://movie.douban.com/subject/2/", "id": 2},
]


def build_client(fetcher):
    """主代理与备用中转共用同一个假抓取器，路由中备用中转的地址需写在前面"""
    return DoubanClient(
        proxy=ProxyAuthority(""),
        fallback=FallbackGateway(fetcher=fetcher),
        fetcher=fetcher,
    )


class TestDoubanClient:
    """测试 DoubanClient"""

    @pytest.mark.asyncio
    async def test_recommend_success(self, fetcher_factory):
        """测试主代理成功时返回规范化的推荐条目"""
        # Arrange
        fetcher = fetcher_factory({"movie.douban.com": {"subjects": SUBJECTS}})
        client = build_client(fetcher)

        # Act
        entries = await client.recommend("tv", "热门", page_limit=16, page_start=32)

        # Assert
        assert len(entries) == 2
        assert entries[0].title == "霸王别姬"
        assert entries[0].rating == "9.6"
        assert entries[0].category == "tv"
        assert entries[1].title == "未知标题"
        assert entries[1].cover == ""
        assert entries[1].id == "2"
        assert len(fetcher.calls) == 1
        url = fetcher.calls[0]
        assert url.startswith("https://movie.douban.com/j/search_subjects?")
        for fragment in ("type=tv", "tag=%E7%83%AD%E9%97%A8", "sort=recommend", "page_limit=16", "page_start=32"):
            assert fragment in url

    @pytest.mark.asyncio
    async def test_empty_subjects_returns_empty_list(self, fetcher_factory):
        """测试 subjects 为空时返回空列表而不是错误"""
        fetcher = fetcher_factory({"movie.douban.com": {"subjects": []}})
        client = build_client(fetcher)

        entries = await client.recommend("movie", "冷门佳片")

        assert entries == []
        assert len(fetcher.calls) == 1

    @pytest.mark.asyncio
    async def test_primary_failure_uses_fallback(self, fetcher_factory):
        """测试主代理失败、备用中转成功时返回备用数据"""
        # Arrange
        fetcher = fetcher_factory({
            "allorigins": {"contents": json.dumps({"subjects": SUBJECTS[:1]})},
            "movie.douban.com": UpstreamStatusError("douban", 403),
        })
        client = build_client(fetcher)

        # Act
        entries = await client.recommend("movie", "热门")

        # Assert
        assert [entry.title for entry in entries] == ["霸王别姬"]
        assert len(fetcher.calls) == 2
        assert "allorigins" in fetcher.calls[1]

    @pytest.mark.asyncio
    async def test_non_object_primary_body_uses_fallback(self, fetcher_factory):
        """测试主代理返回非对象 JSON 时也会尝试备用中转"""
        fetcher = fetcher_factory({
            "allorigins": {"contents": json.dumps({"subjects": []})},
            "movie.douban.com": ["unexpected"],
        })
        client = build_client(fetcher)

        entries = await client.recommend("movie", "热门")

        assert entries == []
        assert len(fetcher.calls) == 2

    @pytest.mark.asyncio
    async def test_both_paths_failing_raises(self, fetcher_factory):
        """测试主代理与备用中转都失败时抛出 RecommendationUnavailableError"""
        # Arrange
        fetcher = fetcher_factory({
            "allorigins": TransportError("relay down"),
            "movie.douban.com": FetchTimeoutError("douban", 10.0),
        })
        client = build_client(fetcher)

        # Act & Assert
        with pytest.raises(RecommendationUnavailableError) as exc_info:
            await client.recommend("movie", "热门")
        assert exc_info.value.cause is not None
        assert len(fetcher.calls) == 2

    @pytest.mark.asyncio
    async def test_unparseable_proxy_url_uses_fallback(self, fetcher_factory):
        """测试代理地址无法解析（非法端口）时仍会尝试备用中转"""
        # Arrange
        relay = fetcher_factory({"allorigins": {"contents": json.dumps({"subjects": SUBJECTS[:1]})}})
        client = DoubanClient(
            proxy=ProxyAuthority("http://proxy.example.com:abc/"),
            fallback=FallbackGateway(fetcher=relay),
            fetcher=BoundedFetcher(default_timeout=1.0),
        )

        # Act
        entries = await client.recommend("movie", "热门")

        # Assert
        assert [entry.title for entry in entries] == ["霸王别姬"]
        assert len(relay.calls) == 1

    @pytest.mark.asyncio
    async def test_fallback_without_contents_raises(self, fetcher_factory):
        """测试备用中转缺少 contents 时视为失败"""
        fetcher = fetcher_factory({
            "allorigins": {"status": {"http_code": 403}},
            "movie.douban.com": UpstreamStatusError("douban", 418),
        })
        client = build_client(fetcher)

        with pytest.raises(RecommendationUnavailableError):
            await client.recommend("movie", "热门")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [
        {"category": "anime", "tag": "热门"},
        {"category": "movie", "tag": "热门", "page_start": -1},
        {"category": "movie", "tag": "热门", "page_limit": 0},
    ])
    async def test_invalid_request_raises_validation_error(self, fetcher_factory, kwargs):
        """测试参数不合法时在发请求前抛出 ValidationError"""
        fetcher = fetcher_factory()
        client = build_client(fetcher)

        with pytest.raises(ValidationError):
            await client.recommend(**kwargs)
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_from_config_uses_proxy_and_password(self, fetcher_factory):
        """测试 from_config 通过代理请求并附加鉴权参数"""
        # Arrange
        config = AresTVConfig.from_dict({
            "proxy_url": "https://proxy.example.com/p/",
            "proxy_password": "secret",
        })
        fetcher = fetcher_factory({"proxy.example.com": {"subjects": SUBJECTS[:1]}})
        client = DoubanClient.from_config(config, fetcher=fetcher)

        # Act
        entries = await client.recommend("movie", "热门")

        # Assert
        assert len(entries) == 1
        url = fetcher.calls[0]
        assert url.startswith("https://proxy.example.com/p/https%3A%2F%2Fmovie.douban.com")
        assert "auth=" in url and "&t=" in url
