"""
AresTV 影视聚合 - 配置
将插件式的字典配置解析为带默认值的 pydantic 模型
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from core.exceptions import ConfigError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)

# 内置资源站表: id -> {api, name}
DEFAULT_API_SITES: Dict[str, Dict[str, str]] = {
    "dbzy": {
        "api": "https://dbzy.tv/api.php/provide/vod",
        "name": "豆瓣资源",
    },
}


class SearchSettings(BaseModel):
    """资源站搜索相关设置"""
    path: str = "?ac=videolist&wd="
    page_path: str = "?ac=videolist&wd={query}&pg={page}"
    headers: Dict[str, str] = Field(default_factory=lambda: {
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "application/json",
    })
    max_pages: int = Field(default=5, ge=1)
    timeout_seconds: float = Field(default=15.0, gt=0)
    # 单次搜索中同时在途的请求上限，0 表示不限制
    max_concurrency: int = Field(default=16, ge=0)


class DoubanSettings(BaseModel):
    """豆瓣推荐相关设置"""
    endpoint: str = "https://movie.douban.com/j/search_subjects"
    timeout_seconds: float = Field(default=10.0, gt=0)
    page_size: int = Field(default=16, ge=1)
    headers: Dict[str, str] = Field(default_factory=lambda: {
        "User-Agent": DEFAULT_USER_AGENT,
        "Referer": "https://movie.douban.com/",
        "Accept": "application/json, text/plain, */*",
    })


class CustomApiEntry(BaseModel):
    url: str
    name: str


class AresTVConfig(BaseModel):
    """顶层配置"""
    # 为空时直连，不经过代理
    proxy_url: str = ""
    proxy_password: Optional[str] = None
    fallback_relay_url: str = "https://api.allorigins.win/get?url="
    api_sites: Dict[str, Dict[str, str]] = Field(default_factory=lambda: dict(DEFAULT_API_SITES))
    custom_apis: List[CustomApiEntry] = Field(default_factory=list)
    search: SearchSettings = Field(default_factory=SearchSettings)
    douban: DoubanSettings = Field(default_factory=DoubanSettings)
    request_log_enabled: bool = False
    request_log_max_size_mb: int = Field(default=1, ge=1)
    request_log_dir: Optional[str] = None

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]] = None) -> "AresTVConfig":
        """
        从字典构建配置

        :param config: 配置字典，缺省的键使用默认值
        :return: AresTVConfig 实例
        :raises ConfigError: 配置值不合法时
        """
        try:
            return cls.model_validate(config or {})
        except PydanticValidationError as e:
            raise ConfigError(f"配置不合法: {e}") from e
