"""
请求数据模型
定义搜索与推荐两条路径的一次性请求参数
"""
from enum import Enum
from typing import Iterable, List
from pydantic import BaseModel, Field, field_validator


def dedupe_source_ids(source_ids: Iterable[str]) -> List[str]:
    """去掉重复的数据源ID，保留首次出现的顺序"""
    return list(dict.fromkeys(source_ids))


class Category(str, Enum):
    MOVIE = "movie"
    TV = "tv"


class SearchRequest(BaseModel):
    """
    多源搜索请求
    source_ids 会去重并保留首次出现的顺序
    """
    query: str
    source_ids: List[str] = Field(default_factory=list)
    max_pages: int = Field(default=5, ge=1)
    timeout_seconds: float = Field(default=15.0, gt=0)

    @field_validator("source_ids")
    @classmethod
    def _dedupe_source_ids(cls, value: List[str]) -> List[str]:
        return dedupe_source_ids(value)


class RecommendationRequest(BaseModel):
    """豆瓣标签推荐请求"""
    category: Category = Category.MOVIE
    tag: str = "热门"
    page_limit: int = Field(default=16, ge=1)
    page_start: int = Field(default=0, ge=0)
