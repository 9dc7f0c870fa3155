"""
规范化条目模型
所有数据源的搜索结果与豆瓣推荐条目，在进入展示层前都会被转换为这里的结构
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

UNKNOWN_TITLE = "未知标题"


class CanonicalItem(BaseModel):
    """
    规范化后的影视条目
    每个字段取自一组按优先级排列的提供方别名中第一个非空的值
    """
    title: str = Field(default=UNKNOWN_TITLE, min_length=1)
    cover: str = ""
    year: str = ""
    remark: str = ""
    area: str = ""
    type: str = ""
    score: str = ""
    id: str = ""
    source_name: str = ""
    source_id: str = ""
    api_url: Optional[str] = Field(
        default=None,
        description="自定义源的API根地址，内置源为 None"
    )
    raw: Dict[str, Any] = Field(
        default_factory=dict,
        description="提供方原始字段的副本"
    )


class RecommendationEntry(BaseModel):
    """豆瓣推荐条目"""
    title: str = Field(default=UNKNOWN_TITLE, min_length=1)
    cover: str = ""
    rating: str = ""
    url: str = ""
    id: str = ""
    category: str = "movie"
