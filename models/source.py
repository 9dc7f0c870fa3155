"""
数据源描述模型
描述一个可按模板URL检索的第三方影视资源站
"""
from enum import Enum
from urllib.parse import quote

from pydantic import BaseModel, Field


def encode_component(value: str) -> str:
    """与浏览器 encodeURIComponent 一致的百分号编码"""
    return quote(str(value), safe="!~*'()")


class SourceKind(str, Enum):
    BUILTIN = "builtin"
    CUSTOM = "custom"


class SourceDescriptor(BaseModel):
    """
    单个数据源的完整描述
    由内置站点表或自定义源登记表解析得到
    """
    id: str = Field(description="数据源ID，自定义源形如 'custom_0'")
    name: str = Field(description="展示用名称")
    base_url: str = Field(description="API 根地址")
    search_path: str = Field(
        default="?ac=videolist&wd=",
        description="首页搜索路径，关键词直接拼接在末尾"
    )
    page_path: str = Field(
        default="?ac=videolist&wd={query}&pg={page}",
        description="分页路径模板，含 {query} 与 {page} 占位符"
    )
    kind: SourceKind = SourceKind.BUILTIN

    @property
    def is_custom(self) -> bool:
        return self.kind == SourceKind.CUSTOM

    def search_url(self, query: str) -> str:
        """构造第1页的搜索地址"""
        return self.base_url + self.search_path + encode_component(query)

    def page_url(self, query: str, page: int) -> str:
        """构造第 page 页的搜索地址"""
        path = self.page_path.replace("{query}", encode_component(query)).replace("{page}", str(page))
        return self.base_url + path
