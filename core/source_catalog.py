"""
数据源目录
内置站点表 + 用户可扩展的自定义源登记表，统一解析为 SourceDescriptor
"""
from typing import Dict, List, Optional

from core.config import AresTVConfig
from core.exceptions import UnknownSourceError, ValidationError
from core.log import get_logger
from models.source import SourceDescriptor, SourceKind

logger = get_logger(__name__)

CUSTOM_PREFIX = "custom_"


class CustomSourceRegistry:
    """
    自定义源登记表，按下标寻址。
    持久化由外部协作方负责，这里只保存内存中的列表。
    """

    def __init__(self, entries: Optional[List[Dict[str, str]]] = None):
        self._entries: List[Dict[str, str]] = []
        for entry in entries or []:
            self.add(entry["url"], entry["name"])

    def add(self, url: str, name: str) -> str:
        """
        登记一个自定义源

        :return: 新源的ID，形如 'custom_3'
        """
        url = (url or "").strip()
        name = (name or "").strip()
        if not url or not name:
            raise ValidationError("自定义源的 url 与 name 均不能为空")
        self._entries.append({"url": url, "name": name})
        return f"{CUSTOM_PREFIX}{len(self._entries) - 1}"

    def get(self, index: int) -> Optional[Dict[str, str]]:
        if 0 <= index < len(self._entries):
            return dict(self._entries[index])
        return None

    def to_list(self) -> List[Dict[str, str]]:
        return [dict(entry) for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)


class SourceCatalog:
    """数据源目录，只读地被聚合器并发使用"""

    def __init__(self, api_sites: Dict[str, Dict[str, str]], custom_registry: Optional[CustomSourceRegistry] = None,
                 search_path: str = "?ac=videolist&wd=", page_path: str = "?ac=videolist&wd={query}&pg={page}"):
        self.api_sites = api_sites
        self.custom_registry = custom_registry or CustomSourceRegistry()
        self.search_path = search_path
        self.page_path = page_path

    @classmethod
    def from_config(cls, config: AresTVConfig) -> "SourceCatalog":
        registry = CustomSourceRegistry([entry.model_dump() for entry in config.custom_apis])
        return cls(
            api_sites=config.api_sites,
            custom_registry=registry,
            search_path=config.search.path,
            page_path=config.search.page_path,
        )

    def resolve(self, source_id: str) -> Optional[SourceDescriptor]:
        """
        解析数据源ID

        :param source_id: 内置源ID，或 'custom_<下标>'
        :return: SourceDescriptor，无法解析时返回 None
        """
        if source_id.startswith(CUSTOM_PREFIX):
            index_str = source_id[len(CUSTOM_PREFIX):]
            if not index_str.isdigit():
                return None
            entry = self.custom_registry.get(int(index_str))
            if not entry:
                return None
            return SourceDescriptor(
                id=source_id,
                name=entry["name"],
                base_url=entry["url"],
                search_path=self.search_path,
                page_path=self.page_path,
                kind=SourceKind.CUSTOM,
            )

        site = self.api_sites.get(source_id)
        if not site or not site.get("api"):
            return None
        return SourceDescriptor(
            id=source_id,
            name=site.get("name") or source_id,
            base_url=site["api"],
            search_path=self.search_path,
            page_path=self.page_path,
            kind=SourceKind.BUILTIN,
        )

    def require(self, source_id: str) -> SourceDescriptor:
        """与 resolve 相同，但无法解析时抛出 UnknownSourceError"""
        descriptor = self.resolve(source_id)
        if descriptor is None:
            raise UnknownSourceError(source_id)
        return descriptor

    def source_ids(self) -> List[str]:
        """所有可用的数据源ID，内置源在前"""
        custom_ids = [f"{CUSTOM_PREFIX}{i}" for i in range(len(self.custom_registry))]
        return list(self.api_sites.keys()) + custom_ids
