"""
AresTV 影视聚合 - 数据模型 (Results)
定义聚合器在各个阶段传递的内部数据结构。
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .items import CanonicalItem


@dataclass
class PageResult:
    """
    单个数据源某一页的抓取结果。
    raw_items 为 None 表示该页抓取失败。
    """
    page: int
    raw_items: Optional[List[Dict[str, Any]]] = None
    page_count: int = 1
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SourceFailure:
    """被吞掉的单页失败记录"""
    source_id: str
    page: int
    error: str


@dataclass
class SearchReport:
    """
    多源搜索的完整结果，附带被静默处理的失败明细。
    """
    items: List[CanonicalItem] = field(default_factory=list)
    failures: List[SourceFailure] = field(default_factory=list)

    @property
    def failed_source_ids(self) -> List[str]:
        return sorted({failure.source_id for failure in self.failures})
