"""
AresTV 影视聚合 - 数据模型包
"""

# 从子模块导入所有模型
from .source import SourceDescriptor, SourceKind
from .items import CanonicalItem, RecommendationEntry, UNKNOWN_TITLE
from .request import Category, SearchRequest, RecommendationRequest
from .results import PageResult, SourceFailure, SearchReport

__all__ = [
    "SourceDescriptor",
    "SourceKind",
    "CanonicalItem",
    "RecommendationEntry",
    "UNKNOWN_TITLE",
    "Category",
    "SearchRequest",
    "RecommendationRequest",
    "PageResult",
    "SourceFailure",
    "SearchReport"
]
