"""
条目规范化
不同资源站对同一含义的字段使用不同的键名，这里按固定的优先级取第一个非空值，
输出统一的 CanonicalItem / RecommendationEntry。纯函数，不做任何 I/O，也不会抛出异常。
"""
from typing import Any, Dict, Mapping, Optional, Sequence

from models.items import UNKNOWN_TITLE, CanonicalItem, RecommendationEntry
from models.source import SourceDescriptor

# 规范字段 -> 提供方别名（按优先级）
VOD_FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "title": ("name", "vod_name", "title", "vod_title", "videoName"),
    "cover": ("pic", "vod_pic", "cover", "image", "vod_pic_thumb"),
    "year": ("year", "vod_year", "releaseyear"),
    "remark": ("note", "vod_remarks", "remarks", "remark", "type_name", "category"),
    "area": ("area", "vod_area", "region"),
    "type": ("type", "type_name", "vod_class", "class"),
    "score": ("score", "rating", "rate"),
    "id": ("id", "vod_id", "_id"),
}

DOUBAN_FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "title": ("title",),
    "cover": ("cover",),
    "rating": ("rate",),
    "url": ("url",),
    "id": ("id",),
}


def pick(raw: Mapping[str, Any], aliases: Sequence[str]) -> str:
    """
    返回 aliases 中第一个非空值的字符串形式，全部为空时返回空字符串。
    None 与去除空白后为空的值视为空。
    """
    for key in aliases:
        value = raw.get(key)
        if value is None:
            continue
        text = str(value)
        if text.strip():
            return text
    return ""


def _resolve(raw: Any, aliases: Dict[str, Sequence[str]]) -> Dict[str, str]:
    if not isinstance(raw, Mapping):
        raw = {}
    return {field: pick(raw, keys) for field, keys in aliases.items()}


def normalize_vod_item(raw: Any, source: Optional[SourceDescriptor] = None) -> CanonicalItem:
    """
    规范化一个资源站条目

    :param raw: 提供方原始条目，不会被修改
    :param source: 条目所属的数据源，用于标注来源
    :return: CanonicalItem
    """
    fields = _resolve(raw, VOD_FIELD_ALIASES)
    fields["title"] = fields["title"] or UNKNOWN_TITLE

    if source is not None:
        fields["source_name"] = source.name
        fields["source_id"] = source.id
        if source.is_custom:
            fields["api_url"] = source.base_url

    return CanonicalItem(raw=dict(raw) if isinstance(raw, Mapping) else {}, **fields)


def normalize_douban_subject(raw: Any, category: str = "movie") -> RecommendationEntry:
    """规范化一个豆瓣推荐条目"""
    fields = _resolve(raw, DOUBAN_FIELD_ALIASES)
    fields["title"] = fields["title"] or UNKNOWN_TITLE
    return RecommendationEntry(category=category, **fields)
