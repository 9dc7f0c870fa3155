"""
AresTV 影视聚合 - 推荐浏览会话
保存当前分类、标签、偏移量以及两个分类各自的标签列表。
由展示层持有并显式传递，不使用模块级全局状态。
"""
from typing import Dict, List, Optional, Union

from clients.douban_client import DoubanClient
from core.exceptions import ValidationError
from core.log import get_logger
from models.items import RecommendationEntry
from models.request import Category, RecommendationRequest

logger = get_logger(__name__)

HOT_TAG = "热门"

DEFAULT_MOVIE_TAGS = [
    "热门", "最新", "经典", "豆瓣高分", "冷门佳片", "华语", "欧美", "韩国", "日本",
    "动作", "喜剧", "日综", "爱情", "科幻", "悬疑", "恐怖", "治愈",
]
DEFAULT_TV_TAGS = ["热门", "美剧", "英剧", "韩剧", "日剧", "国产剧", "港剧", "日本动画", "综艺", "纪录片"]

# “换一批”最多翻到第几批后回到开头
MAX_BATCHES = 9


def _as_category(value: Union[str, Category]) -> Category:
    try:
        return Category(value)
    except ValueError as e:
        raise ValidationError(f"未知的分类: {value}") from e


class BrowseSession:
    """推荐浏览会话"""

    def __init__(self, page_size: int = 16, category: Union[str, Category] = Category.MOVIE):
        if page_size < 1:
            raise ValidationError("page_size 必须为正整数")
        self.page_size = page_size
        self.category = _as_category(category)
        self.current_tag = HOT_TAG
        self.page_start = 0
        self._tags: Dict[Category, List[str]] = {
            Category.MOVIE: list(DEFAULT_MOVIE_TAGS),
            Category.TV: list(DEFAULT_TV_TAGS),
        }

    @property
    def current_tags(self) -> List[str]:
        return list(self._tags[self.category])

    def switch_category(self, category: Union[str, Category]) -> bool:
        """
        切换电影/电视剧

        :return: 是否真的发生了切换
        """
        category = _as_category(category)
        if category == self.category:
            return False
        self.category = category
        self.current_tag = HOT_TAG
        self.page_start = 0
        return True

    def select_tag(self, tag: str) -> bool:
        """选择标签并回到第一批，返回是否发生了变化"""
        if tag == self.current_tag:
            return False
        self.current_tag = tag
        self.page_start = 0
        return True

    def next_batch(self) -> int:
        """换一批，超过最大批次后回到开头，返回新的偏移量"""
        self.page_start += self.page_size
        if self.page_start > MAX_BATCHES * self.page_size:
            self.page_start = 0
        return self.page_start

    def add_tag(self, tag: str) -> bool:
        """
        为当前分类添加标签，忽略大小写去重

        :return: 是否添加成功
        """
        tag = (tag or "").strip()
        if not tag:
            raise ValidationError("标签名称不能为空")
        tags = self._tags[self.category]
        if any(existing.lower() == tag.lower() for existing in tags):
            logger.info(f"AresTV[BrowseSession]: 标签 '{tag}' 已存在。")
            return False
        tags.append(tag)
        return True

    def delete_tag(self, tag: str) -> bool:
        """
        删除当前分类的标签，'热门' 不可删除。
        删除的恰好是当前标签时，回到 '热门' 的第一批。
        """
        if tag == HOT_TAG:
            logger.info("AresTV[BrowseSession]: 热门标签不能删除。")
            return False
        tags = self._tags[self.category]
        if tag not in tags:
            return False
        tags.remove(tag)
        if self.current_tag == tag:
            self.current_tag = HOT_TAG
            self.page_start = 0
        return True

    def reset_tags(self):
        """恢复当前分类的默认标签"""
        defaults = DEFAULT_MOVIE_TAGS if self.category == Category.MOVIE else DEFAULT_TV_TAGS
        self._tags[self.category] = list(defaults)
        self.current_tag = HOT_TAG
        self.page_start = 0

    def tags(self) -> Dict[str, List[str]]:
        """导出标签列表，供外部持久化"""
        return {category.value: list(tags) for category, tags in self._tags.items()}

    def load_tags(self, saved: Optional[Dict[str, List[str]]]):
        """载入外部持久化的标签列表，缺失的分类使用默认值"""
        saved = saved or {}
        self._tags[Category.MOVIE] = list(saved.get(Category.MOVIE.value) or DEFAULT_MOVIE_TAGS)
        self._tags[Category.TV] = list(saved.get(Category.TV.value) or DEFAULT_TV_TAGS)

    def recommendation_request(self) -> RecommendationRequest:
        return RecommendationRequest(
            category=self.category,
            tag=self.current_tag,
            page_limit=self.page_size,
            page_start=self.page_start,
        )

    async def fetch(self, client: DoubanClient) -> List[RecommendationEntry]:
        """按会话当前状态获取推荐列表，失败时 RecommendationUnavailableError 原样上抛"""
        return await client.fetch(self.recommendation_request())
