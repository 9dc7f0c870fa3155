"""
输入验证器模块
提供用于函数输入的装饰器
"""
import inspect
from functools import wraps
from typing import Callable, Any

from core.log import get_logger

logger = get_logger(__name__)


def validate_query(empty: Callable[[], Any] = list, param: str = "query"):
    """
    一个装饰器，用于验证被装饰方法中名为 param 的搜索关键词参数。
    关键词为空或不是字符串时不发起任何请求，直接返回 empty() 的结果；
    否则去掉首尾空白后再传入。

    :param empty: 验证失败时返回值的工厂函数
    :param param: 关键词参数名
    """
    def decorator(func):
        signature = inspect.signature(func)

        @wraps(func)
        async def wrapper(*args, **kwargs):
            bound = signature.bind(*args, **kwargs)
            query = bound.arguments.get(param)
            if not isinstance(query, str) or not query.strip():
                logger.warning(f"Validation failed for {func.__name__}: {param} is empty or not a string.")
                return empty()

            bound.arguments[param] = query.strip()
            return await func(*bound.args, **bound.kwargs)
        return wrapper
    return decorator
