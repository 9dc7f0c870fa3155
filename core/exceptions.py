"""
AresTV 影视聚合 - 自定义异常类
"""
from typing import Optional


class AresTVError(Exception):
    """项目的基础异常类"""
    pass

class ClientError(AresTVError):
    """客户端相关错误，例如API请求失败"""
    pass

class ConfigError(AresTVError):
    """配置相关错误"""
    pass

class ParsingError(AresTVError):
    """数据解析错误，例如响应体不是合法的JSON"""
    pass

class ValidationError(AresTVError, ValueError):
    """输入验证错误"""
    pass


class UnknownSourceError(ConfigError):
    """请求的数据源ID既不是内置源，也无法在自定义源中解析"""

    def __init__(self, source_id: str):
        super().__init__(f"未知的数据源: {source_id}")
        self.source_id = source_id


class FetchTimeoutError(ClientError):
    """请求在截止时间内未完成，已被中止"""

    def __init__(self, url: str, timeout: float):
        super().__init__(f"请求超时 ({timeout}s): {url}")
        self.url = url
        self.timeout = timeout


class UpstreamStatusError(ClientError):
    """上游返回了非 2xx 状态码"""

    def __init__(self, url: str, status: int):
        super().__init__(f"HTTP {status}: {url}")
        self.url = url
        self.status = status


class TransportError(ClientError):
    """连接、DNS 等传输层错误"""
    pass


class MalformedResponseError(ParsingError):
    """响应无法解析，或缺少预期的结构"""
    pass


class FallbackExhaustedError(ClientError):
    """备用中转也未能返回有效数据"""
    pass


class RecommendationUnavailableError(AresTVError):
    """主代理与备用中转均失败，推荐列表不可用"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
