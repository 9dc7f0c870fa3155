"""
代理地址构造
把外部 URL 包装为经代理转发的地址，并可选地附加鉴权参数
"""
import hashlib
import time
from abc import ABC, abstractmethod
from typing import Optional

from core.log import get_logger
from models.source import encode_component

logger = get_logger(__name__)


class ProxyAuth(ABC):
    """代理鉴权能力接口"""

    @abstractmethod
    async def add_auth_to_proxy_url(self, proxied_url: str) -> str:
        """
        为已经拼好的代理地址附加鉴权信息

        :param proxied_url: 代理地址
        :return: 附加鉴权信息后的地址
        """
        pass


class NoProxyAuth(ProxyAuth):
    """默认实现，不附加任何鉴权信息"""

    async def add_auth_to_proxy_url(self, proxied_url: str) -> str:
        return proxied_url


class PasswordProxyAuth(ProxyAuth):
    """
    以密码哈希为凭据的代理鉴权。
    在地址上追加 auth=<sha256(password)> 与毫秒时间戳 t。
    """

    def __init__(self, password: str):
        self._password_hash = hashlib.sha256(password.encode("utf-8")).hexdigest()

    async def add_auth_to_proxy_url(self, proxied_url: str) -> str:
        separator = "&" if "?" in proxied_url else "?"
        timestamp = int(time.time() * 1000)
        return f"{proxied_url}{separator}auth={self._password_hash}&t={timestamp}"


class ProxyAuthority:
    """
    代理地址构造器，尽力而为，永不失败
    """

    def __init__(self, proxy_url: str = "", auth: Optional[ProxyAuth] = None):
        """
        :param proxy_url: 代理前缀，例如 'https://example.com/proxy/'；为空时直连
        :param auth: 可选的鉴权能力，缺省为不鉴权
        """
        self.proxy_url = proxy_url
        self.auth = auth or NoProxyAuth()

    async def proxied_url(self, url: str) -> str:
        """
        构造可直接请求的代理地址

        :param url: 目标外部地址
        :return: 代理地址；鉴权失败时退回未鉴权的代理地址
        """
        if not self.proxy_url:
            return url

        base = self.proxy_url + encode_component(url)
        try:
            return await self.auth.add_auth_to_proxy_url(base)
        except Exception as e:
            logger.warning(f"AresTV[ProxyAuthority]: 附加代理鉴权失败，改用未鉴权地址: {e}")
            return base
