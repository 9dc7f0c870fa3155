"""
AresTV 影视聚合 - 内部日志系统
提供统一的 logger 获取方法，以及一个可按配置开启的上游请求追踪日志。
"""
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional
from pathlib import Path

# 请求追踪日志相关的全局变量
request_logger: Optional[logging.Logger] = None
request_logging_enabled = False

def setup_request_logger(config: dict = None):
    """根据配置设置上游请求追踪专用logger"""
    global request_logger, request_logging_enabled

    if config:
        request_logging_enabled = config.get("request_log_enabled", False)
        max_size_mb = config.get("request_log_max_size_mb", 1)
        log_dir = config.get("request_log_dir")
    else:
        request_logging_enabled = False
        max_size_mb = 1
        log_dir = None

    if not request_logging_enabled:
        request_logger = None
        return

    request_logger = logging.getLogger('arestv_upstream_requests')
    request_logger.setLevel(logging.INFO)
    # 不向 root logger 传播，避免重复输出
    request_logger.propagate = False
    request_logger.handlers.clear()

    log_path = Path(log_dir) if log_dir else Path(__file__).parent.parent / "logs"
    log_path.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        log_path / "upstream_requests.log",
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=1,
        encoding='utf-8'
    )
    handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    request_logger.addHandler(handler)

def log_upstream_request(url: str, outcome: str, elapsed_ms: float):
    """记录一次上游请求的结果。"""
    if not request_logging_enabled or request_logger is None:
        return

    request_logger.info(f"GET {url} -> {outcome} ({elapsed_ms:.0f}ms)")


def get_logger(name: str) -> logging.Logger:
    """
    获取一个日志记录器实例。

    Args:
        name (str): Logger 的名称，通常传入 __name__。

    Returns:
        logging.Logger: 配置好的 logger 实例。
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        # 避免重复添加 handler
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    return logger
