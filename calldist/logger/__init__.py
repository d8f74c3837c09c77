"""
calldist 日志模块

此模块提供整个应用程序的日志记录工具。
"""

from calldist.logger.core import (
    configure_logger,
    close_file_logging,
    resolve_level,
    get_logger,
    debug,
    info,
    warning,
    error,
    critical,
    get_timestamp,
)

from calldist.logger.decorators import (
    log_function,
    log_result,
    log_search_result,
)

from calldist.logger.config import (
    setup_file_logging,
    setup_console_logging,
    setup_application_logging,
)

__all__ = [
    # 核心日志函数
    "configure_logger",
    "close_file_logging",
    "resolve_level",
    "get_logger",
    "debug",
    "info",
    "warning",
    "error",
    "critical",
    # 日志装饰器
    "log_function",
    "log_result",
    "log_search_result",
    # 配置工具
    "setup_file_logging",
    "setup_console_logging",
    "setup_application_logging",
    "get_timestamp",
]
