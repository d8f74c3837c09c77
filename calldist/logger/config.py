"""
日志配置工具

把命令行参数（--debug、--verbose、--log-file）转换为 calldist 日志器的配置。
"""

import logging
import os
from typing import Optional

from calldist.logger.core import (
    DETAILED_FORMAT,
    PLAIN_FORMAT,
    configure_logger,
    get_logger,
    resolve_level,
)
from calldist.utils.fs_utils import ensure_directory_exists


def _prepare_log_file(log_file: str) -> None:
    log_dir = os.path.dirname(log_file)
    if log_dir:
        ensure_directory_exists(log_dir)


def setup_file_logging(log_file: str, level: int = logging.INFO) -> None:
    """
    将日志同时写入文件，替换之前配置的日志文件。

    参数:
        log_file: 日志文件路径，缺失的目录会被创建
        level: 日志级别 (默认: INFO)
    """
    _prepare_log_file(log_file)
    configure_logger(level=level, log_format=DETAILED_FORMAT, log_file=log_file)


def setup_console_logging(level: int = logging.INFO, detailed: bool = False) -> None:
    """只输出到控制台；detailed 为 True 时带时间戳和日志器名称。"""
    configure_logger(level=level, log_format=DETAILED_FORMAT if detailed else PLAIN_FORMAT)


def setup_application_logging(
    log_file: Optional[str] = None,
    verbose: bool = False,
    debug: bool = False,
    level: int = logging.WARNING,
) -> None:
    """
    按命令行参数配置日志。

    默认只显示警告和错误，这样控制台报告不会被日志淹没。

    参数:
        log_file: 日志文件路径 (默认: None)
        verbose: 显示 INFO 级别的查询进度
        debug: 显示 DEBUG 级别的搜索细节
        level: 基础日志级别 (默认: WARNING)
    """
    if log_file:
        _prepare_log_file(log_file)

    detailed = debug or bool(log_file)
    configure_logger(
        level=level,
        log_format=DETAILED_FORMAT if detailed else PLAIN_FORMAT,
        log_file=log_file,
        verbose=verbose,
        debug=debug,
    )

    effective = resolve_level(level, verbose, debug)
    log = get_logger("calldist.logger")
    log.debug(f"日志已配置 - 级别: {logging.getLevelName(effective)}")
    if log_file:
        log.info(f"日志文件: {log_file}")
