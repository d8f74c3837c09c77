"""
日志装饰器模块 - 提供自动添加日志功能的装饰器。
"""

import functools
import inspect
from typing import Any, Callable, TypeVar, cast

from calldist.logger.core import debug, info, warning, error, critical

F = TypeVar("F", bound=Callable[..., Any])

_LOG_FUNCS = {
    "debug": debug,
    "info": info,
    "warning": warning,
    "error": error,
    "critical": critical,
}


def log_function(level: str = "info") -> Callable[[F], F]:
    """
    函数执行日志装饰器 - 记录函数的开始和结束。

    参数:
        level: 日志级别，可选值: "debug", "info", "warning", "error", "critical"

    返回:
        装饰器函数
    """
    log_func = _LOG_FUNCS.get(level, info)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            module = inspect.getmodule(func)
            module_name = module.__name__ if module else "unknown"
            func_name = f"{module_name}.{func.__qualname__}"

            log_func(f"开始执行 {func_name}")

            try:
                result = func(*args, **kwargs)
                log_func(f"完成执行 {func_name}")
                return result
            except Exception as e:
                error(f"{func_name} 执行出错: {type(e).__name__}: {str(e)}")
                raise

        return cast(F, wrapper)

    return decorator


def log_result(func: F) -> F:
    """
    记录函数返回结果的装饰器。
    适用于返回值是简单类型的函数。
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        result = func(*args, **kwargs)

        if isinstance(result, (list, set, tuple)) and len(result) > 0:
            debug(f"{func.__name__} 返回了 {len(result)} 个项目")
        elif isinstance(result, dict) and len(result) > 0:
            debug(f"{func.__name__} 返回了 {len(result)} 个键值对")
        elif result is not None:
            debug(f"{func.__name__} 返回结果: {result}")

        return result

    return cast(F, wrapper)


def log_search_result(func: F) -> F:
    """
    专门用于记录距离查询结果的装饰器。

    假设被装饰的函数返回报告字典列表，每个字典含有 "reachable" 键。
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        result = func(*args, **kwargs)

        if isinstance(result, list):
            reachable = sum(1 for report in result if report.get("reachable"))
            info(f"完成 {len(result)} 个距离查询，其中 {reachable} 个目标可达")

        return result

    return cast(F, wrapper)
