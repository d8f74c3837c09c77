"""
calldist - 调用栈敏感的指令距离分析工具

计算程序中起点到目标位置之间经过的最少指令数，调用只返回到真实的调用者。
"""

from calldist.__version__ import __version__

__title__ = "calldist"
__description__ = "Call-stack-sensitive instruction distance analysis"
__license__ = "MIT"

# 导出主要接口
from calldist.analysis import (
    UNREACHABLE,
    BFSearcher,
    CalldistError,
    ProgramGraph,
    SearchConfig,
    SearchResult,
    StopReason,
)
from calldist.analysis.analyzer import DistanceAnalyzer
from calldist.program import (
    ModuleGraph,
    load_program,
    load_program_text,
    lower_python_source,
    resolve_position,
)

# 导出日志工具
from calldist.logger import (
    configure_logger,
    get_logger,
    setup_application_logging,
)

__all__ = [
    "__version__",
    "UNREACHABLE",
    "BFSearcher",
    "CalldistError",
    "ProgramGraph",
    "SearchConfig",
    "SearchResult",
    "StopReason",
    "DistanceAnalyzer",
    "ModuleGraph",
    "load_program",
    "load_program_text",
    "lower_python_source",
    "resolve_position",
    "configure_logger",
    "get_logger",
    "setup_application_logging",
]
