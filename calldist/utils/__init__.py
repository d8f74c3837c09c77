"""
工具函数包，提供 calldist 所需的通用工具函数。
"""

from calldist.utils.fs_utils import (
    ensure_directory_exists,
    get_absolute_path,
    is_program_description,
    is_python_file,
)

__all__ = [
    "is_python_file",
    "is_program_description",
    "ensure_directory_exists",
    "get_absolute_path",
]
