"""
文件系统实用工具模块，为 calldist 提供文件和路径操作。
"""

import os
from pathlib import Path
from typing import Optional

PROGRAM_EXTENSIONS = (".yaml", ".yml", ".json")


def is_python_file(file_path: str) -> bool:
    """
    检查文件是否为 Python 文件。

    Args:
        file_path: 文件路径

    Returns:
        如果文件扩展名为 .py 则返回 True，否则返回 False
    """
    return file_path.lower().endswith(".py")


def is_program_description(file_path: str) -> bool:
    """检查文件是否为 YAML/JSON 程序描述文件。"""
    return file_path.lower().endswith(PROGRAM_EXTENSIONS)


def ensure_directory_exists(directory_path: str) -> None:
    """
    确保目录存在，如有必要则创建目录。

    Args:
        directory_path: 目录路径
    """
    Path(directory_path).mkdir(parents=True, exist_ok=True)


def get_absolute_path(path: str, relative_to: Optional[str] = None) -> str:
    """
    将相对路径转换为绝对路径。

    Args:
        path: 要转换为绝对路径的路径
        relative_to: 相对路径的基础目录（默认值：当前工作目录）

    Returns:
        绝对路径
    """
    if os.path.isabs(path):
        return path

    base_dir = relative_to or os.getcwd()
    return os.path.normpath(os.path.join(base_dir, path))
