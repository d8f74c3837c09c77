"""
Output module for calldist.

This module provides formatters for converting distance reports into console
text or JSON.
"""

from calldist.output.console_formatter import ConsoleFormatter, format_for_console
from calldist.output.formatter import OutputFormatter
from calldist.output.json_formatter import JSONFormatter, format_as_json


__all__ = [
    "OutputFormatter",
    "JSONFormatter",
    "format_as_json",
    "ConsoleFormatter",
    "format_for_console",
]
