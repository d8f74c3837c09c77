"""
Base formatter for calldist output.

Defines the interface for different output formatters.
"""

import abc
import sys
from typing import IO, Any, Dict, List, Optional


class OutputFormatter(abc.ABC):
    """Base class for all output formatters."""

    @abc.abstractmethod
    def format_results(self, reports: List[Dict[str, Any]], **kwargs: Any) -> str:
        """
        Format distance reports as a string.

        Args:
            reports: List of report dictionaries.
            **kwargs: Additional formatter-specific options.

        Returns:
            Formatted results as a string.
        """

    def write_results(
        self,
        reports: List[Dict[str, Any]],
        output_file: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Write formatted results to a file or stdout.

        Args:
            reports: List of report dictionaries.
            output_file: Path to output file (None for stdout).
            **kwargs: Additional formatter-specific options.
        """
        formatted = self.format_results(reports, **kwargs)
        stream = self._get_output_stream(output_file)
        try:
            stream.write(formatted)
            stream.write("\n")
        finally:
            if output_file:
                stream.close()

    def _get_output_stream(self, output_file: Optional[str] = None) -> IO[str]:
        """
        Get the output stream for writing results.

        Args:
            output_file: Path to output file (None for stdout).

        Returns:
            File-like object for writing.
        """
        if output_file:
            return open(output_file, "w", encoding="utf-8")
        return sys.stdout
