"""
JSON formatter for calldist output.

Formats distance reports as JSON.
"""

import datetime
import json
from typing import Any, Dict, List, Optional

from calldist.analysis.analyzer import DistanceAnalyzer
from calldist.logger import debug
from calldist.output.formatter import OutputFormatter


class JSONFormatter(OutputFormatter):
    """Formats distance reports as JSON."""

    def format_results(self, reports: List[Dict[str, Any]], **kwargs: Any) -> str:
        """
        Format reports as JSON.

        Args:
            reports: List of report dictionaries
            **kwargs: Additional options, including:
                - pretty: Whether to pretty-print the JSON (default: False)
                - include_summary: Whether to include summary statistics (default: True)
                - include_timestamp: Whether to include timestamp (default: True)

        Returns:
            JSON string
        """
        pretty = kwargs.get("pretty", False)
        include_summary = kwargs.get("include_summary", True)
        include_timestamp = kwargs.get("include_timestamp", True)

        result: Dict[str, Any] = {"reports": [dict(report) for report in reports]}

        if include_timestamp:
            result["timestamp"] = datetime.datetime.now(datetime.timezone.utc).isoformat()

        if include_summary:
            result["summary"] = DistanceAnalyzer.get_summary(reports)

        if pretty:
            return json.dumps(result, indent=2, ensure_ascii=False)
        return json.dumps(result, ensure_ascii=False)

    def write_results(
        self,
        reports: List[Dict[str, Any]],
        output_file: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().write_results(reports, output_file, **kwargs)
        if output_file:
            debug(f"Wrote JSON output to {output_file}")


def format_as_json(reports: List[Dict[str, Any]], **kwargs: Any) -> str:
    """
    Convenience function to format reports as JSON.

    Args:
        reports: List of report dictionaries
        **kwargs: Additional options to pass to JSONFormatter.format_results

    Returns:
        JSON string
    """
    return JSONFormatter().format_results(reports, **kwargs)
