"""
Console formatter for calldist output.

Formats distance reports for terminal display with color highlighting.
"""

import datetime
import sys
from typing import Any, Dict, List

from colorama import Fore, Style, init

from calldist.analysis.analyzer import DistanceAnalyzer
from calldist.output.formatter import OutputFormatter

# Initialize colorama
init()


class ConsoleFormatter(OutputFormatter):
    """
    Formats distance reports for terminal display with color highlighting.

    Reachable targets are shown in green, unreachable ones in red, with the
    reason the search stopped.
    """

    def __init__(self, use_color: bool = True):
        """
        Initialize the console formatter.

        Args:
            use_color: Whether to use colored output (default: True)
        """
        super().__init__()
        self.use_color = use_color

        self.colors: Dict[str, str] = {
            "reachable": Fore.GREEN,
            "unreachable": Fore.RED,
            "muted": Fore.WHITE,
            "header": Fore.CYAN,
            "reset": Style.RESET_ALL,
            "bold": Style.BRIGHT,
        }

        # Disable colors if requested or if not in a TTY (e.g., when piping to a file)
        if not use_color or not sys.stdout.isatty():
            for key in self.colors:
                self.colors[key] = ""

    def _color(self, text: str, color: str, bold: bool = False) -> str:
        prefix = self.colors.get(color, "")
        if bold:
            prefix += self.colors["bold"]
        if not prefix:
            return text
        return f"{prefix}{text}{self.colors['reset']}"

    def format_results(self, reports: List[Dict[str, Any]], **kwargs: Any) -> str:
        """
        Format reports for console output.

        Args:
            reports: List of report dictionaries.
            **kwargs: Additional arguments:
                - show_summary: Whether to include summary statistics (default: True).
                - show_stats: Whether to include per-query search counters (default: False).
                - program: The analyzed program (default: taken from the reports).

        Returns:
            Formatted string with the reports.
        """
        show_summary = kwargs.get("show_summary", True)
        show_stats = kwargs.get("show_stats", False)
        program = kwargs.get("program") or (reports[0]["program"] if reports else "Unknown")

        lines = [
            self._color("=" * 80, "header"),
            self._color(" CALLDIST DISTANCE REPORT", "header", bold=True),
            self._color(
                f' Generated: {datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M:%S %Z")}',
                "header",
            ),
            self._color(f" Program: {program}", "header"),
            self._color("=" * 80, "header"),
            "",
        ]

        for idx, report in enumerate(reports, 1):
            lines.append(self._color(f"[{idx}] {report['start']} -> {report['target']}", "bold"))
            if report.get("initial_stack"):
                lines.append(f"    Call stack: {' > '.join(report['initial_stack'])}")
            if report.get("reachable"):
                lines.append(
                    "    Distance: " + self._color(str(report["distance"]), "reachable", bold=True)
                )
            else:
                lines.append(
                    "    Distance: "
                    + self._color("UNREACHABLE", "unreachable", bold=True)
                    + self._color(f" ({report['stop_reason']})", "muted")
                )
            lines.append(f"    Iterations: {report['iterations']}")
            if show_stats:
                for key, value in report.get("stats", {}).items():
                    lines.append(f"    {key.replace('_', ' ').capitalize()}: {value}")
            lines.append("")

        if show_summary:
            summary = DistanceAnalyzer.get_summary(reports)
            lines.append(self._color("SUMMARY", "header", bold=True))
            lines.append("-" * 80)
            lines.append(f"Queries: {summary['queries']}")
            lines.append(
                f"Reachable: {self._color(str(summary['reachable']), 'reachable')}  "
                f"Unreachable: {self._color(str(summary['unreachable']), 'unreachable')}"
            )
            if summary["min_distance"] is not None:
                lines.append(f"Minimum distance: {summary['min_distance']}")
            lines.append(f"Total iterations: {summary['total_iterations']}")

        return "\n".join(lines)

    def format_positions(self, positions: List[Dict[str, Any]]) -> str:
        """Format the position listing produced by ``DistanceAnalyzer.list_positions``."""
        lines = []
        current_function = None
        for position in positions:
            if position["function"] != current_function:
                current_function = position["function"]
                if lines:
                    lines.append("")
                lines.append(self._color(current_function, "header", bold=True))
            line = f" (line {position['line']})" if position["line"] else ""
            lines.append(
                f"  {position['ref']:<40} {self._color(position['kind'], 'muted')}  "
                f"{position['text']}{line}"
            )
        return "\n".join(lines)


def format_for_console(reports: List[Dict[str, Any]], **kwargs: Any) -> str:
    """
    Convenience function to format reports for console display.

    Args:
        reports: List of report dictionaries
        **kwargs: Additional options; ``use_color`` is passed to the formatter

    Returns:
        Formatted string
    """
    use_color = kwargs.pop("use_color", True)
    return ConsoleFormatter(use_color=use_color).format_results(reports, **kwargs)
