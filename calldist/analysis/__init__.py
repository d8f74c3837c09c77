"""
Analysis package for calldist.

Contains the bounded, call-stack-sensitive distance search and the pieces it
is built from. The driver :class:`calldist.analysis.analyzer.DistanceAnalyzer`
is imported from its module directly.
"""

from calldist.analysis.errors import (
    CalldistError,
    ConfigurationError,
    GraphInvariantError,
    PositionReferenceError,
    ProgramLoadError,
    SearchError,
)
from calldist.analysis.graph import EXTERNAL, Callee, PositionKind, ProgramGraph
from calldist.analysis.stack import EMPTY_STACK, CallStack, StackEntry
from calldist.analysis.state import SearchState
from calldist.analysis.guard import would_introduce_recursion
from calldist.analysis.dedup import DuplicateFilter
from calldist.analysis.frontier import Frontier
from calldist.analysis.config import SearchConfig, kind_weighted_cost, unit_step_cost
from calldist.analysis.searcher import (
    UNREACHABLE,
    BFSearcher,
    SearchResult,
    StopReason,
)

__all__ = [
    "CalldistError",
    "ConfigurationError",
    "GraphInvariantError",
    "PositionReferenceError",
    "ProgramLoadError",
    "SearchError",
    "EXTERNAL",
    "Callee",
    "PositionKind",
    "ProgramGraph",
    "EMPTY_STACK",
    "CallStack",
    "StackEntry",
    "SearchState",
    "would_introduce_recursion",
    "DuplicateFilter",
    "Frontier",
    "SearchConfig",
    "kind_weighted_cost",
    "unit_step_cost",
    "UNREACHABLE",
    "BFSearcher",
    "SearchResult",
    "StopReason",
]
