"""
Search bounds and step-cost policy.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Union

from calldist.analysis.errors import ConfigurationError
from calldist.analysis.graph import Position, PositionKind, ProgramGraph

StepCost = Callable[[Position], int]

DEFAULT_MAX_DISTANCE = 10000
DEFAULT_MAX_ITERATIONS = 100000
DEFAULT_MAX_QUEUE_LENGTH = 10000


def unit_step_cost(position: Position) -> int:
    """Every instruction costs one step."""
    return 1


def kind_weighted_cost(
    graph: ProgramGraph,
    weights: Mapping[Union[PositionKind, str], int],
    default: int = 1,
) -> StepCost:
    """
    Build a step-cost function that weights positions by their kind.

    Args:
        graph: Graph used to classify positions
        weights: Cost per kind; keys may be PositionKind members or their
            names (e.g. "call")
        default: Cost for kinds missing from ``weights``

    Returns:
        A callable suitable for :attr:`SearchConfig.step_cost`
    """
    table: Dict[PositionKind, int] = {}
    for key, weight in weights.items():
        kind = key if isinstance(key, PositionKind) else _parse_kind(key)
        _check_non_negative(f"weight for {kind.value}", weight)
        table[kind] = weight
    _check_non_negative("default weight", default)

    def cost(position: Position) -> int:
        return table.get(graph.kind_of(position), default)

    return cost


def _parse_kind(name: str) -> PositionKind:
    try:
        return PositionKind(name.lower())
    except ValueError:
        choices = ", ".join(kind.value for kind in PositionKind)
        raise ConfigurationError(
            f"unknown position kind '{name}' (expected one of: {choices})"
        ) from None


def _check_non_negative(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")


@dataclass(frozen=True)
class SearchConfig:
    """
    Bounds of one search.

    The search reports "unreachable" as soon as the nearest pending state is
    ``max_distance`` or further away, after ``max_iterations`` expansions, or
    when the frontier runs dry. New states are dropped while the frontier
    holds more than ``max_queue_length`` entries.
    """

    max_distance: int = DEFAULT_MAX_DISTANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    max_queue_length: int = DEFAULT_MAX_QUEUE_LENGTH
    step_cost: StepCost = field(default=unit_step_cost, compare=False)

    def __post_init__(self):
        _check_non_negative("max_distance", self.max_distance)
        _check_non_negative("max_iterations", self.max_iterations)
        _check_non_negative("max_queue_length", self.max_queue_length)
        if not callable(self.step_cost):
            raise ConfigurationError("step_cost must be callable")

    def cost_of(self, position: Position) -> int:
        cost = self.step_cost(position)
        if isinstance(cost, bool) or not isinstance(cost, int) or cost < 0:
            raise ConfigurationError(
                f"step cost for {position!r} must be a non-negative integer, got {cost!r}"
            )
        return cost
