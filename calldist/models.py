"""
Pydantic data models for calldist.

This module defines the schemas of program description files and of search
configuration files.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from calldist.analysis.config import (
    DEFAULT_MAX_DISTANCE,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_MAX_QUEUE_LENGTH,
    SearchConfig,
    kind_weighted_cost,
)
from calldist.analysis.graph import PositionKind, ProgramGraph


class FunctionSpec(BaseModel):
    """One function of a program description."""

    model_config = ConfigDict(extra="forbid")

    blocks: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Basic blocks in order; each is a list of instruction strings",
    )
    entry: Optional[str] = Field(
        None, description="Name of the entry block (default: the first block)"
    )
    intrinsic: bool = Field(
        False, description="Calls to intrinsic functions are never stepped into"
    )


class ProgramDocument(BaseModel):
    """Top-level program description."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "functions": {
                    "main": {
                        "blocks": {
                            "entry": ["call helper", "add", "br left right"],
                            "left": ["ret"],
                            "right": ["nop", "ret"],
                        }
                    },
                    "helper": {"blocks": {"entry": ["ret"]}},
                    "printf": {},
                }
            }
        },
    )

    name: Optional[str] = Field(None, description="Optional program name")
    functions: Dict[str, FunctionSpec] = Field(
        ..., description="Functions by name; declarations have no blocks"
    )

    @field_validator("functions", mode="before")
    @classmethod
    def _allow_null_declarations(cls, value):
        # "printf:" in YAML parses to None
        if isinstance(value, dict):
            return {name: ({} if spec is None else spec) for name, spec in value.items()}
        return value


class SearchSettings(BaseModel):
    """
    Search section of a configuration file.

    ``step_cost`` is either a uniform integer or a mapping from position kind
    ("call", "return", "terminator", "other") to cost, with an optional
    "default" entry.
    """

    model_config = ConfigDict(extra="forbid")

    max_distance: int = Field(DEFAULT_MAX_DISTANCE, ge=0)
    max_iterations: int = Field(DEFAULT_MAX_ITERATIONS, ge=0)
    max_queue_length: int = Field(DEFAULT_MAX_QUEUE_LENGTH, ge=0)
    step_cost: Union[int, Dict[str, int]] = 1

    @field_validator("step_cost")
    @classmethod
    def _check_step_cost(cls, value):
        if isinstance(value, int):
            if value < 0:
                raise ValueError("step_cost must be non-negative")
            return value
        allowed = {kind.value for kind in PositionKind} | {"default"}
        for key, weight in value.items():
            if key.lower() not in allowed:
                raise ValueError(
                    f"unknown step_cost key '{key}' (allowed: {', '.join(sorted(allowed))})"
                )
            if weight < 0:
                raise ValueError(f"step_cost for '{key}' must be non-negative")
        return value

    def to_search_config(self, graph: ProgramGraph) -> SearchConfig:
        """Turn these settings into a :class:`SearchConfig` for ``graph``."""
        if isinstance(self.step_cost, int):
            weights = {}
            default = self.step_cost
        else:
            weights = {k.lower(): v for k, v in self.step_cost.items()}
            default = weights.pop("default", 1)

        return SearchConfig(
            max_distance=self.max_distance,
            max_iterations=self.max_iterations,
            max_queue_length=self.max_queue_length,
            step_cost=kind_weighted_cost(graph, weights, default=default),
        )
