"""
Distance analysis driver.

Loads a program, resolves textual start/target references and runs one
:class:`BFSearcher` per query, collecting plain-dict reports for the output
formatters.
"""

from typing import Any, Dict, List, Optional, Sequence

from calldist.analysis.searcher import BFSearcher
from calldist.logger import debug, info, log_result, log_search_result
from calldist.models import SearchSettings
from calldist.program.loader import load_program
from calldist.program.model import Module
from calldist.program.module_graph import ModuleGraph
from calldist.program.refs import resolve_position, resolve_positions
from calldist.utils.fs_utils import get_absolute_path


class DistanceAnalyzer:
    """Answers distance queries on one program."""

    def __init__(
        self,
        module: Module,
        settings: Optional[SearchSettings] = None,
        program_path: Optional[str] = None,
    ):
        self.module = module
        self.graph = ModuleGraph(module)
        self.settings = settings or SearchSettings()
        self.config = self.settings.to_search_config(self.graph)
        self.program_path = program_path

    @classmethod
    def from_file(
        cls, path: str, settings: Optional[SearchSettings] = None
    ) -> "DistanceAnalyzer":
        module = load_program(path)
        return cls(module, settings, program_path=get_absolute_path(path))

    def analyze(
        self, start_ref: str, target_ref: str, stack_refs: Sequence[str] = ()
    ) -> Dict[str, Any]:
        """
        Measure the distance between two referenced positions.

        Args:
            start_ref: Reference of the start position
            target_ref: Reference of the target position
            stack_refs: References of call positions already active at the
                start, outermost first

        Returns:
            Report dictionary
        """
        start = resolve_position(self.module, start_ref)
        target = resolve_position(self.module, target_ref)
        initial_stack = resolve_positions(self.module, list(stack_refs))

        debug(f"Query {start.ref} -> {target.ref} with stack {[c.ref for c in initial_stack]}")
        searcher = BFSearcher(
            self.graph, start, target, initial_stack=initial_stack, config=self.config
        )
        result = searcher.run()

        if result.reachable:
            info(f"{start.ref} -> {target.ref}: distance {result.distance}")
        else:
            info(f"{start.ref} -> {target.ref}: unreachable ({result.stop_reason.value})")

        return {
            "program": self.program_path or self.module.name,
            "start": start.ref,
            "target": target.ref,
            "initial_stack": [call.ref for call in initial_stack],
            "distance": result.distance,
            "reachable": result.reachable,
            "stop_reason": result.stop_reason.value,
            "iterations": result.iterations,
            "stats": result.stats(),
        }

    @log_search_result
    def analyze_all(
        self, start_refs: Sequence[str], target_ref: str, stack_refs: Sequence[str] = ()
    ) -> List[Dict[str, Any]]:
        """Run :meth:`analyze` once per start reference."""
        return [self.analyze(ref, target_ref, stack_refs) for ref in start_refs]

    @log_result
    def list_positions(self) -> List[Dict[str, Any]]:
        """Describe every position of the program, in function and block order."""
        positions = []
        for function in self.module.functions.values():
            for instruction in function.instructions():
                positions.append(
                    {
                        "ref": instruction.ref,
                        "function": function.name,
                        "block": instruction.block.name,
                        "index": instruction.index,
                        "kind": instruction.kind.value,
                        "line": instruction.line,
                        "text": instruction.text,
                    }
                )
        return positions

    @staticmethod
    def get_summary(reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        reachable = [r for r in reports if r.get("reachable")]
        by_reason: Dict[str, int] = {}
        for report in reports:
            reason = report.get("stop_reason", "unknown")
            by_reason[reason] = by_reason.get(reason, 0) + 1

        return {
            "queries": len(reports),
            "reachable": len(reachable),
            "unreachable": len(reports) - len(reachable),
            "min_distance": min((r["distance"] for r in reachable), default=None),
            "total_iterations": sum(r.get("iterations", 0) for r in reports),
            "by_stop_reason": by_reason,
        }
