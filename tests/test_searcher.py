import unittest

from support import (
    CALL_AND_RETURN,
    DIAMOND,
    FAN_OUT,
    LOOP,
    MUTUAL_RECURSION,
    RECURSIVE,
    STRAIGHT_LINE,
    TWO_CALL_SITES,
    build,
    pos,
)

from calldist.analysis import (
    UNREACHABLE,
    BFSearcher,
    ConfigurationError,
    GraphInvariantError,
    PositionKind,
    SearchConfig,
    SearchError,
    StopReason,
    kind_weighted_cost,
)
from calldist.program import ModuleGraph


def search(module, graph, start, target, stack=(), **config):
    searcher = BFSearcher(
        graph,
        pos(module, start),
        pos(module, target),
        initial_stack=[pos(module, ref) for ref in stack],
        config=SearchConfig(**config),
    )
    return searcher.run()


class RecordingSearcher(BFSearcher):
    """Remembers the distance of every state it expands."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.expanded = []

    def do_single_search_iteration(self):
        self.expanded.append(self.frontier.peek().distance)
        super().do_single_search_iteration()


class TestScenarios(unittest.TestCase):
    def test_start_is_target(self):
        module, graph = build(STRAIGHT_LINE)
        result = search(module, graph, "main:entry:2", "main:entry:2")
        self.assertEqual(0, result.distance)
        self.assertEqual(0, result.iterations)
        self.assertEqual(StopReason.FOUND, result.stop_reason)

    def test_straight_line(self):
        module, graph = build(STRAIGHT_LINE)
        for k in range(5):
            result = search(module, graph, "main:entry:0", f"main:entry:{k}")
            self.assertEqual(k, result.distance)

    def test_call_into_defined_function_and_back(self):
        module, graph = build(CALL_AND_RETURN)
        # nop, call, a, b, ret -> after
        result = search(module, graph, "main:entry:0", "main:entry:2")
        self.assertEqual(5, result.distance)

    def test_target_inside_callee(self):
        module, graph = build(CALL_AND_RETURN)
        result = search(module, graph, "main:entry:0", "helper:entry:1")
        self.assertEqual(3, result.distance)

    def test_recursive_second_entry_is_pruned(self):
        module, graph = build(RECURSIVE)
        # rec is already active (entered from main), so re-entering it is rejected
        result = search(
            module, graph, "rec:deeper:0", "rec:entry:0", stack=["main:entry:0"]
        )
        self.assertIs(UNREACHABLE, result.distance)
        self.assertFalse(result.reachable)
        self.assertEqual(StopReason.EXHAUSTED, result.stop_reason)
        self.assertEqual(1, result.recursion_pruned)

    def test_recursive_first_entry_is_allowed(self):
        module, graph = build(RECURSIVE)
        result = search(module, graph, "rec:deeper:0", "rec:entry:0")
        self.assertEqual(1, result.distance)

    def test_shorter_branch_wins(self):
        module, graph = build(DIAMOND)
        result = search(module, graph, "main:entry:0", "main:end:0")
        self.assertEqual(3, result.distance)


class TestCallReturnContext(unittest.TestCase):
    def setUp(self):
        self.module, self.graph = build(TWO_CALL_SITES)

    def test_return_goes_to_actual_caller(self):
        # main -> helper -> main -> other -> helper -> other
        result = search(self.module, self.graph, "main:entry:0", "other:entry:1")
        self.assertEqual(6, result.distance)

    def test_initial_stack_selects_return_site(self):
        result = search(
            self.module, self.graph, "helper:entry:0", "other:entry:1", stack=["other:entry:0"]
        )
        self.assertEqual(1, result.distance)

    def test_return_does_not_reach_other_call_sites(self):
        result = search(
            self.module, self.graph, "helper:entry:0", "main:entry:1", stack=["other:entry:0"]
        )
        self.assertFalse(result.reachable)

    def test_return_with_empty_stack_ends_path(self):
        result = search(self.module, self.graph, "helper:entry:0", "main:entry:1")
        self.assertFalse(result.reachable)
        self.assertEqual(StopReason.EXHAUSTED, result.stop_reason)
        self.assertEqual(1, result.iterations)


class TestPropertiesAndBounds(unittest.TestCase):
    def test_mutual_recursion_terminates(self):
        module, graph = build(MUTUAL_RECURSION)
        result = search(
            module, graph, "main:entry:0", "island:entry:0", max_iterations=1000
        )
        self.assertFalse(result.reachable)
        self.assertEqual(StopReason.EXHAUSTED, result.stop_reason)
        self.assertLess(result.iterations, 1000)
        self.assertGreater(result.recursion_pruned, 0)

    def test_mutual_recursion_reaches_pong(self):
        module, graph = build(MUTUAL_RECURSION)
        # main call ping (1), br (2), call pong (3)
        result = search(module, graph, "main:entry:0", "pong:entry:0")
        self.assertEqual(3, result.distance)

    def test_duplicate_block_entries_are_suppressed(self):
        module, graph = build(LOOP)
        result = search(module, graph, "main:entry:0", "island:entry:0")
        self.assertFalse(result.reachable)
        # entry, loop head, loop branch, exit
        self.assertEqual(4, result.iterations)
        self.assertEqual(1, result.duplicates_dropped)

    def test_distances_are_expanded_in_order(self):
        module, graph = build(MUTUAL_RECURSION)
        searcher = RecordingSearcher(
            graph, pos(module, "main:entry:0"), pos(module, "island:entry:0")
        )
        searcher.run()
        self.assertTrue(searcher.expanded)
        self.assertEqual(sorted(searcher.expanded), searcher.expanded)

    def test_search_is_deterministic(self):
        module, graph = build(DIAMOND)
        first = search(module, graph, "main:entry:0", "main:end:1")
        second = search(module, graph, "main:entry:0", "main:end:1")
        self.assertEqual(first, second)

    def test_distance_bound(self):
        module, graph = build(STRAIGHT_LINE)
        result = search(module, graph, "main:entry:0", "main:entry:3", max_distance=3)
        self.assertFalse(result.reachable)
        self.assertEqual(StopReason.DISTANCE_BOUND, result.stop_reason)

        result = search(module, graph, "main:entry:0", "main:entry:3", max_distance=4)
        self.assertEqual(3, result.distance)

    def test_iteration_bound(self):
        module, graph = build(STRAIGHT_LINE)
        result = search(module, graph, "main:entry:0", "main:entry:3", max_iterations=3)
        self.assertEqual(StopReason.ITERATION_BOUND, result.stop_reason)
        self.assertEqual(3, result.iterations)

        result = search(module, graph, "main:entry:0", "main:entry:3", max_iterations=4)
        self.assertEqual(3, result.distance)

    def test_queue_bound_drops_states(self):
        module, graph = build(FAN_OUT)
        result = search(module, graph, "main:entry:0", "main:b5:0", max_queue_length=2)
        self.assertFalse(result.reachable)
        self.assertEqual(2, result.queue_dropped)
        self.assertEqual(3, result.peak_frontier)

        result = search(module, graph, "main:entry:0", "main:b5:0")
        self.assertEqual(1, result.distance)

    def test_weighted_step_cost(self):
        module, graph = build(CALL_AND_RETURN)
        config = SearchConfig(step_cost=kind_weighted_cost(graph, {PositionKind.CALL: 5}))
        searcher = BFSearcher(
            graph, pos(module, "main:entry:0"), pos(module, "main:entry:2"), config=config
        )
        # nop 1 + call 5 + a 1 + b 1 + ret 1
        self.assertEqual(9, searcher.search_for_minimal_distance())


class TestOpaqueCalls(unittest.TestCase):
    PROGRAM = """
functions:
  main:
    blocks:
      entry: [call printf, call llvm.memcpy, call nowhere, done, ret]
  printf:
  llvm.memcpy:
    intrinsic: true
    blocks:
      entry: [ret]
"""

    def test_external_intrinsic_and_unknown_calls_are_skipped(self):
        module, graph = build(self.PROGRAM)
        result = search(module, graph, "main:entry:0", "main:entry:3")
        self.assertEqual(3, result.distance)
        self.assertEqual(3, result.iterations)


class TestErrors(unittest.TestCase):
    def test_initial_stack_must_hold_calls(self):
        module, graph = build(CALL_AND_RETURN)
        with self.assertRaises(GraphInvariantError):
            search(module, graph, "helper:entry:0", "main:entry:2", stack=["main:entry:0"])

    def test_position_outside_its_block_is_fatal(self):
        module, _ = build(STRAIGHT_LINE)

        class BrokenGraph(ModuleGraph):
            def block_contains(self, block, position):
                return False

        with self.assertRaises(GraphInvariantError):
            BFSearcher(
                BrokenGraph(module), pos(module, "main:entry:0"), pos(module, "main:entry:1")
            )

    def test_successor_block_outside_itself_is_fatal(self):
        module, _ = build(DIAMOND)

        class DetachedBranchGraph(ModuleGraph):
            def block_contains(self, block, position):
                return block.name != "short" and super().block_contains(block, position)

        searcher = BFSearcher(
            DetachedBranchGraph(module), pos(module, "main:entry:0"), pos(module, "main:end:0")
        )
        with self.assertRaises(GraphInvariantError):
            searcher.run()

    def test_return_resumes_through_stack_entry(self):
        module, _ = build(CALL_AND_RETURN)

        class NoResumeGraph(ModuleGraph):
            def next_position(self, position):
                if position.kind is PositionKind.CALL:
                    return None
                return super().next_position(position)

        searcher = BFSearcher(
            NoResumeGraph(module),
            pos(module, "helper:entry:2"),
            pos(module, "main:entry:2"),
            initial_stack=[pos(module, "main:entry:1")],
        )
        with self.assertRaises(GraphInvariantError):
            searcher.run()

    def test_unknown_kind_is_fatal(self):
        module, _ = build(STRAIGHT_LINE)

        class KindlessGraph(ModuleGraph):
            def kind_of(self, position):
                return "mystery"

        searcher = BFSearcher(
            KindlessGraph(module), pos(module, "main:entry:0"), pos(module, "main:entry:1")
        )
        with self.assertRaises(GraphInvariantError):
            searcher.run()

    def test_missing_sequential_successor_is_fatal(self):
        module, _ = build(STRAIGHT_LINE)

        class FallThroughGraph(ModuleGraph):
            def kind_of(self, position):
                return PositionKind.OTHER

        searcher = BFSearcher(
            FallThroughGraph(module), pos(module, "main:entry:4"), pos(module, "main:entry:0")
        )
        with self.assertRaises(GraphInvariantError):
            searcher.run()

    def test_searcher_runs_once(self):
        module, graph = build(STRAIGHT_LINE)
        searcher = BFSearcher(graph, pos(module, "main:entry:0"), pos(module, "main:entry:1"))
        self.assertEqual(1, searcher.search_for_minimal_distance())
        with self.assertRaises(SearchError):
            searcher.run()

    def test_negative_step_cost_rejected(self):
        module, graph = build(STRAIGHT_LINE)
        config = SearchConfig(step_cost=lambda position: -1)
        searcher = BFSearcher(
            graph, pos(module, "main:entry:0"), pos(module, "main:entry:1"), config=config
        )
        with self.assertRaises(ConfigurationError):
            searcher.run()

    def test_invalid_bounds_rejected(self):
        with self.assertRaises(ConfigurationError):
            SearchConfig(max_distance=-1)
        with self.assertRaises(ConfigurationError):
            SearchConfig(max_iterations="10")


if __name__ == "__main__":
    unittest.main()
