"""
Recursion guard.

Pushing a call whose callee is already active anywhere on the stack is
rejected. This keeps the call dimension of the search finite on recursive and
mutually recursive programs, at the price of never exploring a function twice
on one call chain.
"""

from calldist.analysis.graph import ProgramGraph
from calldist.analysis.stack import CallStack, StackEntry


def would_introduce_recursion(
    graph: ProgramGraph, stack: CallStack, candidate: StackEntry
) -> bool:
    """
    Check whether pushing ``candidate`` would call an already active function.

    Args:
        graph: Program graph used to resolve callees
        stack: Current call stack
        candidate: Entry that is about to be pushed

    Returns:
        True if some entry on ``stack`` calls the same function as ``candidate``
    """
    if not stack:
        return False

    called = graph.callee_of(candidate.call).function
    # 扫描整个栈，而不仅仅是栈顶
    for entry in stack:
        if graph.callee_of(entry.call).function == called:
            return True
    return False
