import unittest

from support import CALL_AND_RETURN, TWO_CALL_SITES, build, pos

from calldist.analysis import (
    EMPTY_STACK,
    CallStack,
    SearchError,
    StackEntry,
    would_introduce_recursion,
)


class TestCallStack(unittest.TestCase):
    def setUp(self):
        self.module, self.graph = build(TWO_CALL_SITES)
        self.main_call = pos(self.module, "main:entry:0")
        self.other_call = pos(self.module, "main:entry:2")

    def test_push_returns_new_stack(self):
        pushed = EMPTY_STACK.push(StackEntry(self.main_call))
        self.assertEqual(0, len(EMPTY_STACK))
        self.assertEqual(1, len(pushed))
        self.assertEqual(StackEntry(self.main_call), pushed.top)

    def test_pop_leaves_original_untouched(self):
        stack = CallStack.from_calls([self.main_call, self.other_call])
        entry, rest = stack.pop()
        self.assertEqual(self.other_call, entry.call)
        self.assertEqual((self.main_call,), rest.calls)
        self.assertEqual((self.main_call, self.other_call), stack.calls)

    def test_siblings_do_not_share_state(self):
        base = CallStack.from_calls([self.main_call])
        left = base.push(StackEntry(self.other_call))
        right = base.pop()[1]
        self.assertEqual(2, len(left))
        self.assertEqual(0, len(right))
        self.assertEqual(1, len(base))

    def test_structural_equality_and_hash(self):
        a = CallStack.from_calls([self.main_call, self.other_call])
        b = EMPTY_STACK.push(StackEntry(self.main_call)).push(StackEntry(self.other_call))
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, CallStack.from_calls([self.other_call, self.main_call]))

    def test_pop_empty_raises(self):
        with self.assertRaises(SearchError):
            EMPTY_STACK.pop()

    def test_resume_position_is_instruction_after_call(self):
        entry = StackEntry(self.main_call)
        self.assertIs(pos(self.module, "main:entry:1"), entry.resume_position(self.graph))


class TestRecursionGuard(unittest.TestCase):
    def setUp(self):
        self.module, self.graph = build(TWO_CALL_SITES)

    def test_empty_stack_never_recursive(self):
        entry = StackEntry(pos(self.module, "main:entry:0"))
        self.assertFalse(would_introduce_recursion(self.graph, EMPTY_STACK, entry))

    def test_same_callee_on_stack_is_recursive(self):
        # main:entry:0 and other:entry:0 both call helper
        stack = CallStack.from_calls([pos(self.module, "main:entry:0")])
        candidate = StackEntry(pos(self.module, "other:entry:0"))
        self.assertTrue(would_introduce_recursion(self.graph, stack, candidate))

    def test_whole_stack_is_scanned(self):
        stack = CallStack.from_calls(
            [pos(self.module, "main:entry:0"), pos(self.module, "main:entry:2")]
        )
        candidate = StackEntry(pos(self.module, "other:entry:0"))
        self.assertTrue(would_introduce_recursion(self.graph, stack, candidate))

    def test_different_callee_is_allowed(self):
        stack = CallStack.from_calls([pos(self.module, "main:entry:2")])
        candidate = StackEntry(pos(self.module, "other:entry:0"))
        self.assertFalse(would_introduce_recursion(self.graph, stack, candidate))

    def test_single_call_site_module(self):
        module, graph = build(CALL_AND_RETURN)
        call = pos(module, "main:entry:1")
        stack = CallStack.from_calls([call])
        self.assertTrue(would_introduce_recursion(graph, stack, StackEntry(call)))


if __name__ == "__main__":
    unittest.main()
