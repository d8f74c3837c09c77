"""
Python source adapter.

Lowers the functions of a Python module into the block/instruction model so
that distances can be measured directly on source code. Module-level
statements form a pseudo function named ``<module>``; methods are named
``Class.method``.

Lowering rules
--------------
* Calls inside a statement become call instructions, inner calls first.
  ``name(...)`` resolves to a module-level function of that name and
  ``self.name(...)``/``cls.name(...)`` to a method of the enclosing class.
  Everything else is an external call.
* Each simple statement then becomes one ordinary instruction.
* ``return`` ends the block with a return, ``raise`` with a terminator that
  has no successors. Falling off the end of a function returns implicitly.
* ``if``, ``while``, ``for``, ``try`` and ``match`` end the current block with
  a terminator branching to their sub-blocks. ``break`` and ``continue`` jump
  to the loop exit and header. ``with`` bodies are inlined.
* A ``match`` falls through past its cases unless the last case is
  ``case _:`` or a bare capture without a guard.
"""

import ast
import itertools
import os
from typing import Dict, List, Optional, Sequence, Set, Tuple

from calldist.analysis.errors import ProgramLoadError
from calldist.analysis.graph import PositionKind
from calldist.logger import debug
from calldist.program.model import BasicBlock, Function, Instruction, Module

MODULE_FUNCTION = "<module>"

_FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef)
_SCOPE_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda)


def _statement_text(node: ast.AST) -> str:
    text = ast.unparse(node)
    return text.splitlines()[0] if text else type(node).__name__


class _CallCollector(ast.NodeVisitor):
    """Collects calls of an expression in evaluation order (post-order)."""

    def __init__(self):
        self.calls: List[ast.Call] = []

    def visit_Call(self, node: ast.Call) -> None:
        self.generic_visit(node)
        self.calls.append(node)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        # lambda 体不在此处执行
        pass


def _is_irrefutable(case: ast.match_case) -> bool:
    pattern = case.pattern
    return case.guard is None and isinstance(pattern, ast.MatchAs) and pattern.pattern is None


def _calls_in(*nodes: Optional[ast.AST]) -> List[ast.Call]:
    collector = _CallCollector()
    for node in nodes:
        if node is not None:
            collector.visit(node)
    return collector.calls


class _FunctionLowering:
    """Lowers the body of one function into basic blocks."""

    def __init__(
        self,
        name: str,
        module_functions: Set[str],
        class_name: Optional[str] = None,
        class_methods: Optional[Set[str]] = None,
        file_path: Optional[str] = None,
    ):
        self.function = Function(name, file_path=file_path)
        self.module_functions = module_functions
        self.class_name = class_name
        self.class_methods = class_methods or set()
        self._counter = itertools.count(1)
        # (header, exit) of the enclosing loops
        self.loops: List[Tuple[BasicBlock, BasicBlock]] = []
        self.current: Optional[BasicBlock] = self.function.add_block(BasicBlock("entry"))

    def lower(self, body: Sequence[ast.stmt], end_line: int) -> Function:
        self.lower_body(body)
        if self.current is not None:
            self.current.append(
                Instruction("return", PositionKind.RETURN, "return (implicit)", end_line)
            )
        self.current = None
        return self.function

    # -- helpers --------------------------------------------------------------

    def new_block(self, label: str) -> BasicBlock:
        return self.function.add_block(BasicBlock(f"{label}.{next(self._counter)}"))

    def emit(self, instruction: Instruction) -> None:
        if self.current is None:
            self.current = self.new_block("dead")
        self.current.append(instruction)

    def terminate(
        self, opcode: str, targets: Sequence[BasicBlock], line: int, text: str = ""
    ) -> None:
        self.emit(
            Instruction(
                opcode,
                PositionKind.TERMINATOR,
                text or opcode,
                line,
                targets=[block.name for block in targets],
            )
        )
        self.current = None

    def jump(self, target: BasicBlock, line: int, text: str = "") -> None:
        if self.current is not None:
            self.terminate("jump", [target], line, text)

    def resolve_callee(self, call: ast.Call) -> str:
        func = call.func
        if isinstance(func, ast.Name) and func.id in self.module_functions:
            return func.id
        if (
            self.class_name is not None
            and isinstance(func, ast.Attribute)
            and isinstance(func.value, ast.Name)
            and func.value.id in ("self", "cls")
            and func.attr in self.class_methods
        ):
            return f"{self.class_name}.{func.attr}"
        return _statement_text(func)

    def emit_calls(self, *nodes: Optional[ast.AST]) -> None:
        for call in _calls_in(*nodes):
            callee = self.resolve_callee(call)
            self.emit(
                Instruction(
                    "call",
                    PositionKind.CALL,
                    f"call {callee}",
                    call.lineno,
                    callee=callee,
                )
            )

    def emit_statement(self, stmt: ast.stmt) -> None:
        self.emit(
            Instruction(
                type(stmt).__name__.lower(),
                PositionKind.OTHER,
                _statement_text(stmt),
                stmt.lineno,
            )
        )

    # -- statements -----------------------------------------------------------

    def lower_body(self, body: Sequence[ast.stmt]) -> None:
        for stmt in body:
            self.lower_stmt(stmt)

    def lower_stmt(self, stmt: ast.stmt) -> None:
        handler = getattr(self, f"lower_{type(stmt).__name__}", None)
        if handler is not None:
            handler(stmt)
            return
        if isinstance(stmt, _SCOPE_NODES):
            # 嵌套定义只在此处绑定名字，其函数体不执行
            self.emit_calls(*stmt.decorator_list)
        else:
            self.emit_calls(stmt)
        self.emit_statement(stmt)

    def lower_Return(self, stmt: ast.Return) -> None:
        self.emit_calls(stmt.value)
        self.emit(
            Instruction("return", PositionKind.RETURN, _statement_text(stmt), stmt.lineno)
        )
        self.current = None

    def lower_Raise(self, stmt: ast.Raise) -> None:
        self.emit_calls(stmt.exc, stmt.cause)
        self.terminate("raise", [], stmt.lineno, _statement_text(stmt))

    def lower_If(self, stmt: ast.If) -> None:
        self.emit_calls(stmt.test)
        then_block = self.new_block("if.then")
        else_block = self.new_block("if.else") if stmt.orelse else None
        join = self.new_block("if.end")
        self.terminate(
            "branch",
            [then_block, else_block or join],
            stmt.lineno,
            f"if {_statement_text(stmt.test)}",
        )

        self.current = then_block
        self.lower_body(stmt.body)
        self.jump(join, stmt.lineno)

        if else_block is not None:
            self.current = else_block
            self.lower_body(stmt.orelse)
            self.jump(join, stmt.lineno)

        self.current = join

    def lower_While(self, stmt: ast.While) -> None:
        header = self.new_block("while.cond")
        body = self.new_block("while.body")
        else_block = self.new_block("while.else") if stmt.orelse else None
        exit_block = self.new_block("while.end")
        self.jump(header, stmt.lineno)

        self.current = header
        self.emit_calls(stmt.test)
        always = isinstance(stmt.test, ast.Constant) and bool(stmt.test.value)
        targets = [body] if always else [body, else_block or exit_block]
        self.terminate(
            "branch", targets, stmt.lineno, f"while {_statement_text(stmt.test)}"
        )

        self._lower_loop_body(stmt, header, body, else_block, exit_block)

    def lower_For(self, stmt: ast.For) -> None:
        self.emit_calls(stmt.iter)
        header = self.new_block("for.head")
        body = self.new_block("for.body")
        else_block = self.new_block("for.else") if stmt.orelse else None
        exit_block = self.new_block("for.end")
        self.jump(header, stmt.lineno)

        self.current = header
        self.terminate(
            "for",
            [body, else_block or exit_block],
            stmt.lineno,
            f"for {_statement_text(stmt.target)} in {_statement_text(stmt.iter)}",
        )

        self._lower_loop_body(stmt, header, body, else_block, exit_block)

    lower_AsyncFor = lower_For

    def _lower_loop_body(self, stmt, header, body, else_block, exit_block) -> None:
        self.loops.append((header, exit_block))
        self.current = body
        self.lower_body(stmt.body)
        self.jump(header, stmt.lineno)
        self.loops.pop()

        if else_block is not None:
            self.current = else_block
            self.lower_body(stmt.orelse)
            self.jump(exit_block, stmt.lineno)

        self.current = exit_block

    def lower_Break(self, stmt: ast.Break) -> None:
        if self.loops:
            self.terminate("jump", [self.loops[-1][1]], stmt.lineno, "break")

    def lower_Continue(self, stmt: ast.Continue) -> None:
        if self.loops:
            self.terminate("jump", [self.loops[-1][0]], stmt.lineno, "continue")

    def lower_With(self, stmt: ast.With) -> None:
        self.emit_calls(*[item.context_expr for item in stmt.items])
        self.emit(
            Instruction(
                "with",
                PositionKind.OTHER,
                "with " + ", ".join(_statement_text(item) for item in stmt.items),
                stmt.lineno,
            )
        )
        self.lower_body(stmt.body)

    lower_AsyncWith = lower_With

    def lower_Try(self, stmt: ast.Try) -> None:
        body = self.new_block("try.body")
        handlers = [self.new_block("except") for _ in stmt.handlers]
        final = self.new_block("finally") if stmt.finalbody else None
        join = self.new_block("try.end")
        after = final or join
        self.terminate("try", [body] + handlers, stmt.lineno)

        self.current = body
        self.lower_body(stmt.body)
        self.lower_body(stmt.orelse)
        self.jump(after, stmt.lineno)

        for block, handler in zip(handlers, stmt.handlers):
            self.current = block
            self.emit_calls(handler.type)
            self.lower_body(handler.body)
            self.jump(after, handler.lineno)

        if final is not None:
            self.current = final
            self.lower_body(stmt.finalbody)
            self.jump(join, stmt.lineno)

        self.current = join

    lower_TryStar = lower_Try

    def lower_Match(self, stmt: ast.Match) -> None:
        self.emit_calls(stmt.subject)
        cases = [self.new_block("case") for _ in stmt.cases]
        join = self.new_block("match.end")
        # 最后一个分支是 `case _:` 或 `case name:` 时，没有任何值会落空
        fallthrough = [] if _is_irrefutable(stmt.cases[-1]) else [join]
        self.terminate(
            "match", cases + fallthrough, stmt.lineno, f"match {_statement_text(stmt.subject)}"
        )

        for block, case in zip(cases, stmt.cases):
            self.current = block
            self.emit_calls(case.guard)
            self.lower_body(case.body)
            self.jump(join, stmt.lineno)

        self.current = join


def _collect_definitions(tree: ast.Module) -> Tuple[Set[str], Dict[str, Set[str]]]:
    functions = {node.name for node in tree.body if isinstance(node, _FUNCTION_NODES)}
    classes = {
        node.name: {item.name for item in node.body if isinstance(item, _FUNCTION_NODES)}
        for node in tree.body
        if isinstance(node, ast.ClassDef)
    }
    return functions, classes


def lower_python_source(
    source: str, name: str = "<string>", file_path: Optional[str] = None
) -> Module:
    """
    Lower Python source text into a linked Module.

    Args:
        source: Python source code
        name: Module name
        file_path: Path recorded on every function

    Returns:
        Module with one function per top-level function, per method and one
        for the module body

    Raises:
        ProgramLoadError: if the source does not parse
    """
    try:
        tree = ast.parse(source, filename=file_path or name)
    except SyntaxError as e:
        raise ProgramLoadError(f"cannot parse {file_path or name}: {e}") from e

    functions, classes = _collect_definitions(tree)
    module = Module(name)
    end_of_module = max((getattr(n, "end_lineno", 0) or 0 for n in tree.body), default=0)

    module.add_function(
        _FunctionLowering(MODULE_FUNCTION, functions, file_path=file_path).lower(
            [n for n in tree.body if not isinstance(n, _SCOPE_NODES)], end_of_module
        )
    )

    for node in tree.body:
        if isinstance(node, _FUNCTION_NODES):
            lowering = _FunctionLowering(node.name, functions, file_path=file_path)
            module.add_function(lowering.lower(node.body, node.end_lineno or node.lineno))
        elif isinstance(node, ast.ClassDef):
            for item in node.body:
                if isinstance(item, _FUNCTION_NODES):
                    lowering = _FunctionLowering(
                        f"{node.name}.{item.name}",
                        functions,
                        class_name=node.name,
                        class_methods=classes[node.name],
                        file_path=file_path,
                    )
                    module.add_function(
                        lowering.lower(item.body, item.end_lineno or item.lineno)
                    )

    module.link()
    debug(f"Lowered {name}: {len(module.functions)} functions")
    return module


def load_python_source(path: str) -> Module:
    """Read and lower a Python file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
    except OSError as e:
        raise ProgramLoadError(f"cannot read {path}: {e}") from e
    return lower_python_source(source, name=os.path.basename(path), file_path=path)
