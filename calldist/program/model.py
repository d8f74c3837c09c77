"""
In-memory program representation.

A :class:`Module` holds functions, a function holds ordered basic blocks and a
block holds instructions. Instructions are the positions the search walks;
they compare by identity.
"""

from typing import Dict, List, Optional, Sequence

from calldist.analysis.graph import PositionKind


class Instruction:
    """
    One instruction-like unit of a basic block.

    ``callee`` names the called function for call instructions. ``targets``
    names the successor blocks of a terminator.
    """

    def __init__(
        self,
        opcode: str,
        kind: PositionKind,
        text: str = "",
        line: int = 0,
        callee: Optional[str] = None,
        targets: Sequence[str] = (),
    ):
        self.opcode = opcode
        self.kind = kind
        self.text = text or opcode
        self.line = line
        self.callee = callee
        self.targets = list(targets)
        self.block: Optional["BasicBlock"] = None
        self.index = -1

    @property
    def ref(self) -> str:
        """Textual reference ``function:block:index``."""
        if self.block is None:
            return f"<detached>:{self.text}"
        return f"{self.block.ref}:{self.index}"

    def __repr__(self) -> str:
        return f"Instruction({self.ref}, {self.text!r})"


class BasicBlock:
    """Straight-line instruction sequence that branches only at its end."""

    def __init__(self, name: str):
        self.name = name
        self.function: Optional["Function"] = None
        self.instructions: List[Instruction] = []
        self.successors: List["BasicBlock"] = []

    def append(self, instruction: Instruction) -> Instruction:
        instruction.block = self
        instruction.index = len(self.instructions)
        self.instructions.append(instruction)
        return instruction

    @property
    def terminator(self) -> Optional[Instruction]:
        return self.instructions[-1] if self.instructions else None

    @property
    def ref(self) -> str:
        owner = self.function.name if self.function else "<detached>"
        return f"{owner}:{self.name}"

    def __repr__(self) -> str:
        return f"BasicBlock({self.ref}, {len(self.instructions)} instructions)"


class Function:
    """A function; without blocks it is a declaration whose body is unavailable."""

    def __init__(self, name: str, intrinsic: bool = False, file_path: Optional[str] = None):
        self.name = name
        self.intrinsic = intrinsic
        self.file_path = file_path
        self.blocks: Dict[str, BasicBlock] = {}
        self.entry_name: Optional[str] = None

    def add_block(self, block: BasicBlock) -> BasicBlock:
        block.function = self
        self.blocks[block.name] = block
        if self.entry_name is None:
            self.entry_name = block.name
        return block

    @property
    def is_declaration(self) -> bool:
        return not self.blocks

    @property
    def entry_block(self) -> Optional[BasicBlock]:
        if self.entry_name is None:
            return None
        return self.blocks.get(self.entry_name)

    def instructions(self):
        for block in self.blocks.values():
            yield from block.instructions

    def __repr__(self) -> str:
        return f"Function(name='{self.name}', blocks={len(self.blocks)}, intrinsic={self.intrinsic})"


class Module:
    """A whole program: functions by name."""

    def __init__(self, name: str = "<module>"):
        self.name = name
        self.functions: Dict[str, Function] = {}

    def add_function(self, function: Function) -> Function:
        self.functions[function.name] = function
        return function

    def get_function(self, name: str) -> Optional[Function]:
        return self.functions.get(name)

    def link(self) -> None:
        """Resolve terminator target names into block successor lists."""
        for function in self.functions.values():
            for block in function.blocks.values():
                terminator = block.terminator
                targets = terminator.targets if terminator is not None else []
                block.successors = [function.blocks[name] for name in targets]

    def __repr__(self) -> str:
        return f"Module(name='{self.name}', functions={len(self.functions)})"
