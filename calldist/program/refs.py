"""
Textual position references.

Supported forms::

    function                 first instruction of the entry block
    function:block           first instruction of ``block``
    function:block:index     instruction ``index`` of ``block``
    function@LINE            first instruction of ``function`` on source line LINE

Function names may themselves contain dots (``Class.method``) and angle
brackets (``<module>``), but not ``:`` or ``@``.
"""

from typing import List

from calldist.analysis.errors import PositionReferenceError
from calldist.program.model import Function, Instruction, Module


def _function(module: Module, name: str) -> Function:
    function = module.get_function(name)
    if function is None:
        raise PositionReferenceError(f"unknown function '{name}'")
    if function.is_declaration:
        raise PositionReferenceError(f"function '{name}' has no body")
    return function


def resolve_position(module: Module, ref: str) -> Instruction:
    """
    Resolve a textual reference to an instruction of ``module``.

    Raises:
        PositionReferenceError: if the reference is malformed or names
            nothing in the module
    """
    ref = ref.strip()
    if not ref:
        raise PositionReferenceError("empty position reference")

    if "@" in ref:
        name, _, line_text = ref.partition("@")
        try:
            line = int(line_text)
        except ValueError:
            raise PositionReferenceError(f"invalid line number in '{ref}'") from None
        function = _function(module, name)
        for instruction in function.instructions():
            if instruction.line == line:
                return instruction
        raise PositionReferenceError(f"function '{name}' has no instruction on line {line}")

    parts = ref.split(":")
    if len(parts) > 3:
        raise PositionReferenceError(f"malformed position reference '{ref}'")

    function = _function(module, parts[0])
    if len(parts) == 1:
        return function.entry_block.instructions[0]

    block = function.blocks.get(parts[1])
    if block is None:
        raise PositionReferenceError(f"function '{parts[0]}' has no block '{parts[1]}'")

    index = 0
    if len(parts) == 3:
        try:
            index = int(parts[2])
        except ValueError:
            raise PositionReferenceError(f"invalid instruction index in '{ref}'") from None
    if not 0 <= index < len(block.instructions):
        raise PositionReferenceError(
            f"block '{block.ref}' has no instruction {index} "
            f"({len(block.instructions)} instructions)"
        )
    return block.instructions[index]


def resolve_positions(module: Module, refs: List[str]) -> List[Instruction]:
    return [resolve_position(module, ref) for ref in refs]
