"""
Program description loader.

Reads YAML or JSON program descriptions, validates them with the pydantic
schema in :mod:`calldist.models` and builds a linked :class:`Module`.

Instruction strings are classified by their first word::

    call NAME        call to NAME (external if NAME is not defined)
    ret | return     return to the caller
    br A B ...       terminator with successor blocks A, B, ...
    jmp A            unconditional jump (also: jump, goto, switch)
    unreachable      terminator without successors (also: raise, throw, halt)
    anything else    ordinary instruction
"""

import json
import os
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from calldist.analysis.errors import ProgramLoadError
from calldist.analysis.graph import PositionKind
from calldist.logger import debug, log_function
from calldist.models import FunctionSpec, ProgramDocument
from calldist.program.model import BasicBlock, Function, Instruction, Module
from calldist.program.python_source import load_python_source
from calldist.utils.fs_utils import is_python_file

BRANCH_OPCODES = {"br", "jmp", "jump", "goto", "switch"}
HALT_OPCODES = {"unreachable", "raise", "throw", "halt"}
RETURN_OPCODES = {"ret", "return"}


def parse_instruction(text: str, line: int = 0) -> Instruction:
    """
    Parse one instruction string.

    Args:
        text: Instruction text, e.g. "call helper" or "br then else"
        line: Optional source line to attach

    Returns:
        A detached Instruction

    Raises:
        ProgramLoadError: if the text is empty or malformed
    """
    words = str(text).split()
    if not words:
        raise ProgramLoadError("empty instruction")

    opcode = words[0].lower()
    operands = words[1:]

    if opcode == "call":
        if not operands:
            raise ProgramLoadError(f"call without a callee: '{text}'")
        return Instruction(opcode, PositionKind.CALL, text, line, callee=operands[0])
    if opcode in RETURN_OPCODES:
        return Instruction(opcode, PositionKind.RETURN, text, line)
    if opcode in BRANCH_OPCODES:
        if not operands:
            raise ProgramLoadError(f"'{opcode}' needs at least one target block: '{text}'")
        return Instruction(opcode, PositionKind.TERMINATOR, text, line, targets=operands)
    if opcode in HALT_OPCODES:
        return Instruction(opcode, PositionKind.TERMINATOR, text, line)
    return Instruction(opcode, PositionKind.OTHER, text, line)


def _build_function(name: str, spec: FunctionSpec) -> Function:
    function = Function(name, intrinsic=spec.intrinsic)

    for block_name, lines in spec.blocks.items():
        if not lines:
            raise ProgramLoadError(f"block '{name}:{block_name}' is empty")

        block = function.add_block(BasicBlock(block_name))
        for idx, text in enumerate(lines):
            instruction = block.append(parse_instruction(text))
            is_last = idx == len(lines) - 1
            ends_block = instruction.kind in (PositionKind.TERMINATOR, PositionKind.RETURN)
            if ends_block and not is_last:
                raise ProgramLoadError(
                    f"'{text}' ends block '{name}:{block_name}' but is not its last instruction"
                )
            if is_last and not ends_block:
                raise ProgramLoadError(
                    f"block '{name}:{block_name}' must end with a terminator or return, "
                    f"found '{text}'"
                )

        for target in block.terminator.targets:
            if target not in spec.blocks:
                raise ProgramLoadError(
                    f"block '{name}:{block_name}' branches to unknown block '{target}'"
                )

    if spec.entry is not None:
        if spec.entry not in function.blocks:
            raise ProgramLoadError(f"function '{name}' has no entry block '{spec.entry}'")
        function.entry_name = spec.entry

    return function


def build_module(document: ProgramDocument, name: Optional[str] = None) -> Module:
    """Build and link a Module from a validated program document."""
    module = Module(name or document.name or "<program>")
    for function_name, spec in document.functions.items():
        module.add_function(_build_function(function_name, spec))
    module.link()
    debug(f"Built module {module.name} with {len(module.functions)} functions")
    return module


def load_program_data(data: Dict[str, Any], name: Optional[str] = None) -> Module:
    """Validate a parsed program description and build its Module."""
    if not isinstance(data, dict):
        raise ProgramLoadError("program description must be a mapping at top level")
    try:
        document = ProgramDocument.model_validate(data)
    except ValidationError as e:
        raise ProgramLoadError(f"invalid program description: {e}") from e
    return build_module(document, name)


def load_program_text(text: str, fmt: str = "yaml", name: Optional[str] = None) -> Module:
    """
    Load a program description from a string.

    Args:
        text: YAML or JSON text
        fmt: "yaml" or "json"
        name: Module name

    Returns:
        Linked Module
    """
    try:
        if fmt == "json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ProgramLoadError(f"could not parse program description: {e}") from e
    return load_program_data(data, name)


@log_function(level="debug")
def load_program(path: str) -> Module:
    """
    Load a program from a file.

    ``.py`` files go through the Python source adapter, ``.json`` files are
    read as JSON, everything else as YAML.
    """
    if not os.path.exists(path):
        raise ProgramLoadError(f"program file not found: {path}")

    if is_python_file(path):
        return load_python_source(path)

    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    fmt = "json" if path.lower().endswith(".json") else "yaml"
    return load_program_text(text, fmt=fmt, name=os.path.basename(path))
