"""
Program representations and the graph adapters built on them.
"""

from calldist.program.model import BasicBlock, Function, Instruction, Module
from calldist.program.module_graph import ModuleGraph
from calldist.program.loader import (
    load_program,
    load_program_data,
    load_program_text,
    parse_instruction,
)
from calldist.program.python_source import (
    MODULE_FUNCTION,
    load_python_source,
    lower_python_source,
)
from calldist.program.refs import resolve_position, resolve_positions

__all__ = [
    "BasicBlock",
    "Function",
    "Instruction",
    "Module",
    "ModuleGraph",
    "load_program",
    "load_program_data",
    "load_program_text",
    "parse_instruction",
    "MODULE_FUNCTION",
    "load_python_source",
    "lower_python_source",
    "resolve_position",
    "resolve_positions",
]
