"""Shared helpers for the calldist test-suite."""

import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
current_dir = Path(__file__).parent
project_root = current_dir.parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from calldist.program import ModuleGraph, load_program_text, resolve_position

EXAMPLES_DIR = project_root / "examples"


def build(text):
    """Load a YAML program description and return (module, graph)."""
    module = load_program_text(text)
    return module, ModuleGraph(module)


def pos(module, ref):
    return resolve_position(module, ref)


STRAIGHT_LINE = """
functions:
  main:
    blocks:
      entry: [i0, i1, i2, i3, ret]
"""

CALL_AND_RETURN = """
functions:
  main:
    blocks:
      entry: [nop, call helper, after, ret]
  helper:
    blocks:
      entry: [a, b, ret]
"""

TWO_CALL_SITES = """
functions:
  main:
    blocks:
      entry: [call helper, x1, call other, ret]
  other:
    blocks:
      entry: [call helper, y1, ret]
  helper:
    blocks:
      entry: [ret]
"""

RECURSIVE = """
functions:
  main:
    blocks:
      entry: [call rec, ret]
  rec:
    blocks:
      entry: [nop, br deeper base]
      deeper: [call rec, ret]
      base: [ret]
"""

MUTUAL_RECURSION = """
functions:
  main:
    blocks:
      entry: [call ping, ret]
  ping:
    blocks:
      entry: [br again out]
      again: [call pong, jmp entry]
      out: [ret]
  pong:
    blocks:
      entry: [call ping, call pong, ret]
  island:
    blocks:
      entry: [never, ret]
"""

DIAMOND = """
functions:
  main:
    blocks:
      entry: [br short long]
      short: [a, jmp end]
      long: [a, b, c, jmp end]
      end: [target, ret]
"""

LOOP = """
functions:
  main:
    blocks:
      entry: [jmp loop]
      loop: [x, br loop exit]
      exit: [unreachable]
  island:
    blocks:
      entry: [ret]
"""

FAN_OUT = """
functions:
  main:
    blocks:
      entry: [switch b1 b2 b3 b4 b5]
      b1: [ret]
      b2: [ret]
      b3: [ret]
      b4: [ret]
      b5: [ret]
"""
