#!/usr/bin/env python
"""
calldist 包的主入口点，允许通过 python -m calldist 执行。
"""

import sys
from calldist.main import run_calldist

if __name__ == "__main__":
    sys.exit(run_calldist())
