#!/usr/bin/env python

"""
Main entry point for the calldist command-line tool.
"""

import sys
import traceback
from typing import List, Optional

from calldist.analysis.errors import CalldistError
from calldist.cli.commands import cli_main
from calldist.logger import error


def run_calldist(argv: Optional[List[str]] = None) -> int:
    """Run the calldist CLI."""
    args = sys.argv[1:] if argv is None else argv
    try:
        return cli_main(args)
    except CalldistError as e:
        error(f"错误: {e}")
        if "--debug" in args:
            error(traceback.format_exc())
        return 1
    except Exception as e:
        error(f"未预期的错误: {type(e).__name__}: {e}")
        if "--debug" in args:
            error(traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(run_calldist())
