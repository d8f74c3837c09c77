"""
calldist Command Line Interface Package

This package contains the command line interface implementation for calldist.
"""

from calldist.cli.config_utils import apply_overrides, load_configuration
from calldist.cli.commands import cli_main, create_parser

__all__ = ["cli_main", "create_parser", "load_configuration", "apply_overrides"]
