"""
Exception hierarchy for calldist.

Search outcomes such as "unreachable" are never exceptions. These classes
cover malformed inputs and broken graph invariants.
"""


class CalldistError(Exception):
    """Base class for all calldist errors."""


class GraphInvariantError(CalldistError):
    """The program graph violates a structural invariant the search relies on."""


class SearchError(CalldistError):
    """A searcher was used in a way it does not support."""


class ConfigurationError(CalldistError):
    """Invalid search configuration."""


class ProgramLoadError(CalldistError):
    """A program description or source file could not be turned into a graph."""


class PositionReferenceError(CalldistError):
    """A textual position reference does not name a position of the program."""
