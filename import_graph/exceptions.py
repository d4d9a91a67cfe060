"""
Exception hierarchy for import-graph.

Everything the tool raises on purpose inherits from ImportGraphError so the
CLI and the dashboard can report failures uniformly.
"""


class ImportGraphError(Exception):
    """Base exception for all import-graph errors."""


class UsageError(ImportGraphError):
    """The command line was not invoked with exactly one package."""


class ResolutionError(ImportGraphError):
    """A package could not be located or its source could not be parsed."""

    def __init__(self, import_path: str, cause):
        self.import_path = import_path
        self.cause = cause
        super().__init__(f"failed to import {import_path}: {cause}")
