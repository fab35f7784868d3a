"""
Exception hierarchy for searchbench.

Every error is fatal to the command that raised it; the CLI catches
SearchBenchError, reports it and exits non-zero.
"""


class SearchBenchError(Exception):
    """Base exception for all searchbench errors."""


class SetupError(SearchBenchError):
    """
    Raised before any benchmarking or merging starts.

    This includes:
    - Index directory missing or not an index
    - Query file missing or unreadable
    - Index already present where `new` should create one
    """


class QueryError(SearchBenchError):
    """Raised when a single query fails to parse, search or fetch."""

    def __init__(self, action: str, query: str, cause: BaseException):
        self.query = query
        self.cause = cause
        super().__init__(f"Failed while {action} query '{query}'.\n\n{cause}")


class MergeError(SearchBenchError):
    """Raised when segment merging or garbage collection fails."""
