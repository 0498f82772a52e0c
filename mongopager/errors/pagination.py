"""Typed errors raised by the pagination engine.

Caller input errors (sort, cursor, limit) render as 400 Problem Details and
driver failures as 503. ``ContractViolation`` is not a problem detail: it marks
a broken invariant inside the engine and is never meant to be handled.
"""

from typing import Any

from .problem_details import BadRequestError, ServiceUnavailableError


class InvalidSortSpec(BadRequestError):
    """The sort specification is empty or malformed."""

    def __init__(self, detail: str = "Sort specification must not be empty", **extensions: Any):
        super().__init__(detail, error_code="INVALID_SORT_SPEC", **extensions)


class InvalidCursor(BadRequestError):
    """The cursor token is malformed, undecodable or does not match the sort."""

    def __init__(self, detail: str = "Invalid cursor", **extensions: Any):
        super().__init__(detail, error_code="INVALID_CURSOR", **extensions)


class InvalidLimit(BadRequestError):
    """The page size is not a positive integer."""

    def __init__(self, limit: Any, **extensions: Any):
        self.limit = limit
        super().__init__(
            f"Limit must be a positive integer, got {limit!r}",
            error_code="INVALID_LIMIT",
            **extensions
        )


class ExecutionFailure(ServiceUnavailableError):
    """The execution collaborator failed while running find or count.

    The driver error is kept on ``error`` and chained as ``__cause__``; it is
    logged but never rendered to clients.
    """

    def __init__(self, operation: str, error: BaseException, **extensions: Any):
        self.operation = operation
        self.error = error
        super().__init__(
            f"Pagination {operation} failed",
            error_code="EXECUTION_FAILURE",
            **extensions
        )


class ContractViolation(RuntimeError):
    """An internal pagination invariant was broken."""
