"""Error handling module for mongopager."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    ServiceUnavailableError,
    create_problem_response
)
from .pagination import (
    InvalidSortSpec,
    InvalidCursor,
    InvalidLimit,
    ExecutionFailure,
    ContractViolation
)
from .handlers import register_exception_handlers

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "BadRequestError",
    "ServiceUnavailableError",
    "create_problem_response",
    "InvalidSortSpec",
    "InvalidCursor",
    "InvalidLimit",
    "ExecutionFailure",
    "ContractViolation",
    "register_exception_handlers"
]
