"""Cursor-based pagination for MongoDB."""

__version__ = "1.0.0"

from .pagination import (
    SortOrder,
    Direction,
    SortField,
    SortSpec,
    PaginationRequest,
    PageInfo,
    Edge,
    FindResult,
    CursorCodec,
    Paginator,
    paginate
)
from .errors import (
    InvalidSortSpec,
    InvalidCursor,
    InvalidLimit,
    ExecutionFailure,
    ContractViolation
)

__all__ = [
    "__version__",
    "SortOrder",
    "Direction",
    "SortField",
    "SortSpec",
    "PaginationRequest",
    "PageInfo",
    "Edge",
    "FindResult",
    "CursorCodec",
    "Paginator",
    "paginate",
    "InvalidSortSpec",
    "InvalidCursor",
    "InvalidLimit",
    "ExecutionFailure",
    "ContractViolation"
]
