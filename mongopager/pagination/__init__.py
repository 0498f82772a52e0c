"""Cursor-based pagination engine."""

from .models import (
    SortOrder,
    Direction,
    SortField,
    SortSpec,
    FirstPage,
    OffsetPage,
    CursorPage,
    PaginationRequest,
    QueryPlan,
    PageInfo,
    Edge,
    FindResult
)
from .codec import CursorCodec, get_field
from .translator import QueryTranslator, build_seek_filter
from .assembler import PageAssembler
from .paginator import Executor, Paginator, paginate
from .links import create_link_header, link_header_for

__all__ = [
    "SortOrder",
    "Direction",
    "SortField",
    "SortSpec",
    "FirstPage",
    "OffsetPage",
    "CursorPage",
    "PaginationRequest",
    "QueryPlan",
    "PageInfo",
    "Edge",
    "FindResult",
    "CursorCodec",
    "get_field",
    "QueryTranslator",
    "build_seek_filter",
    "PageAssembler",
    "Executor",
    "Paginator",
    "paginate",
    "create_link_header",
    "link_header_for"
]
