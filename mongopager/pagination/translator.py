"""Translate pagination requests into MongoDB find instructions."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..errors.pagination import InvalidLimit
from .codec import CursorCodec
from .models import (
    CursorPage,
    Direction,
    OffsetPage,
    PaginationRequest,
    QueryPlan,
    SortOrder,
    SortSpec,
)

logger = logging.getLogger(__name__)


def comparison_operator(order: SortOrder, direction: Direction) -> str:
    """Return the operator that selects rows after the cursor for one field."""
    forward = order is SortOrder.ASCENDING
    if direction is Direction.PREVIOUS:
        forward = not forward
    return "$gt" if forward else "$lt"


def strict_condition(field: str, operator: str, value: Any) -> Optional[Dict[str, Any]]:
    """Condition selecting values of ``field`` strictly past ``value``.

    MongoDB sorts null (and missing) below every other value while range
    operators never match null, so null cursor values and the null tail of a
    descending scan are spelled out. Returns None when nothing lies past
    ``value``.
    """
    if operator == "$gt":
        if value is None:
            return {field: {"$ne": None}}
        return {field: {"$gt": value}}
    if value is None:
        return None
    return {"$or": [{field: {"$lt": value}}, {field: None}]}


def build_seek_filter(sort: SortSpec, values: Sequence[Any], direction: Direction) -> Dict[str, Any]:
    """Build the lexicographic seek condition past ``values``.

    For fields f1..fn the condition is
    ``(f1 op v1) OR (f1 == v1 AND f2 op v2) OR ... (f1..fn-1 equal AND fn op vn)``.
    """
    branches: List[Dict[str, Any]] = []
    equal_so_far: Dict[str, Any] = {}
    for sort_field, value in zip(sort.fields, values):
        operator = comparison_operator(sort_field.order, direction)
        condition = strict_condition(sort_field.field, operator, value)
        if condition is not None:
            branches.append({**equal_so_far, **condition})
        equal_so_far[sort_field.field] = {"$eq": value}

    if not branches:
        return {sort.field_names[0]: {"$in": []}}
    if len(branches) == 1:
        return branches[0]
    return {"$or": branches}


def combine_filters(base: Dict[str, Any], seek: Dict[str, Any]) -> Dict[str, Any]:
    """AND the caller's filter with the seek condition."""
    if not base:
        return seek
    return {"$and": [base, seek]}


class QueryTranslator:
    """Turns a PaginationRequest into a QueryPlan."""

    def __init__(self, codec: CursorCodec):
        self.codec = codec

    def translate(self, request: PaginationRequest) -> QueryPlan:
        """Build filter, sort, limit and skip for one page.

        Every mode fetches one row more than the page size so the assembler
        can tell whether another page follows.

        Raises:
            InvalidSortSpec: If the sort is empty or malformed
            InvalidLimit: If the limit is not positive
            InvalidCursor: If the cursor cannot be decoded for this sort
        """
        request.sort.ensure_valid()
        if isinstance(request.limit, bool) or not isinstance(request.limit, int) or request.limit <= 0:
            raise InvalidLimit(request.limit)

        base = request.base_filter
        mode = request.mode
        fetch_limit = request.limit + 1

        if isinstance(mode, OffsetPage):
            logger.debug(f"Offset page: skip={mode.skip} limit={request.limit}")
            return QueryPlan(
                filter=base,
                sort=request.sort.to_mongo(),
                limit=fetch_limit,
                skip=mode.skip
            )

        if isinstance(mode, CursorPage):
            values = self.codec.decode(mode.cursor)
            seek = build_seek_filter(request.sort, values, mode.direction)
            sort = request.sort
            if mode.direction is Direction.PREVIOUS:
                sort = sort.reversed()
            logger.debug(
                f"Cursor page: direction={mode.direction.value} limit={request.limit} "
                f"sort={sort.to_mongo()}"
            )
            return QueryPlan(
                filter=combine_filters(base, seek),
                sort=sort.to_mongo(),
                limit=fetch_limit
            )

        logger.debug(f"First page: limit={request.limit}")
        return QueryPlan(filter=base, sort=request.sort.to_mongo(), limit=fetch_limit)
