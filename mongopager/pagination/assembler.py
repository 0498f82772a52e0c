"""Assemble raw find results into a FindResult envelope."""

import logging
from typing import Any, Callable, List, Optional, Sequence

from ..errors.pagination import ContractViolation
from .codec import CursorCodec, Projection, get_field
from .models import (
    CursorPage,
    Direction,
    FindResult,
    OffsetPage,
    PageInfo,
    PaginationRequest,
    QueryPlan,
)

logger = logging.getLogger(__name__)

ItemFactory = Callable[[Any], Any]


def _identity(row: Any) -> Any:
    return row


class PageAssembler:
    """Builds the page envelope from at most ``limit + 1`` raw rows."""

    def __init__(
        self,
        codec: CursorCodec,
        item_factory: Optional[ItemFactory] = None,
        projection: Projection = get_field,
    ):
        self.codec = codec
        self.item_factory = item_factory or _identity
        self.projection = projection

    def assemble(
        self,
        request: PaginationRequest,
        plan: QueryPlan,
        rows: Sequence[Any],
        total_count: Optional[int] = None,
    ) -> FindResult:
        """Trim, reorder and wrap the rows returned for ``plan``.

        Raises:
            ContractViolation: If more rows came back than the plan asked for
        """
        if len(rows) > plan.limit:
            raise ContractViolation(
                f"Executor returned {len(rows)} rows for a fetch limit of {plan.limit}"
            )

        has_more = len(rows) > request.limit
        retained: List[Any] = list(rows[:request.limit])

        direction = request.direction
        if direction is Direction.PREVIOUS:
            retained.reverse()

        edges = []
        items = []
        for row in retained:
            item = self.item_factory(row)
            edges.append({"cursor": self.codec.encode_row(row, self.projection), "node": item})
            items.append(item)

        mode = request.mode
        if isinstance(mode, OffsetPage):
            has_previous, has_next = mode.skip > 0, has_more
        elif isinstance(mode, CursorPage) and direction is Direction.PREVIOUS:
            has_previous, has_next = has_more, True
        elif isinstance(mode, CursorPage):
            has_previous, has_next = True, has_more
        else:
            has_previous, has_next = False, has_more

        page_info = PageInfo(
            has_next_page=has_next,
            has_previous_page=has_previous,
            start_cursor=edges[0]["cursor"] if edges else None,
            next_cursor=edges[-1]["cursor"] if edges else None,
        )
        logger.debug(
            f"Assembled page: {len(items)} items, has_next={has_next}, "
            f"has_previous={has_previous}, total={total_count}"
        )
        return FindResult(
            page_info=page_info,
            edges=edges,
            items=items,
            total_count=total_count,
        )
