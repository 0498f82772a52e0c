"""The pagination entry point: translate, execute, assemble."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from bson.codec_options import CodecOptions

from ..errors.pagination import ExecutionFailure
from .assembler import ItemFactory, PageAssembler
from .codec import CursorCodec, Projection, get_field
from .models import FindResult, PaginationRequest
from .translator import QueryTranslator

logger = logging.getLogger(__name__)


class Executor(Protocol):
    """Runs the queries a pagination request needs."""

    async def execute_find(
        self,
        filter: Dict[str, Any],
        sort: Sequence[Tuple[str, int]],
        limit: int,
        skip: int = 0,
    ) -> List[Any]:
        """Return at most ``limit`` rows matching ``filter``, ordered by ``sort``."""
        ...

    async def execute_count(self, filter: Dict[str, Any]) -> int:
        """Return the number of rows matching ``filter``."""
        ...


class Paginator:
    """Pages through an executor's results.

    Holds no per-request state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        executor: Executor,
        item_factory: Optional[ItemFactory] = None,
        projection: Projection = get_field,
        codec_options: Optional[CodecOptions] = None,
    ):
        self.executor = executor
        self.item_factory = item_factory
        self.projection = projection
        self.codec_options = codec_options

    async def paginate(self, request: PaginationRequest) -> FindResult:
        """Fetch one page for ``request``.

        Raises:
            InvalidSortSpec: If the sort is empty or malformed
            InvalidLimit: If the limit is not positive
            InvalidCursor: If the cursor cannot be decoded for this sort
            ExecutionFailure: If find or count fails in the executor
            ContractViolation: If the executor returns more rows than asked
        """
        codec = CursorCodec(request.sort, self.codec_options)
        plan = QueryTranslator(codec).translate(request)

        if request.sort.field_names[-1] != "_id":
            logger.debug(
                f"Sort {request.sort.field_names} does not end with _id; "
                f"rows with equal sort values may repeat or be skipped across pages"
            )

        find = self._run(
            "find",
            self.executor.execute_find(plan.filter, plan.sort, plan.limit, plan.skip)
        )
        if request.include_total:
            rows, total_count = await asyncio.gather(
                find,
                self._run("count", self.executor.execute_count(request.base_filter))
            )
        else:
            rows, total_count = await find, None

        assembler = PageAssembler(codec, self.item_factory, self.projection)
        return assembler.assemble(request, plan, rows, total_count)

    @staticmethod
    async def _run(operation: str, call):
        try:
            return await call
        except ExecutionFailure:
            raise
        except Exception as e:
            logger.error(f"Pagination {operation} failed: {type(e).__name__}: {e}")
            raise ExecutionFailure(operation, e) from e


async def paginate(
    request: PaginationRequest,
    executor: Executor,
    item_factory: Optional[ItemFactory] = None,
    projection: Projection = get_field,
    codec_options: Optional[CodecOptions] = None,
) -> FindResult:
    """Fetch one page for ``request`` from ``executor``."""
    paginator = Paginator(executor, item_factory, projection, codec_options)
    return await paginator.paginate(request)
