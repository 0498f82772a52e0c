"""Document listing endpoints."""

import json
import logging
from typing import Annotated, Any, Dict

from bson import json_util
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ..config import Settings, get_settings
from ..db.connection import get_database
from ..db.executor import MongoExecutor
from ..errors.problem_details import BadRequestError
from ..pagination import Direction, Executor, PaginationRequest, Paginator, link_header_for


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/collections/{collection}/documents",
    tags=["Documents"],
    responses={
        400: {"description": "Bad Request - Invalid pagination parameters"},
        503: {"description": "Service Unavailable - Database error"}
    }
)


def to_json_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Render a BSON document as relaxed Extended JSON."""
    return json.loads(json_util.dumps(document, json_options=json_util.RELAXED_JSON_OPTIONS))


async def get_executor(collection: str) -> Executor:
    """Executor for the collection named in the path."""
    database = await get_database()
    return MongoExecutor(database[collection])


@router.get(
    "",
    summary="List documents",
    description="List documents in a collection with cursor-based or offset pagination.",
    responses={
        200: {"description": "Documents retrieved successfully"}
    }
)
async def list_documents(
    collection: str,
    request: Request,
    executor: Annotated[Executor, Depends(get_executor)],
    settings: Annotated[Settings, Depends(get_settings)],
    limit: Annotated[int | None, Query(ge=1, description="Number of documents per page")] = None,
    cursor: Annotated[str | None, Query(description="Cursor to resume from")] = None,
    direction: Annotated[Direction | None, Query(description="Direction to travel from the cursor")] = None,
    skip: Annotated[int | None, Query(ge=0, description="Offset; takes precedence over cursor")] = None,
    sort: Annotated[str | None, Query(description="Sort fields, e.g. 'score:desc,_id:asc'")] = None,
    include_total: Annotated[bool | None, Query(description="Include the total document count")] = None
) -> JSONResponse:
    """List documents in a collection one page at a time.

    Pages are ordered by ``sort`` (``_id`` ascending by default). Every
    document is returned with its own cursor, so a client can resume after any
    item, not only at page boundaries. A non-zero ``skip`` switches to offset
    paging and ignores ``cursor``.

    Args:
        collection: Name of the collection to page through
        request: FastAPI request object
        executor: Query executor for the collection
        settings: Application settings
        limit: Page size, up to the configured maximum
        cursor: Cursor taken from a previous page
        direction: 'next' (default) or 'previous'
        skip: Number of documents to skip in offset mode
        sort: Comma separated sort fields
        include_total: Whether to count all documents

    Returns:
        FindResult envelope with a Link header for adjacent pages
    """
    page_size = limit or settings.default_page_size
    if page_size > settings.max_page_size:
        raise BadRequestError(
            f"Limit must not exceed {settings.max_page_size}",
            error_code="INVALID_LIMIT"
        )
    sort_param = sort or settings.default_sort
    if include_total is None:
        include_total = settings.include_total_count

    pagination = PaginationRequest.build(
        sort=sort_param,
        limit=page_size,
        cursor=cursor,
        direction=direction,
        skip=skip,
        include_total=include_total
    )
    logger.info(f"Listing documents in '{collection}' ({pagination.mode.kind} page, limit {page_size})")

    paginator = Paginator(
        executor,
        item_factory=to_json_document,
        codec_options=getattr(executor, "codec_options", None)
    )
    result = await paginator.paginate(pagination)

    headers = {}
    link_header = link_header_for(
        str(request.url.replace(query="")),
        {"limit": page_size, "sort": sort_param},
        result
    )
    if link_header:
        headers["Link"] = link_header

    return JSONResponse(
        content=result.model_dump(by_alias=True, mode="json"),
        headers=headers
    )
