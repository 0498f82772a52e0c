"""Run paginated queries against a MongoDB collection."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from ..pagination import FindResult, PaginationRequest, Paginator, get_field
from ..pagination.assembler import ItemFactory
from ..pagination.codec import Projection

logger = logging.getLogger(__name__)


class MongoExecutor:
    """Executes find and count for the paginator on one collection."""

    def __init__(self, collection: AsyncCollection):
        self.collection = collection

    @property
    def codec_options(self):
        return self.collection.codec_options

    async def execute_find(
        self,
        filter: Dict[str, Any],
        sort: Sequence[Tuple[str, int]],
        limit: int,
        skip: int = 0
    ) -> List[Dict[str, Any]]:
        """Return the matching documents in ``sort`` order."""
        try:
            cursor = self.collection.find(filter, sort=list(sort) or None, limit=limit, skip=skip)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Find on '{self.collection.name}' failed: {e}")
            raise
        logger.debug(f"Find on '{self.collection.name}' returned {len(documents)} documents")
        return documents

    async def execute_count(self, filter: Dict[str, Any]) -> int:
        """Count the documents matching ``filter``."""
        try:
            return await self.collection.count_documents(filter)
        except PyMongoError as e:
            logger.error(f"Count on '{self.collection.name}' failed: {e}")
            raise


async def find_paginated(
    collection: AsyncCollection,
    request: PaginationRequest,
    item_factory: Optional[ItemFactory] = None,
    projection: Projection = get_field
) -> FindResult:
    """Fetch one page of ``collection`` for ``request``.

    Cursors are encoded with the collection's codec options so decoded sort
    values compare equal to the values the driver returns.
    """
    executor = MongoExecutor(collection)
    paginator = Paginator(
        executor,
        item_factory=item_factory,
        projection=projection,
        codec_options=executor.codec_options
    )
    return await paginator.paginate(request)
