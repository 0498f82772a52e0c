"""RFC 8288 Link headers for paginated responses."""

from typing import Any, Dict, Optional
from urllib.parse import urlencode

from .models import Direction, FindResult


def create_link_header(
    base_url: str,
    params: Dict[str, Any],
    next_cursor: Optional[str] = None,
    prev_cursor: Optional[str] = None
) -> Optional[str]:
    """Create Link header for pagination as per RFC 8288.

    Args:
        base_url: Base URL for the resource
        params: Query parameters to carry over (limit, sort, ...)
        next_cursor: Cursor to resume forward from
        prev_cursor: Cursor to resume backward from

    Returns:
        Link header value or None if no links
    """
    carried = {k: v for k, v in params.items() if k not in ("cursor", "direction", "skip") and v is not None}
    links = []

    if next_cursor:
        query = urlencode({**carried, "cursor": next_cursor, "direction": Direction.NEXT.value})
        links.append(f'<{base_url}?{query}>; rel="next"')

    if prev_cursor:
        query = urlencode({**carried, "cursor": prev_cursor, "direction": Direction.PREVIOUS.value})
        links.append(f'<{base_url}?{query}>; rel="prev"')

    return ", ".join(links) if links else None


def link_header_for(base_url: str, params: Dict[str, Any], result: FindResult) -> Optional[str]:
    """Link header pointing at the pages adjacent to ``result``."""
    info = result.page_info
    return create_link_header(
        base_url,
        params,
        next_cursor=info.next_cursor if info.has_next_page else None,
        prev_cursor=info.start_cursor if info.has_previous_page else None,
    )
