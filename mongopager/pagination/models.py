"""Pydantic models for pagination requests and result envelopes."""

from enum import Enum, IntEnum
from typing import Annotated, Any, Dict, Generic, List, Literal, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pymongo import ASCENDING, DESCENDING

from ..errors.pagination import InvalidSortSpec

T = TypeVar("T")


class SortOrder(IntEnum):
    """Sort order of a single field, valued like pymongo's constants."""

    ASCENDING = ASCENDING
    DESCENDING = DESCENDING

    def flipped(self) -> "SortOrder":
        return SortOrder.DESCENDING if self is SortOrder.ASCENDING else SortOrder.ASCENDING


class Direction(str, Enum):
    """Direction of travel relative to the sort order."""

    NEXT = "next"
    PREVIOUS = "previous"


_ORDER_NAMES = {
    "asc": SortOrder.ASCENDING,
    "ascending": SortOrder.ASCENDING,
    "1": SortOrder.ASCENDING,
    "desc": SortOrder.DESCENDING,
    "descending": SortOrder.DESCENDING,
    "-1": SortOrder.DESCENDING,
}


class SortField(BaseModel):
    """One (field, order) pair of a sort specification."""

    field: str = Field(description="Document field name, dotted for embedded fields")
    order: SortOrder = Field(default=SortOrder.ASCENDING, description="Sort order")

    model_config = ConfigDict(frozen=True)


class SortSpec(BaseModel):
    """Ordered sequence of sort fields.

    The position of a field defines its tie-break precedence. The last field
    should be unique (usually ``_id``), otherwise rows sharing every sort value
    can be skipped or repeated across pages.
    """

    fields: Tuple[SortField, ...] = Field(default=(), description="Sort fields in precedence order")

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def field_names(self) -> List[str]:
        return [f.field for f in self.fields]

    def to_mongo(self) -> List[Tuple[str, int]]:
        """Return the sort in the ``[(field, order), ...]`` form pymongo accepts."""
        return [(f.field, int(f.order)) for f in self.fields]

    def reversed(self) -> "SortSpec":
        """Return the same fields with every order flipped."""
        return SortSpec(fields=tuple(
            SortField(field=f.field, order=f.order.flipped()) for f in self.fields
        ))

    def ensure_valid(self) -> None:
        """Raise InvalidSortSpec unless the spec is usable for pagination."""
        if not self.fields:
            raise InvalidSortSpec()
        seen = set()
        for f in self.fields:
            if not f.field or not f.field.strip():
                raise InvalidSortSpec("Sort field names must not be blank")
            if f.field in seen:
                raise InvalidSortSpec(f"Sort field '{f.field}' appears more than once")
            seen.add(f.field)

    @classmethod
    def from_mongo(cls, sort: Union[Mapping[str, int], Sequence[Tuple[str, int]]]) -> "SortSpec":
        """Build a SortSpec from a pymongo-style mapping or list of pairs."""
        pairs = sort.items() if isinstance(sort, Mapping) else sort
        try:
            return cls(fields=tuple(
                SortField(field=name, order=SortOrder(int(order))) for name, order in pairs
            ))
        except (TypeError, ValueError) as e:
            raise InvalidSortSpec(f"Invalid sort specification: {e}")

    @classmethod
    def parse(cls, value: str) -> "SortSpec":
        """Parse ``"score:desc,_id"`` or ``"-score,_id"`` into a SortSpec."""
        fields = []
        for part in (value or "").split(","):
            part = part.strip()
            if not part:
                continue
            if ":" in part:
                name, _, order_name = part.partition(":")
                order = _ORDER_NAMES.get(order_name.strip().lower())
                if order is None:
                    raise InvalidSortSpec(f"Unknown sort order '{order_name}' for field '{name}'")
            elif part.startswith("-"):
                name, order = part[1:], SortOrder.DESCENDING
            else:
                name, order = part.lstrip("+"), SortOrder.ASCENDING
            fields.append(SortField(field=name.strip(), order=order))
        spec = cls(fields=tuple(fields))
        spec.ensure_valid()
        return spec


class FirstPage(BaseModel):
    """No cursor and no skip: the first page in sort order."""

    kind: Literal["first"] = "first"

    model_config = ConfigDict(frozen=True)


class OffsetPage(BaseModel):
    """Classic skip/limit paging."""

    kind: Literal["offset"] = "offset"
    skip: int = Field(default=0, ge=0, description="Number of rows to skip")

    model_config = ConfigDict(frozen=True)


class CursorPage(BaseModel):
    """Resume from a cursor in the given direction."""

    kind: Literal["cursor"] = "cursor"
    cursor: str = Field(description="Opaque cursor token")
    direction: Direction = Field(default=Direction.NEXT, description="Direction of travel")

    model_config = ConfigDict(frozen=True)


PagingMode = Annotated[Union[FirstPage, OffsetPage, CursorPage], Field(discriminator="kind")]


class PaginationRequest(BaseModel):
    """A single page request. The paging mode is fixed at construction."""

    sort: SortSpec
    limit: int = Field(description="Page size")
    mode: PagingMode = Field(default_factory=FirstPage)
    filter: Optional[Dict[str, Any]] = Field(default=None, description="Base query filter")
    include_total: bool = Field(default=True, description="Whether to count matching documents")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def build(
        cls,
        sort: Union[SortSpec, str, Mapping[str, int], Sequence[Tuple[str, int]]],
        limit: int,
        cursor: Optional[str] = None,
        direction: Optional[Union[Direction, str]] = None,
        skip: Optional[int] = None,
        filter: Optional[Dict[str, Any]] = None,
        include_total: bool = True,
    ) -> "PaginationRequest":
        """Build a request from loose options.

        A non-zero ``skip`` selects offset paging and the cursor is ignored.
        Otherwise a cursor selects cursor paging, moving forward unless a
        direction is given.
        """
        if isinstance(sort, str):
            sort = SortSpec.parse(sort)
        elif not isinstance(sort, SortSpec):
            sort = SortSpec.from_mongo(sort)

        if skip:
            mode = OffsetPage(skip=skip)
        elif cursor:
            mode = CursorPage(cursor=cursor, direction=Direction(direction or Direction.NEXT))
        else:
            mode = FirstPage()

        return cls(sort=sort, limit=limit, mode=mode, filter=filter, include_total=include_total)

    @property
    def direction(self) -> Direction:
        if isinstance(self.mode, CursorPage):
            return self.mode.direction
        return Direction.NEXT

    @property
    def base_filter(self) -> Dict[str, Any]:
        return dict(self.filter or {})


class QueryPlan(BaseModel):
    """Concrete find instructions for the execution collaborator."""

    filter: Dict[str, Any] = Field(default_factory=dict)
    sort: List[Tuple[str, int]]
    limit: int
    skip: int = 0


class _EnvelopeModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageInfo(_EnvelopeModel):
    """Whether more pages exist, and the cursors bounding this one."""

    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: Optional[str] = None
    next_cursor: Optional[str] = None


class Edge(_EnvelopeModel, Generic[T]):
    """An item paired with its own cursor."""

    cursor: str
    node: T


class FindResult(_EnvelopeModel, Generic[T]):
    """A page of items with per-item cursors and page metadata."""

    page_info: PageInfo = Field(default_factory=PageInfo)
    edges: List[Edge[T]] = Field(default_factory=list)
    items: List[T] = Field(default_factory=list)
    total_count: Optional[int] = None
