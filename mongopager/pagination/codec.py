"""Cursor token encoding.

A cursor is the BSON document ``{"f": [field, ...], "v": [value, ...]}`` of a
row's sort fields and values, encoded as URL-safe base64 without padding.
Fields and values are arrays because the encoder always writes a top-level
``_id`` key first.
"""

import base64
import logging
import re
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

import bson
from bson.codec_options import CodecOptions
from bson.errors import InvalidDocument

from ..errors.pagination import InvalidCursor
from .models import SortSpec

logger = logging.getLogger(__name__)

SortKeyTuple = Tuple[Any, ...]
Projection = Callable[[Any, str], Any]

DEFAULT_CODEC_OPTIONS = CodecOptions()

_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
_FIELDS_KEY = "f"
_VALUES_KEY = "v"
_MISSING = object()


def get_field(row: Any, name: str) -> Any:
    """Read a possibly dotted field from a mapping or object; missing is None."""
    value = row
    for part in name.split("."):
        if isinstance(value, Mapping):
            value = value.get(part, _MISSING)
        else:
            value = getattr(value, part, _MISSING)
        if value is _MISSING:
            return None
    return value


class CursorCodec:
    """Encodes sort-key tuples to tokens and back for one SortSpec."""

    def __init__(self, sort: SortSpec, codec_options: Optional[CodecOptions] = None):
        self.sort = sort
        self.codec_options = codec_options or DEFAULT_CODEC_OPTIONS

    def encode(self, values: Sequence[Any]) -> str:
        """Encode the sort values of one row.

        Raises:
            InvalidCursor: If the value count differs from the sort field count
                or a value has no BSON representation
        """
        names = self.sort.field_names
        if len(values) != len(names):
            raise InvalidCursor(
                f"Expected {len(names)} sort values, got {len(values)}"
            )
        try:
            raw = bson.encode(
                {_FIELDS_KEY: list(names), _VALUES_KEY: list(values)},
                codec_options=self.codec_options
            )
        except (InvalidDocument, TypeError, OverflowError) as e:
            raise InvalidCursor(f"Sort values cannot be encoded: {e}")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    def encode_row(self, row: Any, projection: Projection = get_field) -> str:
        """Project the sort fields from a row and encode them."""
        return self.encode(self.project(row, projection))

    def project(self, row: Any, projection: Projection = get_field) -> SortKeyTuple:
        return tuple(projection(row, name) for name in self.sort.field_names)

    def decode(self, token: str) -> SortKeyTuple:
        """Decode a token back into sort values.

        Raises:
            InvalidCursor: If the token is not URL-safe base64, not a BSON
                document, or its fields differ from the sort fields
        """
        if not token or not isinstance(token, str) or not _TOKEN_PATTERN.fullmatch(token):
            raise InvalidCursor("Cursor is not a valid token")

        try:
            raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
        except ValueError as e:
            raise InvalidCursor(f"Invalid cursor encoding: {e}")

        try:
            document = bson.decode(raw, codec_options=self.codec_options)
        except Exception as e:
            logger.debug(f"Rejected cursor that is not a BSON document: {e}")
            raise InvalidCursor("Cursor does not contain a valid document")

        if not isinstance(document, Mapping) or set(document.keys()) != {_FIELDS_KEY, _VALUES_KEY}:
            raise InvalidCursor("Cursor does not contain sort values")
        fields, values = document[_FIELDS_KEY], document[_VALUES_KEY]
        if not isinstance(fields, list) or not isinstance(values, list):
            raise InvalidCursor("Cursor does not contain sort values")

        expected = self.sort.field_names
        if fields != expected or len(values) != len(expected):
            raise InvalidCursor(f"Cursor fields {fields} do not match sort fields {expected}")
        return tuple(values)
