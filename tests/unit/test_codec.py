"""Tests for cursor encoding and decoding."""

import base64
from datetime import datetime

import bson
import pytest
from bson import ObjectId

from mongopager.errors import InvalidCursor
from mongopager.pagination import CursorCodec, SortSpec, get_field


@pytest.fixture
def score_codec() -> CursorCodec:
    return CursorCodec(SortSpec.parse("score:desc,_id:asc"))


class TestRoundTrip:
    """decode(encode(t)) == t for the value types cursors carry."""

    @pytest.mark.parametrize("values", [
        (5, 1),
        (3.25, "abc"),
        (None, ObjectId("65a000000000000000000001")),
        (datetime(2024, 1, 2, 3, 4, 5, 123000), 7),
        ({"nested": [1, 2]}, True),
        (2 ** 40, ""),
    ])
    def test_round_trip(self, score_codec, values):
        assert score_codec.decode(score_codec.encode(values)) == values

    @pytest.mark.parametrize("sort,values", [
        ("rank,_id", (1, 2)),
        ("_id,rank", (2, 1)),
        ("rank:desc,_id:desc", (None, ObjectId("65a000000000000000000001"))),
        ("a,_id,b", ("x", 3, 4.5)),
    ])
    def test_id_position_is_preserved(self, sort, values):
        codec = CursorCodec(SortSpec.parse(sort))
        assert codec.decode(codec.encode(values)) == values

    def test_single_field(self):
        codec = CursorCodec(SortSpec.parse("_id"))
        oid = ObjectId()
        assert codec.decode(codec.encode((oid,))) == (oid,)


class TestEncoding:
    """Token shape and determinism."""

    def test_encode_is_deterministic(self, score_codec):
        tokens = {score_codec.encode((5, 1)) for _ in range(10)}
        assert len(tokens) == 1

    def test_separate_codecs_agree(self):
        first = CursorCodec(SortSpec.parse("score:desc,_id"))
        second = CursorCodec(SortSpec.parse("score:desc,_id"))
        assert first.encode((5, 1)) == second.encode((5, 1))

    def test_different_values_give_different_tokens(self, score_codec):
        assert score_codec.encode((5, 1)) != score_codec.encode((5, 2))

    def test_token_is_url_safe_without_padding(self, score_codec):
        token = score_codec.encode(("a/b+c?d=e", ObjectId()))
        assert not set(token) - set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_")

    def test_token_holds_bson_of_sort_fields(self, score_codec):
        token = score_codec.encode((5, 1))
        raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
        assert bson.decode(raw) == {"f": ["score", "_id"], "v": [5, 1]}

    def test_encode_rejects_wrong_value_count(self, score_codec):
        with pytest.raises(InvalidCursor):
            score_codec.encode((5,))

    def test_encode_rejects_unencodable_value(self, score_codec):
        with pytest.raises(InvalidCursor):
            score_codec.encode((object(), 1))

    def test_encode_row_projects_sort_fields(self):
        codec = CursorCodec(SortSpec.parse("meta.rank:desc,_id"))
        row = {"_id": 9, "meta": {"rank": 4}, "title": "ignored"}
        assert codec.decode(codec.encode_row(row)) == (4, 9)

    def test_encode_row_missing_field_is_null(self, score_codec):
        assert score_codec.decode(score_codec.encode_row({"_id": 3})) == (None, 3)

    def test_encode_row_with_custom_projection(self, score_codec):
        row = {"stats": {"score": 8}, "id": 2}
        projection = lambda r, name: r["stats"]["score"] if name == "score" else r["id"]
        assert score_codec.decode(score_codec.encode_row(row, projection)) == (8, 2)


class TestDecodeRejection:
    """Malformed or foreign tokens raise InvalidCursor and nothing else."""

    @pytest.mark.parametrize("token", [
        "",
        "not a token",
        "abc+def/",
        "abc=",
        "a",
        base64.urlsafe_b64encode(b"definitely not bson").rstrip(b"=").decode(),
    ])
    def test_malformed_tokens(self, score_codec, token):
        with pytest.raises(InvalidCursor):
            score_codec.decode(token)

    def test_trailing_newline_is_rejected(self, score_codec):
        token = score_codec.encode((5, 1))
        with pytest.raises(InvalidCursor):
            score_codec.decode(token + "\n")

    def test_document_keyed_by_field_is_rejected(self, score_codec):
        raw = bson.encode({"score": 5, "_id": 1})
        token = base64.urlsafe_b64encode(raw).rstrip(b"=").decode()
        with pytest.raises(InvalidCursor):
            score_codec.decode(token)

    def test_value_count_mismatch_is_rejected(self, score_codec):
        raw = bson.encode({"f": ["score", "_id"], "v": [5]})
        token = base64.urlsafe_b64encode(raw).rstrip(b"=").decode()
        with pytest.raises(InvalidCursor):
            score_codec.decode(token)

    def test_non_string_token(self, score_codec):
        with pytest.raises(InvalidCursor):
            score_codec.decode(None)

    def test_cursor_for_another_sort(self, score_codec):
        other = CursorCodec(SortSpec.parse("name,_id"))
        with pytest.raises(InvalidCursor):
            score_codec.decode(other.encode(("Apple", 1)))

    def test_cursor_with_fewer_fields(self, score_codec):
        other = CursorCodec(SortSpec.parse("score:desc"))
        with pytest.raises(InvalidCursor):
            score_codec.decode(other.encode((5,)))

    def test_cursor_with_fields_in_other_order(self, score_codec):
        other = CursorCodec(SortSpec.parse("_id,score:desc"))
        with pytest.raises(InvalidCursor):
            score_codec.decode(other.encode((1, 5)))

    def test_truncated_token(self, score_codec):
        token = score_codec.encode((5, 1))
        with pytest.raises(InvalidCursor):
            score_codec.decode(token[:-4])

    def test_tampered_bytes_never_crash(self, score_codec):
        token = score_codec.encode((5, ObjectId("65a000000000000000000001")))
        raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))

        for position in range(len(raw)):
            mutated = bytearray(raw)
            mutated[position] ^= 0xFF
            tampered = base64.urlsafe_b64encode(bytes(mutated)).rstrip(b"=").decode()
            try:
                values = score_codec.decode(tampered)
            except InvalidCursor:
                continue
            assert len(values) == 2


def test_get_field_reads_objects_and_mappings():
    class Row:
        def __init__(self):
            self.meta = {"rank": 3}

    assert get_field(Row(), "meta.rank") == 3
    assert get_field({"a": {"b": None}}, "a.b") is None
    assert get_field({"a": 1}, "a.b") is None
    assert get_field({}, "missing") is None
