"""Tests for perch.document.model: request validation and response rendering."""

import pytest

from perch.document.model import (
    IndexRequest,
    IndexResponse,
    OpType,
    RefreshPolicy,
    VersionType,
    parse_time_value,
)
from perch.errors import BadRequest


def _request(**overrides: object) -> IndexRequest:
    return IndexRequest(index="books", source={"title": "Dune"}, id="1", **overrides)  # type: ignore[arg-type]


class TestEnums:
    def test_op_type(self) -> None:
        assert OpType.parse("create") is OpType.CREATE

    def test_op_type_invalid(self) -> None:
        with pytest.raises(BadRequest, match=r"found: \[upsert\]"):
            OpType.parse("upsert")

    def test_version_type_invalid(self) -> None:
        with pytest.raises(BadRequest, match="No version type"):
            VersionType.parse("force")

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, RefreshPolicy.NONE),
            ("", RefreshPolicy.IMMEDIATE),
            ("true", RefreshPolicy.IMMEDIATE),
            ("false", RefreshPolicy.NONE),
            ("wait_for", RefreshPolicy.WAIT_UNTIL),
        ],
    )
    def test_refresh(self, raw: str | None, expected: RefreshPolicy) -> None:
        assert RefreshPolicy.parse(raw) is expected

    def test_refresh_invalid(self) -> None:
        with pytest.raises(BadRequest, match="refresh"):
            RefreshPolicy.parse("sometimes")


class TestTimeValue:
    @pytest.mark.parametrize(
        ("raw", "seconds"),
        [("30s", 30.0), ("1m", 60.0), ("500ms", 0.5), ("2h", 7200.0), ("-1", -1.0), ("0", 0.0)],
    )
    def test_parse(self, raw: str, seconds: float) -> None:
        assert parse_time_value(raw, "timeout") == pytest.approx(seconds)

    @pytest.mark.parametrize("raw", ["30", "1y", "s", "-5s"])
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(BadRequest, match=r"setting \[timeout\]"):
            parse_time_value(raw, "timeout")


class TestValidate:
    def test_defaults_valid(self) -> None:
        _request().validate()

    def test_seq_no_without_term(self) -> None:
        with pytest.raises(BadRequest, match="set together"):
            _request(if_seq_no=3).validate()

    def test_negative_seq_no(self) -> None:
        with pytest.raises(BadRequest, match="non negative"):
            _request(if_seq_no=-2, if_primary_term=1).validate()

    def test_internal_version_rejected(self) -> None:
        with pytest.raises(BadRequest, match="if_seq_no"):
            _request(version=3).validate()

    def test_external_requires_version(self) -> None:
        with pytest.raises(BadRequest, match="requires a version"):
            _request(version_type=VersionType.EXTERNAL).validate()

    def test_external_with_cas(self) -> None:
        with pytest.raises(BadRequest, match="compare and write"):
            _request(version_type=VersionType.EXTERNAL, version=2, if_seq_no=0, if_primary_term=1).validate()

    def test_create_with_cas(self) -> None:
        with pytest.raises(BadRequest, match="compare and set"):
            _request(op_type=OpType.CREATE, if_seq_no=0, if_primary_term=1).validate()

    def test_create_with_external(self) -> None:
        with pytest.raises(BadRequest, match="internal versioning"):
            _request(op_type=OpType.CREATE, version_type=VersionType.EXTERNAL, version=5).validate()

    def test_long_id(self) -> None:
        with pytest.raises(BadRequest, match="512 bytes"):
            IndexRequest(index="books", source={}, id="x" * 513).validate()


class TestIndexResponse:
    def test_created(self) -> None:
        response = IndexResponse(index="books", id="1", version=1, created=True, seq_no=0, primary_term=1)
        assert response.result == "created"
        assert response.status == 201
        assert response.to_dict() == {
            "_index": "books",
            "_id": "1",
            "_version": 1,
            "result": "created",
            "_shards": {"total": 1, "successful": 1, "failed": 0},
            "_seq_no": 0,
            "_primary_term": 1,
        }

    def test_updated(self) -> None:
        response = IndexResponse(index="books", id="1", version=2, created=False, seq_no=1, primary_term=1)
        assert response.result == "updated"
        assert response.status == 200

    def test_location(self) -> None:
        response = IndexResponse(index="books", id="1", version=1, created=True, seq_no=0, primary_term=1)
        assert response.location() == "/books/_doc/1"
        assert response.location("r1") == "/books/_doc/1?routing=r1"
