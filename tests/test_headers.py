"""Tests for perch.http.headers and perch.http.query."""

from perch.http.headers import Headers
from perch.http.query import QueryParams


class TestHeaders:
    def test_case_insensitive(self) -> None:
        headers = Headers(((b"X-Opaque-Id", b"abc"),))
        assert headers["x-opaque-id"] == "abc"
        assert "X-OPAQUE-ID" in headers

    def test_first_value_wins(self) -> None:
        headers = Headers(((b"warning", b"one"), (b"warning", b"two")))
        assert headers["Warning"] == "one"
        assert headers.get_list("Warning") == ["one", "two"]

    def test_len_counts_distinct_names(self) -> None:
        headers = Headers(((b"a", b"1"), (b"a", b"2"), (b"b", b"3")))
        assert len(headers) == 2
        assert list(headers) == ["a", "b"]

    def test_get_default(self) -> None:
        assert Headers().get("missing", "x") == "x"

    def test_from_dict(self) -> None:
        assert Headers.from_dict({"Content-Type": "application/json"})["content-type"] == "application/json"

    def test_non_string_key(self) -> None:
        assert 1 not in Headers(((b"a", b"1"),))


class TestQueryParams:
    def test_first_value(self) -> None:
        query = QueryParams(b"routing=a&routing=b")
        assert query["routing"] == "a"

    def test_blank_values(self) -> None:
        query = QueryParams(b"refresh&pretty=")
        assert query["refresh"] == ""
        assert query["pretty"] == ""

    def test_percent_decoding(self) -> None:
        assert QueryParams(b"pipeline=my%20pipe")["pipeline"] == "my pipe"

    def test_raw(self) -> None:
        assert QueryParams(b"a=1").raw == b"a=1"

    def test_empty(self) -> None:
        query = QueryParams()
        assert len(query) == 0
        assert "a" not in query
