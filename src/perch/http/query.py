"""Query string parameters as the REST handlers read them.

Blank values are kept: ``?refresh`` parses to ``{"refresh": ""}``, which
the document handlers treat as an explicit flag. When a name repeats,
the first occurrence wins.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Immutable, first-value-wins view of a raw query string."""

    __slots__ = ("_raw", "_values")

    def __init__(self, query_string: bytes = b"") -> None:
        values: dict[str, str] = {}
        for name, value in parse_qsl(query_string.decode("latin-1"), keep_blank_values=True):
            values.setdefault(name, value)
        object.__setattr__(self, "_values", values)
        object.__setattr__(self, "_raw", query_string)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"QueryParams({self._values!r})"

    @property
    def raw(self) -> bytes:
        """The query string exactly as received."""
        return self._raw
