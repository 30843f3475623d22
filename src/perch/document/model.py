"""Index request and response records.

``IndexRequest`` is what the REST layer hands to a ``DocumentClient``;
``IndexResponse`` is what comes back. Both are frozen.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from perch.errors import BadRequest


class OpType(Enum):
    INDEX = "index"
    CREATE = "create"

    @classmethod
    def parse(cls, value: str) -> "OpType":
        try:
            return cls(value)
        except ValueError:
            msg = f"opType must be 'create' or 'index', found: [{value}]"
            raise BadRequest(msg) from None


class VersionType(Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    EXTERNAL_GTE = "external_gte"

    @classmethod
    def parse(cls, value: str) -> "VersionType":
        try:
            return cls(value)
        except ValueError:
            msg = f"No version type match [{value}]"
            raise BadRequest(msg) from None


class RefreshPolicy(Enum):
    NONE = "false"
    IMMEDIATE = "true"
    WAIT_UNTIL = "wait_for"

    @classmethod
    def parse(cls, value: str | None) -> "RefreshPolicy":
        """``None`` means no refresh; a bare ``?refresh`` means immediate."""
        if value is None:
            return cls.NONE
        if value == "":
            return cls.IMMEDIATE
        try:
            return cls(value)
        except ValueError:
            msg = f"Unknown value for refresh: [{value}]."
            raise BadRequest(msg) from None


_TIME_VALUE = re.compile(r"^(\d+)(nanos|micros|ms|s|m|h|d)$")
_TIME_UNITS = {
    "nanos": 1e-9,
    "micros": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
}

DEFAULT_TIMEOUT = 60.0


def parse_time_value(value: str, setting: str) -> float:
    """Parse ``"30s"``/``"1m"``/``"500ms"`` into seconds.

    ``-1`` and ``0`` are accepted unit-less, as "no timeout" and "now".
    """
    if value in ("-1", "0"):
        return float(value)
    m = _TIME_VALUE.match(value)
    if m is None:
        msg = (
            f"failed to parse setting [{setting}] with value [{value}] as a time value: "
            "unit is missing or unrecognized"
        )
        raise BadRequest(msg)
    return int(m.group(1)) * _TIME_UNITS[m.group(2)]


@dataclass(frozen=True, slots=True)
class IndexRequest:
    """A single-document index operation.

    ``id`` is ``None`` when the server should assign one.
    """

    index: str
    source: dict[str, Any]
    id: str | None = None
    op_type: OpType = OpType.INDEX
    routing: str | None = None
    pipeline: str | None = None
    refresh: RefreshPolicy = RefreshPolicy.NONE
    timeout: float = DEFAULT_TIMEOUT
    version: int | None = None
    version_type: VersionType = VersionType.INTERNAL
    if_seq_no: int | None = None
    if_primary_term: int | None = None
    require_alias: bool = False
    wait_for_active_shards: str | None = None

    def validate(self) -> None:
        """Reject combinations no backend can honour.

        Raises ``BadRequest`` listing the first problem found.
        """
        if (self.if_seq_no is None) != (self.if_primary_term is None):
            msg = "if_seq_no and if_primary_term must be set together"
            raise BadRequest(msg)
        if self.if_seq_no is not None and self.if_seq_no < 0:
            msg = f"sequence number must be non negative. got [{self.if_seq_no}]."
            raise BadRequest(msg)
        if self.if_primary_term is not None and self.if_primary_term <= 0:
            msg = f"primary term must be positive. got [{self.if_primary_term}]"
            raise BadRequest(msg)

        if self.version_type is VersionType.INTERNAL:
            if self.version is not None:
                msg = (
                    "internal versioning can not be used for optimistic concurrency control. "
                    "Please use `if_seq_no` and `if_primary_term` instead"
                )
                raise BadRequest(msg)
        else:
            if self.version is None:
                msg = f"version type [{self.version_type.value}] requires a version"
                raise BadRequest(msg)
            if self.version < 0:
                msg = f"illegal version value [{self.version}] for version type [{self.version_type.value}]"
                raise BadRequest(msg)
            if self.if_seq_no is not None:
                msg = "compare and write operations can not use versioning"
                raise BadRequest(msg)

        if self.op_type is OpType.CREATE:
            if self.if_seq_no is not None:
                msg = "create operations do not support compare and set. use index instead"
                raise BadRequest(msg)
            if self.version_type is not VersionType.INTERNAL:
                msg = "create operations only support internal versioning. use index instead"
                raise BadRequest(msg)

        if self.id is not None and len(self.id.encode("utf-8")) > 512:
            msg = f"id [{self.id}] is too long, must be no longer than 512 bytes"
            raise BadRequest(msg)


@dataclass(frozen=True, slots=True)
class ShardInfo:
    total: int = 1
    successful: int = 1
    failed: int = 0


@dataclass(frozen=True, slots=True)
class IndexResponse:
    """Outcome of an ``IndexRequest`` as reported by the backend."""

    index: str
    id: str
    version: int
    created: bool
    seq_no: int
    primary_term: int
    shards: ShardInfo = field(default_factory=ShardInfo)

    @property
    def result(self) -> str:
        return "created" if self.created else "updated"

    @property
    def status(self) -> int:
        return 201 if self.created else 200

    def location(self, routing: str | None = None) -> str:
        """Relative URL of the indexed document."""
        loc = f"/{self.index}/_doc/{self.id}"
        if routing is not None:
            loc = f"{loc}?routing={routing}"
        return loc

    def to_dict(self) -> dict[str, Any]:
        return {
            "_index": self.index,
            "_id": self.id,
            "_version": self.version,
            "result": self.result,
            "_shards": {
                "total": self.shards.total,
                "successful": self.shards.successful,
                "failed": self.shards.failed,
            },
            "_seq_no": self.seq_no,
            "_primary_term": self.primary_term,
        }
