"""Cluster topology as seen by REST handlers.

Handlers never hold a topology snapshot: they hold a ``NodesSupplier``
and ask it for the current ``DiscoveryNodes`` on each request.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True, order=True)
class Version:
    """A ``major.minor.revision`` service version."""

    major: int
    minor: int = 0
    revision: int = 0

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``"7.5.0"`` (missing parts default to 0)."""
        parts = text.strip().split(".")
        if not 1 <= len(parts) <= 3:
            msg = f"Invalid version {text!r}"
            raise ValueError(msg)
        try:
            numbers = [int(p) for p in parts]
        except ValueError:
            msg = f"Invalid version {text!r}"
            raise ValueError(msg) from None
        return cls(*numbers)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.revision}"


@dataclass(frozen=True, slots=True)
class DiscoveryNode:
    """One node of the cluster."""

    node_id: str
    name: str
    version: Version


@dataclass(frozen=True, slots=True)
class DiscoveryNodes:
    """An immutable snapshot of cluster membership."""

    nodes: tuple[DiscoveryNode, ...] = ()

    @property
    def min_node_version(self) -> Version | None:
        """Oldest version in the cluster, or ``None`` with no nodes."""
        if not self.nodes:
            return None
        return min(node.version for node in self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


NodesSupplier: TypeAlias = Callable[[], DiscoveryNodes]


def static_nodes(*versions: str | Version, nodes: Iterable[DiscoveryNode] = ()) -> NodesSupplier:
    """Build a supplier for a fixed topology.

    ``static_nodes("8.0.0", "7.17.0")`` yields two nodes named
    ``node-0`` and ``node-1``. Explicit ``DiscoveryNode`` objects can be
    passed through *nodes*.
    """
    members = list(nodes)
    for i, v in enumerate(versions, start=len(members)):
        version = v if isinstance(v, Version) else Version.parse(v)
        members.append(DiscoveryNode(node_id=f"node-{i}", name=f"node-{i}", version=version))
    snapshot = DiscoveryNodes(tuple(members))

    def supplier() -> DiscoveryNodes:
        return snapshot

    return supplier
