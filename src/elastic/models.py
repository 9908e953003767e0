"""Response documents read from the cluster — only the consumed fields."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

from pydantic import BaseModel, Field

from src.core.types import HealthState
from src.elastic.exceptions import ElasticParseError

EntryT = TypeVar("EntryT", bound=BaseModel)

# ── Cluster health (/_cluster/health?level=shards) ───────────────


class ShardHealth(BaseModel):
    status: HealthState


class IndexHealth(BaseModel):
    status: HealthState
    shards: dict[str, ShardHealth] = Field(default_factory=dict)


class ClusterHealth(BaseModel):
    """Cluster health document with shard-level detail."""

    cluster_name: str
    status: HealthState
    number_of_nodes: int
    timed_out: bool = False
    indices: dict[str, IndexHealth] = Field(default_factory=dict)


def _first_entry(nodes: Mapping[str, EntryT]) -> EntryT:
    for entry in nodes.values():
        return entry
    raise ElasticParseError("response contains no nodes")


# ── Node stats (/_nodes/_local/stats) ────────────────────────────


class ProcessStats(BaseModel):
    open_file_descriptors: int | None = None


class JvmMemStats(BaseModel):
    heap_used_percent: int


class JvmStats(BaseModel):
    mem: JvmMemStats


class ThreadPoolStats(BaseModel):
    rejected: int


class BreakerStats(BaseModel):
    estimated_size_in_bytes: int
    limit_size_in_bytes: int
    tripped: int


class NodeEntry(BaseModel):
    """One node's stats. Sections a node does not report stay None."""

    name: str = ""
    process: ProcessStats | None = None
    jvm: JvmStats | None = None
    thread_pool: dict[str, ThreadPoolStats] | None = None
    breakers: dict[str, BreakerStats] | None = None


class NodesDocument(BaseModel):
    """Node stats response keyed by node id."""

    nodes: dict[str, NodeEntry] = Field(default_factory=dict)

    def first_node(self) -> NodeEntry:
        """Return the first (local) node entry.

        Raises:
            ElasticParseError: the response lists no nodes.
        """
        return _first_entry(self.nodes)


# ── Node info (/_nodes/_local) ───────────────────────────────────
# Info documents share section names with stats (jvm, thread_pool, ...)
# but not their fields, so only the process limits are read here.


class ProcessInfo(BaseModel):
    max_file_descriptors: int | None = None


class NodeInfoEntry(BaseModel):
    name: str = ""
    process: ProcessInfo | None = None


class NodesInfoDocument(BaseModel):
    """Node info response keyed by node id."""

    nodes: dict[str, NodeInfoEntry] = Field(default_factory=dict)

    def first_node(self) -> NodeInfoEntry:
        return _first_entry(self.nodes)
