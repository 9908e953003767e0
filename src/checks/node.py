"""Node probe — one of five checks against the local node's stats.

Defaults follow the Elasticsearch guide on monitoring individual nodes:

- The JVM starts collecting garbage when the heap is 75% full; a heap that
  stays above 85% is in trouble.
- Any rejected thread-pool work unit or tripped circuit breaker deserves a
  look; five is critical.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TypeVar

import structlog

from src.checks.aggregate import Aggregation, by_name, check_each
from src.checks.report import CheckReport
from src.core.types import Status
from src.elastic.client import ElasticClient, failure_result
from src.elastic.exceptions import ElasticError, ElasticParseError
from src.elastic.models import (
    BreakerStats,
    NodeEntry,
    NodesDocument,
    NodesInfoDocument,
    ThreadPoolStats,
)
from src.thresholds import ThresholdError, evaluate, parse_entity_thresholds, parse_optional_range

logger = structlog.stdlib.get_logger()

SectionT = TypeVar("SectionT")

STATS_PATH = "/_nodes/_local/stats"
INFO_PATH = "/_nodes/_local"


class NodeCheck(StrEnum):
    """The mutually exclusive node checks, named after their CLI flags."""

    OPEN_FDS = "open-fds"
    JVM_HEAP_USAGE = "jvm-heap-usage"
    THREAD_POOL_REJECTED = "thread-pool-rejected"
    BREAKERS_TRIPPED = "breakers-tripped"
    BREAKERS_SIZE = "breakers-size"


# (warning, critical)
DEFAULT_THRESHOLDS: dict[NodeCheck, tuple[str, str]] = {
    NodeCheck.OPEN_FDS: ("80%", "90%"),
    NodeCheck.JVM_HEAP_USAGE: ("75%", "85%"),
    NodeCheck.THREAD_POOL_REJECTED: ("@1:", "@5:"),
    NodeCheck.BREAKERS_TRIPPED: ("@1:", "@5:"),
    NodeCheck.BREAKERS_SIZE: ("75%", "85%"),
}


def _section(value: SectionT | None, section: str) -> SectionT:
    if value is None:
        raise ElasticParseError(f"node stats carry no '{section}' section")
    return value


# ── Single-value checks ─────────────────────────────────────────


def check_open_fds(
    node: NodeEntry,
    max_fds: int,
    warning: str | None = None,
    critical: str | None = None,
) -> tuple[Status, str]:
    """Open file descriptors; thresholds are percentages of *max_fds*."""
    process = _section(node.process, "process")
    open_fds = _section(process.open_file_descriptors, "process.open_file_descriptors")

    default_warning, default_critical = DEFAULT_THRESHOLDS[NodeCheck.OPEN_FDS]
    status = evaluate(
        open_fds,
        warning=parse_optional_range(warning or default_warning, percent=True),
        critical=parse_optional_range(critical or default_critical, percent=True),
        base=max_fds,
    )
    return status, f"Open file descriptors: {open_fds}"


def check_jvm_heap_usage(
    node: NodeEntry,
    warning: str | None = None,
    critical: str | None = None,
) -> tuple[Status, str]:
    """Heap used is already a percentage, so percentage bounds use base 100."""
    heap_used = _section(node.jvm, "jvm").mem.heap_used_percent

    default_warning, default_critical = DEFAULT_THRESHOLDS[NodeCheck.JVM_HEAP_USAGE]
    status = evaluate(
        heap_used,
        warning=parse_optional_range(warning or default_warning),
        critical=parse_optional_range(critical or default_critical),
        base=100,
    )
    return status, f"JVM heap in use: {heap_used}%"


# ── Per-entity checks ───────────────────────────────────────────


def check_thread_pool_rejected(
    node: NodeEntry,
    warning: str | None = None,
    critical: str | None = None,
) -> Aggregation:
    """Rejected work units per thread pool, with per-pool overrides."""
    pools = _section(node.thread_pool, "thread_pool")
    default_warning, default_critical = DEFAULT_THRESHOLDS[NodeCheck.THREAD_POOL_REJECTED]

    return check_each(
        pools,
        value_of=_rejected,
        warning_of=by_name(parse_entity_thresholds(warning, default_warning)),
        critical_of=by_name(parse_entity_thresholds(critical, default_critical)),
        prefix="Thread pools with rejected threads: ",
    )


def check_breakers_tripped(
    node: NodeEntry,
    warning: str | None = None,
    critical: str | None = None,
) -> Aggregation:
    """How often each circuit breaker has tripped."""
    breakers = _section(node.breakers, "breakers")
    default_warning, default_critical = DEFAULT_THRESHOLDS[NodeCheck.BREAKERS_TRIPPED]

    return check_each(
        breakers,
        value_of=_tripped,
        warning_of=by_name(parse_entity_thresholds(warning, default_warning)),
        critical_of=by_name(parse_entity_thresholds(critical, default_critical)),
        prefix="Breakers tripped: ",
    )


def check_breakers_size(
    node: NodeEntry,
    warning: str | None = None,
    critical: str | None = None,
) -> Aggregation:
    """Estimated size of each breaker; thresholds are percentages of its own limit."""
    breakers = _section(node.breakers, "breakers")
    default_warning, default_critical = DEFAULT_THRESHOLDS[NodeCheck.BREAKERS_SIZE]

    return check_each(
        breakers,
        value_of=_estimated_size,
        warning_of=by_name(parse_entity_thresholds(warning, default_warning, percent=True)),
        critical_of=by_name(parse_entity_thresholds(critical, default_critical, percent=True)),
        prefix="Breakers over memory limit: ",
        base_of=_limit_size,
    )


def _rejected(pool: ThreadPoolStats) -> int:
    return pool.rejected


def _tripped(breaker: BreakerStats) -> int:
    return breaker.tripped


def _estimated_size(breaker: BreakerStats) -> int:
    return breaker.estimated_size_in_bytes


def _limit_size(breaker: BreakerStats) -> int:
    return breaker.limit_size_in_bytes


# ── Probe entry point ───────────────────────────────────────────


def _fetch_max_fds(client: ElasticClient) -> int:
    info = client.get_document(INFO_PATH, NodesInfoDocument)
    process = info.first_node().process
    if process is None or process.max_file_descriptors is None:
        raise ElasticParseError("node info carries no 'process.max_file_descriptors'")
    return process.max_file_descriptors


def _run_check(
    client: ElasticClient,
    node: NodeEntry,
    check: NodeCheck,
    warning: str | None,
    critical: str | None,
    report: CheckReport,
) -> None:
    if check == NodeCheck.OPEN_FDS:
        report.add(*check_open_fds(node, _fetch_max_fds(client), warning, critical))
    elif check == NodeCheck.JVM_HEAP_USAGE:
        report.add(*check_jvm_heap_usage(node, warning, critical))
    elif check == NodeCheck.THREAD_POOL_REJECTED:
        report.add_aggregated(check_thread_pool_rejected(node, warning, critical).messages)
    elif check == NodeCheck.BREAKERS_TRIPPED:
        report.add_aggregated(check_breakers_tripped(node, warning, critical).messages)
    elif check == NodeCheck.BREAKERS_SIZE:
        report.add_aggregated(check_breakers_size(node, warning, critical).messages)


def run_node_probe(
    client: ElasticClient,
    check: NodeCheck,
    warning: str | None = None,
    critical: str | None = None,
) -> CheckReport:
    """Fetch the local node's stats and run *check* against them.

    Fetch and parse problems end the run with the status they map to; an
    invalid threshold makes the check UNKNOWN.
    """
    report = CheckReport()

    result = client.fetch(STATS_PATH, NodesDocument)
    stats = result.document
    if stats is None:
        report.add(result.status, result.message)
        return report

    try:
        _run_check(client, stats.first_node(), check, warning, critical, report)
    except ElasticError as exc:
        failed = failure_result(exc)
        report.add(failed.status, failed.message)
    except ThresholdError as exc:
        logger.warning("threshold_invalid", check=check.value, error=str(exc))
        report.add(Status.UNKNOWN, f"Invalid threshold for {check.value}: {exc}")

    logger.info("node_checked", check=check.value, status=report.status.name)
    return report
