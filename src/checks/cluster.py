"""Cluster probe — overall status, nodes online and failing shards."""

from __future__ import annotations

import structlog
from pydantic import BaseModel, ConfigDict

from src.checks.aggregate import Aggregation, check_each, fixed
from src.checks.report import CheckReport
from src.core.types import HealthState, Status
from src.elastic.client import ElasticClient
from src.elastic.models import ClusterHealth, IndexHealth, ShardHealth
from src.thresholds import (
    ThresholdError,
    ThresholdRange,
    evaluate,
    parse_health_state,
    parse_optional_range,
    parse_range,
    state_range,
)

logger = structlog.stdlib.get_logger()

HEALTH_PATH = "/_cluster/health"

DEFAULT_WARNING_STATE = HealthState.YELLOW
DEFAULT_CRITICAL_STATE = HealthState.RED


class ClusterCheckOptions(BaseModel):
    """Thresholds for one cluster probe run, as given on the command line."""

    model_config = ConfigDict(frozen=True)

    warning: str | None = None
    critical: str | None = None
    nodes_warning: str | None = None
    nodes_critical: str | None = None


def health_params(timeout_secs: int) -> dict[str, str]:
    """Query parameters asking for shard detail and a server-side timeout.

    The server gives up two seconds before the probe's own budget ends.
    """
    return {"level": "shards", "timeout": f"{max(timeout_secs - 2, 1)}s"}


def check_cluster_status(
    health: ClusterHealth,
    warning: HealthState,
    critical: HealthState,
) -> Status:
    return evaluate(
        health.status.ordinal,
        warning=state_range(warning),
        critical=state_range(critical),
    )


def check_nodes_online(
    health: ClusterHealth,
    warning: ThresholdRange | None,
    critical: ThresholdRange | None,
) -> Status:
    """Without thresholds the node count is reported as OK."""
    return evaluate(health.number_of_nodes, warning=warning, critical=critical)


def check_failing_shards(
    health: ClusterHealth,
    state: HealthState,
) -> dict[str, Aggregation]:
    """Find shards in *state* inside every index that is itself in *state*.

    An index in *state* may hold shards in a different state; only the
    shards that match are listed.

    Returns:
        {index name: aggregation over its shards}, for indices with matches.
    """
    exact = fixed(parse_range(f"@{state.ordinal}:{state.ordinal}"))
    failing: dict[str, Aggregation] = {}
    for index_name in sorted(health.indices):
        index: IndexHealth = health.indices[index_name]
        if index.status != state:
            continue

        aggregation = check_each(
            index.shards,
            value_of=_shard_ordinal,
            warning_of=fixed(None),
            critical_of=exact,
            prefix=f"index {index_name} shard(s) ",
        )
        if aggregation.messages:
            failing[index_name] = aggregation
    return failing


def _shard_ordinal(shard: ShardHealth) -> int:
    return shard.status.ordinal


def evaluate_cluster(health: ClusterHealth, options: ClusterCheckOptions) -> CheckReport:
    """Run the three cluster checks against an already fetched document."""
    report = CheckReport()

    states: tuple[HealthState, HealthState] | None = None
    try:
        states = (
            parse_health_state(options.warning or DEFAULT_WARNING_STATE),
            parse_health_state(options.critical or DEFAULT_CRITICAL_STATE),
        )
    except ThresholdError as exc:
        logger.warning("threshold_invalid", check="cluster-status", error=str(exc))
        report.add(Status.UNKNOWN, f"Invalid cluster status threshold: {exc}")

    if states is not None:
        warning_state, critical_state = states
        status = check_cluster_status(health, warning_state, critical_state)
        report.add(status, f"Cluster {health.cluster_name} is {health.status.value}")

    try:
        nodes_status = check_nodes_online(
            health,
            warning=parse_optional_range(options.nodes_warning),
            critical=parse_optional_range(options.nodes_critical),
        )
    except ThresholdError as exc:
        logger.warning("threshold_invalid", check="nodes-online", error=str(exc))
        report.add(Status.UNKNOWN, f"Invalid nodes threshold: {exc}")
    else:
        report.add(nodes_status, f"nodes online: {health.number_of_nodes}")

    if states is not None:
        warning_state, critical_state = states
        # Matching shards carry the severity their state has at cluster level.
        shard_status = evaluate(
            critical_state.ordinal,
            warning=state_range(warning_state),
            critical=state_range(critical_state),
        )
        for aggregation in check_failing_shards(health, critical_state).values():
            for message in aggregation.messages:
                report.add(shard_status, message.text)

    logger.info(
        "cluster_evaluated",
        cluster=health.cluster_name,
        status=report.status.name,
        nodes=health.number_of_nodes,
    )
    return report


def run_cluster_probe(client: ElasticClient, options: ClusterCheckOptions) -> CheckReport:
    """Fetch cluster health and evaluate it; fetch problems end the run."""
    result = client.fetch(
        HEALTH_PATH,
        ClusterHealth,
        params=health_params(client.config.timeout_secs),
    )
    health = result.document
    if health is None:
        report = CheckReport()
        report.add(result.status, result.message)
        return report

    if health.timed_out:
        report = CheckReport()
        report.add(Status.CRITICAL, "Connection to cluster timed out!")
        return report

    return evaluate_cluster(health, options)
