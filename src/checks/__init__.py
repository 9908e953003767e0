"""Probe logic — aggregation, reporting, cluster and node checks."""

from src.checks.aggregate import Aggregation, by_name, check_each, fixed, group_results
from src.checks.cluster import ClusterCheckOptions, evaluate_cluster, run_cluster_probe
from src.checks.node import DEFAULT_THRESHOLDS, NodeCheck, run_node_probe
from src.checks.report import CheckReport

__all__ = [
    "Aggregation",
    "CheckReport",
    "ClusterCheckOptions",
    "DEFAULT_THRESHOLDS",
    "NodeCheck",
    "by_name",
    "check_each",
    "evaluate_cluster",
    "fixed",
    "group_results",
    "run_cluster_probe",
    "run_node_probe",
]
