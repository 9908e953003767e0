#!/usr/bin/env python3
"""Cluster probe — Nagios-compatible check of Elasticsearch cluster health.

Usage::

    # Status, nodes online and red shards with the default thresholds
    check_es_cluster --cluster-status

    # Warn below three nodes, critical below two
    check_es_cluster --cluster-status --nodes-warning 3: --nodes-critical 2:

    # Only red is a problem
    check_es_cluster --cluster-status -w red -c red --url http://es01:9200
"""

from __future__ import annotations

import argparse
import sys

from scripts.plugin import build_parser, emit, resolve_settings, usage
from src.checks.cluster import ClusterCheckOptions, run_cluster_probe
from src.checks.report import CheckReport
from src.elastic.client import ElasticClient

STATUS_HELP = """\
The STATUS label can have three values:
* green - All primary and replica shards are allocated. Your cluster is 100%
  operational.
* yellow - All primary shards are allocated, but at least one replica is
  missing. No data is missing, so search results will still be complete.
* red - At least one primary shard (and all of its replicas) are missing.
  Searches will return partial results and indexing into that shard fails.

Defaults are taken from
<https://www.elastic.co/guide/en/elasticsearch/guide/current/_cluster_health.html>"""


def parse_args(argv: list[str] | None = None) -> tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = build_parser(
        description="Check the health of an Elasticsearch cluster.",
        epilog=STATUS_HELP,
    )
    parser.add_argument(
        "--cluster-status",
        action="store_true",
        help="Check the status of the cluster, its nodes and its shards.",
    )
    parser.add_argument(
        "-w",
        "--warning",
        default=None,
        metavar="STATUS",
        help="Warning threshold as a STATUS (default: yellow)",
    )
    parser.add_argument(
        "-c",
        "--critical",
        default=None,
        metavar="STATUS",
        help="Critical threshold as a STATUS; shards in this state are listed (default: red)",
    )
    parser.add_argument(
        "--nodes-warning",
        default=None,
        metavar="INTEGER",
        help="Warning threshold range for the number of nodes online",
    )
    parser.add_argument(
        "--nodes-critical",
        default=None,
        metavar="INTEGER",
        help="Critical threshold range for the number of nodes online",
    )
    return parser, parser.parse_args(argv)


def run(argv: list[str] | None = None) -> int:
    parser, args = parse_args(argv)
    if not args.cluster_status:
        return usage(parser)

    settings = resolve_settings(args)
    options = ClusterCheckOptions(
        warning=args.warning,
        critical=args.critical,
        nodes_warning=args.nodes_warning,
        nodes_critical=args.nodes_critical,
    )

    def probe() -> CheckReport:
        with ElasticClient(settings.elasticsearch) as client:
            return run_cluster_probe(client, options)

    return emit(settings, probe)


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
