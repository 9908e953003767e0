#!/usr/bin/env python3
"""Node probe — Nagios-compatible checks of the local Elasticsearch node.

Usage::

    # Heap usage with the default 75% / 85% thresholds
    check_es_node --jvm-heap-usage

    # Per thread-pool thresholds on top of a global one
    check_es_node --thread-pool-rejected --critical "search;@100000:,@5:"

    # Breakers above 90% of their own limit are critical
    check_es_node --breakers-size -w 80% -c 90%
"""

from __future__ import annotations

import argparse
import sys

from scripts.plugin import build_parser, emit, resolve_settings, usage
from src.checks.node import NodeCheck, run_node_probe
from src.checks.report import CheckReport
from src.elastic.client import ElasticClient

NODE_HELP = """\
Defaults are taken from
<https://www.elastic.co/guide/en/elasticsearch/guide/current/_monitoring_individual_nodes.html>"""

_CHECK_HELP: dict[NodeCheck, str] = {
    NodeCheck.OPEN_FDS: "Check how many file descriptors are open.",
    NodeCheck.JVM_HEAP_USAGE: "Check how much JVM heap is used.",
    NodeCheck.THREAD_POOL_REJECTED: (
        "Check how many rejected work units the thread pools have. A per "
        'thread-pool threshold is set by prefixing it with "<thread-pool-name>;", '
        'e.g: --critical "search;@100000:"'
    ),
    NodeCheck.BREAKERS_TRIPPED: "Check how many circuit breakers that have been tripped.",
    NodeCheck.BREAKERS_SIZE: "Check how near we are the circuit breaker size limit.",
}


def parse_args(argv: list[str] | None = None) -> tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = build_parser(
        description="Check the local node of an Elasticsearch cluster.",
        epilog=NODE_HELP,
    )
    checks = parser.add_mutually_exclusive_group()
    for check in NodeCheck:
        checks.add_argument(
            f"--{check.value}",
            dest="check",
            action="store_const",
            const=check,
            help=_CHECK_HELP[check],
        )
    parser.add_argument(
        "-w",
        "--warning",
        default=None,
        help=(
            "Warning threshold in INTEGER (breakers-tripped, thread-pool-rejected) "
            "or PERCENT%% (open-fds, jvm-heap-usage, breakers-size)"
        ),
    )
    parser.add_argument(
        "-c",
        "--critical",
        default=None,
        help=(
            "Critical threshold in INTEGER (breakers-tripped, thread-pool-rejected) "
            "or PERCENT%% (open-fds, jvm-heap-usage, breakers-size)"
        ),
    )
    return parser, parser.parse_args(argv)


def run(argv: list[str] | None = None) -> int:
    parser, args = parse_args(argv)
    if args.check is None:
        return usage(parser)

    settings = resolve_settings(args)

    def probe() -> CheckReport:
        with ElasticClient(settings.elasticsearch) as client:
            return run_node_probe(client, args.check, args.warning, args.critical)

    return emit(settings, probe)


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
