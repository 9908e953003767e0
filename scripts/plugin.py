"""Command-line plumbing shared by both probes.

Arguments common to every probe, settings resolution (YAML file first,
flags on top) and the final output line + exit code.
"""

from __future__ import annotations

import argparse
import signal
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from types import FrameType

import structlog
from pydantic import SecretStr

from src.checks.report import CheckReport
from src.core import __version__
from src.core.config import ElasticsearchConfig, Settings, load_settings
from src.core.logging import level_for_verbosity, setup_logging
from src.core.types import Status
from src.elastic.exceptions import DeadlineExceededError

logger = structlog.get_logger(__name__)

THRESHOLD_HELP = (
    "See <https://nagios-plugins.org/doc/guidelines.html#THRESHOLDFORMAT> for\n"
    "information on how to use thresholds."
)


def build_parser(description: str, epilog: str = "") -> argparse.ArgumentParser:
    """Parser carrying the connection, logging and threshold flags."""
    parser = argparse.ArgumentParser(
        description=description,
        epilog="\n\n".join(part for part in (THRESHOLD_HELP, epilog) if part),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--url",
        default=None,
        help="URL to your Elasticsearch instance (default: http://localhost:9200)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        default=None,
        help="Seconds before the plugin times out (default: 10)",
    )
    parser.add_argument("-u", "--username", "--user", default=None, help="Username for authentication")
    parser.add_argument("-p", "--password", default=None, help="Password for authentication")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more to stderr (-v info, -vv debug)",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Load the YAML settings and apply command-line overrides."""
    settings = load_settings(args.config)
    setup_logging(settings.logging, level=level_for_verbosity(args.verbose))

    overrides: dict[str, object] = {}
    if args.url:
        overrides["url"] = args.url
    if args.timeout is not None:
        overrides["timeout_secs"] = args.timeout
    if args.username is not None:
        overrides["username"] = args.username
    if args.password is not None:
        overrides["password"] = SecretStr(args.password)

    if overrides:
        merged = settings.elasticsearch.model_dump()
        merged.update(overrides)
        settings = settings.model_copy(
            update={"elasticsearch": ElasticsearchConfig(**merged)},
        )
    return settings


def usage(parser: argparse.ArgumentParser) -> int:
    """No check was selected: show help and exit UNKNOWN."""
    parser.print_help()
    return int(Status.UNKNOWN)


@contextmanager
def deadline_alarm(seconds: float) -> Iterator[None]:
    """Raise DeadlineExceededError if the block runs longer than *seconds*.

    Backstop for the client's own budget checks, which cannot interrupt a
    single blocking read. Needs SIGALRM in the main thread; elsewhere the
    block runs unguarded.
    """
    if not hasattr(signal, "SIGALRM") or threading.current_thread() is not threading.main_thread():
        yield
        return

    def expire(signum: int, frame: FrameType | None) -> None:
        raise DeadlineExceededError("plugin timed out")

    previous = signal.signal(signal.SIGALRM, expire)
    signal.setitimer(signal.ITIMER_REAL, max(seconds, 0.001))
    try:
        yield
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(signal.SIGALRM, previous)


def emit(settings: Settings, probe: Callable[[], CheckReport]) -> int:
    """Run *probe*, print the plugin line and return the exit code.

    The whole run is capped at the configured timeout. Anything unexpected
    is reported as UNKNOWN rather than a traceback.
    """
    shortname = settings.output.shortname
    try:
        with deadline_alarm(settings.elasticsearch.timeout_secs):
            report = probe()
    except DeadlineExceededError as exc:
        logger.warning("probe_deadline_exceeded", timeout=settings.elasticsearch.timeout_secs)
        print(f"{shortname} {Status.UNKNOWN.name} - {exc}")
        return int(Status.UNKNOWN)
    except Exception as exc:  # noqa: BLE001
        logger.exception("probe_crashed")
        print(f"{shortname} {Status.UNKNOWN.name} - {exc}")
        return int(Status.UNKNOWN)

    print(report.render(shortname))
    return report.exit_code
