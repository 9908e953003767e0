"""Synchronous Elasticsearch HTTP client bounded by the probe's time budget."""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from types import TracebackType
from typing import Any, Generic, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from src.core.config import ElasticsearchConfig, get_settings
from src.core.types import Status
from src.elastic.exceptions import (
    DeadlineExceededError,
    ElasticConnectionError,
    ElasticError,
    ElasticParseError,
    ElasticTimeoutError,
)

logger = structlog.stdlib.get_logger()

DocumentT = TypeVar("DocumentT", bound=BaseModel)

# Seconds kept in reserve so the probe can still report before the
# supervisor's own timeout fires.
SAFETY_MARGIN_SECS = 1.0


class FetchResult(BaseModel, Generic[DocumentT]):
    """Outcome of a fetch: a parsed document, or the status to exit with."""

    document: DocumentT | None = None
    status: Status = Status.OK
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.document is not None


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"]) or "document"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


class ElasticClient:
    """Issues GET requests against one cluster URL.

    Every request gets a timeout no longer than what is left of the overall
    budget (``timeout_secs`` minus the safety margin, counted from
    construction).

    Usage::

        with ElasticClient(config) as client:
            result = client.fetch("/_cluster/health", ClusterHealth)
    """

    def __init__(
        self,
        config: ElasticsearchConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or get_settings().elasticsearch
        self._transport = transport
        self._clock = clock
        self._deadline = clock() + self._config.timeout_secs - SAFETY_MARGIN_SECS
        self._http: httpx.Client | None = None

    @property
    def config(self) -> ElasticsearchConfig:
        return self._config

    @property
    def connected(self) -> bool:
        return self._http is not None and not self._http.is_closed

    def remaining_secs(self) -> float:
        """Seconds left before the request deadline."""
        return self._deadline - self._clock()

    def connect(self) -> None:
        """Create the underlying httpx client."""
        auth: httpx.BasicAuth | None = None
        if self._config.has_credentials:
            auth = httpx.BasicAuth(
                self._config.username,
                self._config.password.get_secret_value(),
            )
        self._http = httpx.Client(
            base_url=self._config.url.rstrip("/"),
            auth=auth,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> ElasticClient:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET *path* and return the decoded JSON body.

        Raises:
            DeadlineExceededError: no time is left for another request.
            ElasticConnectionError: transport failure or non-2xx status.
            ElasticParseError: the body is not valid JSON.
        """
        if self._http is None:
            raise ElasticConnectionError("HTTP client not connected")

        remaining = self.remaining_secs()
        if remaining <= 0:
            raise DeadlineExceededError("plugin timed out")

        logger.debug("es_request", path=path, params=params, timeout=remaining)
        try:
            with self._http.stream("GET", path, params=params, timeout=remaining) as response:
                response.raise_for_status()
                body = self._read_body(response)
        except httpx.HTTPStatusError as exc:
            raise ElasticConnectionError(
                f"{exc.response.status_code} {exc.response.reason_phrase}"
            ) from exc
        except httpx.TimeoutException as exc:
            if self.remaining_secs() <= 0:
                raise DeadlineExceededError("plugin timed out") from exc
            raise ElasticTimeoutError(f"Request to {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise ElasticConnectionError(f"Request to {path} failed: {exc}") from exc

        try:
            return json.loads(body)
        except ValueError as exc:
            raise ElasticParseError(str(exc)) from exc

    def _read_body(self, response: httpx.Response) -> bytes:
        """Read the body chunk by chunk, giving up once the budget is spent.

        httpx timeouts apply to each network operation, so a server that
        trickles its body would otherwise outlive the budget.
        """
        chunks: list[bytes] = []
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            if self.remaining_secs() <= 0:
                raise DeadlineExceededError("plugin timed out")
        return b"".join(chunks)

    def get_document(
        self,
        path: str,
        model: type[DocumentT],
        params: dict[str, str] | None = None,
    ) -> DocumentT:
        """GET *path* and validate the body against *model*.

        Raises:
            ElasticError: see ``get_json``; validation failures raise
                ElasticParseError.
        """
        body = self.get_json(path, params=params)
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            raise ElasticParseError(_describe_validation_error(exc)) from exc

    def fetch(
        self,
        path: str,
        model: type[DocumentT],
        params: dict[str, str] | None = None,
    ) -> FetchResult[DocumentT]:
        """Like ``get_document`` but returns failures as a FetchResult."""
        try:
            document = self.get_document(path, model, params=params)
        except ElasticError as exc:
            return failure_result(exc)
        return FetchResult(document=document)


def failure_result(exc: ElasticError) -> FetchResult[Any]:
    """Map a client error to the status and message the probe exits with."""
    if isinstance(exc, DeadlineExceededError):
        status, message = Status.UNKNOWN, str(exc)
    elif isinstance(exc, ElasticParseError):
        status, message = Status.CRITICAL, f"JSON was invalid: {exc}"
    else:
        status, message = Status.CRITICAL, str(exc)

    logger.warning("es_fetch_failed", status=status.name, error=message)
    return FetchResult(status=status, message=message)
