"""Exception hierarchy for talking to the Elasticsearch HTTP API."""

from __future__ import annotations


class ElasticError(Exception):
    """Base exception for all Elasticsearch client errors."""


class ElasticConnectionError(ElasticError):
    """The request failed or the server answered with a non-2xx status."""


class ElasticTimeoutError(ElasticConnectionError):
    """The request did not complete within its client-side timeout."""


class ElasticParseError(ElasticError):
    """The response body was not valid JSON or lacked a required field."""


class DeadlineExceededError(ElasticError):
    """The probe's execution budget ran out before a request could be sent."""
