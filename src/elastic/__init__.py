"""Elasticsearch HTTP access — client, response documents, errors."""

from src.elastic.client import ElasticClient, FetchResult, failure_result
from src.elastic.exceptions import (
    DeadlineExceededError,
    ElasticConnectionError,
    ElasticError,
    ElasticParseError,
    ElasticTimeoutError,
)
from src.elastic.models import ClusterHealth, NodeEntry, NodesDocument, NodesInfoDocument

__all__ = [
    "ClusterHealth",
    "DeadlineExceededError",
    "ElasticClient",
    "ElasticConnectionError",
    "ElasticError",
    "ElasticParseError",
    "ElasticTimeoutError",
    "FetchResult",
    "NodeEntry",
    "NodesDocument",
    "NodesInfoDocument",
    "failure_result",
]
