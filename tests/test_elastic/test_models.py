"""Tests for the response documents — required fields and node lookup."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.core.types import HealthState
from src.elastic.exceptions import ElasticParseError
from src.elastic.models import ClusterHealth, NodesDocument, NodesInfoDocument


class TestClusterHealth:
    def test_shard_level_document(self) -> None:
        health = ClusterHealth.model_validate({
            "cluster_name": "prod",
            "status": "red",
            "number_of_nodes": 2,
            "active_shards": 10,
            "indices": {
                "logs-2020": {
                    "status": "red",
                    "shards": {"0": {"status": "red", "primary_active": False}},
                },
            },
        })
        assert health.status == HealthState.RED
        assert not health.timed_out
        assert health.indices["logs-2020"].shards["0"].status == HealthState.RED

    def test_indices_optional(self) -> None:
        health = ClusterHealth.model_validate(
            {"cluster_name": "prod", "status": "green", "number_of_nodes": 1}
        )
        assert health.indices == {}

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ClusterHealth.model_validate(
                {"cluster_name": "prod", "status": "purple", "number_of_nodes": 1}
            )

    def test_node_count_required(self) -> None:
        with pytest.raises(ValidationError):
            ClusterHealth.model_validate({"cluster_name": "prod", "status": "green"})


class TestNodesDocument:
    def test_first_node(self) -> None:
        doc = NodesDocument.model_validate({
            "nodes": {
                "abc123": {
                    "name": "es01",
                    "jvm": {"mem": {"heap_used_percent": 42}},
                },
            },
        })
        node = doc.first_node()
        assert node.name == "es01"
        assert node.jvm is not None
        assert node.jvm.mem.heap_used_percent == 42
        assert node.breakers is None

    def test_no_nodes_is_parse_error(self) -> None:
        with pytest.raises(ElasticParseError, match="no nodes"):
            NodesDocument.model_validate({"nodes": {}}).first_node()

    def test_info_document_ignores_stats_shaped_sections(self) -> None:
        doc = NodesInfoDocument.model_validate({
            "nodes": {
                "abc123": {
                    "name": "es01",
                    "process": {"id": 4242, "mlockall": False, "max_file_descriptors": 65535},
                    "jvm": {"mem": {"heap_init_in_bytes": 1, "heap_max_in_bytes": 2}},
                    "thread_pool": {"search": {"type": "fixed", "min": 7, "max": 7}},
                },
            },
        })
        node = doc.first_node()
        assert node.process is not None
        assert node.process.max_file_descriptors == 65535

    def test_info_document_without_nodes(self) -> None:
        with pytest.raises(ElasticParseError, match="no nodes"):
            NodesInfoDocument.model_validate({"nodes": {}}).first_node()

    def test_breaker_fields_required(self) -> None:
        with pytest.raises(ValidationError):
            NodesDocument.model_validate(
                {"nodes": {"n": {"breakers": {"request": {"tripped": 0}}}}}
            )
