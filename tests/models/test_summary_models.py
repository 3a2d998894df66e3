# tests/models/test_summary_models.py
"""
Decoding of kubelet summary payloads into the pydantic models.
"""

import json

import pytest
from pydantic import ValidationError

from localsight.models.summary import Summary


def test_decodes_full_payload(summary_payload):
    summary = Summary.model_validate_json(json.dumps(summary_payload))

    assert summary.node.node_name == "n1"
    assert len(summary.pods) == 1

    pod = summary.pods[0]
    assert pod.pod_ref.name == "web-0"
    assert pod.pod_ref.namespace == "default"
    assert pod.pod_ref.uid == "uid-web-0"
    assert pod.ephemeral_storage.used_bytes == 100
    assert pod.ephemeral_storage.inodes == 50
    assert pod.ephemeral_storage.inodes_free == 40
    assert pod.ephemeral_storage.inodes_used == 10

    container = pod.containers[0]
    assert container.name == "app"
    assert container.memory.usage_bytes == 20
    assert container.rootfs.inodes_used == 3
    assert container.logs.available_bytes == 95

    volume = pod.volumes[0]
    assert volume.name == "data"
    assert volume.capacity_bytes == 1000


def test_missing_stats_default_to_zero():
    summary = Summary.model_validate(
        {"node": {"nodeName": "n1"}, "pods": [{"podRef": {"name": "p", "namespace": "ns"}, "containers": [{"name": "c"}]}]}
    )

    pod = summary.pods[0]
    assert pod.pod_ref.uid is None
    assert pod.ephemeral_storage.used_bytes == 0
    assert pod.volumes == []
    assert pod.containers[0].memory.usage_bytes == 0
    assert pod.containers[0].rootfs.inodes == 0


def test_explicit_nulls_are_treated_as_missing():
    summary = Summary.model_validate(
        {
            "node": {"nodeName": "n1"},
            "pods": [
                {
                    "podRef": {"name": "p", "namespace": "ns", "uid": None},
                    "ephemeral-storage": None,
                    "containers": None,
                    "volume": None,
                }
            ],
        }
    )

    pod = summary.pods[0]
    assert pod.containers == []
    assert pod.volumes == []
    assert pod.ephemeral_storage.capacity_bytes == 0


def test_pod_order_is_preserved():
    pods = [{"podRef": {"name": f"pod-{i}", "namespace": "ns"}} for i in range(5)]

    summary = Summary.model_validate({"node": {"nodeName": "n1"}, "pods": pods})

    assert [pod.pod_ref.name for pod in summary.pods] == [f"pod-{i}" for i in range(5)]


def test_empty_document_is_an_empty_summary():
    summary = Summary.model_validate_json("{}")

    assert summary.node.node_name == ""
    assert summary.pods == []


@pytest.mark.parametrize(
    "body",
    [
        "{not json",
        '{"pods": "nope"}',
        '{"pods": [{"podRef": {"name": "p"}}]}',
        '{"pods": [{"podRef": {"name": "p", "namespace": "ns"}, "ephemeral-storage": {"usedBytes": -1}}]}',
    ],
)
def test_invalid_payloads_are_rejected(body):
    with pytest.raises(ValidationError):
        Summary.model_validate_json(body)
