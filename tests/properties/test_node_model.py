"""Property-based tests for node and taint models."""

from datetime import datetime, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st
from kubernetes import client

from netpingpong.models.node import NodeRecord, NodeTaint


@given(effect=st.text().filter(lambda x: x not in ["NoSchedule", "PreferNoSchedule", "NoExecute"]))
def test_invalid_taint_effect_rejected(effect):
    """Invalid taint effects should be rejected."""
    with pytest.raises(ValueError):
        NodeTaint(key="test", value="true", effect=effect)


def test_taint_is_immutable():
    """Taints are value objects."""
    taint = NodeTaint(key="gate", value="true", effect="NoSchedule")

    with pytest.raises(ValueError):
        taint.key = "other"


def test_taint_string_form():
    """Taints render the way kubectl shows them."""
    assert str(NodeTaint(key="gpu", value="true", effect="NoSchedule")) == "gpu=true:NoSchedule"
    assert str(NodeTaint(key="gate", effect="NoExecute")) == "gate:NoExecute"


def sample_v1node() -> client.V1Node:
    added = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    return client.V1Node(
        metadata=client.V1ObjectMeta(
            name="worker-1",
            resource_version="4242",
            labels={"kubernetes.io/hostname": "worker-1"},
            annotations={"node.alpha.kubernetes.io/ttl": "0"},
        ),
        spec=client.V1NodeSpec(
            pod_cidr="10.42.1.0/24",
            unschedulable=False,
            taints=[
                client.V1Taint(key="netpingpong/unverified", value="true", effect="NoSchedule"),
                client.V1Taint(
                    key="node.kubernetes.io/unreachable", effect="NoExecute", time_added=added
                ),
            ],
        ),
    )


def test_record_from_kubernetes():
    """Name, version, labels and taints are read from the V1Node."""
    record = NodeRecord.from_kubernetes(sample_v1node())

    assert record.name == "worker-1"
    assert record.resource_version == "4242"
    assert record.labels == {"kubernetes.io/hostname": "worker-1"}
    assert [t.key for t in record.taints] == [
        "netpingpong/unverified",
        "node.kubernetes.io/unreachable",
    ]
    assert record.taints[1].value is None
    assert record.taints[1].time_added.year == 2026
    assert record.has_taint("netpingpong/unverified")


def test_record_without_taints():
    """A node with no spec taints yields an empty taint tuple."""
    node = sample_v1node()
    node.spec.taints = None

    assert NodeRecord.from_kubernetes(node).taints == ()


def test_to_kubernetes_keeps_untouched_fields():
    """Writing back a record preserves fields the model does not expose."""
    source = sample_v1node()
    record = NodeRecord.from_kubernetes(source)
    updated = record.model_copy(update={"taints": record.taints[1:]})

    node = updated.to_kubernetes()

    assert node.spec.pod_cidr == "10.42.1.0/24"
    assert node.metadata.annotations == {"node.alpha.kubernetes.io/ttl": "0"}
    assert node.metadata.resource_version == "4242"
    assert [t.key for t in node.spec.taints] == ["node.kubernetes.io/unreachable"]
    assert node.spec.taints[0].time_added == source.spec.taints[1].time_added
    # The source object read from the API is not modified
    assert len(source.spec.taints) == 2


def test_to_kubernetes_clears_empty_taints():
    """Removing the last taint sends no taint list at all."""
    record = NodeRecord.from_kubernetes(sample_v1node())

    node = record.model_copy(update={"taints": ()}).to_kubernetes()

    assert node.spec.taints is None


def test_to_kubernetes_without_source():
    """A record built locally still produces a complete V1Node."""
    record = NodeRecord(
        name="worker-2",
        resource_version="7",
        taints=(NodeTaint(key="gpu", value="true", effect="NoSchedule"),),
    )

    node = record.to_kubernetes()

    assert node.metadata.name == "worker-2"
    assert node.metadata.resource_version == "7"
    assert node.spec.taints[0].key == "gpu"
