"""Pytest configuration and shared fixtures."""

import pytest
from hypothesis import Verbosity, settings

from netpingpong.exceptions import ConflictError, KubernetesError
from netpingpong.models.node import NodeRecord, NodeTaint

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load the default profile
settings.load_profile("default")


class FakeNodeClient:
    """In-memory NodeClient with optimistic concurrency.

    ``external_writes`` other actors land a write between this client's read
    and its next update, one per update call, until the count runs out. Each
    external write bumps the resource version and appends a taint so tests can
    tell whether a later write was built from a fresh read.
    """

    def __init__(self, record: NodeRecord, external_writes: int = 0):
        self.stored = record
        self.external_writes = external_writes
        self.get_calls: list[str] = []
        self.update_calls: list[NodeRecord] = []
        self.reads: list[NodeRecord] = []

    def get_node(self, name: str) -> NodeRecord:
        self.get_calls.append(name)
        if name != self.stored.name:
            raise KubernetesError(f'nodes "{name}" not found')
        self.reads.append(self.stored)
        return self.stored

    def update_node(self, record: NodeRecord) -> NodeRecord:
        self.update_calls.append(record)
        if self.external_writes > 0:
            self.external_writes -= 1
            self._external_write()
        if record.resource_version != self.stored.resource_version:
            raise ConflictError(f"Node {record.name} was modified")
        self.stored = record.model_copy(
            update={"resource_version": str(int(self.stored.resource_version) + 1)}
        )
        return self.stored

    def _external_write(self) -> None:
        version = int(self.stored.resource_version) + 1
        taint = NodeTaint(key=f"external/{version}", value="true", effect="NoSchedule")
        self.stored = self.stored.model_copy(
            update={"resource_version": str(version), "taints": self.stored.taints + (taint,)}
        )


@pytest.fixture(scope="session")
def fake_node_client_cls():
    """The FakeNodeClient class, session scoped so Hypothesis tests can use it."""
    return FakeNodeClient


@pytest.fixture
def gated_node():
    """A node still carrying the readiness gate taint among others."""
    return NodeRecord(
        name="worker-1",
        resource_version="100",
        labels={"kubernetes.io/hostname": "worker-1"},
        taints=(
            NodeTaint(key="node.kubernetes.io/not-ready", effect="NoExecute"),
            NodeTaint(key="netpingpong/unverified", value="true", effect="NoSchedule"),
            NodeTaint(key="gpu", value="true", effect="PreferNoSchedule"),
        ),
    )


@pytest.fixture
def fake_node_client(gated_node):
    """A FakeNodeClient holding ``gated_node`` with no competing writers."""
    return FakeNodeClient(gated_node)


@pytest.fixture
def token_file(tmp_path):
    """A bearer token file as mounted from the provisioning secret."""
    path = tmp_path / "token"
    path.write_text("s3cr3t-token\n")
    return path
