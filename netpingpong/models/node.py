"""Data models for node records and their taints."""

import copy
from datetime import datetime

from kubernetes import client
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class NodeTaint(BaseModel):
    """Kubernetes node taint."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str | None = None
    effect: str  # NoSchedule, PreferNoSchedule, NoExecute
    time_added: datetime | None = None

    @field_validator("effect")
    @classmethod
    def validate_effect(cls, v: str) -> str:
        """Validate taint effect is one of the allowed values."""
        allowed = ["NoSchedule", "PreferNoSchedule", "NoExecute"]
        if v not in allowed:
            raise ValueError(f"effect must be one of {allowed}, got {v}")
        return v

    @classmethod
    def from_kubernetes(cls, taint: client.V1Taint) -> "NodeTaint":
        """Parse from a kubernetes client V1Taint."""
        return cls(
            key=taint.key,
            value=taint.value,
            effect=taint.effect,
            time_added=taint.time_added,
        )

    def to_kubernetes(self) -> client.V1Taint:
        """Convert to a kubernetes client V1Taint."""
        return client.V1Taint(
            key=self.key, value=self.value, effect=self.effect, time_added=self.time_added
        )

    def __str__(self) -> str:
        value = f"={self.value}" if self.value else ""
        return f"{self.key}{value}:{self.effect}"


class NodeRecord(BaseModel):
    """Local, possibly stale copy of a cluster node.

    Only the taint list is ever changed by this agent. The full source object
    is kept privately so that writing the record back preserves every field
    the model does not expose.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    resource_version: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    taints: tuple[NodeTaint, ...] = ()

    _source: client.V1Node | None = PrivateAttr(default=None)

    def has_taint(self, key: str) -> bool:
        """Return True if any taint on the node uses ``key``."""
        return any(t.key == key for t in self.taints)

    @classmethod
    def from_kubernetes(cls, node: client.V1Node) -> "NodeRecord":
        """Parse from a kubernetes client V1Node."""
        taints = (node.spec.taints if node.spec else None) or []
        record = cls(
            name=node.metadata.name,
            resource_version=node.metadata.resource_version,
            labels=node.metadata.labels or {},
            taints=tuple(NodeTaint.from_kubernetes(t) for t in taints),
        )
        record._source = node
        return record

    def to_kubernetes(self) -> client.V1Node:
        """Build the V1Node to send on update.

        The resource version is the one this record was read at, so the API
        server rejects the write if the node changed in the meantime.
        """
        if self._source is not None:
            node = copy.deepcopy(self._source)
        else:
            node = client.V1Node(
                metadata=client.V1ObjectMeta(name=self.name, labels=dict(self.labels) or None),
                spec=client.V1NodeSpec(),
            )
        if node.spec is None:
            node.spec = client.V1NodeSpec()
        node.metadata.resource_version = self.resource_version
        node.spec.taints = [t.to_kubernetes() for t in self.taints] or None
        return node
