"""Data models for node records and probe results."""

from netpingpong.models.node import NodeRecord, NodeTaint
from netpingpong.models.probe import ProbeOutcome, ProbeStatus

__all__ = [
    "NodeRecord",
    "NodeTaint",
    "ProbeOutcome",
    "ProbeStatus",
]
