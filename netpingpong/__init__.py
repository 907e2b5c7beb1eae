"""Node readiness gate: probe a peer, then clear a scheduling taint."""

__version__ = "0.1.0"
