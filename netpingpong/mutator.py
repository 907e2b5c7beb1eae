"""Optimistic-concurrency read-modify-write for node records.

Other controllers (the kubelet, the node lifecycle controller, other agents)
write to the same node object. Each attempt re-reads the node, applies the
transform to that fresh copy, and writes it back carrying the resource
version it was read at; the API server rejects the write with a conflict if
anyone else got there first, in which case the whole attempt is repeated.
"""

import random
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from netpingpong.exceptions import ConflictError, ConflictExhaustedError
from netpingpong.kube import NodeClient
from netpingpong.logging_config import get_logger
from netpingpong.models.node import NodeRecord

logger = get_logger(__name__)

Transform = Callable[[NodeRecord], NodeRecord]


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff between conflicting attempts.

    Attributes:
        steps: Total number of attempts, including the first
        initial_delay: Seconds to wait before the first retry
        factor: Multiplier applied to the delay after each retry
        jitter: Maximum extra fraction of the delay added at random
        max_delay: Upper bound on any single delay, before jitter
    """

    steps: int = 5
    initial_delay: float = 0.01
    factor: float = 2.0
    jitter: float = 0.1
    max_delay: float = 1.0

    def __post_init__(self):
        if self.steps < 1:
            raise ValueError(f"steps must be at least 1, got {self.steps}")

    def delays(self) -> Iterator[float]:
        """Yield the wait before each retry (``steps - 1`` values)."""
        delay = self.initial_delay
        for _ in range(self.steps - 1):
            capped = min(delay, self.max_delay)
            yield capped + capped * self.jitter * random.random()
            delay *= self.factor


DEFAULT_RETRY = RetryPolicy()


class NodeMutator:
    """Applies transforms to a node, retrying on write conflicts."""

    def __init__(
        self,
        client: NodeClient,
        policy: RetryPolicy = DEFAULT_RETRY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.policy = policy
        self._sleep = sleep

    def mutate(self, node_name: str, transform: Transform) -> NodeRecord:
        """Read ``node_name``, apply ``transform`` and write the result back.

        Returns:
            The node as stored after the successful write

        Raises:
            ConflictExhaustedError: If every attempt was rejected as stale
            KubernetesError: If a read fails, or a write fails for any
                reason other than a conflict
        """
        delays = self.policy.delays()
        for attempt in range(1, self.policy.steps + 1):
            current = self.client.get_node(node_name)
            desired = transform(current)
            try:
                return self.client.update_node(desired)
            except ConflictError as e:
                logger.debug(
                    f"Conflict updating node {node_name} "
                    f"(attempt {attempt}/{self.policy.steps}): {e.message}"
                )
                delay = next(delays, None)
                if delay is None:
                    break
                self._sleep(delay)

        logger.error(
            f"Giving up on node {node_name} after {self.policy.steps} conflicting attempts"
        )
        raise ConflictExhaustedError(node_name, self.policy.steps)
