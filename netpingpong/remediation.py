"""Taint removal once a node has proven its network path works."""

from netpingpong.exceptions import FatalError, NetPingPongError
from netpingpong.logging_config import get_logger
from netpingpong.models.node import NodeRecord
from netpingpong.mutator import NodeMutator

logger = get_logger(__name__)


def without_taint(record: NodeRecord, key: str) -> NodeRecord:
    """Return a copy of ``record`` with every taint keyed ``key`` dropped.

    Remaining taints keep their order and field values.
    """
    kept = tuple(t for t in record.taints if t.key != key)
    return record.model_copy(update={"taints": kept})


class TaintRemediator:
    """Ensures a named taint is absent from a node."""

    def __init__(self, mutator: NodeMutator):
        self.mutator = mutator

    def remove_taint(self, node_name: str, taint_key: str) -> NodeRecord:
        """Remove ``taint_key`` from ``node_name``.

        The write happens even when the taint is already gone.

        Raises:
            FatalError: If the node could not be updated
        """
        present = []

        def transform(record: NodeRecord) -> NodeRecord:
            present.append(record.has_taint(taint_key))
            return without_taint(record, taint_key)

        try:
            updated = self.mutator.mutate(node_name, transform)
        except NetPingPongError as e:
            logger.critical(f"Error removing taint {taint_key} from node {node_name}: {e.message}")
            raise FatalError(f"Failed to remove taint {taint_key} from node {node_name}", e)

        if present and present[-1]:
            logger.info(f"Taint {taint_key} removed from node {node_name}")
        else:
            logger.info(f"Taint {taint_key} already absent from node {node_name}")
        return updated
