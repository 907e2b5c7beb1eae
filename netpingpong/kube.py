"""Access to node objects in the Kubernetes API."""

from typing import Protocol

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from netpingpong.exceptions import ConflictError, KubernetesError
from netpingpong.logging_config import get_logger
from netpingpong.models.node import NodeRecord

logger = get_logger(__name__)

HTTP_CONFLICT = 409


class NodeClient(Protocol):
    """The two node operations the agent needs from a cluster."""

    def get_node(self, name: str) -> NodeRecord: ...

    def update_node(self, record: NodeRecord) -> NodeRecord: ...


def load_cluster_config() -> None:
    """Load in-cluster credentials, falling back to the local kubeconfig.

    Raises:
        KubernetesError: If neither source yields a usable configuration
    """
    try:
        config.load_incluster_config()
        logger.debug("Loaded in-cluster Kubernetes configuration")
        return
    except ConfigException as e:
        logger.debug(f"In-cluster configuration unavailable: {e}")

    try:
        config.load_kube_config()
        logger.debug("Loaded Kubernetes configuration from kubeconfig")
    except (ConfigException, OSError) as e:
        raise KubernetesError(
            "Failed to load Kubernetes configuration",
            "Run inside a pod with a service account, or make a kubeconfig available "
            f"via KUBECONFIG or ~/.kube/config. Cause: {e}",
        )


class KubernetesNodeClient:
    """NodeClient backed by the official Kubernetes Python client.

    The CoreV1Api is built on first use so that a process without cluster
    credentials can still serve relay requests.
    """

    def __init__(self, api: client.CoreV1Api | None = None):
        self._api = api

    @property
    def api(self) -> client.CoreV1Api:
        if self._api is None:
            load_cluster_config()
            self._api = client.CoreV1Api()
        return self._api

    def get_node(self, name: str) -> NodeRecord:
        """Fetch a node.

        Raises:
            KubernetesError: If the node cannot be read
        """
        try:
            node = self.api.read_node(name=name)
        except ApiException as e:
            raise KubernetesError(f"Failed to get node {name}: {e.status} {e.reason}", e.body)
        except HTTPError as e:
            raise KubernetesError(f"Failed to get node {name}: API server unreachable", str(e))
        return NodeRecord.from_kubernetes(node)

    def update_node(self, record: NodeRecord) -> NodeRecord:
        """Replace a node with the given record.

        Raises:
            ConflictError: If the node changed since ``record`` was read
            KubernetesError: For any other API failure
        """
        try:
            node = self.api.replace_node(name=record.name, body=record.to_kubernetes())
        except ApiException as e:
            if e.status == HTTP_CONFLICT:
                raise ConflictError(
                    f"Node {record.name} was modified since resourceVersion "
                    f"{record.resource_version}",
                    e.body,
                )
            raise KubernetesError(
                f"Failed to update node {record.name}: {e.status} {e.reason}", e.body
            )
        except HTTPError as e:
            raise KubernetesError(
                f"Failed to update node {record.name}: API server unreachable", str(e)
            )
        return NodeRecord.from_kubernetes(node)
