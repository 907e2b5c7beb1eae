"""Process supervisor: runs the relay server and the probe loop side by side.

The two share nothing but the process. The probe loop ending (only ever with
a FatalError) stops the server and the error is re-raised to the caller,
which exits non-zero so the kubelet restarts the container.
"""

import asyncio
import contextlib
from pathlib import Path

import uvicorn

from netpingpong.config import (
    DEFAULT_HTTP_TIMEOUT,
    PROBE_INTERVAL_SECONDS,
    TOKEN_PATH,
    ServerSettings,
)
from netpingpong.kube import KubernetesNodeClient, NodeClient
from netpingpong.logging_config import get_logger
from netpingpong.loop import ProbeLoop
from netpingpong.mutator import NodeMutator
from netpingpong.probe import ProbeClient
from netpingpong.relay import create_app
from netpingpong.remediation import TaintRemediator

logger = get_logger(__name__)


def build_probe_loop(
    node_client: NodeClient | None = None,
    token_path: Path = TOKEN_PATH,
    interval: float = PROBE_INTERVAL_SECONDS,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> ProbeLoop:
    """Wire a ProbeLoop to a real cluster unless ``node_client`` is given."""
    remediator = TaintRemediator(NodeMutator(node_client or KubernetesNodeClient()))
    return ProbeLoop(
        ProbeClient(timeout=timeout), remediator, token_path=token_path, interval=interval
    )


def build_server(
    settings: ServerSettings, timeout: float = DEFAULT_HTTP_TIMEOUT
) -> uvicorn.Server:
    """Create the uvicorn server for the relay endpoint."""
    config = uvicorn.Config(
        create_app(timeout=timeout),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
    return uvicorn.Server(config)


async def run_agent(probe_loop: ProbeLoop, server: uvicorn.Server) -> None:
    """Run until the server stops or the probe loop fails.

    Raises:
        FatalError: If the probe loop could not remediate the node
    """
    loop_task = asyncio.create_task(probe_loop.run(), name="probe-loop")
    server_task = asyncio.create_task(server.serve(), name="relay-server")

    done, _ = await asyncio.wait({loop_task, server_task}, return_when=asyncio.FIRST_COMPLETED)

    if loop_task in done:
        logger.info("Probe loop stopped, shutting down relay server")
        server.should_exit = True
        await server_task
        loop_task.result()
        return

    logger.info("Relay server stopped, cancelling probe loop")
    loop_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await loop_task
    server_task.result()
