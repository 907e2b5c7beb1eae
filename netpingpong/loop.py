"""Fixed-interval probe-and-remediate control loop."""

import asyncio
import os
from collections.abc import Mapping
from pathlib import Path

from netpingpong.config import PROBE_INTERVAL_SECONDS, TOKEN_PATH, AgentSettings
from netpingpong.exceptions import TokenError
from netpingpong.logging_config import get_logger
from netpingpong.models.probe import ProbeOutcome, ProbeStatus
from netpingpong.probe import ProbeClient, read_token
from netpingpong.remediation import TaintRemediator

logger = get_logger(__name__)


class ProbeLoop:
    """Probes the configured address and clears the taint once it answers 200."""

    def __init__(
        self,
        probe_client: ProbeClient,
        remediator: TaintRemediator,
        token_path: Path = TOKEN_PATH,
        interval: float = PROBE_INTERVAL_SECONDS,
        environ: Mapping[str, str] | None = None,
    ):
        self.probe_client = probe_client
        self.remediator = remediator
        self.token_path = token_path
        self.interval = interval
        self.environ = os.environ if environ is None else environ

    def tick(self) -> ProbeOutcome | None:
        """Run one probe and, if healthy, one remediation.

        Returns:
            The probe outcome, or None when the tick was skipped

        Raises:
            FatalError: If the taint could not be removed
        """
        logger.info("Starting probe tick")
        settings = AgentSettings.from_env(self.environ)

        try:
            token = read_token(self.token_path)
        except TokenError as e:
            logger.error(f"Failed to read token: {e.message}: {e.details}")
            return None

        outcome = self.probe_client.probe(settings.address, token)

        if outcome.status is ProbeStatus.HEALTHY:
            self.remediator.remove_taint(settings.node_name, settings.taint_name)
        elif outcome.status is ProbeStatus.UNHEALTHY:
            logger.warning(
                f"Received non-{self.probe_client.healthy_status} response: {outcome.status_code}"
            )
        return outcome

    async def run(self) -> None:
        """Tick forever, one tick at a time.

        Each tick runs in a worker thread so the event loop stays free for the
        relay endpoint. A FatalError from a tick ends the loop.
        """
        logger.info(f"Probe loop started with a {self.interval:g}s interval")
        while True:
            await asyncio.sleep(self.interval)
            await asyncio.to_thread(self.tick)
