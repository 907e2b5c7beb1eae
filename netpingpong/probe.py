"""Authenticated liveness probe against a peer's relay endpoint."""

from pathlib import Path

import requests
from urllib3.exceptions import HTTPError

from netpingpong.config import DEFAULT_HTTP_TIMEOUT, HEALTHY_STATUS, TOKEN_PATH
from netpingpong.exceptions import TokenError
from netpingpong.logging_config import get_logger
from netpingpong.models.probe import ProbeOutcome

logger = get_logger(__name__)


def read_token(path: Path = TOKEN_PATH) -> str:
    """Read the bearer token.

    Called on every tick so a rotated secret is picked up without a restart.

    Raises:
        TokenError: If the file cannot be read
    """
    try:
        return Path(path).read_text().strip()
    except (OSError, UnicodeDecodeError) as e:
        raise TokenError(f"Failed to read token from {path}", str(e))


class ProbeClient:
    """Sends one GET per probe; retries are the caller's concern."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        healthy_status: int = HEALTHY_STATUS,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.healthy_status = healthy_status

    def probe(self, address: str, token: str) -> ProbeOutcome:
        """Probe ``address`` with ``token`` as bearer credential.

        Never raises for network problems: DNS failures, refused connections,
        timeouts and unusable addresses all come back as a transport failure.
        """
        headers = {"Authorization": f"Bearer {token}"}
        try:
            response = self.session.get(address, headers=headers, timeout=self.timeout)
        except (requests.RequestException, HTTPError) as e:
            logger.warning(f"Error sending request to {address!r}: {e}")
            return ProbeOutcome.transport_failure(e)

        # Body is already read (no streaming); closing hands the connection back to the pool
        response.close()

        if response.status_code == self.healthy_status:
            logger.debug(f"Probe of {address} succeeded")
            return ProbeOutcome.healthy(response.status_code)
        return ProbeOutcome.unhealthy(response.status_code)

    def close(self) -> None:
        self.session.close()
