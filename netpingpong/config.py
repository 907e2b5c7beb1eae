"""Runtime settings read from the process environment.

Probe settings are re-read on every tick so that a changed Downward API value
or ConfigMap-backed variable never requires holding state between ticks.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, field_validator

from netpingpong.exceptions import ConfigurationError

TOKEN_PATH = Path("/var/run/secrets/netpingpong/token")
PROBE_INTERVAL_SECONDS = 10.0
HEALTHY_STATUS = 200
DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_LISTEN = ":8080"
DEFAULT_HOST = "0.0.0.0"

ADDRESS_ENV = "NETPong_ADDRESS"
TAINT_NAME_ENV = "TAINT_NAME"
NODE_NAME_ENV = "NODE_NAME"
PORT_ENV = "PORT"


class AgentSettings(BaseModel):
    """Per-tick probe configuration."""

    address: str = ""
    taint_name: str = ""
    node_name: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AgentSettings":
        """Build settings from environment variables.

        Unset variables become empty strings and are passed through as-is.
        """
        environ = os.environ if environ is None else environ
        return cls(
            address=environ.get(ADDRESS_ENV, ""),
            taint_name=environ.get(TAINT_NAME_ENV, ""),
            node_name=environ.get(NODE_NAME_ENV, ""),
        )

    def missing(self) -> list[str]:
        """Return the names of environment variables that resolved to empty values."""
        pairs = [
            (ADDRESS_ENV, self.address),
            (TAINT_NAME_ENV, self.taint_name),
            (NODE_NAME_ENV, self.node_name),
        ]
        return [name for name, value in pairs if not value]


class ServerSettings(BaseModel):
    """Listen address for the health relay endpoint."""

    listen: str = DEFAULT_LISTEN

    @field_validator("listen")
    @classmethod
    def validate_listen(cls, v: str) -> str:
        """Validate the listen address is ``:port``, ``host:port`` or ``port``."""
        if not v:
            return DEFAULT_LISTEN
        _, _, port = v.rpartition(":")
        if not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"listen address must end with a port in 1-65535, got '{v}'")
        return v

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerSettings":
        """Build settings from the PORT environment variable.

        Raises:
            ConfigurationError: If PORT is not a usable listen address
        """
        environ = os.environ if environ is None else environ
        listen = environ.get(PORT_ENV, DEFAULT_LISTEN)
        try:
            return cls(listen=listen)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid {PORT_ENV} value: {listen!r}",
                f"Use ':8080', '127.0.0.1:8080' or '8080'. {e}",
            )

    @property
    def host(self) -> str:
        host, _, _ = self.listen.rpartition(":")
        return host.strip("[]") or DEFAULT_HOST

    @property
    def port(self) -> int:
        return int(self.listen.rpartition(":")[2])
