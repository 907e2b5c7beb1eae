"""Result of a single liveness probe."""

from enum import Enum

from pydantic import BaseModel


class ProbeStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    TRANSPORT_FAILURE = "transport_failure"


class ProbeOutcome(BaseModel):
    """Classification of one probe response.

    Produced once per polling tick and never persisted.
    """

    status: ProbeStatus
    status_code: int | None = None
    error: str | None = None

    @classmethod
    def healthy(cls, status_code: int = 200) -> "ProbeOutcome":
        return cls(status=ProbeStatus.HEALTHY, status_code=status_code)

    @classmethod
    def unhealthy(cls, status_code: int) -> "ProbeOutcome":
        return cls(status=ProbeStatus.UNHEALTHY, status_code=status_code)

    @classmethod
    def transport_failure(cls, error: Exception | str) -> "ProbeOutcome":
        return cls(status=ProbeStatus.TRANSPORT_FAILURE, error=str(error))

    @property
    def is_healthy(self) -> bool:
        return self.status is ProbeStatus.HEALTHY

    def __str__(self) -> str:
        if self.status is ProbeStatus.TRANSPORT_FAILURE:
            return f"transport failure ({self.error})"
        return f"{self.status.value} (HTTP {self.status_code})"
