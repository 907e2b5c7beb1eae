"""Custom exceptions for netpingpong."""


class NetPingPongError(Exception):
    """Base exception for all netpingpong errors."""

    def __init__(self, message: str, details: str = None):
        """Initialize the exception.

        Args:
            message: Main error message
            details: Additional details or suggestions
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            Formatted error message with details
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


class ConfigurationError(NetPingPongError):
    """Exception raised for configuration errors."""

    pass


class TokenError(NetPingPongError):
    """Exception raised when the bearer token cannot be read."""

    pass


class KubernetesError(NetPingPongError):
    """Exception raised for Kubernetes API errors."""

    pass


class ConflictError(KubernetesError):
    """Exception raised when a node write is rejected as stale."""

    pass


class ConflictExhaustedError(NetPingPongError):
    """Exception raised when every retry of a node update hit a conflict."""

    def __init__(self, node_name: str, attempts: int):
        self.node_name = node_name
        self.attempts = attempts
        super().__init__(
            f"Node {node_name} update still conflicting after {attempts} attempts",
            "Another actor keeps modifying the node; the next run will try again",
        )


class FatalError(NetPingPongError):
    """Exception raised when the agent must stop so a supervisor can restart it."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message, str(cause) if cause else None)
