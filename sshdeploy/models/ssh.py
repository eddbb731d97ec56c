"""SSH-related data models."""

from dataclasses import dataclass
from enum import Enum


class ConnectionState(Enum):
    """Lifecycle of a client's single cached connection."""

    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    CLOSED = "closed"


@dataclass
class SSHHost:
    """SSH host configuration."""

    name: str
    hostname: str
    user: str = "root"
    port: int = 22
    identity_file: str | None = None

    @property
    def target(self) -> str:
        """Render as user@hostname:port for log messages."""
        return f"{self.user}@{self.hostname}:{self.port}"
