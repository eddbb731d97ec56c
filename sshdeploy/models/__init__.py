"""Data models for sshdeploy."""

from sshdeploy.models.command import Result
from sshdeploy.models.ssh import ConnectionState, SSHHost

__all__ = [
    "ConnectionState",
    "Result",
    "SSHHost",
]
