"""Exceptions raised by sshdeploy.

Transport and authentication failures from asyncssh (and ``OSError`` from
the dial) are never wrapped; they reach the caller unchanged.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sshdeploy.models import Result


class SSHDeployError(Exception):
    """Base class for sshdeploy errors."""


class ClientClosedError(SSHDeployError):
    """Client was closed and will not reconnect implicitly."""

    def __init__(self, host: str):
        self.host = host
        super().__init__(
            f"Client for {host} is closed; call connect() to open a new connection"
        )


class ExitStatusMissingError(SSHDeployError):
    """Channel closed before the remote process reported how it exited."""

    def __init__(self, command: str):
        self.command = command
        super().__init__("remote process exited without reporting a status")


class CommandError(SSHDeployError):
    """Remote command did not complete successfully.

    Carries the populated Result so stdout/stderr stay readable.
    """

    def __init__(self, result: "Result"):
        """Initialize command error.

        Args:
            result: Result of the failed command
        """
        self.result = result
        if result.exit_status != 0:
            message = f"process exited with status {result.exit_status}"
        else:
            message = f"command failed: {result.error}"
        super().__init__(message)

    @property
    def exit_status(self) -> int:
        """Exit status of the remote process (0 if it never reported one)."""
        return self.result.exit_status
