"""Protocol interfaces for dependency inversion.

Defines the small capabilities the client depends on, so that log
destinations and SSH connections can be swapped out or mocked in tests.

Usage Example:

    from sshdeploy import Client

    lines: list[str] = []
    client = Client("web1", "deploy")
    client.debug_sink = lines.append   # any LogSink works
    client.info_sink = print
    client.error_sink = None           # silence stderr lines
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LogSink(Protocol):
    """Capability to emit one log line.

    Plain callables such as ``print``, ``list.append`` or a bound
    ``logging.Logger.info`` all satisfy this protocol. The client holds
    three independent instances, one each for debug, info and error.
    """

    def __call__(self, line: str, /) -> Any:
        """Emit a single, already trimmed line."""
        ...


@runtime_checkable
class SSHConnection(Protocol):
    """Protocol for the parts of an SSH connection the client uses.

    Satisfied by ``asyncssh.SSHClientConnection``.
    """

    async def create_process(self, *args: Any, **kwargs: Any) -> Any:
        """Start a remote process and return it."""
        ...

    async def open_connection(self, *args: Any, **kwargs: Any) -> Any:
        """Open a direct TCP connection through the tunnel.

        Returns:
            (reader, writer) stream pair
        """
        ...

    def close(self) -> None:
        """Begin closing the connection."""
        ...

    async def wait_closed(self) -> None:
        """Wait until the connection is fully closed."""
        ...
