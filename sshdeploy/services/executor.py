"""Remote command execution with streamed, captured output."""

import asyncio
import time
from typing import TYPE_CHECKING

import asyncssh

from sshdeploy.exceptions import ExitStatusMissingError
from sshdeploy.models import Result

if TYPE_CHECKING:
    from sshdeploy.protocols import LogSink, SSHConnection
    from sshdeploy.utils.log_buffer import LogCapturingBuffer

_CHUNK_SIZE = 65536


async def _pump(stream: "asyncssh.SSHReader[bytes]", sink: "LogCapturingBuffer") -> None:
    """Copy a remote stream into a buffer until EOF."""
    while True:
        data = await stream.read(_CHUNK_SIZE)
        if not data:
            break
        sink.write(data)


async def run_command(
    conn: "SSHConnection",
    command: str,
    result: Result,
    started: float,
    info: "LogSink | None" = None,
) -> Result:
    """Run one command on a fresh channel and record the outcome.

    Output is written into ``result``'s buffers as it arrives, so their
    log sinks see each line while the command is still running.

    A non-zero exit fills in ``exit_status``; any other failure after the
    channel opened is kept in ``error`` with the status left at 0.

    Raises:
        asyncssh.ChannelOpenError: If the channel cannot be opened
        OSError: If the transport fails while opening the channel
    """
    process = await conn.create_process(command, encoding=None)

    if info is not None:
        info(f"[EXEC  ] {command}")

    try:
        process.stdin.write_eof()
        await asyncio.gather(
            _pump(process.stdout, result.stdout_buffer),
            _pump(process.stderr, result.stderr_buffer),
        )
        completed = await process.wait(check=True)
        if completed.exit_status is None and completed.exit_signal is None:
            result.error = ExitStatusMissingError(command)
    except asyncssh.ProcessError as e:
        result.error = e
        if e.returncode is not None:
            result.exit_status = e.returncode
    except (asyncssh.Error, OSError) as e:
        result.error = e
    finally:
        result.stdout_buffer.flush()
        result.stderr_buffer.flush()
        if info is not None:
            info(f"=> {time.monotonic() - started:.6f}")
        process.close()

    return result
