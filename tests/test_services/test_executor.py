"""Tests for the session executor."""

import time
from unittest.mock import AsyncMock, MagicMock

import asyncssh
import pytest

from sshdeploy.exceptions import ExitStatusMissingError
from sshdeploy.models import Result
from sshdeploy.services.executor import run_command
from sshdeploy.utils.log_buffer import LogCapturingBuffer


@pytest.fixture
def log() -> dict[str, list[str]]:
    """Collected log lines per severity."""
    return {"debug": [], "info": [], "error": []}


@pytest.fixture
def result(log: dict[str, list[str]]) -> Result:
    """Result whose buffers log to the collector."""
    return Result(
        stdout_buffer=LogCapturingBuffer(log["debug"].append),
        stderr_buffer=LogCapturingBuffer(log["error"].append),
    )


@pytest.mark.asyncio
async def test_success_captures_both_streams(process_factory, log, result) -> None:
    """Output is captured and logged line by line."""
    process = process_factory(
        stdout=[b"line one\nline ", b"two\n"],
        stderr=[b"warning: x\n"],
    )
    conn = MagicMock(create_process=AsyncMock(return_value=process))

    await run_command(conn, "echo hi", result, time.monotonic(), log["info"].append)

    conn.create_process.assert_awaited_once_with("echo hi", encoding=None)
    process.stdin.write_eof.assert_called_once()
    process.wait.assert_awaited_once_with(check=True)
    process.close.assert_called_once()
    assert result.stdout == "line one\nline two\n"
    assert result.stderr == "warning: x\n"
    assert result.exit_status == 0
    assert result.error is None
    assert log["debug"] == ["line one", "line two"]
    assert log["error"] == ["warning: x"]


@pytest.mark.asyncio
async def test_info_lines_announce_command_and_runtime(process_factory, log, result) -> None:
    """Info sink gets the command and a six-decimal runtime."""
    conn = MagicMock(create_process=AsyncMock(return_value=process_factory()))

    await run_command(conn, "uptime", result, time.monotonic(), log["info"].append)

    assert log["info"][0] == "[EXEC  ] uptime"
    assert log["info"][1].startswith("=> ")
    seconds = log["info"][1][3:]
    assert len(seconds.split(".")[1]) == 6
    assert float(seconds) >= 0


@pytest.mark.asyncio
async def test_nonzero_exit_sets_status(process_factory, result) -> None:
    """A non-zero exit is recorded as the status with output preserved."""
    process = process_factory(stdout=[b"partial\n"], stderr=[b"boom\n"], exit_status=3)
    conn = MagicMock(create_process=AsyncMock(return_value=process))

    await run_command(conn, "false", result, time.monotonic())

    assert result.exit_status == 3
    assert isinstance(result.error, asyncssh.ProcessError)
    assert result.stdout == "partial\n"
    assert result.stderr == "boom\n"
    process.close.assert_called_once()


@pytest.mark.asyncio
async def test_transport_failure_keeps_status_zero(process_factory, result) -> None:
    """Errors other than an exit status leave the status at zero."""
    lost = asyncssh.ConnectionLost("connection lost")
    process = process_factory(stdout=[b"before\n"], wait_error=lost)
    conn = MagicMock(create_process=AsyncMock(return_value=process))

    await run_command(conn, "sleep 100", result, time.monotonic())

    assert result.error is lost
    assert result.exit_status == 0
    assert result.stdout == "before\n"
    process.close.assert_called_once()


@pytest.mark.asyncio
async def test_missing_exit_status_is_an_error(process_factory, result) -> None:
    """A channel that closes without a status is not a success."""
    process = process_factory(exit_status=None)
    conn = MagicMock(create_process=AsyncMock(return_value=process))

    await run_command(conn, "true", result, time.monotonic())

    assert isinstance(result.error, ExitStatusMissingError)
    assert result.exit_status == 0
    assert not result.success


@pytest.mark.asyncio
async def test_channel_open_failure_propagates(result) -> None:
    """Failing to open the channel raises without logging the command."""
    info: list[str] = []
    error = asyncssh.ChannelOpenError(2, "Connection refused")
    conn = MagicMock(create_process=AsyncMock(side_effect=error))

    with pytest.raises(asyncssh.ChannelOpenError):
        await run_command(conn, "ls", result, time.monotonic(), info.append)

    assert info == []


@pytest.mark.asyncio
async def test_trailing_output_without_newline_is_logged(process_factory, log, result) -> None:
    """The last line is logged even without a newline."""
    process = process_factory(stdout=[b"no newline"])
    conn = MagicMock(create_process=AsyncMock(return_value=process))

    await run_command(conn, "printf x", result, time.monotonic())

    assert log["debug"] == ["no newline"]
