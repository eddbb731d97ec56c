"""Shared fakes for asyncssh connections and processes."""

from collections.abc import Callable, Iterable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import asyncssh
import pytest

from sshdeploy.config.host_keys import HostKeyVerifier
from sshdeploy.config.settings import Settings


class FakeReader:
    """Stand-in for asyncssh.SSHReader returning canned chunks."""

    def __init__(self, chunks: Iterable[bytes]):
        self._chunks = list(chunks)

    async def read(self, n: int = -1) -> bytes:
        if self._chunks:
            return self._chunks.pop(0)
        return b""


def make_process(
    stdout: Iterable[bytes] = (),
    stderr: Iterable[bytes] = (),
    exit_status: int | None = 0,
    exit_signal: Any = None,
    wait_error: BaseException | None = None,
) -> MagicMock:
    """Build a fake SSHClientProcess.

    A non-zero exit_status makes wait() raise ProcessError, as
    ``wait(check=True)`` does in asyncssh.
    """
    process = MagicMock()
    process.stdout = FakeReader(stdout)
    process.stderr = FakeReader(stderr)

    if wait_error is not None:
        process.wait = AsyncMock(side_effect=wait_error)
    elif exit_status:
        process.wait = AsyncMock(
            side_effect=asyncssh.ProcessError(
                env=None,
                command="",
                subsystem=None,
                exit_status=exit_status,
                exit_signal=None,
                returncode=exit_status,
                stdout="",
                stderr="",
            )
        )
    else:
        process.wait = AsyncMock(
            return_value=MagicMock(
                exit_status=exit_status,
                exit_signal=exit_signal,
                returncode=exit_status,
            )
        )
    return process


def make_connection(*processes: MagicMock) -> MagicMock:
    """Build a fake SSHClientConnection handing out the given processes."""
    conn = MagicMock()
    conn.create_process = AsyncMock(side_effect=list(processes))
    conn.open_connection = AsyncMock(return_value=(MagicMock(), MagicMock()))
    conn.wait_closed = AsyncMock()
    return conn


@pytest.fixture
def process_factory() -> Callable[..., MagicMock]:
    """Factory for fake remote processes."""
    return make_process


@pytest.fixture
def connection_factory() -> Callable[..., MagicMock]:
    """Factory for fake connections."""
    return make_connection


@pytest.fixture
def settings(tmp_path: Any) -> Settings:
    """Settings isolated from the environment and the real home directory."""
    return Settings(default_key_path=str(tmp_path / "no_default_key"))


@pytest.fixture
def insecure_host_keys() -> HostKeyVerifier:
    """Host key policy with verification disabled."""
    return HostKeyVerifier.insecure()


@pytest.fixture
def no_agent(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run without an SSH agent in the environment."""
    monkeypatch.delenv("SSH_AUTH_SOCK", raising=False)
