"""SSH client with a single cached connection.

A client owns at most one connection to its host. The connection is opened
on first use, reused for every later command and only released by
close(). Commands on one client run one at a time.

Usage Example:

    async with Client("web1.example.com", "deploy") as client:
        result = await client.execute("uptime")
        await client.deploy_file("/etc/app/config", "key=value\\n", mode=0o644)
"""

import asyncio
import logging
import shutil
import subprocess
import time
from pathlib import Path
from types import TracebackType

import asyncssh

from sshdeploy.config.host_keys import HostKeyVerifier
from sshdeploy.config.settings import Settings
from sshdeploy.exceptions import ClientClosedError, CommandError
from sshdeploy.models import ConnectionState, Result
from sshdeploy.protocols import LogSink, SSHConnection
from sshdeploy.services.credentials import AuthMethods, resolve_auth
from sshdeploy.services.deploy import build_deploy_command
from sshdeploy.services.executor import run_command
from sshdeploy.utils.log_buffer import LogCapturingBuffer

logger = logging.getLogger(__name__)

# Remote output and command lifecycle lines go here by default
remote_logger = logging.getLogger("sshdeploy.remote")


class Client:
    """SSH client for running commands and deploying files on one host."""

    def __init__(
        self,
        host: str,
        user: str,
        port: int | None = None,
        password: str | None = None,
        private_key: str | bytes | None = None,
        passphrase: str | None = None,
        agent_path: str | None = None,
        host_keys: HostKeyVerifier | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize client. No network I/O happens until first use.

        Args:
            host: Remote hostname or address
            user: Remote login name
            port: SSH port (default: settings.port, normally 22)
            password: Password to try before any key
            private_key: Inline key material or path to a key file
            passphrase: Passphrase for an encrypted private key
            agent_path: SSH agent socket (default: $SSH_AUTH_SOCK)
            host_keys: Host key policy (default: built from settings, strict)
            settings: Settings (default: loaded from environment)
        """
        self.host = host
        self.user = user
        self.port = port
        self.private_key = private_key
        self.passphrase = passphrase
        self.agent_path = agent_path
        self.host_keys = host_keys
        self.settings = settings or Settings.from_env()
        self._password = password

        self.debug_sink: LogSink | None = remote_logger.debug
        self.info_sink: LogSink | None = remote_logger.info
        self.error_sink: LogSink | None = remote_logger.error

        self._state = ConnectionState.UNCONNECTED
        self._conn: SSHConnection | None = None
        self._auth: AuthMethods | None = None
        self._connect_lock = asyncio.Lock()
        self._exec_lock = asyncio.Lock()

    def set_password(self, password: str | None) -> None:
        """Set the password offered first on the next connect()."""
        self._password = password

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def connection(self) -> "SSHConnection | None":
        """The cached connection, if connected."""
        return self._conn

    @property
    def target(self) -> str:
        """Render as user@host:port for log messages."""
        return f"{self.user}@{self.host}:{self.port or self.settings.port}"

    def _host_key_policy(self) -> HostKeyVerifier:
        if self.host_keys is None:
            self.host_keys = HostKeyVerifier(
                known_hosts_path=self.settings.known_hosts,
                strict_checking=self.settings.strict_host_key_checking,
            )
        return self.host_keys

    async def _dial(
        self, auth: AuthMethods, known_hosts: str | None
    ) -> "SSHConnection":
        return await asyncssh.connect(
            self.host,
            port=self.port,
            username=self.user,
            known_hosts=known_hosts,
            **auth.connect_options(),
        )

    async def _connect(self) -> "SSHConnection":
        if self._state is ConnectionState.CONNECTED:
            await self._release()
            self._state = ConnectionState.UNCONNECTED

        if not self.port:
            self.port = self.settings.port or 22

        host_keys = self._host_key_policy()
        auth = await resolve_auth(
            password=self._password,
            agent_path=self.agent_path,
            private_key=self.private_key,
            default_key_path=self.settings.default_key_path,
            passphrase=self.passphrase,
        )

        logger.info(
            "Opening SSH connection to %s (auth=%s)",
            self.target,
            ",".join(auth.methods) or "none",
        )
        try:
            try:
                conn = await self._dial(auth, host_keys.get_known_hosts_path())
            except asyncssh.HostKeyNotVerifiable as e:
                if host_keys.strict_checking:
                    logger.error(
                        "Host key verification failed for %s: %s. "
                        "Add the host key to %s or set "
                        "SSHDEPLOY_STRICT_HOST_KEY_CHECKING=false",
                        self.host,
                        e,
                        host_keys.get_known_hosts_path(),
                    )
                    raise
                logger.warning(
                    "Host key not verified for %s (strict mode disabled): %s",
                    self.host,
                    e,
                )
                conn = await self._dial(auth, None)
        except BaseException:
            auth.close()
            raise

        self._conn = conn
        self._auth = auth
        self._state = ConnectionState.CONNECTED
        logger.info("SSH connection established to %s", self.target)
        return conn

    async def connect(self) -> "SSHConnection":
        """Open a new connection, replacing any existing one.

        Dial and authentication errors from asyncssh propagate unchanged
        and leave the client in its previous (unconnected or closed)
        state; calling connect() again retries.

        Returns:
            The new connection
        """
        async with self._connect_lock:
            return await self._connect()

    async def connect_if_absent(self) -> "SSHConnection":
        """Return the cached connection, dialing only if never connected.

        Raises:
            ClientClosedError: If the client was closed
        """
        async with self._connect_lock:
            if self._state is ConnectionState.CONNECTED:
                assert self._conn is not None
                return self._conn
            elif self._state is ConnectionState.CLOSED:
                raise ClientClosedError(self.host)
            return await self._connect()

    async def _release(self) -> None:
        conn, self._conn = self._conn, None
        if conn is not None:
            logger.info("Closing SSH connection to %s", self.target)
            conn.close()
            await conn.wait_closed()
        if self._auth is not None:
            self._auth.close()
            self._auth = None

    async def close(self) -> None:
        """Release the connection and the agent client.

        Safe to call repeatedly or before any connection was made.
        """
        async with self._connect_lock:
            await self._release()
            self._state = ConnectionState.CLOSED

    async def execute(self, command: str, check: bool = True) -> Result:
        """Run a shell command on the remote host.

        Stdout lines go to ``debug_sink`` and stderr lines to
        ``error_sink`` while the command runs; ``info_sink`` gets the
        command line and the elapsed time.

        Args:
            command: Shell command string
            check: Raise CommandError unless the command succeeded

        Returns:
            Result with captured output, runtime and exit status

        Raises:
            CommandError: If check is set and the command exited non-zero
                or its channel failed mid-run (``.result`` holds the output)
            ClientClosedError: If the client was closed
        """
        started = time.monotonic()
        async with self._exec_lock:
            conn = await self.connect_if_absent()
            result = Result(
                stdout_buffer=LogCapturingBuffer(self.debug_sink),
                stderr_buffer=LogCapturingBuffer(self.error_sink),
            )
            await run_command(conn, command, result, started, self.info_sink)
            result.runtime = time.monotonic() - started

        if check and not result.success:
            raise CommandError(result)
        return result

    def deploy_command(
        self,
        path: str,
        content: str | bytes,
        owner: str = "",
        mode: int = 0,
    ) -> str:
        """Build the install command using this client's settings."""
        return build_deploy_command(
            path,
            content,
            owner=owner,
            mode=mode,
            sudo=self.settings.use_sudo,
            scratch_dir=self.settings.scratch_dir,
        )

    async def deploy_file(
        self,
        path: str,
        content: str | bytes,
        owner: str = "",
        mode: int = 0,
        check: bool = True,
    ) -> Result:
        """Atomically install content at a remote path.

        Args:
            path: Destination path on the remote host
            content: File content
            owner: Optional chown spec, e.g. "root:root"
            mode: Optional permission bits, e.g. 0o644
            check: Raise CommandError unless the install succeeded

        Raises:
            TypeError: If content is neither str nor bytes
        """
        return await self.execute(
            self.deploy_command(path, content, owner=owner, mode=mode),
            check=check,
        )

    async def deploy_local_file(
        self,
        local_path: Path | str,
        path: str,
        owner: str = "",
        mode: int = 0,
        check: bool = True,
    ) -> Result:
        """Install a local file's content at a remote path.

        Raises:
            OSError: If the local file cannot be read
        """
        content = Path(local_path).read_bytes()
        return await self.deploy_file(path, content, owner=owner, mode=mode, check=check)

    async def open_tunnel(
        self, host: str, port: int
    ) -> tuple["asyncssh.SSHReader[bytes]", "asyncssh.SSHWriter[bytes]"]:
        """Open a TCP connection to host:port through the SSH connection.

        The returned stream pair can carry any protocol, e.g. an HTTP
        client's transport.
        """
        conn = await self.connect_if_absent()
        logger.debug("Opening tunnel to %s:%d via %s", host, port, self.target)
        return await conn.open_connection(host, port)

    def ssh_command(self) -> list[str]:
        """Command line for an interactive session with the system ssh."""
        args = [shutil.which("ssh") or "ssh"]
        host_keys = self._host_key_policy()
        known_hosts = host_keys.get_known_hosts_path()
        if known_hosts is None:
            args += ["-o", "UserKnownHostsFile=/dev/null", "-o", "StrictHostKeyChecking=no"]
        else:
            args += ["-o", f"UserKnownHostsFile={known_hosts}"]
        if self.port:
            args += ["-p", str(self.port)]
        if self.user:
            args += ["-l", self.user]
        args.append(self.host)
        return args

    def attach(self) -> int:
        """Hand the terminal to an interactive ssh session.

        Returns:
            Exit code of the ssh process
        """
        args = self.ssh_command()
        logger.info("Executing %s", args)
        return subprocess.run(args, check=False).returncode

    async def __aenter__(self) -> "Client":
        await self.connect_if_absent()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"Client({self.target!r}, state={self._state.value})"
