"""Credential resolution for SSH authentication.

Builds the ordered authentication methods for a client without touching
the network: password first, then public keys from the local agent and
from an explicit or default private key. Every credential source that
cannot be used is skipped so the remaining ones still get a chance; a host
with nothing usable ends up with no methods and the dial fails in asyncssh.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any

import asyncssh

logger = logging.getLogger(__name__)

_KEY_LOAD_ERRORS = (OSError, ValueError, asyncssh.KeyImportError)
_AGENT_ERRORS = (OSError, ValueError, asyncssh.Error)


@dataclass
class AuthMethods:
    """Resolved authentication methods, in the order they are tried.

    Holds at most one password method and one public key method; agent
    keys and file keys share the key method, agent keys first.
    """

    password: str | None = None
    client_keys: list[Any] = field(default_factory=list)
    agent: "asyncssh.SSHAgentClient | None" = None

    @property
    def methods(self) -> list[str]:
        """Names of the methods that will be offered."""
        names = []
        if self.password:
            names.append("password")
        if self.client_keys:
            names.append("publickey")
        return names

    def connect_options(self) -> dict[str, Any]:
        """Translate into ``asyncssh.connect`` keyword arguments.

        The agent is never handed to asyncssh directly; its keys are
        already in ``client_keys``.
        """
        return {
            "password": self.password or None,
            # None disables public key auth instead of loading default keys
            "client_keys": list(self.client_keys) or None,
            "agent_path": None,
        }

    def close(self) -> None:
        """Release the agent connection if one is open."""
        if self.agent is not None:
            self.agent.close()
            self.agent = None


def is_key_material(private_key: str | bytes) -> bool:
    """Tell inline key material apart from a key file path."""
    if isinstance(private_key, bytes):
        return b"-----BEGIN" in private_key
    return "-----BEGIN" in private_key


def load_private_key(
    private_key: str | bytes,
    passphrase: str | None = None,
) -> "asyncssh.SSHKey | None":
    """Parse inline key material or read a key file.

    Returns:
        The parsed key, or None if it could not be read or parsed
    """
    try:
        if is_key_material(private_key):
            return asyncssh.import_private_key(private_key, passphrase)
        path = os.path.expanduser(os.fsdecode(private_key))
        return asyncssh.read_private_key(path, passphrase)
    except _KEY_LOAD_ERRORS as e:
        logger.debug("Skipping unusable private key: %s", e)
        return None


async def load_agent_keys(
    agent_path: str | None = None,
) -> tuple["asyncssh.SSHAgentClient | None", list[Any]]:
    """Open the local SSH agent and list the identities it offers.

    Args:
        agent_path: Agent socket path (default: $SSH_AUTH_SOCK)

    Returns:
        (agent client, keys); (None, []) when no agent is usable
    """
    path = agent_path or os.getenv("SSH_AUTH_SOCK")
    if not path:
        return None, []

    try:
        agent = await asyncssh.connect_agent(path)
    except _AGENT_ERRORS as e:
        logger.debug("SSH agent at %s unavailable: %s", path, e)
        return None, []
    if agent is None:
        return None, []

    try:
        keys = list(await agent.get_keys())
    except _AGENT_ERRORS as e:
        logger.debug("Cannot list SSH agent identities: %s", e)
        agent.close()
        return None, []

    if not keys:
        agent.close()
        return None, []

    logger.debug("SSH agent offered %d identities", len(keys))
    return agent, keys


async def resolve_auth(
    password: str | None = None,
    agent_path: str | None = None,
    private_key: str | bytes | None = None,
    default_key_path: str | None = None,
    passphrase: str | None = None,
) -> AuthMethods:
    """Resolve authentication methods for a connection.

    Args:
        password: Password to offer first, if set
        agent_path: Agent socket path (default: $SSH_AUTH_SOCK)
        private_key: Inline key material or key file path
        default_key_path: Key file used when no explicit key is configured
        passphrase: Passphrase for encrypted private keys

    Returns:
        AuthMethods holding the agent client (if any) for the caller to close
    """
    auth = AuthMethods(password=password or None)

    auth.agent, agent_keys = await load_agent_keys(agent_path)
    auth.client_keys.extend(agent_keys)

    key_source = private_key if private_key else default_key_path
    if key_source:
        key = load_private_key(key_source, passphrase)
        if key is not None:
            auth.client_keys.append(key)

    logger.debug("Resolved auth methods: %s", ", ".join(auth.methods) or "(none)")
    return auth
