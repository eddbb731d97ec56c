"""Aggregated configuration.

Delegates to specialized components:
- Settings: Environment variables
- SSHConfigParser: Reads ~/.ssh/config
- HostKeyVerifier: Host key policy
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from sshdeploy.config.host_keys import HostKeyVerifier
from sshdeploy.config.parser import SSHConfigParser
from sshdeploy.config.settings import Settings
from sshdeploy.models import SSHHost

if TYPE_CHECKING:
    from sshdeploy.client import Client

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Client factory configuration.

    Aggregates settings, SSH config hosts and the host key policy, and
    builds clients that share them.
    """

    settings: Settings
    parser: SSHConfigParser
    host_keys: HostKeyVerifier
    _hosts_cache: dict[str, SSHHost] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def from_env(cls, ssh_config_path: Path | str | None = None) -> "Config":
        """Create config from environment.

        Args:
            ssh_config_path: SSH config file (default: ~/.ssh/config)

        Returns:
            Configured instance with all components initialized
        """
        settings = Settings.from_env()

        allowlist_str = os.getenv("SSHDEPLOY_ALLOWLIST", "").strip()
        allowlist = [h.strip() for h in allowlist_str.split(",") if h.strip()] or None

        blocklist_str = os.getenv("SSHDEPLOY_BLOCKLIST", "").strip()
        blocklist = [h.strip() for h in blocklist_str.split(",") if h.strip()] or None

        parser = SSHConfigParser(
            config_path=ssh_config_path,
            allowlist=allowlist,
            blocklist=blocklist,
        )
        host_keys = HostKeyVerifier(
            known_hosts_path=settings.known_hosts,
            strict_checking=settings.strict_host_key_checking,
        )
        return cls(settings=settings, parser=parser, host_keys=host_keys)

    def get_hosts(self) -> dict[str, SSHHost]:
        """Get SSH hosts from config.

        Lazy loads and caches hosts on first call.
        """
        if not self._hosts_cache:
            self._hosts_cache = self.parser.parse()
        return self._hosts_cache

    def get_host(self, name: str) -> SSHHost | None:
        """Get host by name, or None if not configured."""
        return self.get_hosts().get(name)

    def client(
        self,
        host: str,
        user: str,
        port: int | None = None,
        password: str | None = None,
        private_key: str | None = None,
    ) -> "Client":
        """Build a client for an ad-hoc host using these settings."""
        from sshdeploy.client import Client

        return Client(
            host,
            user,
            port=port or self.settings.port,
            password=password,
            private_key=private_key,
            host_keys=self.host_keys,
            settings=self.settings,
        )

    def client_for(self, name: str, password: str | None = None) -> "Client":
        """Build a client for a host defined in the SSH config.

        Args:
            name: Host alias from the SSH config
            password: Optional password to try first

        Raises:
            KeyError: If the host is not configured (or filtered out)
        """
        host = self.get_host(name)
        if host is None:
            raise KeyError(f"Unknown SSH host: {name}")

        logger.debug("Building client for %s (%s)", name, host.target)
        return self.client(
            host.hostname,
            host.user,
            port=host.port,
            password=password,
            private_key=host.identity_file,
        )
