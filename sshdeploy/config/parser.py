"""SSH config file parser.

Reads ~/.ssh/config so clients can be built from named host entries.
"""

import logging
import os
import re
from pathlib import Path

from sshdeploy.models import SSHHost

logger = logging.getLogger(__name__)

_HOST_RE = re.compile(r"^Host\s+(\S+)", re.IGNORECASE)
_OPTION_RE = re.compile(r"^(\w+)\s*=?\s*(.+)$")


class SSHConfigParser:
    """Parser for SSH config files.

    Extracts HostName, User, Port and IdentityFile for each concrete
    ``Host`` entry. Options under ``Host *`` act as defaults for the
    entries that follow. Supports allowlist/blocklist filtering.
    """

    def __init__(
        self,
        config_path: Path | str | None = None,
        allowlist: list[str] | None = None,
        blocklist: list[str] | None = None,
    ):
        """Initialize SSH config parser.

        Args:
            config_path: Path to SSH config file (default: ~/.ssh/config)
            allowlist: Only include these hosts (if set)
            blocklist: Exclude these hosts
        """
        if config_path is None:
            config_path = Path.home() / ".ssh" / "config"

        self.config_path = Path(config_path)
        self.allowlist = set(allowlist) if allowlist else None
        self.blocklist = set(blocklist) if blocklist else set()

    def parse(self) -> dict[str, SSHHost]:
        """Parse SSH config and return host definitions.

        Returns:
            Dictionary mapping host alias to SSHHost
        """
        if not self.config_path.exists():
            logger.debug("SSH config not found: %s", self.config_path)
            return {}

        try:
            content = self.config_path.read_text()
        except OSError as e:
            logger.warning("Cannot read SSH config %s: %s", self.config_path, e)
            return {}

        hosts: dict[str, SSHHost] = {}
        current_host: str | None = None
        current_data: dict[str, str] = {}
        global_defaults: dict[str, str] = {}

        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            host_match = _HOST_RE.match(line)
            if host_match:
                self._add_host(hosts, current_host, current_data)
                current_host = host_match.group(1)
                if "*" in current_host or "?" in current_host:
                    current_host = "*"
                current_data = global_defaults.copy() if current_host != "*" else {}
                continue

            option_match = _OPTION_RE.match(line)
            if option_match and current_host:
                key = option_match.group(1).lower()
                value = option_match.group(2).strip()
                if key == "identityfile":
                    value = os.path.expanduser(value)
                current_data[key] = value
                if current_host == "*":
                    global_defaults[key] = value

        self._add_host(hosts, current_host, current_data)

        logger.info("Parsed %d hosts from %s", len(hosts), self.config_path)
        return hosts

    def _add_host(
        self,
        hosts: dict[str, SSHHost],
        name: str | None,
        data: dict[str, str],
    ) -> None:
        """Record a finished Host block if it is concrete and allowed."""
        if not name or name == "*" or not self._is_host_allowed(name):
            return

        try:
            port = int(data.get("port", "22"))
        except ValueError:
            logger.warning("Invalid port for host %s: %s", name, data.get("port"))
            port = 22

        hosts[name] = SSHHost(
            name=name,
            hostname=data.get("hostname", name),
            user=data.get("user", "root"),
            port=port,
            identity_file=data.get("identityfile"),
        )

    def _is_host_allowed(self, name: str) -> bool:
        # Allowlist takes precedence
        if self.allowlist:
            return name in self.allowlist
        return name not in self.blocklist
