"""Client settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "SSHDEPLOY_"


def _default_key_path() -> str:
    return str(Path.home() / ".ssh" / "id_rsa")


@dataclass
class Settings:
    """Settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Connection
    port: int = field(default=22)
    default_key_path: str = field(default_factory=_default_key_path)

    # Host key policy (None means use ~/.ssh/known_hosts)
    known_hosts: str | None = field(default=None)
    strict_host_key_checking: bool = field(default=True)

    # Deployment
    use_sudo: bool = field(default=True)
    scratch_dir: str = field(default="/tmp")

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from SSHDEPLOY_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            port=cls._get_int("PORT", 22),
            default_key_path=os.path.expanduser(
                os.getenv(ENV_PREFIX + "DEFAULT_KEY_PATH") or _default_key_path()
            ),
            known_hosts=os.getenv(ENV_PREFIX + "KNOWN_HOSTS") or None,
            strict_host_key_checking=cls._get_bool("STRICT_HOST_KEY_CHECKING", True),
            use_sudo=cls._get_bool("USE_SUDO", True),
            scratch_dir=os.getenv(ENV_PREFIX + "SCRATCH_DIR", "/tmp"),
            log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("LOG_COLORS", True),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Variable name without the SSHDEPLOY_ prefix
            default: Default value if not set

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning(
                "Invalid int for %s%s: %s, using default %d",
                ENV_PREFIX,
                key,
                value,
                default,
            )
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")
