"""Configuration module for sshdeploy.

Provides focused classes for different configuration concerns:
- Config: Client factory (aggregates all components)
- SSHConfigParser: Parses ~/.ssh/config files
- HostKeyVerifier: SSH host key verification policy
- Settings: Environment variable configuration
"""

from sshdeploy.config.host_keys import HostKeyVerifier
from sshdeploy.config.main import Config
from sshdeploy.config.parser import SSHConfigParser
from sshdeploy.config.settings import Settings

__all__ = ["Config", "HostKeyVerifier", "SSHConfigParser", "Settings"]
