"""sshdeploy: run commands and atomically deploy files over SSH."""

from sshdeploy.client import Client
from sshdeploy.config import Config, HostKeyVerifier, Settings
from sshdeploy.exceptions import (
    ClientClosedError,
    CommandError,
    ExitStatusMissingError,
    SSHDeployError,
)
from sshdeploy.models import ConnectionState, Result, SSHHost
from sshdeploy.protocols import LogSink
from sshdeploy.services.deploy import build_deploy_command
from sshdeploy.utils.console import configure_logging
from sshdeploy.utils.log_buffer import LogCapturingBuffer

__version__ = "0.1.0"

__all__ = [
    "build_deploy_command",
    "Client",
    "ClientClosedError",
    "CommandError",
    "Config",
    "configure_logging",
    "ConnectionState",
    "ExitStatusMissingError",
    "HostKeyVerifier",
    "LogCapturingBuffer",
    "LogSink",
    "Result",
    "Settings",
    "SSHDeployError",
    "SSHHost",
]
