"""Utilities for sshdeploy."""

from sshdeploy.utils.console import (
    ColorfulFormatter,
    RemoteLogFormatter,
    configure_logging,
)
from sshdeploy.utils.log_buffer import LogCapturingBuffer
from sshdeploy.utils.shell import quote_arg, sudo_prefix

__all__ = [
    "ColorfulFormatter",
    "configure_logging",
    "LogCapturingBuffer",
    "quote_arg",
    "RemoteLogFormatter",
    "sudo_prefix",
]
