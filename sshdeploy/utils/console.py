"""Colorful console logging for remote command output."""

import logging
import re
import sys
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sshdeploy.config.settings import Settings

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "sshdeploy.remote": COLORS["bright_cyan"],
    "sshdeploy.client": COLORS["bright_magenta"],
    "sshdeploy.services": COLORS["bright_blue"],
    "sshdeploy.config": COLORS["green"],
    "default": COLORS["white"],
}

_RUNTIME_PATTERN = re.compile(r"^(=> \d+\.\d{6})$")
_EXEC_PATTERN = re.compile(r"^(\[EXEC  \])")
_SSH_TARGET_PATTERN = re.compile(r"(\w+@[\w\.\-]+:\d+)")

NOISY_LOGGERS = ("asyncssh", "asyncio")


class ColorfulFormatter(logging.Formatter):
    """Colorful log formatter with component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_level(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname, COLORS["white"])
        return self._colorize(f"{record.levelname:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith("sshdeploy."):
            name = name[len("sshdeploy.") :]
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line

    def _highlight_message(self, message: str) -> str:
        """Highlight commands, runtimes and SSH targets."""
        if not self.use_colors:
            return message

        message = _EXEC_PATTERN.sub(
            f"{COLORS['bright_cyan']}\\1{COLORS['reset']}", message
        )
        message = _RUNTIME_PATTERN.sub(
            f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message
        )
        message = _SSH_TARGET_PATTERN.sub(
            f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message
        )
        return message


class RemoteLogFormatter(ColorfulFormatter):
    """Formatter that marks connection and command lifecycle events."""

    def format(self, record: logging.LogRecord) -> str:
        """Format with a leading lifecycle indicator."""
        base = super().format(record)
        if not self.use_colors:
            return base

        message = record.getMessage()
        lowered = message.lower()

        if message.startswith("[EXEC"):
            return f"{COLORS['bright_cyan']}>>>{COLORS['reset']} {base}"
        elif message.startswith("=> "):
            return f"{COLORS['bright_green']}<<<{COLORS['reset']} {base}"
        elif record.levelno >= logging.ERROR or "failed" in lowered:
            return f"{COLORS['bright_red']}!!{COLORS['reset']}  {base}"
        elif "opening" in lowered:
            return f"{COLORS['bright_cyan']}+{COLORS['reset']}   {base}"
        elif "closing" in lowered:
            return f"{COLORS['bright_yellow']}-{COLORS['reset']}   {base}"

        return f"    {base}"


def configure_logging(settings: "Settings | None" = None) -> logging.Logger:
    """Install the console handler on the sshdeploy logger.

    Safe to call more than once; a handler is only added the first time.

    Args:
        settings: Settings to read level and color preferences from
            (default: loaded from environment)

    Returns:
        The configured ``sshdeploy`` logger
    """
    if settings is None:
        from sshdeploy.config.settings import Settings

        settings = Settings.from_env()

    use_colors = settings.log_colors and sys.stderr.isatty()

    package_logger = logging.getLogger("sshdeploy")
    package_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(RemoteLogFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    for noisy_logger in NOISY_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    return package_logger
