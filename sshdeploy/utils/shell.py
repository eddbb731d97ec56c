"""Shell command safety utilities."""

import shlex


def quote_arg(arg: str) -> str:
    """Safely quote a shell argument.

    Plain paths and owner specs such as ``/etc/app/config`` or
    ``root:root`` come back unchanged; anything with shell metacharacters
    is single-quoted.

    Args:
        arg: Argument to quote

    Returns:
        Shell-safe quoted argument
    """
    return shlex.quote(arg)


def sudo_prefix(sudo: bool) -> str:
    """Return the privilege escalation prefix for a command."""
    return "sudo " if sudo else ""
