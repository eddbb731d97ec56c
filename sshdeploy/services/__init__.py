"""Services for sshdeploy."""

from sshdeploy.services.credentials import (
    AuthMethods,
    load_agent_keys,
    load_private_key,
    resolve_auth,
)
from sshdeploy.services.deploy import (
    build_deploy_command,
    checksum,
    encode_payload,
    temp_path_for,
)
from sshdeploy.services.executor import run_command

__all__ = [
    "AuthMethods",
    "build_deploy_command",
    "checksum",
    "encode_payload",
    "load_agent_keys",
    "load_private_key",
    "resolve_auth",
    "run_command",
    "temp_path_for",
]
