"""Atomic file deployment expressed as a single shell pipeline.

The content travels inside the command itself: gzip, then base64, echoed
into ``base64 -d | gunzip`` on the remote side. It is written to a
temporary file named after the SHA-256 of the content and only then moved
over the destination, so readers of the destination never observe a
partial write. Identical payloads map to the same temporary name.
"""

import base64
import gzip
import hashlib
import posixpath

from sshdeploy.utils.shell import quote_arg, sudo_prefix

SCRATCH_DIR = "/tmp"
TEMP_PREFIX = "gossh."


def content_bytes(content: str | bytes) -> bytes:
    """Normalize deployable content to bytes.

    Raises:
        TypeError: If content is neither str nor bytes
    """
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    raise TypeError(
        f"content must be str or bytes, got {type(content).__name__}"
    )


def checksum(content: str | bytes) -> str:
    """SHA-256 of the uncompressed content as lowercase hex."""
    return hashlib.sha256(content_bytes(content)).hexdigest()


def temp_path_for(content: str | bytes, scratch_dir: str = SCRATCH_DIR) -> str:
    """Content-addressed temporary path for a payload."""
    return posixpath.join(scratch_dir, TEMP_PREFIX + checksum(content))


def encode_payload(content: str | bytes) -> str:
    """gzip and base64 encode content for embedding in a command.

    The gzip header carries a fixed mtime so equal content always encodes
    to the same text.
    """
    compressed = gzip.compress(content_bytes(content), mtime=0)
    return base64.b64encode(compressed).decode("ascii")


def build_deploy_command(
    path: str,
    content: str | bytes,
    owner: str = "",
    mode: int = 0,
    sudo: bool = True,
    scratch_dir: str = SCRATCH_DIR,
) -> str:
    """Build the shell command that installs content at path.

    Args:
        path: Destination path on the remote host
        content: File content (str is encoded as UTF-8)
        owner: chown spec for the file; skipped when empty
        mode: Permission bits, e.g. 0o644; skipped when not positive
        sudo: Prefix privileged steps with sudo
        scratch_dir: Directory holding the temporary file

    Returns:
        Single command string for the remote shell

    Raises:
        TypeError: If content is neither str nor bytes
    """
    data = content_bytes(content)
    encoded = encode_payload(data)
    tmp_path = quote_arg(temp_path_for(data, scratch_dir))
    target = quote_arg(path)
    parent = quote_arg(posixpath.dirname(path) or ".")
    priv = sudo_prefix(sudo)

    steps = [
        f"{priv}mkdir -p {parent}",
        f"echo {encoded} | base64 -d | gunzip | {priv}tee {tmp_path} > /dev/null",
    ]
    if owner:
        steps.append(f"{priv}chown {quote_arg(owner)} {tmp_path}")
    if mode > 0:
        steps.append(f"{priv}chmod {mode:o} {tmp_path}")
    steps.append(f"{priv}mv {tmp_path} {target}")

    return " && ".join(steps)
