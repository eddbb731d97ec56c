"""Tests for the file deployment command builder."""

import base64
import gzip
import hashlib
import re
import shlex

import pytest

from sshdeploy.services.deploy import (
    build_deploy_command,
    checksum,
    encode_payload,
    temp_path_for,
)

_PAYLOAD_RE = re.compile(r"echo (\S+) \| base64 -d \| gunzip \| ")
_TEMP_RE = re.compile(r"/tmp/gossh\.([0-9a-f]{64})")


def _payload(command: str) -> bytes:
    match = _PAYLOAD_RE.search(command)
    assert match, command
    return gzip.decompress(base64.b64decode(match.group(1)))


def _digest(command: str) -> str:
    match = _TEMP_RE.search(command)
    assert match, command
    return match.group(1)


def test_hello_config_example() -> None:
    """Mode without owner gives chmod and mv but no chown."""
    digest = hashlib.sha256(b"hello\n").hexdigest()

    command = build_deploy_command("/etc/app/config", "hello\n", "", 0o644)

    assert f"sudo chmod 644 /tmp/gossh.{digest}" in command
    assert command.endswith(f"sudo mv /tmp/gossh.{digest} /etc/app/config")
    assert "chown" not in command
    assert command.startswith("sudo mkdir -p /etc/app && ")


def test_full_pipeline_order() -> None:
    """Steps run in install order joined by &&."""
    content = b"payload"
    tmp = temp_path_for(content)

    command = build_deploy_command("/srv/app/bin", content, "deploy:deploy", 0o755)
    steps = command.split(" && ")

    assert steps[0] == "sudo mkdir -p /srv/app"
    assert steps[1].startswith("echo ")
    assert steps[1].endswith(f"| base64 -d | gunzip | sudo tee {tmp} > /dev/null")
    assert steps[2] == f"sudo chown deploy:deploy {tmp}"
    assert steps[3] == f"sudo chmod 755 {tmp}"
    assert steps[4] == f"sudo mv {tmp} /srv/app/bin"


@pytest.mark.parametrize(
    "content",
    [b"", b"hello\n", b"\x00\x01\xff" * 1000, "unicode ✓ text\n", b"a" * 100_000],
)
def test_digest_matches_uncompressed_content(content: str | bytes) -> None:
    """Embedded digest is the SHA-256 of the original content."""
    raw = content.encode("utf-8") if isinstance(content, str) else content

    command = build_deploy_command("/opt/file", content)

    assert _digest(command) == hashlib.sha256(raw).hexdigest()
    assert _payload(command) == raw


def test_identical_inputs_give_identical_commands() -> None:
    """Encoding is deterministic so repeated deploys converge."""
    first = build_deploy_command("/etc/motd", "welcome\n", "root", 0o644)
    second = build_deploy_command("/etc/motd", "welcome\n", "root", 0o644)

    assert first == second
    assert encode_payload("welcome\n") == encode_payload(b"welcome\n")


def test_different_content_gives_different_temp_path() -> None:
    """Temp names are content addressed."""
    assert temp_path_for("a") != temp_path_for("b")
    assert temp_path_for("a") == f"/tmp/gossh.{checksum('a')}"


def test_temp_path_independent_of_destination() -> None:
    """Same content at two destinations shares the temp name."""
    one = build_deploy_command("/etc/one", "same")
    two = build_deploy_command("/etc/two", "same")

    assert _digest(one) == _digest(two)


def test_zero_mode_skips_chmod() -> None:
    """Mode 0 means leave permissions alone."""
    command = build_deploy_command("/etc/x", "x", owner="nobody", mode=0)

    assert "chmod" not in command
    assert "sudo chown nobody " in command


def test_without_sudo() -> None:
    """sudo can be disabled for paths the login user owns."""
    command = build_deploy_command("/home/me/file", "x", owner="me", mode=0o600, sudo=False)

    assert "sudo" not in command
    assert command.startswith("mkdir -p /home/me && ")
    assert "| tee /tmp/gossh." in command
    assert "chmod 600 " in command


def test_custom_scratch_dir() -> None:
    """Temp file can live outside /tmp."""
    command = build_deploy_command("/etc/x", "x", scratch_dir="/var/tmp")

    assert f"/var/tmp/gossh.{checksum('x')}" in command
    assert "/tmp/gossh." not in command.replace("/var/tmp/gossh.", "")


def test_unusual_paths_and_owner_are_quoted() -> None:
    """Spaces and shell syntax in path or owner cannot break the pipeline."""
    path = "/srv/my app/conf; touch pwned"
    owner = "a b"

    command = build_deploy_command(path, "x", owner=owner)
    mv_step = command.split(" && ")[-1]
    chown_step = command.split(" && ")[2]

    assert shlex.split(mv_step)[-1] == path
    assert shlex.split(chown_step)[2] == owner
    assert shlex.split(command.split(" && ")[0]) == ["sudo", "mkdir", "-p", "/srv/my app"]


def test_relative_path_uses_current_directory() -> None:
    """A bare file name still produces a valid mkdir."""
    command = build_deploy_command("notes.txt", "x")

    assert command.startswith("sudo mkdir -p . && ")
    assert command.endswith(" notes.txt")


def test_rejects_non_text_content() -> None:
    """Content must be str or bytes."""
    with pytest.raises(TypeError, match="content must be str or bytes"):
        build_deploy_command("/etc/x", 42)  # type: ignore[arg-type]
