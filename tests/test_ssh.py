"""Tests for SSH key helpers and ssh argument building."""

import os
import stat
from unittest.mock import MagicMock, patch

import pytest

from acmachine.errors import DriverError
from acmachine.ssh import copy_ssh_key, generate_ssh_key, read_public_key, ssh_base_args


# ── generate_ssh_key ──────────────────────────────────────────────


@patch("acmachine.ssh.subprocess.run")
def test_generate_ssh_key_runs_ssh_keygen(mock_run, tmp_path):
    key = tmp_path / "id_rsa"

    def keygen(cmd, **kwargs):
        key.write_text("PRIVATE")
        return MagicMock(returncode=0, stderr="")

    mock_run.side_effect = keygen

    generate_ssh_key(str(key))

    cmd = mock_run.call_args[0][0]
    assert cmd[0] == "ssh-keygen"
    assert cmd[cmd.index("-t") + 1] == "rsa"
    assert cmd[cmd.index("-N") + 1] == ""
    assert cmd[-2:] == ["-f", str(key)]
    assert stat.S_IMODE(os.stat(key).st_mode) == 0o600


@patch("acmachine.ssh.subprocess.run")
def test_generate_ssh_key_keeps_existing(mock_run, tmp_path):
    key = tmp_path / "id_rsa"
    key.write_text("EXISTING")

    generate_ssh_key(str(key))

    mock_run.assert_not_called()
    assert key.read_text() == "EXISTING"


@patch("acmachine.ssh.subprocess.run")
def test_generate_ssh_key_failure(mock_run, tmp_path):
    mock_run.return_value = MagicMock(returncode=1, stderr="Saving key failed: Permission denied\n")

    with pytest.raises(DriverError, match="ssh-keygen failed: Saving key failed"):
        generate_ssh_key(str(tmp_path / "id_rsa"))


@patch("acmachine.ssh.subprocess.run", side_effect=FileNotFoundError)
def test_generate_ssh_key_missing_binary(mock_run, tmp_path):
    with pytest.raises(DriverError, match="'ssh-keygen' not found"):
        generate_ssh_key(str(tmp_path / "id_rsa"))


# ── copy / read ───────────────────────────────────────────────────


def test_copy_ssh_key_sets_permissions(tmp_path):
    src = tmp_path / "src"
    src.write_text("KEY")
    os.chmod(src, 0o644)
    dst = tmp_path / "dst"

    copy_ssh_key(str(src), str(dst))

    assert dst.read_text() == "KEY"
    assert stat.S_IMODE(os.stat(dst).st_mode) == 0o600


def test_copy_ssh_key_missing_source(tmp_path):
    with pytest.raises(DriverError, match="unable to copy ssh key"):
        copy_ssh_key(str(tmp_path / "nope"), str(tmp_path / "dst"))


def test_read_public_key_strips(tmp_path):
    (tmp_path / "id_rsa.pub").write_text("ssh-rsa AAAA me@host\n")
    assert read_public_key(str(tmp_path / "id_rsa")) == "ssh-rsa AAAA me@host"


# ── ssh_base_args ─────────────────────────────────────────────────


def test_ssh_base_args_default_port():
    args = ssh_base_args("root@1.2.3.4", "/keys/id_rsa", 22)
    assert args[0] == "ssh"
    assert args[-1] == "root@1.2.3.4"
    assert "-p" not in args
    assert args[args.index("-i") + 1] == "/keys/id_rsa"


def test_ssh_base_args_custom_port_no_key():
    args = ssh_base_args("root@1.2.3.4", None, 2222)
    assert "-i" not in args
    assert args[args.index("-p") + 1] == "2222"
