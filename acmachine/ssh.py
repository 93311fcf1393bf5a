"""SSH helpers: key pair generation/import and ssh command construction."""

import logging
import os
import shutil
import subprocess

from acmachine.errors import DriverError

logger = logging.getLogger(__name__)

KEY_BITS = 2048


def generate_ssh_key(path):
    """Generate an RSA key pair at *path* (private) and *path*.pub with ssh-keygen.

    An existing key at *path* is left untouched.
    """
    if os.path.exists(path):
        logger.debug(f"SSH key {path} already exists, reusing it")
        return

    cmd = ["ssh-keygen", "-q", "-t", "rsa", "-b", str(KEY_BITS), "-N", "", "-C", "acmachine", "-f", path]
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        raise DriverError("'ssh-keygen' not found. Is it installed and on PATH?") from None
    if result.returncode != 0:
        raise DriverError(f"ssh-keygen failed: {result.stderr.strip()}")
    os.chmod(path, 0o600)


def copy_ssh_key(src, dst):
    """Copy a key file and restrict it to owner read/write."""
    try:
        shutil.copyfile(src, dst)
    except OSError as e:
        raise DriverError(f"unable to copy ssh key: {e}") from e
    try:
        os.chmod(dst, 0o600)
    except OSError as e:
        raise DriverError(f"unable to set permissions on the ssh key: {e}") from e


def read_public_key(private_key_path):
    with open(f"{private_key_path}.pub") as f:
        return f.read().strip()


def ssh_base_args(address, ssh_key, ssh_port):
    """Build base SSH arguments for connecting to a machine."""
    args = [
        "ssh",
        "-o", "StrictHostKeyChecking=no",
        "-o", "UserKnownHostsFile=/dev/null",
        "-o", "LogLevel=quiet",
        "-o", "ConnectionAttempts=3",
        "-o", "ConnectTimeout=10",
    ]
    if ssh_key:
        args += ["-i", ssh_key]
    if ssh_port and ssh_port != 22:
        args += ["-p", str(ssh_port)]
    args.append(address)
    return args
