"""Shared pytest fixtures for all test modules."""

import os
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

import acmachine.redact as redact_module
from acmachine.api.client import ArubaCloudClient
from acmachine.drivers.arubacloud import Driver
from fakes import MACHINE_NAME, fake_generate_ssh_key

PROJECT_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture(scope="session")
def project_root():
    """Absolute path to the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def run_cli(project_root):
    """Return a callable that invokes the acmachine CLI as a subprocess."""

    def _run(*args, env=None):
        result = subprocess.run(
            [sys.executable, "-m", "acmachine.acmachine", *args],
            capture_output=True,
            text=True,
            cwd=project_root,
            env={**os.environ, **(env or {})},
        )
        return result.returncode, result.stdout, result.stderr

    return _run


@pytest.fixture(autouse=True)
def no_sleep():
    """Polling never really sleeps in tests."""
    with patch("acmachine.utils.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture(autouse=True)
def reset_redaction():
    redact_module._registered.clear()
    redact_module._patterns = None
    yield
    redact_module._registered.clear()
    redact_module._patterns = None


@pytest.fixture
def fake_client():
    return MagicMock(spec=ArubaCloudClient)


@pytest.fixture
def fake_keygen():
    with patch("acmachine.drivers.arubacloud.generate_ssh_key", side_effect=fake_generate_ssh_key) as mock_keygen:
        yield mock_keygen


@pytest.fixture
def driver(tmp_path, fake_client):
    """An ArubaCloud driver wired to a mocked API client."""
    d = Driver(
        machine_name=MACHINE_NAME,
        store_path=str(tmp_path),
        username="ARU-xxxx",
        password="account-password",
        admin_password="root-password",
    )
    d._client = fake_client
    return d
