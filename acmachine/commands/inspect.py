"""Read-only commands: ls, status, url, ip, inspect, ssh."""

import json
import logging
import subprocess
import sys

from acmachine.commands import HANDLED_ERRORS, fail, get_store, load_machine
from acmachine.ssh import ssh_base_args

logger = logging.getLogger(__name__)


def handle_ls(args):
    """CLI handler for 'ls'."""
    store = get_store(args)
    rows = [("NAME", "DRIVER", "STATE", "URL")]
    for name in store.list():
        try:
            driver = store.load(name)
        except HANDLED_ERRORS as e:
            logger.warning(f"Warning: cannot load machine '{name}': {e}")
            continue
        state = "-"
        if not args.quiet:
            try:
                with driver:
                    state = str(driver.get_state())
            except HANDLED_ERRORS as e:
                logger.debug(f"State of '{name}' unavailable: {e}")
                state = "Error"
        rows.append((name, driver.driver_name(), state, driver.get_url()))

    if args.quiet:
        for row in rows[1:]:
            logger.info(row[0])
        return

    widths = [max(len(r[i]) for r in rows) for i in range(len(rows[0]))]
    for row in rows:
        logger.info("   ".join(col.ljust(w) for col, w in zip(row, widths)).rstrip())


def handle_status(args):
    """CLI handler for 'status'."""
    try:
        with load_machine(args) as driver:
            state = driver.get_state()
    except HANDLED_ERRORS as e:
        fail(e)
    logger.info(str(state))


def handle_url(args):
    """CLI handler for 'url'."""
    try:
        url = load_machine(args).get_url()
    except HANDLED_ERRORS as e:
        fail(e)
    logger.info(url)


def handle_ip(args):
    """CLI handler for 'ip'."""
    try:
        ip = load_machine(args).get_ip()
    except HANDLED_ERRORS as e:
        fail(e)
    logger.info(ip)


def handle_inspect(args):
    """CLI handler for 'inspect': dump the stored driver snapshot as JSON."""
    try:
        driver = load_machine(args)
    except HANDLED_ERRORS as e:
        fail(e)
    logger.info(json.dumps({"DriverName": driver.driver_name(), "Driver": driver.to_dict()}, indent=2))


def handle_ssh(args):
    """CLI handler for 'ssh': open a shell or run a command on the machine."""
    try:
        driver = load_machine(args)
        address = f"{driver.get_ssh_username()}@{driver.get_ip()}"
    except HANDLED_ERRORS as e:
        fail(e)

    cmd = ssh_base_args(address, driver.get_ssh_key_path(), driver.get_ssh_port())
    cmd.extend(args.remote_command)
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        rc = subprocess.run(cmd).returncode
    except FileNotFoundError:
        fail("'ssh' not found. Is it installed and on PATH?")
    sys.exit(rc)


def register_inspect_commands(subparsers):
    """Register ls/status/url/ip/inspect/ssh."""
    parser = subparsers.add_parser("ls", help="List machines")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only print machine names")
    parser.set_defaults(func=handle_ls)

    for command, handler, help_text in (
        ("status", handle_status, "Get the state of a machine"),
        ("url", handle_url, "Get the docker URL of a machine"),
        ("ip", handle_ip, "Get the IP address of a machine"),
        ("inspect", handle_inspect, "Show the stored configuration of a machine"),
    ):
        parser = subparsers.add_parser(command, help=help_text)
        parser.add_argument("name", help="Machine name")
        parser.set_defaults(func=handler)

    parser = subparsers.add_parser("ssh", help="Log into or run a command on a machine with SSH")
    parser.add_argument("name", help="Machine name")
    parser.add_argument("remote_command", nargs="*", help="Command to run instead of a login shell")
    parser.set_defaults(func=handle_ssh)
