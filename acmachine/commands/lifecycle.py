"""Lifecycle commands: start, stop, restart, kill, rm."""

import logging

from acmachine.commands import HANDLED_ERRORS, fail, get_store, load_machine

logger = logging.getLogger(__name__)

# command -> (driver method, help, message when done)
_ACTIONS = {
    "start": ("start", "Start a machine", "Started machine '{}'."),
    "stop": ("stop", "Stop a machine", "Stopped machine '{}'."),
    "restart": ("restart", "Restart a machine", "Restarted machine '{}'."),
    "kill": ("kill", "Power off a machine", "Killed machine '{}'."),
}


def handle_action(args):
    """CLI handler for start/stop/restart/kill."""
    method, _, done_msg = _ACTIONS[args.command]
    try:
        with load_machine(args) as driver:
            getattr(driver, method)()
    except HANDLED_ERRORS as e:
        fail(e)
    get_store(args).save(driver)
    logger.info(done_msg.format(args.name))


def handle_rm(args):
    """CLI handler for 'rm': delete the remote server, then the local machine dir."""
    store = get_store(args)
    if not args.yes:
        answer = input(f"About to remove {args.name}. Are you sure? (y/n): ")
        if answer.strip().lower() not in ("y", "yes"):
            logger.info("Aborting.")
            return

    try:
        driver = load_machine(args)
    except HANDLED_ERRORS as e:
        fail(e)

    with driver:
        try:
            driver.remove()
        except HANDLED_ERRORS as e:
            if not args.force:
                fail(e)
            logger.warning(f"Warning: removing remote server failed ({e}); removing local config anyway (--force).")

    store.remove(args.name)
    logger.info(f"Successfully removed {args.name}")


def register_lifecycle_commands(subparsers):
    """Register start/stop/restart/kill/rm."""
    for command, (_, help_text, _) in _ACTIONS.items():
        parser = subparsers.add_parser(command, help=help_text)
        parser.add_argument("name", help="Machine name")
        parser.set_defaults(func=handle_action)

    parser = subparsers.add_parser("rm", help="Remove a machine (deletes the remote server)")
    parser.add_argument("name", help="Machine name")
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    parser.add_argument("-f", "--force", action="store_true", help="Remove local config even if deleting the server fails")
    parser.set_defaults(func=handle_rm)
