"""Create command: provision a new machine with a registered driver."""

import logging

from acmachine.commands import HANDLED_ERRORS, fail, get_store, register_driver_secrets, validate_machine_name
from acmachine.config import add_flag_arguments, build_driver_options
from acmachine.drivers import available_drivers, new_driver

logger = logging.getLogger(__name__)

DEFAULT_DRIVER = "arubacloud"


def handle_create(args):
    """CLI handler for 'create'."""
    store = get_store(args)
    try:
        name = validate_machine_name(args.name)
        if store.exists(name):
            fail(f"Host already exists: '{name}'")
        driver = new_driver(args.driver, name, str(store.path))
    except HANDLED_ERRORS as e:
        fail(e)

    with driver:
        try:
            options = build_driver_options(driver.get_create_flags(), vars(args), config_path=args.config)
            driver.set_config_from_flags(options)
            register_driver_secrets(driver)

            logger.info("Running pre-create checks...")
            driver.pre_create_check()
        except HANDLED_ERRORS as e:
            fail(e)

        # Saved before create so a half-created machine can still be removed
        store.save(driver)
        logger.info(f"Creating machine '{name}' ({driver.driver_name()})...")
        try:
            driver.create()
        except HANDLED_ERRORS as e:
            store.save(driver)
            logger.error(f"Error creating machine: {e}")
            logger.error(f"You may want to remove it with 'acmachine rm -y {name}'.")
            fail(e)
        store.save(driver)

    logger.info(f"Machine '{name}' is running.")
    logger.info(f"IP:   {driver.get_ssh_hostname()}")
    logger.info(f"URL:  {driver.get_url()}")
    logger.info(f"SSH:  acmachine ssh {name}")


def register_create_command(subparsers):
    """Register the 'create' subcommand with every known driver's flags."""
    parser = subparsers.add_parser("create", help="Create a machine")
    parser.add_argument("-d", "--driver", default=DEFAULT_DRIVER, help=f"Driver to create the machine with (default: {DEFAULT_DRIVER})")
    parser.add_argument("--config", default=None, help="YAML file with default values for driver flags")
    parser.add_argument("name", help="Machine name")

    for driver_name in available_drivers():
        group = parser.add_argument_group(f"{driver_name} driver options")
        add_flag_arguments(group, new_driver(driver_name, "", "").get_create_flags())

    parser.set_defaults(func=handle_create)
