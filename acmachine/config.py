"""Create-flag resolution: CLI flag > environment variable > YAML config file > flag default."""

import argparse
import logging
import os

import yaml

from acmachine.drivers.base import BoolFlag, DriverOptions

logger = logging.getLogger(__name__)


def flag_option(flag):
    """Command-line spelling of a flag name (ac_ssh_key -> --ac-ssh-key)."""
    return "--" + flag.name.replace("_", "-")


def add_flag_arguments(parser, flags):
    """Register driver create flags on an argparse parser.

    Defaults stay ``None`` so resolution can tell "not given" apart from an
    explicit value.
    """
    for flag in flags:
        help_text = flag.usage
        if flag.env_var:
            help_text += f" (env: {flag.env_var})"
        if isinstance(flag, BoolFlag):
            parser.add_argument(flag_option(flag), dest=flag.name, action=argparse.BooleanOptionalAction, default=None, help=help_text)
        else:
            if flag.value not in ("", None):
                help_text += f" (default: {flag.value})"
            parser.add_argument(flag_option(flag), dest=flag.name, default=None, help=help_text)


def load_config_file(path):
    """Load a YAML mapping of flag names to values.

    Keys may use dashes or underscores, with or without a leading ``--``.

    Raises:
        ValueError: the file does not hold a mapping.
    """
    with open(os.path.expanduser(path)) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping of flag names to values")
    return {str(k).lstrip("-").replace("-", "_"): v for k, v in data.items()}


def resolve_flag_values(flags, cli_values, environ=None, file_values=None):
    """Merge flag sources into a single name -> value dict."""
    environ = os.environ if environ is None else environ
    file_values = file_values or {}
    resolved = {}
    for flag in flags:
        cli = cli_values.get(flag.name)
        if cli is not None:
            resolved[flag.name] = cli
        elif flag.env_var and environ.get(flag.env_var):
            resolved[flag.name] = environ[flag.env_var]
        elif flag.name in file_values:
            resolved[flag.name] = file_values[flag.name]
        else:
            resolved[flag.name] = flag.value

    unknown = sorted(set(file_values) - {f.name for f in flags})
    if unknown:
        logger.warning(f"Warning: ignoring unknown config keys: {', '.join(unknown)}")
    return resolved


def build_driver_options(flags, cli_values, config_path=None, environ=None):
    """Resolve all sources and wrap them for ``Driver.set_config_from_flags``."""
    file_values = load_config_file(config_path) if config_path else {}
    values = resolve_flag_values(flags, cli_values, environ=environ, file_values=file_values)
    return DriverOptions(values, flags)
