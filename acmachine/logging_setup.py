"""CLI logging setup: plain %(message)s output, debug detail on request."""

import logging
import sys

from acmachine.redact import SecretRedactingFilter


def setup_cli_logging(debug=False):
    """Configure the root logger for CLI commands.

    Info output reads like print(). With *debug*, records also carry the
    logger name and httpx request logging is let through.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    fmt = "%(levelname)s %(name)s: %(message)s" if debug else "%(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    # Filter on the handler so records from child loggers are redacted too
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.INFO if debug else logging.WARNING)
