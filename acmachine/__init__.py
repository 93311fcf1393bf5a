"""acmachine: create, inspect and tear down ArubaCloud machines."""

__version__ = "0.1.0"
