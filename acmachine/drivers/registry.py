"""Driver registry: how the host tool finds a driver by name.

Built-in drivers register themselves on import; third-party drivers are
discovered through the ``acmachine.drivers`` entry-point group.
"""

import logging
from importlib.metadata import entry_points

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "acmachine.drivers"

_drivers = {}


def register_driver(name, factory):
    """Register *factory* (a Driver class or callable returning one) under *name*."""
    if name in _drivers and _drivers[name] is not factory:
        logger.debug(f"Driver '{name}' re-registered")
    _drivers[name] = factory


def _load_entry_points():
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        if ep.name in _drivers:
            continue
        try:
            register_driver(ep.name, ep.load())
        except ImportError as e:
            logger.warning(f"Warning: could not load driver '{ep.name}': {e}")


def available_drivers():
    """Sorted names of all known drivers."""
    _load_entry_points()
    return sorted(_drivers)


def new_driver(name, machine_name, store_path):
    """Instantiate the driver registered under *name* for one machine.

    Raises:
        ValueError: no driver by that name.
    """
    if name not in _drivers:
        _load_entry_points()
    factory = _drivers.get(name)
    if factory is None:
        raise ValueError(f"Unknown driver: {name} (available: {', '.join(available_drivers())})")
    return factory(machine_name=machine_name, store_path=store_path)


def load_driver(name, data):
    """Rebuild a driver of type *name* from a stored snapshot."""
    if name not in _drivers:
        _load_entry_points()
    factory = _drivers.get(name)
    if factory is None:
        raise ValueError(f"Unknown driver: {name}")
    return factory.from_dict(data)
