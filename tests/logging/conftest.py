import logging

import pytest

from kubetype.engines.loggers import ObjectFormatter


def _own_handlers():
    return [handler for handler in logging.getLogger().handlers
            if isinstance(handler.formatter, ObjectFormatter)]


@pytest.fixture(autouse=True)
def _restore_logging():
    """ `configure` changes the global logging setup: undo it after every test. """
    root = logging.getLogger()
    root_level = root.level
    lowlevel = {name: (logging.getLogger(name).handlers[:], logging.getLogger(name).propagate)
                for name in ['aiohttp', 'asyncio']}
    yield
    for handler in _own_handlers():
        root.removeHandler(handler)
    root.setLevel(root_level)
    for name, (handlers, propagate) in lowlevel.items():
        logging.getLogger(name).handlers[:] = handlers
        logging.getLogger(name).propagate = propagate


@pytest.fixture()
def own_handlers():
    return _own_handlers
