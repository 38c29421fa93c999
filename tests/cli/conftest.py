import functools
import logging

import click.testing
import pytest

from kubetype.cli import main
from kubetype.engines.loggers import ObjectFormatter
from kubetype.structs.credentials import ConnectionInfo


@pytest.fixture(autouse=True)
def _clear_own_handlers():
    logger = logging.getLogger()
    original_handlers = logger.handlers[:]
    original_level = logger.level
    yield
    logger.handlers[:] = [
        handler for handler in logger.handlers
        if handler in original_handlers or not isinstance(handler.formatter, ObjectFormatter)
    ]
    logger.setLevel(original_level)


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture()
def login(mocker):
    info = ConnectionInfo(server='http://localhost:1', default_namespace='default')
    return mocker.patch('kubetype.clients.login.login', return_value=info)
