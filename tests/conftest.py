# tests/conftest.py
import logging

import pytest

from src.controllers.SpeechController import SpeechController
from src.types import LocaleName
from tests.engine_fixture import FakeRecognitionEngine


@pytest.fixture
def fake_engine():
    """Available engine offering en_US and de_DE, with en_US as system locale."""
    return FakeRecognitionEngine(
        available=True,
        locales=[LocaleName('en_US', 'English (US)'), LocaleName('de_DE', 'Deutsch')],
        system_locale='en_US',
    )


@pytest.fixture
def controller(fake_engine):
    """SpeechController over fake_engine with default configuration."""
    return SpeechController(fake_engine, config={})


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level changed by setup_logging()."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
