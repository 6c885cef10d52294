import logging

import pytest

from app import CONSOLE_HANDLER_NAME, create_app
from app.settings import Settings


def _console_handlers() -> list[logging.Handler]:
    return [handler for handler in logging.getLogger().handlers if handler.get_name() == CONSOLE_HANDLER_NAME]


@pytest.mark.unit
def test_create_app_attaches_single_console_handler(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    create_app(settings=Settings.load())
    create_app(settings=Settings.load())

    handlers = _console_handlers()
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.StreamHandler)
    assert handlers[0].level == logging.WARNING
    assert logging.getLogger().level == logging.WARNING


@pytest.mark.unit
def test_console_handler_follows_info_level(app) -> None:
    handlers = _console_handlers()

    assert len(handlers) == 1
    assert handlers[0].level == logging.INFO
