import logging

import pytest
import typer

from utils.log import configure_logging


def test_configure_logging_level():
    """Уровень задаётся без учёта регистра"""
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING
    configure_logging("ERROR")
    assert logging.getLogger().level == logging.ERROR
    assert logging.getLogger("urllib3").level == logging.ERROR


def test_configure_logging_empty_level():
    """Пустой уровень означает WARNING"""
    configure_logging("")
    assert logging.getLogger().level == logging.WARNING


@pytest.mark.parametrize("level", ["loud", "BASIC_FORMAT"])
def test_configure_logging_bad_level(level):
    """Неизвестный уровень - typer.BadParameter"""
    with pytest.raises(typer.BadParameter):
        configure_logging(level)
