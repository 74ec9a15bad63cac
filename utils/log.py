"""
Настройка логирования для CLI.
"""
import logging

import typer

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """
    Настраивает корневой логгер (stderr).

    Raises:
        typer.BadParameter: Неизвестный уровень логирования
    """
    normalized = (level or "WARNING").strip().upper()
    logging_level = getattr(logging, normalized, None)
    if not isinstance(logging_level, int):
        raise typer.BadParameter(
            "--log-level должен быть одним из: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )

    logging.basicConfig(level=logging_level, format=LOG_FORMAT, force=True)
    logging.getLogger("urllib3").setLevel(max(logging_level, logging.WARNING))
