"""
Вывод Document обратно в текст nginx.conf.
"""
import logging
from pathlib import Path
from typing import Union

from model.document import Document
from model.errors import ConfigWriteError

logger = logging.getLogger(__name__)


def format_nginx_config(document: Document) -> str:
    """
    Собирает текст конфига. Нетронутые части выводятся байт в байт как в исходнике.
    """
    return str(document)


def write_nginx_config(document: Document, path: Union[str, Path]) -> str:
    """
    Записывает конфиг в файл в UTF-8.

    Returns:
        Записанный текст

    Raises:
        ConfigWriteError: Файл не удалось записать
    """
    text = format_nginx_config(document)
    try:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
    except OSError as e:
        raise ConfigWriteError(f"Не удалось записать конфиг в '{path}': {e}") from e
    logger.debug("Записано %d символов в %s", len(text), path)
    return text
