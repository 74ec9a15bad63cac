"""
Общие функции команд: загрузка конфига, вывод результата, обработка ошибок.
"""
import logging
import sys
from contextlib import contextmanager
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from config.config_loader import get_config
from exporter.nginx_conf import format_nginx_config, write_nginx_config
from model.document import Document
from model.errors import NginxConfigError
from model.host_port import HostPort
from parser.nginx_parser import parse_nginx_config

console = Console()
logger = logging.getLogger(__name__)

CONFIG_OPTION_HELP = "Путь или URL к nginx.conf (по умолчанию defaults.nginx_config_path из конфига)"


@contextmanager
def reported_errors():
    """Печатает ошибки разбора/поиска/ввода-вывода и завершает команду с кодом 1."""
    try:
        yield
    except NginxConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


def resolve_config_path(config_path: Optional[str]) -> str:
    if config_path:
        return config_path
    config_path = get_config().get_nginx_config_path()
    if not config_path:
        console.print("[red]Путь к nginx.conf не указан и не задан в конфиге.[/red]")
        console.print("[yellow]Укажите путь через аргумент или настройте defaults.nginx_config_path.[/yellow]")
        sys.exit(1)
    return config_path


def load_document(config_path: Optional[str]) -> Document:
    config_path = resolve_config_path(config_path)
    with reported_errors():
        return parse_nginx_config(config_path)


def emit(document: Document, config_path: str, in_place: bool, output: Optional[str]):
    """
    Выводит изменённый конфиг: в исходный файл, в output или в stdout.
    """
    with reported_errors():
        if in_place:
            write_nginx_config(document, config_path)
            logger.info("Конфиг %s обновлён", config_path)
        elif output:
            write_nginx_config(document, output)
            logger.info("Конфиг записан в %s", output)
        else:
            typer.echo(format_nginx_config(document), nl=False)


def parse_host_port(value: str) -> HostPort:
    try:
        return HostPort.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))
