"""
Команды для правки server и location блоков.
"""
import logging
from typing import List, Optional

import typer

from commands.common import CONFIG_OPTION_HELP, emit, load_document, reported_errors, resolve_config_path
from model.document import Location, Server
from model.host_port import DEFAULT_HTTP_PORT, HostPort

app = typer.Typer(help="Правка server и location блоков.")
logger = logging.getLogger(__name__)

CONFIG = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP)
IN_PLACE = typer.Option(False, "--in-place", "-i", help="Записать результат в исходный файл")
OUTPUT = typer.Option(None, "--output", "-o", help="Записать результат в файл")
LISTEN = typer.Option(DEFAULT_HTTP_PORT, "--listen", "-l", help="Порт listen")


def _parse_location(value: str) -> Location:
    path, sep, target = value.partition("=")
    if not sep or not path or not target:
        raise typer.BadParameter(f"Ожидалось PATH=PROXY_PASS, получено: {value!r}")
    return Location.named(path, target)


@app.command("add")
def add(
    name: str = typer.Argument(..., help="server_name"),
    listen: int = LISTEN,
    locations: Optional[List[str]] = typer.Option(None, "--location", help="location в виде PATH=PROXY_PASS (можно несколько раз)"),
    config_path: Optional[str] = CONFIG,
    in_place: bool = IN_PLACE,
    output: Optional[str] = OUTPUT,
):
    """
    Добавляет server. Существующий server с той же парой name/listen не заменяется.

    Пример:
        nginx-roundtrip server add worker03 --location /=http://localhost:8380/ -c nginx.conf
    """
    config_path = resolve_config_path(config_path)
    document = load_document(config_path)
    server = Server.named(name).with_listen(listen)
    for value in locations or []:
        server.add_location(_parse_location(value))
    if document.find_server(name, listen):
        logger.warning("server %s:%d уже есть в конфиге, добавлен дубликат", name, listen)
    document.add_server(server)
    emit(document, config_path, in_place, output)


@app.command("remove")
def remove(
    name: str = typer.Argument(..., help="server_name"),
    listen: int = LISTEN,
    config_path: Optional[str] = CONFIG,
    in_place: bool = IN_PLACE,
    output: Optional[str] = OUTPUT,
):
    """
    Удаляет все server с указанной парой server_name/listen.
    """
    config_path = resolve_config_path(config_path)
    document = load_document(config_path)
    if document.find_server(name, listen) is None:
        logger.warning("server %s:%d не найден, конфиг не изменён", name, listen)
    document.remove_server(HostPort(name, listen))
    emit(document, config_path, in_place, output)


@app.command("add-location")
def add_location(
    name: str = typer.Argument(..., help="server_name"),
    path: str = typer.Argument(..., help="Шаблон пути location"),
    proxy_pass: str = typer.Argument(..., help="Адрес proxy_pass"),
    listen: int = LISTEN,
    config_path: Optional[str] = CONFIG,
    in_place: bool = IN_PLACE,
    output: Optional[str] = OUTPUT,
):
    """
    Добавляет location в server. location с тем же путём заменяется.

    Пример:
        nginx-roundtrip server add-location worker /api http://backend/api -c nginx.conf -i
    """
    config_path = resolve_config_path(config_path)
    document = load_document(config_path)
    with reported_errors():
        server = document.get_server(name, listen)
    server.remove_location(path)
    server.add_location(Location.named(path, proxy_pass))
    emit(document, config_path, in_place, output)
