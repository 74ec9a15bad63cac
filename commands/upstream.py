"""
Команды для правки upstream блоков.
"""
import logging
from typing import List, Optional

import typer

from commands.common import CONFIG_OPTION_HELP, emit, load_document, parse_host_port, reported_errors, resolve_config_path
from model.document import Upstream

app = typer.Typer(help="Правка upstream блоков.")
logger = logging.getLogger(__name__)

CONFIG = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP)
IN_PLACE = typer.Option(False, "--in-place", "-i", help="Записать результат в исходный файл")
OUTPUT = typer.Option(None, "--output", "-o", help="Записать результат в файл")


@app.command("add")
def add(
    name: str = typer.Argument(..., help="Имя upstream"),
    method: Optional[str] = typer.Option(None, "--method", "-m", help="Метод балансировки, например least_conn"),
    servers: Optional[List[str]] = typer.Option(None, "--server", "-s", help="Адрес host:port (можно несколько раз)"),
    config_path: Optional[str] = CONFIG,
    in_place: bool = IN_PLACE,
    output: Optional[str] = OUTPUT,
):
    """
    Добавляет upstream. Существующий upstream с тем же именем не заменяется.

    Пример:
        nginx-roundtrip upstream add backend -m least_conn -s 10.0.0.1:8080 -s 10.0.0.2:8080 -c nginx.conf
    """
    config_path = resolve_config_path(config_path)
    document = load_document(config_path)
    upstream = Upstream.named(name).with_method(method)
    for server in servers or []:
        upstream.add_host_port(parse_host_port(server))
    if document.find_upstream(name):
        logger.warning("upstream %s уже есть в конфиге, добавлен дубликат", name)
    document.add_upstream(upstream)
    emit(document, config_path, in_place, output)


@app.command("remove")
def remove(
    name: str = typer.Argument(..., help="Имя upstream"),
    config_path: Optional[str] = CONFIG,
    in_place: bool = IN_PLACE,
    output: Optional[str] = OUTPUT,
):
    """
    Удаляет все upstream с указанным именем.
    """
    config_path = resolve_config_path(config_path)
    document = load_document(config_path)
    if document.find_upstream(name) is None:
        logger.warning("upstream %s не найден, конфиг не изменён", name)
    document.remove_upstream(name)
    emit(document, config_path, in_place, output)


@app.command("add-host")
def add_host(
    name: str = typer.Argument(..., help="Имя upstream"),
    address: str = typer.Argument(..., help="Адрес host:port"),
    config_path: Optional[str] = CONFIG,
    in_place: bool = IN_PLACE,
    output: Optional[str] = OUTPUT,
):
    """
    Добавляет сервер в upstream. Если host уже есть, его порт заменяется.

    Пример:
        nginx-roundtrip upstream add-host backend localhost:8380 -c nginx.conf -i
    """
    config_path = resolve_config_path(config_path)
    document = load_document(config_path)
    host_port = parse_host_port(address)
    with reported_errors():
        document.get_upstream(name).update_host_port(host_port)
    emit(document, config_path, in_place, output)


@app.command("remove-host")
def remove_host(
    name: str = typer.Argument(..., help="Имя upstream"),
    host: str = typer.Argument(..., help="Хост без порта"),
    config_path: Optional[str] = CONFIG,
    in_place: bool = IN_PLACE,
    output: Optional[str] = OUTPUT,
):
    """
    Удаляет сервер из upstream по имени хоста.
    """
    config_path = resolve_config_path(config_path)
    document = load_document(config_path)
    with reported_errors():
        upstream = document.get_upstream(name)
    if not upstream.has_host(host):
        logger.warning("В upstream %s нет хоста %s", name, host)
    upstream.remove_host(host)
    emit(document, config_path, in_place, output)


@app.command("set-port")
def set_port(
    name: str = typer.Argument(..., help="Имя upstream"),
    address: str = typer.Argument(..., help="Текущий адрес host:port"),
    port: int = typer.Argument(..., help="Новый порт"),
    config_path: Optional[str] = CONFIG,
    in_place: bool = IN_PLACE,
    output: Optional[str] = OUTPUT,
):
    """
    Меняет порт сервера. Текущий адрес должен совпадать точно (host и port).

    Пример:
        nginx-roundtrip upstream set-port backend localhost:8180 8181 -c nginx.conf
    """
    config_path = resolve_config_path(config_path)
    document = load_document(config_path)
    host_port = parse_host_port(address)
    with reported_errors():
        document.get_upstream(name).set_port(host_port, port)
    emit(document, config_path, in_place, output)
