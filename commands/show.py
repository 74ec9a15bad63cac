from typing import Optional

import typer

from commands.common import load_document
from config.config_loader import get_config
from exporter.json_yaml import format_document, print_export
from exporter.nginx_conf import format_nginx_config


def show(
    config_path: Optional[str] = typer.Argument(None, help="Путь или URL к nginx.conf (если не указан, используется из конфига)"),
    json: bool = typer.Option(False, "--json", help="Экспортировать структуру в JSON"),
    yaml: bool = typer.Option(False, "--yaml", help="Экспортировать структуру в YAML"),
):
    """
    Разбирает nginx.conf и выводит его обратно.

    Без опций вывод совпадает с исходным файлом байт в байт.

    Пример:
        nginx-roundtrip show /etc/nginx/nginx.conf
        nginx-roundtrip show http://config-host/nginx.conf --json
    """
    document = load_document(config_path)

    format_type = get_config().get_output_format()
    if json:
        format_type = 'json'
    elif yaml:
        format_type = 'yaml'

    if format_type in ('json', 'yaml'):
        print_export(format_document(document), format_type)
    else:
        typer.echo(format_nginx_config(document), nl=False)
