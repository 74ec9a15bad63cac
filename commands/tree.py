from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree as RichTree

from commands.common import load_document
from model.document import Document

console = Console()


def _build_tree(document: Document, root: RichTree):
    for upstream in document.upstreams:
        label = f"[bold magenta]upstream[/bold magenta] {escape(upstream.name)}"
        if upstream.method:
            label += f" [dim]({escape(upstream.method)})[/dim]"
        node = root.add(label)
        for hp in upstream.host_ports:
            node.add(f"[green]server[/green] {escape(str(hp))}")
    for server in document.servers:
        node = root.add(f"[bold]server[/bold] {escape(server.name)}:{server.listen}")
        for location in server.locations:
            node.add(
                f"[cyan]location[/cyan] {escape(location.name)} -> {escape(location.proxy_pass)}"
            )


def tree(
    config_path: Optional[str] = typer.Argument(None, help="Путь или URL к nginx.conf (если не указан, используется из конфига)"),
):
    """
    Визуализирует upstream, server и location из nginx.conf в виде дерева.

    Пример:
        nginx-roundtrip tree /etc/nginx/nginx.conf
        nginx-roundtrip tree  # Использует путь из конфига
    """
    document = load_document(config_path)
    root = RichTree("[bold blue]nginx.conf[/bold blue]")
    _build_tree(document, root)
    console.print(root)
