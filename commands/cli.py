from typing import Optional

import typer

from commands.server import app as server_app
from commands.show import show
from commands.tree import tree
from commands.upstream import app as upstream_app
from config.config_loader import get_config
from utils.log import configure_logging

app = typer.Typer(help="nginx-roundtrip — правка upstream/server/location в nginx.conf без потери разметки")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Уровень логирования: DEBUG, INFO, WARNING, ERROR, CRITICAL"),
):
    configure_logging(log_level or get_config().get_log_level())


app.command()(show)
app.command()(tree)
app.add_typer(upstream_app, name="upstream", help="Правка upstream блоков")
app.add_typer(server_app, name="server", help="Правка server и location блоков")

if __name__ == "__main__":
    app()
