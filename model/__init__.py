"""Модель конфигурации nginx с сохранением исходной разметки."""
from model.document import Document, Location, Server, Upstream
from model.errors import (
    ConfigReadError,
    ConfigWriteError,
    MalformedConfigError,
    NginxConfigError,
    NotFoundError,
)
from model.host_port import DEFAULT_HTTP_PORT, HostPort

__all__ = [
    "ConfigReadError",
    "ConfigWriteError",
    "DEFAULT_HTTP_PORT",
    "Document",
    "HostPort",
    "Location",
    "MalformedConfigError",
    "NginxConfigError",
    "NotFoundError",
    "Server",
    "Upstream",
]
