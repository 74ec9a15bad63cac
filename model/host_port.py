"""
Адрес upstream-сервера вида host:port.
"""
import re
from dataclasses import dataclass, field, replace

DEFAULT_HTTP_PORT = 80

_HOST_PORT_RE = re.compile(r'^(?P<host>[^\s:;]+)(?::(?P<port>\d+))?$')


@dataclass(frozen=True, order=True)
class HostPort:
    """
    Значение host + port. Сортировка по host, затем по port.

    implicit_port отмечает адрес, прочитанный без порта (server backend;):
    такой адрес выводится тоже без порта. В сравнении не участвует.
    """
    host: str
    port: int = DEFAULT_HTTP_PORT
    implicit_port: bool = field(default=False, compare=False, repr=False)

    @classmethod
    def parse(cls, text: str) -> "HostPort":
        """
        Разбирает строку "host" или "host:port".

        Raises:
            ValueError: Если строка не похожа на host[:port]
        """
        m = _HOST_PORT_RE.match(text.strip())
        if not m:
            raise ValueError(f"Некорректный адрес: {text!r}")
        if m.group('port') is None:
            return cls(m.group('host'), DEFAULT_HTTP_PORT, implicit_port=True)
        return cls(m.group('host'), int(m.group('port')))

    def with_port(self, port: int) -> "HostPort":
        return replace(self, port=port, implicit_port=False)

    def matches(self, server) -> bool:
        """Совпадает ли server по паре (server_name, listen)."""
        return server.name == self.host and server.listen == self.port

    def __str__(self):
        if self.implicit_port:
            return self.host
        return f"{self.host}:{self.port}"
