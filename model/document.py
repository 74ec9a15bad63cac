"""
Модель конфигурации: Document -> Upstream/Server -> HostPort/Location.

Каждая сущность сама собирает свой текст в __str__. Поля before/after хранят
нераспознанный текст (комментарии, прочие директивы) и выводятся как есть
на том же месте, где были в исходном файле.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from model.errors import NotFoundError
from model.host_port import DEFAULT_HTTP_PORT, HostPort

BLOCK_SEPARATOR = "\n    "

UPSTREAM_INDENT = " " * 8
LOCATION_INDENT = " " * 12


def _fragment(text: str, indent: str) -> str:
    return f"{indent}{text}\n" if text else ""


@dataclass
class Location:
    """location внутри server: шаблон пути и proxy_pass."""
    name: str
    proxy_pass: str
    before: str = ""
    after: str = ""

    @classmethod
    def named(cls, name: str, proxy_pass: str) -> "Location":
        return cls(name=name, proxy_pass=proxy_pass)

    def with_before(self, before: str) -> "Location":
        self.before = before
        return self

    def with_after(self, after: str) -> "Location":
        self.after = after
        return self

    def sort_key(self):
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "proxy_pass": self.proxy_pass,
            "before": self.before,
            "after": self.after,
        }

    def __str__(self):
        return (
            f"        location {self.name} {{\n"
            + _fragment(self.before, LOCATION_INDENT)
            + f"{LOCATION_INDENT}proxy_pass {self.proxy_pass};\n"
            + _fragment(self.after, LOCATION_INDENT)
            + "        }\n"
        )


@dataclass
class Server:
    """Виртуальный хост. Ключ поиска и сортировки: (name, listen)."""
    name: str
    listen: int = DEFAULT_HTTP_PORT
    locations: List[Location] = field(default_factory=list)

    @classmethod
    def named(cls, name: str) -> "Server":
        return cls(name=name)

    def with_listen(self, listen: int) -> "Server":
        self.listen = listen
        return self

    def with_location(self, location: Location) -> "Server":
        return self.add_location(location)

    def sort_key(self):
        return (self.name, self.listen)

    def add_location(self, location: Location) -> "Server":
        self.locations.append(location)
        self.locations.sort(key=Location.sort_key)
        return self

    def find_location(self, name: str) -> Optional[Location]:
        return next((loc for loc in self.locations if loc.name == name), None)

    def remove_location(self, name: str):
        self.locations = [loc for loc in self.locations if loc.name != name]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "listen": self.listen,
            "locations": [loc.to_dict() for loc in self.locations],
        }

    def __str__(self):
        return (
            "server {\n"
            f"        server_name {self.name};\n"
            f"        listen {self.listen};\n"
            + "".join(str(loc) for loc in self.locations)
            + "    }\n"
        )


@dataclass
class Upstream:
    """
    Пул серверов для балансировки.

    method: директива балансировки без ';' (least_conn, ip_hash, ...) или None.
    host_ports: уникальны по host, упорядочены по (host, port).
    """
    name: str
    method: Optional[str] = None
    before: str = ""
    after: str = ""
    host_ports: List[HostPort] = field(default_factory=list)

    @classmethod
    def named(cls, name: str) -> "Upstream":
        return cls(name=name)

    def with_method(self, method: Optional[str]) -> "Upstream":
        self.method = method
        return self

    def with_before(self, before: str) -> "Upstream":
        self.before = before
        return self

    def with_after(self, after: str) -> "Upstream":
        self.after = after
        return self

    def with_host_port(self, host_port: HostPort) -> "Upstream":
        return self.add_host_port(host_port)

    def sort_key(self):
        return self.name

    def is_empty(self) -> bool:
        return not self.host_ports

    def has_host(self, host: str) -> bool:
        return any(hp.host == host for hp in self.host_ports)

    def add_host_port(self, host_port: HostPort) -> "Upstream":
        self.host_ports.append(host_port)
        self.host_ports.sort()
        return self

    def remove_host(self, host: str):
        self.host_ports = [hp for hp in self.host_ports if hp.host != host]

    def update_host_port(self, host_port: HostPort):
        self.remove_host(host_port.host)
        self.add_host_port(host_port)

    def set_port(self, host_port: HostPort, port: int):
        """
        Меняет порт у существующего адреса.

        Адрес ищется по точному значению host + port, а не только по host.

        Raises:
            NotFoundError: Если такого адреса нет в upstream
        """
        try:
            index = self.host_ports.index(host_port)
        except ValueError:
            raise NotFoundError(f"{host_port} не найден в upstream {self.name}") from None
        self.host_ports[index] = host_port.with_port(port)
        self.host_ports.sort()

    def port_of(self, host: str) -> int:
        for hp in self.host_ports:
            if hp.host == host:
                return hp.port
        raise NotFoundError(f"Нет сервера {host} в upstream {self.name}")

    def index_of(self, host: str) -> int:
        for index, hp in enumerate(self.host_ports):
            if hp.host == host:
                return index
        raise NotFoundError(f"Хост [{host}] не найден среди {[str(hp) for hp in self.host_ports]}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "method": self.method,
            "before": self.before,
            "after": self.after,
            "servers": [{"host": hp.host, "port": hp.port} for hp in self.host_ports],
        }

    def __str__(self):
        method = f"{UPSTREAM_INDENT}{self.method};\n\n" if self.method else ""
        servers = "".join(f"{UPSTREAM_INDENT}server {hp};\n" for hp in self.host_ports)
        return (
            f"upstream {self.name} {{\n"
            + _fragment(self.before, UPSTREAM_INDENT)
            + method
            + servers
            + _fragment(self.after, UPSTREAM_INDENT)
            + "    }\n"
        )


@dataclass
class Document:
    """
    Весь конфиг: текст до первого блока, upstream-ы, server-ы и текст после.

    Блоки выводятся в порядке списков: сначала upstream, затем server.
    Добавление сортирует список; парсер сохраняет порядок из файла.

    final_newline=False: файл закончился закрывающей строкой последнего блока
    без перевода строки, и вывод тоже его не ставит.
    """
    leading: str = ""
    trailing: str = ""
    upstreams: List[Upstream] = field(default_factory=list)
    servers: List[Server] = field(default_factory=list)
    final_newline: bool = True

    @classmethod
    def create(cls) -> "Document":
        return cls(leading="http {\n    ", trailing="}\n")

    def add_upstream(self, upstream: Upstream) -> "Document":
        self.upstreams.append(upstream)
        self.upstreams.sort(key=Upstream.sort_key)
        return self

    def remove_upstream(self, name: str):
        self.upstreams = [u for u in self.upstreams if u.name != name]

    def find_upstream(self, name: str) -> Optional[Upstream]:
        return next((u for u in self.upstreams if u.name == name), None)

    def get_upstream(self, name: str) -> Upstream:
        upstream = self.find_upstream(name)
        if upstream is None:
            raise NotFoundError(f"upstream {name} не найден")
        return upstream

    def add_server(self, server: Server) -> "Document":
        self.servers.append(server)
        self.servers.sort(key=Server.sort_key)
        return self

    def remove_server(self, host_port: HostPort):
        # удаляются все server с совпадающей парой, а не только первый
        self.servers = [s for s in self.servers if not host_port.matches(s)]

    def find_server(self, name: str, listen: int) -> Optional[Server]:
        return next((s for s in self.servers if s.name == name and s.listen == listen), None)

    def get_server(self, name: str, listen: int) -> Server:
        server = self.find_server(name, listen)
        if server is None:
            raise NotFoundError(f"server {name}:{listen} не найден")
        return server

    def to_dict(self) -> Dict[str, Any]:
        return {
            "upstreams": [u.to_dict() for u in self.upstreams],
            "servers": [s.to_dict() for s in self.servers],
        }

    def __str__(self):
        blocks = [str(u) for u in self.upstreams] + [str(s) for s in self.servers]
        text = self.leading + BLOCK_SEPARATOR.join(blocks) + self.trailing
        if not self.final_newline and not self.trailing and text.endswith("\n"):
            return text[:-1]
        return text
