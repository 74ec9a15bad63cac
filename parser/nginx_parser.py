"""
Парсер nginx.conf с сохранением исходного текста.

Распознаются только блоки upstream, server и location с фиксированными
отступами (4 пробела на уровень). Всё, что не является известным полем,
сохраняется как есть в before/after ближайшей сущности, поэтому
str(parse_nginx_text(text)) == text.
"""
import logging
import re
from pathlib import Path
from typing import IO, List, Optional, Tuple, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from config.config_loader import get_config
from model.document import (
    BLOCK_SEPARATOR,
    LOCATION_INDENT,
    UPSTREAM_INDENT,
    Document,
    Location,
    Server,
    Upstream,
)
from model.errors import ConfigReadError, MalformedConfigError
from model.host_port import HostPort

logger = logging.getLogger(__name__)

_BLOCK_START_RE = re.compile(r'^[ \t]*(upstream [^\s{]+ \{|server \{)$', re.M)
_UPSTREAM_RE = re.compile(r'^upstream (?P<name>[^\s{]+) \{$')
_SERVER_OPEN = 'server {'
_BLOCK_CLOSE = '    }'
_LOCATION_CLOSE = '        }'

_HOST_PORT_RE = re.compile(r'^        server (?P<address>[^\s;]+);$')
_METHOD_RE = re.compile(
    r'^        (?P<method>least_conn|ip_hash|ntlm|random(?: [^;]+)?|hash [^;]+|least_time [^;]+);$'
)
_SERVER_NAME_RE = re.compile(r'^        server_name (?P<name>[^;]+);$')
_LISTEN_RE = re.compile(r'^        listen (?P<port>\d+);$')
_LOCATION_RE = re.compile(r'^        location (?P<name>.+) \{$')
_PROXY_PASS_RE = re.compile(r'^            proxy_pass (?P<target>[^\s;]+);$')

# Заголовок следующего блока верхнего уровня внутри незакрытого upstream
_TOP_BLOCK_RE = re.compile(r'^    (upstream [^\s{]+|server) \{$')
_CRLF_BLOCK_START_RE = re.compile(r'^[ \t]*(upstream [^\s{]+ \{|server \{)\r$', re.M)

Source = Union[str, Path, IO]


class _Scanner:
    """Построчное чтение текста с позицией и номером текущей строки."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line_no = 1

    def seek(self, pos: int):
        self.pos = pos
        self.line_no = self.text.count('\n', 0, pos) + 1

    def current(self) -> str:
        """Текущая строка без перевода строки, даже если он отсутствует."""
        return self.text[self.pos:].split('\n', 1)[0]

    def next_line(self, block: str) -> str:
        if self.pos >= len(self.text):
            raise MalformedConfigError(f"блок {block} не закрыт", self.line_no)
        end = self.text.find('\n', self.pos)
        if end < 0:
            # последняя строка файла без перевода строки
            end = len(self.text)
        line = self.text[self.pos:end]
        self.pos = min(end + 1, len(self.text))
        self.line_no += 1
        return line

    def read_block(self, close: str, block: str, guard) -> Tuple[List[str], int]:
        """
        Читает тело блока до строки close.

        Returns:
            Кортеж (строки тела, номер первой строки тела)
        """
        first = self.line_no
        lines = []
        while True:
            line_no = self.line_no
            line = self.next_line(block)
            if line == close:
                return lines, first
            if guard(line):
                raise MalformedConfigError(f"блок {block} не закрыт", line_no)
            lines.append(line)

    def block_follows(self) -> bool:
        """Идёт ли после разделителя ещё один блок upstream/server."""
        if not self.text.startswith(BLOCK_SEPARATOR, self.pos):
            return False
        start = self.pos + len(BLOCK_SEPARATOR)
        line = self.text[start:].split('\n', 1)[0]
        return line == _SERVER_OPEN or bool(_UPSTREAM_RE.match(line))


def _host_port(line: str) -> Optional[HostPort]:
    m = _HOST_PORT_RE.match(line)
    if not m:
        return None
    try:
        return HostPort.parse(m.group('address'))
    except ValueError:
        # например server unix:/run/app.sock; - остаётся нераспознанным текстом
        return None


def _captured(lines: List[str], indent: str, line_no: int) -> str:
    """Склеивает нераспознанные строки; у первой снимается отступ шаблона."""
    if not lines:
        return ""
    text = '\n'.join(lines)
    if not text.startswith(indent) or text == indent:
        raise MalformedConfigError(
            f"ожидался отступ в {len(indent)} пробелов: {lines[0]!r}", line_no
        )
    return text[len(indent):]


def _parse_upstream(scanner: _Scanner) -> Upstream:
    name = _UPSTREAM_RE.match(scanner.next_line('upstream')).group('name')
    body, first = scanner.read_block(
        _BLOCK_CLOSE, f"upstream {name}", lambda line: bool(_TOP_BLOCK_RE.match(line))
    )

    hosts_at = next((i for i, line in enumerate(body) if _host_port(line)), None)
    method = None
    if hosts_at is None:
        hosts: List[HostPort] = []
        before, after = body, []
        for i in range(len(body) - 1):
            if _METHOD_RE.match(body[i]) and body[i + 1] == '':
                method = _METHOD_RE.match(body[i]).group('method')
                before, after = body[:i], body[i + 2:]
                break
        after_at = first + len(body) - len(after)
    else:
        end = hosts_at
        while end < len(body) and _host_port(body[end]):
            end += 1
        hosts = [_host_port(line) for line in body[hosts_at:end]]
        before, after = body[:hosts_at], body[end:]
        # метод стоит сразу перед списком серверов и отделён пустой строкой
        if len(before) >= 2 and before[-1] == '' and _METHOD_RE.match(before[-2]):
            method = _METHOD_RE.match(before[-2]).group('method')
            before = before[:-2]
        after_at = first + end

    return Upstream(
        name=name,
        method=method,
        before=_captured(before, UPSTREAM_INDENT, first),
        after=_captured(after, UPSTREAM_INDENT, after_at),
        host_ports=hosts,
    )


def _parse_location(scanner: _Scanner, name: str, header_no: int) -> Location:
    body, first = scanner.read_block(
        _LOCATION_CLOSE,
        f"location {name}",
        lambda line: line == _BLOCK_CLOSE or bool(_LOCATION_RE.match(line)),
    )
    at = next((i for i, line in enumerate(body) if _PROXY_PASS_RE.match(line)), None)
    if at is None:
        raise MalformedConfigError(f"в location {name} нет proxy_pass", header_no)
    return Location(
        name=name,
        proxy_pass=_PROXY_PASS_RE.match(body[at]).group('target'),
        before=_captured(body[:at], LOCATION_INDENT, first),
        after=_captured(body[at + 1:], LOCATION_INDENT, first + at + 1),
    )


def _parse_server(scanner: _Scanner) -> Server:
    scanner.next_line('server')

    line_no = scanner.line_no
    m = _SERVER_NAME_RE.match(scanner.next_line('server'))
    if not m:
        raise MalformedConfigError("ожидалась директива server_name", line_no)
    name = m.group('name')

    line_no = scanner.line_no
    m = _LISTEN_RE.match(scanner.next_line(f"server {name}"))
    if not m:
        raise MalformedConfigError(f"в server {name} ожидалась директива listen", line_no)
    server = Server(name=name, listen=int(m.group('port')))

    while True:
        line_no = scanner.line_no
        line = scanner.next_line(f"server {name}")
        if line == _BLOCK_CLOSE:
            return server
        m = _LOCATION_RE.match(line)
        if not m:
            raise MalformedConfigError(
                f"неожиданная строка в server {name}: {line.strip()!r}", line_no
            )
        server.locations.append(_parse_location(scanner, m.group('name'), line_no))


def _line_of(text: str, pos: int) -> int:
    return text.count('\n', 0, pos) + 1


def parse_nginx_text(text: str) -> Document:
    """
    Разбирает текст конфига в Document.

    Блоки сохраняют порядок из файла, чтобы нетронутый конфиг выводился без изменений.
    Блоки разделяются ровно одной пустой строкой; блок после другого разделителя
    не может быть выведен из модели и считается ошибкой.

    Raises:
        MalformedConfigError: Незакрытый блок, нет proxy_pass/server_name/listen,
            нестандартный разделитель между блоками, окончания строк CRLF
    """
    m = _CRLF_BLOCK_START_RE.search(text)
    if m:
        raise MalformedConfigError(
            "окончания строк CRLF не поддерживаются, преобразуйте файл в LF",
            _line_of(text, m.start()),
        )

    m = _BLOCK_START_RE.search(text)
    if not m:
        logger.debug("Блоки upstream/server не найдены")
        return Document(leading=text)

    document = Document(leading=text[:m.start(1)])
    scanner = _Scanner(text)
    scanner.seek(m.start(1))
    while True:
        if _UPSTREAM_RE.match(scanner.current()):
            if document.servers:
                raise MalformedConfigError("upstream после server не поддерживается", scanner.line_no)
            document.upstreams.append(_parse_upstream(scanner))
        else:
            document.servers.append(_parse_server(scanner))
        if not scanner.block_follows():
            break
        scanner.seek(scanner.pos + len(BLOCK_SEPARATOR))

    m = _BLOCK_START_RE.search(text, scanner.pos)
    if m:
        raise MalformedConfigError(
            f"блок {m.group(1)} должен отделяться от предыдущего ровно одной пустой строкой",
            _line_of(text, m.start()),
        )
    document.trailing = text[scanner.pos:]
    if not document.trailing and not text.endswith('\n'):
        document.final_newline = False

    logger.debug(
        "Разобрано upstream: %d, server: %d",
        len(document.upstreams), len(document.servers),
    )
    return document


def _decode(data: bytes, source: str) -> str:
    encoding = get_config().get("read", "encoding", "utf-8")
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise MalformedConfigError(f"не удалось декодировать {source} как {encoding}: {e}") from e


def parse_nginx_stream(stream: IO, source: str = "<stream>") -> Document:
    """Читает поток целиком (str или bytes) и разбирает его."""
    data = stream.read()
    if isinstance(data, bytes):
        data = _decode(data, source)
    return parse_nginx_text(data)


def _fetch(url: str, timeout: Optional[float]) -> bytes:
    if timeout is None:
        timeout = get_config().get("read", "http_timeout", 10.0)
    logger.debug("Загрузка конфига по %s (timeout=%s)", url, timeout)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ConfigReadError(f"Не удалось загрузить конфиг из '{url}': {e}") from e
    return response.content


def parse_nginx_config(source: Source, timeout: Optional[float] = None) -> Document:
    """
    Читает конфиг из файла, URL или открытого потока.

    Args:
        source: Путь, file://, http(s):// URL или открытый поток
        timeout: Таймаут HTTP запроса (по умолчанию из конфига nginx-roundtrip)

    Returns:
        Document

    Raises:
        ConfigReadError: Источник не удалось открыть или прочитать
        MalformedConfigError: Нарушена структура конфига
    """
    if hasattr(source, 'read'):
        return parse_nginx_stream(source)

    location = str(source)
    parsed = urlparse(location)
    if parsed.scheme in ('http', 'https'):
        return parse_nginx_text(_decode(_fetch(location, timeout), location))

    path = Path(url2pathname(parsed.path)) if parsed.scheme == 'file' else Path(location)
    try:
        with open(path, 'rb') as f:
            return parse_nginx_stream(f, location)
    except OSError as e:
        raise ConfigReadError(f"Не удалось загрузить конфиг из '{location}': {e}") from e
