"""
Интеграционные тесты CLI nginx-roundtrip
"""
import json

import yaml
from typer.testing import CliRunner

from commands.cli import app
from config import config_loader

runner = CliRunner()


def test_show_round_trip(sample_path, sample_text):
    """show без опций выводит конфиг без изменений"""
    result = runner.invoke(app, ["show", str(sample_path)])
    assert result.exit_code == 0
    assert result.output == sample_text


def test_show_json(sample_path):
    """show --json экспортирует структуру"""
    result = runner.invoke(app, ["show", str(sample_path), "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [u["name"] for u in data["upstreams"]] == ["backend"]
    assert data["summary"]["total_servers"] == 3
    assert data["summary"]["total_locations"] == 4


def test_show_yaml(sample_path):
    """show --yaml экспортирует структуру"""
    result = runner.invoke(app, ["show", str(sample_path), "--yaml"])
    assert result.exit_code == 0
    data = yaml.safe_load(result.output)
    assert data["upstreams"][0]["servers"][0] == {"host": "localhost", "port": 8180}


def test_show_uses_configured_path(tmp_path, sample_path, sample_text):
    """Без аргумента используется defaults.nginx_config_path"""
    settings = tmp_path / "settings.yaml"
    settings.write_text(yaml.safe_dump({"defaults": {"nginx_config_path": str(sample_path)}}))
    config_loader._config_loader = config_loader.ConfigLoader(settings)

    result = runner.invoke(app, ["show"])
    assert result.exit_code == 0
    assert result.output == sample_text


def test_show_without_path():
    """Без аргумента и без настройки - ошибка"""
    result = runner.invoke(app, ["show"])
    assert result.exit_code == 1


def test_tree(sample_path):
    """tree показывает upstream, server и location"""
    result = runner.invoke(app, ["tree", str(sample_path)])
    assert result.exit_code == 0
    assert "backend" in result.output
    assert "least_conn" in result.output
    assert "worker01" in result.output
    assert "/foo" in result.output


def test_missing_file():
    """Несуществующий файл - exit code 1"""
    result = runner.invoke(app, ["show", "/nonexistent/nginx.conf"])
    assert result.exit_code == 1
    result = runner.invoke(app, ["tree", "/nonexistent/nginx.conf"])
    assert result.exit_code == 1


def test_malformed_file(tmp_path):
    """Битый конфиг - exit code 1"""
    path = tmp_path / "broken.conf"
    path.write_text("http {\n    upstream a {\n        server x:1;\n")
    result = runner.invoke(app, ["show", str(path)])
    assert result.exit_code == 1
    assert "не закрыт" in result.output


def test_upstream_add_host(sample_path):
    """add-host добавляет сервер в отсортированную позицию"""
    result = runner.invoke(app, ["upstream", "add-host", "backend", "127.0.0.1:8080", "-c", str(sample_path)])
    assert result.exit_code == 0
    assert (
        "        server 127.0.0.1:8080;\n"
        "        server localhost:8180;\n"
    ) in result.output


def test_upstream_add_host_unknown_upstream(sample_path):
    """add-host в несуществующий upstream - exit code 1"""
    result = runner.invoke(app, ["upstream", "add-host", "nope", "127.0.0.1:8080", "-c", str(sample_path)])
    assert result.exit_code == 1
    assert "nope" in result.output


def test_upstream_add_host_bad_address(sample_path):
    """Некорректный адрес - ошибка параметров"""
    result = runner.invoke(app, ["upstream", "add-host", "backend", "host:port", "-c", str(sample_path)])
    assert result.exit_code == 2


def test_upstream_set_port_in_place(sample_path, sample_text):
    """set-port --in-place переписывает файл"""
    result = runner.invoke(
        app, ["upstream", "set-port", "backend", "localhost:8180", "8181", "-c", str(sample_path), "--in-place"]
    )
    assert result.exit_code == 0
    assert sample_path.read_text() == sample_text.replace("localhost:8180;", "localhost:8181;")


def test_upstream_set_port_missing(sample_path, sample_text):
    """set-port на отсутствующий адрес - exit code 1, файл не меняется"""
    result = runner.invoke(
        app, ["upstream", "set-port", "backend", "localhost:9999", "8181", "-c", str(sample_path), "-i"]
    )
    assert result.exit_code == 1
    assert sample_path.read_text() == sample_text


def test_upstream_remove_host_to_output(tmp_path, sample_path):
    """remove-host --output пишет результат в другой файл"""
    target = tmp_path / "out.conf"
    result = runner.invoke(
        app, ["upstream", "remove-host", "backend", "localhost", "-c", str(sample_path), "-o", str(target)]
    )
    assert result.exit_code == 0
    text = target.read_text()
    assert "server localhost" not in text
    assert "# lb-after-comment" in text


def test_upstream_add_and_remove(sample_path, sample_text, tmp_path):
    """add затем remove возвращает исходный конфиг"""
    result = runner.invoke(
        app, ["upstream", "add", "api", "-m", "ip_hash", "-s", "10.0.0.2:9000", "-s", "10.0.0.1:9000",
              "-c", str(sample_path), "-i"]
    )
    assert result.exit_code == 0
    text = sample_path.read_text()
    assert text.startswith(
        "http {\n"
        "    upstream api {\n"
        "        ip_hash;\n"
        "\n"
        "        server 10.0.0.1:9000;\n"
        "        server 10.0.0.2:9000;\n"
        "    }\n"
    )

    result = runner.invoke(app, ["upstream", "remove", "api", "-c", str(sample_path), "-i"])
    assert result.exit_code == 0
    assert sample_path.read_text() == sample_text


def test_server_remove(sample_path):
    """server remove удаляет только точную пару name/listen"""
    result = runner.invoke(app, ["server", "remove", "worker01", "-c", str(sample_path)])
    assert result.exit_code == 0
    assert "server_name worker01;" not in result.output
    assert "server_name worker02;" in result.output

    result = runner.invoke(app, ["server", "remove", "worker02", "--listen", "8080", "-c", str(sample_path)])
    assert "server_name worker02;" in result.output


def test_server_add_with_location(sample_path):
    """server add с location"""
    result = runner.invoke(
        app, ["server", "add", "worker03", "--location", "/=http://localhost:8380/", "-c", str(sample_path)]
    )
    assert result.exit_code == 0
    assert (
        "    server {\n"
        "        server_name worker03;\n"
        "        listen 80;\n"
        "        location / {\n"
        "            proxy_pass http://localhost:8380/;\n"
        "        }\n"
        "    }\n"
        "}\n"
    ) in result.output


def test_server_add_location_replaces(sample_path):
    """add-location заменяет location с тем же путём"""
    result = runner.invoke(
        app, ["server", "add-location", "worker01", "/", "http://localhost:8181/", "-c", str(sample_path)]
    )
    assert result.exit_code == 0
    assert "proxy_pass http://localhost:8181/;" in result.output
    assert "proxy_pass http://localhost:8180/;" not in result.output


def test_server_add_location_unknown_server(sample_path):
    """add-location в несуществующий server - exit code 1"""
    result = runner.invoke(
        app, ["server", "add-location", "worker09", "/", "http://x/", "-c", str(sample_path)]
    )
    assert result.exit_code == 1


def test_bad_log_level(sample_path):
    """Неизвестный уровень логирования - ошибка параметров"""
    result = runner.invoke(app, ["--log-level", "loud", "show", str(sample_path)])
    assert result.exit_code == 2
