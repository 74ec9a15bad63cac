"""
Общие фикстуры тестов nginx-roundtrip.
"""
import pytest

from config import config_loader

SAMPLE_CONFIG = """\
http {
    upstream backend {
        # lb-before-comment
        least_conn;

        server localhost:8180;
        server localhost:8280;
        # lb-after-comment
    }

    server {
        server_name worker;
        listen 80;
        location / {
            proxy_pass http://backend;
            proxy_set_header Host $host;
            proxy_set_header X-Real-IP $remote_addr;
        }
        location /foo {
            proxy_pass http://backend/foo;
        }
    }

    server {
        server_name worker01;
        listen 80;
        location / {
            proxy_pass http://localhost:8180/;
        }
    }

    server {
        server_name worker02;
        listen 80;
        location / {
            proxy_pass http://localhost:8280/;
        }
    }
}
"""


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Не даём тестам подхватить пользовательский .nginx-roundtrip.yaml."""
    monkeypatch.setattr(config_loader.ConfigLoader, "_find_config_file", lambda self: None)
    config_loader.reload_config()
    yield
    config_loader.reload_config()


@pytest.fixture
def sample_text():
    return SAMPLE_CONFIG


@pytest.fixture
def sample_path(tmp_path):
    path = tmp_path / "nginx.conf"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path
