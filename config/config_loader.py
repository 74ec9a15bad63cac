"""
Модуль для загрузки и управления конфигурационным файлом nginx-roundtrip.
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Загрузчик конфигурационного файла для nginx-roundtrip.
    """
    
    def __init__(self, config_path: Optional[Path] = None):
        """
        Инициализация загрузчика конфигурации.
        
        Args:
            config_path: Явный путь к конфигу (если None - поиск в стандартных местах)
        """
        self.config: Dict[str, Any] = {}
        self.config_path: Optional[Path] = None
        self._load_config(config_path)
    
    def _find_config_file(self) -> Optional[Path]:
        """
        Ищет конфигурационный файл в стандартных местах.
        
        Returns:
            Path к конфигурационному файлу или None
        """
        env_path = os.environ.get("NGINX_ROUNDTRIP_CONFIG")
        # Список возможных путей к конфигу (в порядке приоритета)
        possible_paths = [Path(env_path)] if env_path else []
        possible_paths += [
            Path.cwd() / ".nginx-roundtrip.yaml",  # Текущая директория
            Path.cwd() / ".nginx-roundtrip.yml",
            Path("/opt/nginx-roundtrip/config.yaml"),  # Системный конфиг
            Path("/opt/nginx-roundtrip/config.yml"),
            Path.home() / ".nginx-roundtrip" / "config.yaml",  # Домашняя директория
            Path.home() / ".nginx-roundtrip" / "config.yml",
        ]
        
        for path in possible_paths:
            if path.exists() and path.is_file():
                return path
        
        return None
    
    def _load_config(self, config_path: Optional[Path] = None):
        """Загружает конфигурацию из файла."""
        config_file = config_path or self._find_config_file()
        
        if not config_file:
            # Используем значения по умолчанию
            self.config = self._get_default_config()
            return
        
        try:
            with open(config_file, 'r') as f:
                user_config = yaml.safe_load(f) or {}
            
            # Объединяем с дефолтными значениями
            self.config = self._merge_config(self._get_default_config(), user_config)
            self.config_path = Path(config_file)
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Не удалось прочитать %s, используются значения по умолчанию: %s", config_file, e)
            self.config = self._get_default_config()
    
    def _get_default_config(self) -> Dict[str, Any]:
        """
        Возвращает конфигурацию по умолчанию.
        
        Returns:
            Словарь с дефолтными настройками
        """
        return {
            "defaults": {
                "nginx_config_path": None,  # Путь к nginx.conf, если не указан в команде
            },
            "read": {
                "http_timeout": 10.0,
                "encoding": "utf-8",
            },
            "output": {
                "format": "nginx",  # nginx, json, yaml
            },
            "logging": {
                "level": "WARNING",
            },
        }
    
    def _merge_config(self, default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Рекурсивно объединяет конфигурации.
        
        Args:
            default: Конфигурация по умолчанию
            user: Пользовательская конфигурация
            
        Returns:
            Объединенная конфигурация
        """
        result = default.copy()
        
        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        
        return result
    
    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Получает значение из конфигурации.
        
        Args:
            section: Секция конфига (например, "read", "output")
            key: Ключ в секции
            default: Значение по умолчанию, если не найдено
            
        Returns:
            Значение из конфига или default
        """
        return self.config.get(section, {}).get(key, default)
    
    def get_output_format(self) -> str:
        return self.get("output", "format", "nginx")
    
    def get_log_level(self) -> str:
        return self.get("logging", "level", "WARNING")
    
    def get_nginx_config_path(self) -> Optional[str]:
        """
        Получает путь к nginx.conf из конфигурации.
        
        Returns:
            Путь к nginx.conf или None
        """
        return self.get("defaults", "nginx_config_path")
    
    def get_config_path(self) -> Optional[str]:
        """
        Возвращает путь к загруженному конфигурационному файлу.
        
        Returns:
            Путь к конфигу или None
        """
        return str(self.config_path) if self.config_path else None


# Глобальный экземпляр загрузчика конфигурации
_config_loader: Optional[ConfigLoader] = None


def get_config() -> ConfigLoader:
    """
    Получает глобальный экземпляр загрузчика конфигурации.
    
    Returns:
        Экземпляр ConfigLoader
    """
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def reload_config():
    """Перезагружает конфигурацию."""
    global _config_loader
    _config_loader = ConfigLoader()
