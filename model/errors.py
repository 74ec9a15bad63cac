"""
Исключения nginx-roundtrip.
"""


class NginxConfigError(Exception):
    """Базовое исключение для всех ошибок работы с конфигом."""


class ConfigReadError(NginxConfigError, OSError):
    """Не удалось открыть или прочитать источник конфига."""


class ConfigWriteError(NginxConfigError, OSError):
    """Не удалось записать конфиг."""


class MalformedConfigError(NginxConfigError, ValueError):
    """
    Нарушена структура конфига: незакрытый блок, отсутствующее обязательное поле
    или текст, который нельзя восстановить из модели без потерь.
    """

    def __init__(self, message: str, line: int = 0):
        self.line = line
        if line:
            message = f"строка {line}: {message}"
        super().__init__(message)


class NotFoundError(NginxConfigError, LookupError):
    """Запрошенный ключ (host, upstream, server) отсутствует в модели."""
