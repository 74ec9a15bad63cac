"""
Модуль для экспорта структуры конфига в JSON и YAML форматы.
"""
import json
import sys
from datetime import datetime
from typing import Any, Dict

import yaml

from model.document import Document


def export_json(data: Any, pretty: bool = True) -> str:
    """
    Экспортирует данные в JSON формат.
    
    Args:
        data: Данные для экспорта
        pretty: Форматировать с отступами
        
    Returns:
        JSON строка
    """
    if pretty:
        return json.dumps(data, ensure_ascii=False, indent=2, default=str)
    else:
        return json.dumps(data, ensure_ascii=False, default=str)


def export_yaml(data: Any) -> str:
    """
    Экспортирует данные в YAML формат.
    
    Args:
        data: Данные для экспорта
        
    Returns:
        YAML строка
    """
    return yaml.dump(data, allow_unicode=True, default_flow_style=False, sort_keys=False)


def print_export(data: Any, format_type: str, file=None):
    """
    Выводит данные в указанном формате.
    
    Args:
        data: Данные для экспорта
        format_type: 'json' или 'yaml'
        file: Файл для вывода (по умолчанию stdout)
    """
    if file is None:
        file = sys.stdout
    
    if format_type == 'json':
        output = export_json(data)
    elif format_type == 'yaml':
        output = export_yaml(data)
    else:
        raise ValueError(f"Неподдерживаемый формат: {format_type}")
    
    print(output, file=file)


def format_document(document: Document) -> Dict[str, Any]:
    """
    Форматирует структуру Document для экспорта.
    
    Текст before/after попадает в экспорт как есть.
    
    Args:
        document: Разобранный конфиг
        
    Returns:
        Словарь с данными для экспорта
    """
    data = {"timestamp": datetime.now().isoformat()}
    data.update(document.to_dict())
    data["summary"] = {
        "total_upstreams": len(document.upstreams),
        "total_upstream_servers": sum(len(u.host_ports) for u in document.upstreams),
        "total_servers": len(document.servers),
        "total_locations": sum(len(s.locations) for s in document.servers),
    }
    return data
