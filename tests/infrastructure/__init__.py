"""
Общая инфраструктура тестов шаблонизатора.

Modules:
- file_utils: создание файлов шаблонов, данных и конфигов
- cli_utils: запуск CLI в отдельном процессе
"""

from .file_utils import write, write_template, write_yaml
from .cli_utils import run_cli, jload

__all__ = ["write", "write_template", "write_yaml", "run_cli", "jload"]
