"""
Настройки рендеринга.

Настройки можно передать напрямую (Settings) или загрузить из YAML-файла.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from ruamel.yaml import YAML

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class Settings:
    """
    Настройки рендерера.

    Attributes:
        import_directory: Каталог, относительно которого разрешаются {import ...}
    """
    import_directory: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Settings:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            logger.warning(f"Ignoring unknown settings keys: {', '.join(unknown)}")

        import_directory = raw.get("import_directory", "")
        if import_directory is None:
            import_directory = ""
        if not isinstance(import_directory, str):
            raise ValueError(
                f"Setting 'import_directory' must be a string, got {type(import_directory).__name__}"
            )
        return cls(import_directory=import_directory)


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        return {}
    raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"YAML must be a mapping: {path}")
    return raw


def load_settings(path: Path) -> Settings:
    """
    Загружает настройки из YAML-файла.

    Отсутствующий файл дает настройки по умолчанию.

    Raises:
        ValueError: Если файл содержит не словарь или некорректные значения
    """
    raw = _read_yaml_map(path)
    settings = Settings.from_dict(raw)
    logger.debug(f"Loaded settings from {path}: {settings}")
    return settings


__all__ = ["Settings", "load_settings"]
