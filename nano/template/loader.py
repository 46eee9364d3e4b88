"""
Загрузчики исходного текста импортируемых шаблонов.

Загрузчик сообщает об отсутствии шаблона через FileNotFoundError;
остальные ошибки ввода-вывода пробрасываются рендереру без изменений.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Mapping, Protocol

logger = logging.getLogger(__name__)


class TemplateLoader(Protocol):
    """Протокол загрузчика: путь → исходный текст шаблона."""

    async def load(self, path: str) -> str:
        ...


class FileSystemLoader:
    """Читает шаблоны с диска в рабочем потоке, не блокируя цикл событий."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def load(self, path: str) -> str:
        logger.debug(f"Loading template file {path}")
        return await asyncio.to_thread(Path(path).read_text, encoding=self.encoding)


class DictLoader:
    """Отдает шаблоны из словаря путь → исходный текст."""

    def __init__(self, templates: Mapping[str, str]):
        self.templates = dict(templates)

    async def load(self, path: str) -> str:
        try:
            return self.templates[path]
        except KeyError:
            raise FileNotFoundError(path) from None


__all__ = ["TemplateLoader", "FileSystemLoader", "DictLoader"]
