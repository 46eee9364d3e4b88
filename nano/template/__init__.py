"""
Шаблонизатор nano.

Токенизатор → парсер выражений и шаблонов → асинхронный рендерер с импортами.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from .loader import DictLoader, FileSystemLoader, TemplateLoader
from .nodes import BlockList, NodeType, node_to_dict
from .parser import TemplateParser, parse, parse_cached
from .renderer import DataContext, Renderer, render
from ..config import Settings


def render_sync(
    template: str,
    data: Optional[DataContext] = None,
    settings: Optional[Settings] = None,
    loader: Optional[TemplateLoader] = None,
) -> str:
    """Синхронная обертка над render() для кода без цикла событий."""
    return asyncio.run(render(template, data, settings, loader))


__all__ = [
    "BlockList",
    "NodeType",
    "node_to_dict",
    "TemplateParser",
    "parse",
    "parse_cached",
    "Renderer",
    "DataContext",
    "render",
    "render_sync",
    "TemplateLoader",
    "FileSystemLoader",
    "DictLoader",
]
