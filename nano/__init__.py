"""
nano — компактный шаблонизатор с асинхронным рендерингом.
"""

from __future__ import annotations

from .config import Settings, load_settings
from .errors import (
    ImportNotFoundError,
    MissingClosingTagError,
    NanoSyntaxError,
    NanoUserError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
)
from .template import DictLoader, FileSystemLoader, TemplateLoader, parse, render, render_sync

__all__ = [
    "Settings",
    "load_settings",
    "render",
    "render_sync",
    "parse",
    "TemplateLoader",
    "FileSystemLoader",
    "DictLoader",
    "NanoUserError",
    "NanoSyntaxError",
    "UnexpectedTokenError",
    "UnexpectedEndOfInputError",
    "MissingClosingTagError",
    "ImportNotFoundError",
]
