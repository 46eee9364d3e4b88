"""
Постобработка вывода по флагам тегов.

'!' — сжатие пробелов между тегами разметки, '#' — HTML-экранирование.
Флаги применяются последовательно в порядке объявления.
"""

from __future__ import annotations

import re
from typing import Callable, Dict

from .nodes import FlagList

TRIM_FLAG = "!"
ESCAPE_FLAG = "#"

_BETWEEN_TAGS = re.compile(r">\s+<")
_TABS_AND_NEWLINES = re.compile(r"[\t\n]")

_ESCAPE_MAP = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "`": "&#x60;",
    "=": "&#x3D;",
    "/": "&#x2F;",
}
_ESCAPE_PATTERN = re.compile(r"[&<>\"'`=/]")


def trim_whitespace(value: str) -> str:
    """Схлопывает '>  <' в '><' и удаляет оставшиеся табуляции и переводы строк."""
    return _TABS_AND_NEWLINES.sub("", _BETWEEN_TAGS.sub("><", value))


def escape_html(value: str) -> str:
    """Экранирует 8 символов фиксированной таблицей сущностей."""
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPE_MAP[m.group(0)], value)


_FLAG_HANDLERS: Dict[str, Callable[[str], str]] = {
    TRIM_FLAG: trim_whitespace,
    ESCAPE_FLAG: escape_html,
}


def apply_flags(value: str, flags: FlagList) -> str:
    """Применяет флаги по порядку; неизвестные флаги игнорируются."""
    for flag in flags:
        handler = _FLAG_HANDLERS.get(flag)
        if handler is not None:
            value = handler(value)
    return value


__all__ = ["TRIM_FLAG", "ESCAPE_FLAG", "trim_whitespace", "escape_html", "apply_flags"]
