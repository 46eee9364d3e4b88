from __future__ import annotations

import pytest

from nano.template import DictLoader
from nano.template.parser import parse_cached


@pytest.fixture(autouse=True)
def _clear_parse_cache():
    """Кэш разбора общий для процесса; тесты не должны видеть AST друг друга."""
    parse_cached.cache_clear()
    yield
    parse_cached.cache_clear()


@pytest.fixture
def dict_loader():
    """Фабрика in-memory загрузчиков: dict_loader({"path": "source"})."""
    def _make(templates):
        return DictLoader(templates)
    return _make
