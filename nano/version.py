"""
Версия шаблонизатора из метаданных установленного дистрибутива.
"""

from __future__ import annotations

from importlib import metadata
from typing import List

# Имя дистрибутива из pyproject.toml; импортный пакет называется иначе
DIST_NAME = "nano-template"

UNKNOWN_VERSION = "0.0.0"


def _candidate_dists() -> List[str]:
    """Дистрибутивы, поставляющие импортный пакет nano, плюс имя по умолчанию."""
    package = __name__.partition(".")[0]
    found = metadata.packages_distributions().get(package, [])
    return [*found, DIST_NAME] if DIST_NAME not in found else list(found)


def tool_version() -> str:
    """
    Версия пакета для `nano --version`.

    Исходное дерево без установки дает UNKNOWN_VERSION.
    """
    for dist in _candidate_dists():
        try:
            return metadata.version(dist)
        except metadata.PackageNotFoundError:
            continue
    return UNKNOWN_VERSION


__all__ = ["DIST_NAME", "UNKNOWN_VERSION", "tool_version"]
