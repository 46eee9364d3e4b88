"""
Базовые исключения движка шаблонов.

Все ожидаемые ошибки, которые должны показываться пользователю
в виде понятного сообщения (без трассировки стека), наследуются от NanoUserError.

Ошибки программирования и баги НЕ наследуются от NanoUserError —
они распространяются с полной трассировкой.
"""

from __future__ import annotations


class NanoUserError(Exception):
    """
    Базовый класс для всех пользовательских ошибок шаблонизатора.

    Сигнализирует о проблемах, которые пользователь может исправить:
    синтаксические ошибки в шаблоне, отсутствующие импорты и т.д.
    """
    pass


class NanoSyntaxError(NanoUserError):
    """Ошибка синтаксического анализа шаблона или выражения."""

    def __init__(self, message: str, line: int):
        super().__init__(f"{message} (line {line})")
        self.message = message
        self.line = line


class UnexpectedTokenError(NanoSyntaxError):
    """Ни одно правило токенизатора не подошло к текущей позиции."""
    pass


class UnexpectedEndOfInputError(NanoSyntaxError):
    """Входные данные закончились раньше, чем ожидаемый токен."""
    pass


class MissingClosingTagError(NanoSyntaxError):
    """Блок {if}/{for}/{switch}/{case} не закрыт соответствующим тегом."""
    pass


class ImportNotFoundError(NanoUserError):
    """Импортируемый шаблон не найден загрузчиком."""

    def __init__(self, path: str):
        super().__init__(f'Imported file "{path}" could not be found.')
        self.path = path


__all__ = [
    "NanoUserError",
    "NanoSyntaxError",
    "UnexpectedTokenError",
    "UnexpectedEndOfInputError",
    "MissingClosingTagError",
    "ImportNotFoundError",
]
