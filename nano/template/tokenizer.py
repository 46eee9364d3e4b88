"""
Ленивый токенизатор на упорядоченном списке правил.

Правила проверяются в порядке объявления, побеждает первое совпадение.
Правило с типом None поглощает совпадение без выдачи токена
(пробелы, комментарии). Хранится ровно один токен предпросмотра.
"""

from __future__ import annotations

from typing import Optional

from .tokens import Token, TokenRuleList, TokenTypeName
from ..errors import NanoSyntaxError, UnexpectedEndOfInputError, UnexpectedTokenError


# Маркер "предпросмотр еще не вычислен"
_UNSET = object()


class Tokenizer:
    """
    Потоковый токенизатор с предпросмотром на один токен.

    Состояние (курсор, строка, предпросмотр) принадлежит экземпляру
    и живет только в рамках одного вызова парсера.
    """

    def __init__(self, source: str, rules: TokenRuleList, line_offset: int = 0):
        """
        Args:
            source: Исходная строка
            rules: Упорядоченный список правил (паттерн, тип)
            line_offset: Число строк до начала source в исходном шаблоне
        """
        self.source = source
        self.rules = rules
        self.cursor = 0
        self.line = line_offset + 1
        self._lookahead = _UNSET

    def peek(self) -> Optional[Token]:
        """Возвращает следующий токен без потребления (None в конце потока)."""
        if self._lookahead is _UNSET:
            self._lookahead = self._next_token()
        return self._lookahead

    def peek_type(self) -> Optional[TokenTypeName]:
        """Тип следующего токена или None в конце потока."""
        token = self.peek()
        return token.type if token is not None else None

    def advance(self, expected_type: TokenTypeName) -> Token:
        """
        Потребляет токен предпросмотра, если его тип совпадает с ожидаемым.

        Raises:
            UnexpectedEndOfInputError: Если токенов не осталось
            NanoSyntaxError: Если тип токена не совпадает с ожидаемым
        """
        token = self.peek()
        if token is None:
            raise UnexpectedEndOfInputError("Unexpected end of input", self.line)

        if token.type != expected_type:
            raise NanoSyntaxError(f"Unexpected token {token.value}", token.line)

        self._lookahead = self._next_token()
        return token

    def current_line(self) -> int:
        """Текущая строка курсора (начиная с 1)."""
        return self.line

    def has_remaining_input(self) -> bool:
        return self.cursor < len(self.source)

    def _next_token(self) -> Optional[Token]:
        while self.has_remaining_input():
            start_line = self.line

            for pattern, token_type in self.rules:
                match = pattern.match(self.source, self.cursor)
                if match is None or not match.group(0):
                    continue

                value = match.group(0)
                self.cursor += len(value)
                self.line += value.count("\n")
                break
            else:
                char = self.source[self.cursor]
                raise UnexpectedTokenError(f"Unexpected token {char}", self.line)

            if token_type is None:
                # Отбрасываемое совпадение: ищем следующий значимый токен
                continue

            return Token(token_type, value, start_line)

        return None


__all__ = ["Tokenizer"]
