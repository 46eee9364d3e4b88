"""
Парсер шаблонов.

Токенизирует шаблон правилами разметки и строит AST из блоков.
Содержимое тегов и операторов разбирается ExpressionParser.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import List, Optional, Tuple, Union

from .expression import ExpressionParser
from .nodes import (
    Block,
    BlockList,
    Case,
    Else,
    FlagList,
    For,
    If,
    Import,
    Switch,
    Tag,
    Text,
)
from .tokenizer import Tokenizer
from .tokens import TEMPLATE_RULES, Token
from ..errors import MissingClosingTagError, NanoSyntaxError, UnexpectedEndOfInputError

logger = logging.getLogger(__name__)

_FLAGS_PATTERN = re.compile(r"^[#!]{0,2}")


def split_flags(tag_value: str) -> Tuple[FlagList, str]:
    """
    Отделяет флаги от содержимого тега.

    Args:
        tag_value: Полный текст тега вместе с фигурными скобками

    Returns:
        (флаги в порядке объявления, выражение без флагов)
    """
    raw = tag_value[1:-1]
    match = _FLAGS_PATTERN.match(raw)
    raw_flags = match.group(0) if match else ""
    return tuple(raw_flags), raw[len(raw_flags):]


class TemplateParser:
    """
    Рекурсивный парсер шаблонов.

    Потребляет токены по одному и строит плоский список блоков
    до конца потока или до ограничивающего токена (тело If/For/Case).
    """

    def __init__(self, template: str):
        self.tokenizer = Tokenizer(template, TEMPLATE_RULES)

    def parse(self) -> BlockList:
        """
        Парсит шаблон целиком.

        Raises:
            NanoSyntaxError: При ошибке синтаксического анализа
        """
        block_list = self._parse_block_list()
        logger.debug(f"Parsed template into {len(block_list.nodes)} top-level blocks")
        return block_list

    def _parse_block_list(self, limit: Optional[str] = None, flags: FlagList = ()) -> BlockList:
        """
        Собирает блоки до токена limit (не потребляя его) или до конца потока.

        Флаги охватывающего блока проставляются только непосредственным
        текстовым потомкам.
        """
        nodes: List[Block] = []

        while True:
            token_type = self.tokenizer.peek_type()
            if token_type is None or token_type == limit:
                break

            nodes.append(self._stamp_flags(self._parse_block(token_type), flags))

        return BlockList(nodes=tuple(nodes))

    def _parse_block(self, token_type: str) -> Block:
        if token_type == "TEXT":
            return self._parse_text()
        if token_type == "TAG":
            return self._parse_tag()
        if token_type == "IF":
            return self._parse_if("IF")
        if token_type == "FOR":
            return self._parse_for()
        if token_type == "IMPORT":
            return self._parse_import()
        if token_type == "SWITCH":
            return self._parse_switch()

        # ELSEIF/ELSE вне {if}, закрывающие теги без пары, CASE вне {switch}
        token = self.tokenizer.peek()
        raise NanoSyntaxError(f"Unexpected token {token.value}", token.line)

    def _parse_text(self) -> Text:
        """Склеивает подряд идущие TEXT-токены в один узел."""
        parts = [self.tokenizer.advance("TEXT").value]

        while self.tokenizer.peek_type() == "TEXT":
            parts.append(self.tokenizer.advance("TEXT").value)

        return Text(value="".join(parts))

    def _parse_tag(self) -> Tag:
        token = self.tokenizer.advance("TAG")
        flags, source = split_flags(token.value)
        value = self._expression_parser(source, token).expression()
        return Tag(value=value, flags=flags)

    def _parse_if(self, token_type: str) -> If:
        """
        Разбирает {if} или {else if}.

        Тело накапливается до {/if}; встреченный {else if}/{else} разбирается
        рекурсивно, становится alternate и завершает тело текущей ветки.
        Закрывающий {/if} потребляет только внешний {if}.
        """
        token = self.tokenizer.advance(token_type)
        flags, source = split_flags(token.value)
        statement = self._expression_parser(source, token).if_statement()

        nodes: List[Block] = []
        alternate: Optional[Union[If, Else]] = None

        while True:
            next_type = self.tokenizer.peek_type()
            if next_type is None or next_type == "IF_END":
                break

            if next_type == "ELSEIF":
                alternate = self._parse_if("ELSEIF")
                break
            if next_type == "ELSE":
                alternate = self._parse_else()
                break

            nodes.append(self._stamp_flags(self._parse_block(next_type), flags))

        if token_type == "IF":
            self._expect_closing("IF_END", "{/if}")

        return If(statement=statement, consequent=BlockList(nodes=tuple(nodes)), alternate=alternate)

    def _parse_else(self) -> Else:
        token = self.tokenizer.advance("ELSE")
        flags, _ = split_flags(token.value)
        return Else(body=self._parse_block_list("IF_END", flags))

    def _parse_for(self) -> For:
        token = self.tokenizer.advance("FOR")
        flags, source = split_flags(token.value)
        statement = self._expression_parser(source, token).for_statement()
        body = self._parse_block_list("FOR_END", flags)

        self._expect_closing("FOR_END", "{/for}")

        return For(statement=statement, body=body)

    def _parse_import(self) -> Import:
        token = self.tokenizer.advance("IMPORT")
        statement = self._expression_parser(token.value[1:-1], token).import_statement()
        return Import(statement=statement)

    def _parse_switch(self) -> Switch:
        """
        Разбирает {switch expr}{case expr}...{/case}...{/switch}.

        Между ветками допускается только пробельный текст.
        """
        token = self.tokenizer.advance("SWITCH")
        statement = self._expression_parser(token.value[1:-1], token).switch_statement()
        cases: List[Case] = []

        while True:
            next_type = self.tokenizer.peek_type()
            if next_type is None or next_type == "SWITCH_END":
                break

            if next_type == "CASE":
                cases.append(self._parse_case())
                continue

            if next_type == "TEXT":
                text = self._parse_text()
                if text.value.strip():
                    raise NanoSyntaxError(
                        f"Unexpected text {text.value.strip()!r} inside {{switch}}",
                        self.tokenizer.current_line(),
                    )
                continue

            unexpected = self.tokenizer.peek()
            raise NanoSyntaxError(f"Unexpected token {unexpected.value} inside {{switch}}", unexpected.line)

        self._expect_closing("SWITCH_END", "{/switch}")

        return Switch(statement=statement, cases=tuple(cases))

    def _parse_case(self) -> Case:
        token = self.tokenizer.advance("CASE")
        statement = self._expression_parser(token.value[1:-1], token).case_statement()
        body = self._parse_block_list("CASE_END")

        self._expect_closing("CASE_END", "{/case}")

        return Case(statement=statement, body=body)

    # Вспомогательные методы

    def _expect_closing(self, token_type: str, tag: str) -> None:
        try:
            self.tokenizer.advance(token_type)
        except UnexpectedEndOfInputError:
            raise MissingClosingTagError(f"Missing {tag} closing tag", self.tokenizer.current_line()) from None

    @staticmethod
    def _expression_parser(source: str, token: Token) -> ExpressionParser:
        return ExpressionParser(source, line_offset=token.line - 1)

    @staticmethod
    def _stamp_flags(node: Block, flags: FlagList) -> Block:
        if flags and isinstance(node, Text):
            return Text(value=node.value, flags=flags)
        return node


def parse(template: str) -> BlockList:
    """
    Удобная функция для разбора шаблона.

    Raises:
        NanoSyntaxError: При синтаксической ошибке
    """
    return TemplateParser(template).parse()


@lru_cache(maxsize=128)
def parse_cached(template: str) -> BlockList:
    """Разбор с кэшированием по тексту шаблона; AST неизменяем, поэтому его можно разделять."""
    return parse(template)


__all__ = ["TemplateParser", "parse", "parse_cached", "split_flags"]
