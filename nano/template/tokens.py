"""
Лексические типы.

Определяет токен, правило токенизации и таблицы правил для двух грамматик:
разметки шаблона и выражений внутри тегов {...}.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

# Упрощенная система токенов - используем строки напрямую
TokenTypeName = str


@dataclass(frozen=True)
class Token:
    """
    Токен с номером строки для диагностики ошибок.
    """
    type: TokenTypeName
    value: str
    line: int           # Номер строки начала токена (начиная с 1)

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, line={self.line})"


# Правило: (паттерн, тип). Тип None означает "сопоставить и отбросить".
TokenRule = Tuple[Pattern[str], Optional[TokenTypeName]]
TokenRuleList = List[TokenRule]


def compile_rules(specs: List[Tuple[str, Optional[TokenTypeName]]]) -> TokenRuleList:
    """Компилирует спецификации правил в порядке объявления."""
    return [(re.compile(pattern), token_type) for pattern, token_type in specs]


# Тело тега: строки в кавычках целиком, иначе любой символ кроме фигурных скобок и кавычек.
# Тег не переносится через строку: "{" в тексте без "}" на той же строке остается текстом
_TAG_BODY = r"""(?:"[^"\n]*"|'[^'\n]*'|[^{}"'\n])"""
_FLAGS = r"[#!]{0,2}"

# Порядок важен: блочные теги должны идти раньше общего правила TAG
TEMPLATE_RULES: TokenRuleList = compile_rules([
    (r"<!--[\s\S]*?-->", None),
    (r"<(style|script)[^>]*>[\s\S]*?</(script|style)>", "TEXT"),

    (r"\{import " + _TAG_BODY + r"+\}", "IMPORT"),
    (r"\{switch " + _TAG_BODY + r"+\}", "SWITCH"),
    (r"\{case " + _TAG_BODY + r"+\}", "CASE"),

    (r"\{" + _FLAGS + r"if " + _TAG_BODY + r"+\}", "IF"),
    (r"\{" + _FLAGS + r"else if " + _TAG_BODY + r"+\}", "ELSEIF"),
    (r"\{" + _FLAGS + r"else\}", "ELSE"),
    (r"\{" + _FLAGS + r"for " + _TAG_BODY + r"+\}", "FOR"),

    (r"\{/if\}", "IF_END"),
    (r"\{/for\}", "FOR_END"),
    (r"\{/switch\}", "SWITCH_END"),
    (r"\{/case\}", "CASE_END"),

    (r"\{" + _FLAGS + _TAG_BODY + r"*\}", "TAG"),
    (r"[\s\S]", "TEXT"),
])

EXPRESSION_RULES: TokenRuleList = compile_rules([
    (r"\s+", None),
    (r"<!--[\s\S]*?-->", None),

    (r"\(", "L_PARENTHESIS"),
    (r"\)", "R_PARENTHESIS"),
    (r"\[", "L_BRACKET"),
    (r"\]", "R_BRACKET"),
    (r"\{", "L_CURLY"),
    (r"\}", "R_CURLY"),
    (r",", "COMMA"),
    (r"\.", "DOT"),

    # Ключевые слова: граница слова проверяется только справа
    (r"import\b", "IMPORT"),
    (r"with\b", "WITH"),
    (r"for\b", "FOR"),
    (r"in\b", "IN"),
    (r"if\b", "IF"),
    (r"else\b", "ELSE"),
    (r"switch\b", "SWITCH"),
    (r"case\b", "CASE"),
    (r"true\b", "TRUE"),
    (r"false\b", "FALSE"),
    (r"null\b", "NULL"),

    (r"[+\-]", "ADDITIVE"),
    (r"[*/]", "MULTIPLICATIVE"),

    (r"[=!]=", "EQUALITY"),
    (r"[><]=?", "RELATIONAL"),
    (r"&&", "AND"),
    (r"\|\|", "OR"),
    (r"!", "NOT"),

    (r"\d+(?:\.\d+)?", "NUMBER"),
    (r"[\w$]+", "IDENTIFIER"),

    (r"\?", "QUESTIONMARK"),
    (r":", "COLON"),

    (r'"[^"]*"', "STRING"),
    (r"'[^']*'", "STRING"),
])


__all__ = [
    "TokenTypeName",
    "Token",
    "TokenRule",
    "TokenRuleList",
    "compile_rules",
    "TEMPLATE_RULES",
    "EXPRESSION_RULES",
]
