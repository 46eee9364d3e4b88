"""
Парсер выражений с рекурсивным спуском.

Разбирает содержимое одного тега {...} (флаги уже отрезаны) в AST выражения.
Приоритеты операторов закодированы вложенностью правил грамматики.

Грамматика (от низшего приоритета к высшему):
expression     → conditional
conditional    → or ("?" expression ":" expression)?
or             → and ("||" and)*
and            → equality ("&&" equality)*
equality       → relational (("==" | "!=") relational)*
relational     → additive (("<" | ">" | "<=" | ">=") additive)*
additive       → multiplicative (("+" | "-") multiplicative)*
multiplicative → unary (("*" | "/") unary)*
unary          → ("+" | "-" | "!") unary | member
member         → primary ("." IDENTIFIER | "[" expression "]" | arguments)*
primary        → "(" expression ")" | array | IDENTIFIER | literal
array          → "[" (expression ("," expression)*)? "]"
literal        → true | false | null | STRING | NUMBER

Операторы блочных тегов:
import_statement → "import" expression ("with" "(" IDENTIFIER ":" expression ("," ...)* ")")?
if_statement     → "else"? "if" expression
for_statement    → "for" IDENTIFIER ("," IDENTIFIER)? "in" expression
switch_statement → "switch" expression
case_statement   → "case" expression
"""

from __future__ import annotations

from typing import Callable, List

from .nodes import (
    ArrayExpression,
    BinaryExpression,
    BooleanLiteral,
    CallExpression,
    CaseStatement,
    ConditionalExpression,
    Expression,
    ForStatement,
    Identifier,
    IfStatement,
    ImportArgument,
    ImportStatement,
    LogicalExpression,
    MemberExpression,
    NullLiteral,
    NumericLiteral,
    StringLiteral,
    SwitchStatement,
    UnaryExpression,
)
from .tokenizer import Tokenizer
from .tokens import EXPRESSION_RULES
from ..errors import NanoSyntaxError, UnexpectedEndOfInputError

# Максимальное число имен в заголовке for: значение и индекс/ключ
MAX_LOOP_IDENTIFIERS = 2


class ExpressionParser:
    """
    Парсер выражений одного тега.

    Экземпляр создается на каждую строку выражения; line_offset
    позволяет сообщать номера строк относительно всего шаблона.
    """

    def __init__(self, source: str, line_offset: int = 0):
        self.source = source
        self.tokenizer = Tokenizer(source, EXPRESSION_RULES, line_offset)

    # Точки входа

    def expression(self) -> Expression:
        """Разбирает голое выражение (содержимое {tag})."""
        result = self._parse_expression()
        self._expect_end()
        return result

    def import_statement(self) -> ImportStatement:
        self.tokenizer.advance("IMPORT")
        path = self._parse_expression()
        arguments: List[ImportArgument] = []

        if self._check("WITH"):
            self.tokenizer.advance("WITH")
            self.tokenizer.advance("L_PARENTHESIS")
            arguments.append(self._parse_import_argument())
            while self._match("COMMA"):
                arguments.append(self._parse_import_argument())
            self.tokenizer.advance("R_PARENTHESIS")

        self._expect_end()
        return ImportStatement(path=path, arguments=tuple(arguments))

    def if_statement(self) -> IfStatement:
        # {else if ...} разбирается тем же правилом
        self._match("ELSE")
        self.tokenizer.advance("IF")
        test = self._parse_expression()
        self._expect_end()
        return IfStatement(test=test)

    def for_statement(self) -> ForStatement:
        self.tokenizer.advance("FOR")
        identifiers = self._parse_identifier_list()
        self.tokenizer.advance("IN")
        iterator = self._parse_expression()
        self._expect_end()
        return ForStatement(identifiers=tuple(identifiers), iterator=iterator)

    def switch_statement(self) -> SwitchStatement:
        self.tokenizer.advance("SWITCH")
        discriminant = self._parse_expression()
        self._expect_end()
        return SwitchStatement(discriminant=discriminant)

    def case_statement(self) -> CaseStatement:
        self.tokenizer.advance("CASE")
        test = self._parse_expression()
        self._expect_end()
        return CaseStatement(test=test)

    # Грамматика выражений

    def _parse_expression(self) -> Expression:
        return self._parse_conditional()

    def _parse_conditional(self) -> Expression:
        test = self._parse_or()

        if self._match("QUESTIONMARK"):
            consequent = self._parse_expression()
            self.tokenizer.advance("COLON")
            alternate = self._parse_expression()
            return ConditionalExpression(test=test, consequent=consequent, alternate=alternate)

        return test

    def _parse_or(self) -> Expression:
        return self._parse_logical_chain(self._parse_and, "OR")

    def _parse_and(self) -> Expression:
        return self._parse_logical_chain(self._parse_equality, "AND")

    def _parse_equality(self) -> Expression:
        return self._parse_binary_chain(self._parse_relational, "EQUALITY")

    def _parse_relational(self) -> Expression:
        return self._parse_binary_chain(self._parse_additive, "RELATIONAL")

    def _parse_additive(self) -> Expression:
        return self._parse_binary_chain(self._parse_multiplicative, "ADDITIVE")

    def _parse_multiplicative(self) -> Expression:
        return self._parse_binary_chain(self._parse_unary, "MULTIPLICATIVE")

    def _parse_binary_chain(self, operand: Callable[[], Expression], token_type: str) -> Expression:
        """Левоассоциативная цепочка: left = left OP right."""
        left = operand()

        while self._check(token_type):
            operator = self.tokenizer.advance(token_type).value
            right = operand()
            left = BinaryExpression(operator=operator, left=left, right=right)

        return left

    def _parse_logical_chain(self, operand: Callable[[], Expression], token_type: str) -> Expression:
        left = operand()

        while self._check(token_type):
            operator = self.tokenizer.advance(token_type).value
            right = operand()
            left = LogicalExpression(operator=operator, left=left, right=right)

        return left

    def _parse_unary(self) -> Expression:
        for token_type in ("ADDITIVE", "NOT"):
            if self._check(token_type):
                operator = self.tokenizer.advance(token_type).value
                # Правая ассоциативность: -!x
                return UnaryExpression(operator=operator, argument=self._parse_unary())

        return self._parse_member()

    def _parse_member(self) -> Expression:
        """Точечный доступ, скобочный доступ и вызовы в одном цикле: a.b()[c].d(e)"""
        target = self._parse_primary()

        while True:
            if self._match("DOT"):
                target = MemberExpression(object=target, property=self._parse_identifier())
            elif self._match("L_BRACKET"):
                prop = self._parse_expression()
                self.tokenizer.advance("R_BRACKET")
                target = MemberExpression(object=target, property=prop, computed=True)
            elif self._check("L_PARENTHESIS"):
                target = self._parse_call(target)
            else:
                return target

    def _parse_call(self, callee: Expression) -> CallExpression:
        call = CallExpression(callee=callee, arguments=tuple(self._parse_arguments()))

        # Цепочка вызовов: f()()
        if self._check("L_PARENTHESIS"):
            return self._parse_call(call)

        return call

    def _parse_arguments(self) -> List[Expression]:
        self.tokenizer.advance("L_PARENTHESIS")
        arguments: List[Expression] = []

        if not self._check("R_PARENTHESIS"):
            arguments.append(self._parse_expression())
            while self._match("COMMA"):
                arguments.append(self._parse_expression())

        self.tokenizer.advance("R_PARENTHESIS")
        return arguments

    def _parse_primary(self) -> Expression:
        token_type = self.tokenizer.peek_type()

        if token_type == "L_PARENTHESIS":
            self.tokenizer.advance("L_PARENTHESIS")
            expr = self._parse_expression()
            self.tokenizer.advance("R_PARENTHESIS")
            return expr
        if token_type == "L_BRACKET":
            return self._parse_array()
        if token_type == "IDENTIFIER":
            return self._parse_identifier()

        return self._parse_literal()

    def _parse_array(self) -> ArrayExpression:
        self.tokenizer.advance("L_BRACKET")
        elements: List[Expression] = []

        if not self._check("R_BRACKET"):
            elements.append(self._parse_expression())
            while self._match("COMMA"):
                elements.append(self._parse_expression())

        self.tokenizer.advance("R_BRACKET")
        return ArrayExpression(elements=tuple(elements))

    def _parse_literal(self) -> Expression:
        token = self.tokenizer.peek()

        if token is None:
            raise UnexpectedEndOfInputError(
                f"Unexpected end of input in tag {{{self.source}}}", self.tokenizer.current_line()
            )

        if token.type == "TRUE":
            self.tokenizer.advance("TRUE")
            return BooleanLiteral(value=True)
        if token.type == "FALSE":
            self.tokenizer.advance("FALSE")
            return BooleanLiteral(value=False)
        if token.type == "NULL":
            self.tokenizer.advance("NULL")
            return NullLiteral()
        if token.type == "STRING":
            value = self.tokenizer.advance("STRING").value
            return StringLiteral(value=value[1:-1])
        if token.type == "NUMBER":
            value = self.tokenizer.advance("NUMBER").value
            return NumericLiteral(value=float(value) if "." in value else int(value))

        raise NanoSyntaxError(f"Unexpected token {token.value} in tag {{{self.source}}}", token.line)

    def _parse_identifier(self) -> Identifier:
        token = self.tokenizer.advance("IDENTIFIER")
        return Identifier(name=token.value)

    def _parse_identifier_list(self) -> List[str]:
        names = [self._parse_identifier().name]
        while self._match("COMMA"):
            names.append(self._parse_identifier().name)

        if len(names) > MAX_LOOP_IDENTIFIERS:
            raise NanoSyntaxError(
                f"Too many loop identifiers in tag {{{self.source}}}: "
                f"expected at most {MAX_LOOP_IDENTIFIERS}, got {len(names)}",
                self.tokenizer.current_line(),
            )

        return names

    def _parse_import_argument(self) -> ImportArgument:
        key = self._parse_identifier().name
        self.tokenizer.advance("COLON")
        return ImportArgument(key=key, value=self._parse_expression())

    # Вспомогательные методы для работы с токенами

    def _check(self, token_type: str) -> bool:
        """Проверяет тип следующего токена без потребления."""
        return self.tokenizer.peek_type() == token_type

    def _match(self, token_type: str) -> bool:
        """Проверяет и потребляет токен указанного типа."""
        if self._check(token_type):
            self.tokenizer.advance(token_type)
            return True
        return False

    def _expect_end(self) -> None:
        """Проверяет, что выражение разобрано до конца."""
        token = self.tokenizer.peek()
        if token is not None:
            raise NanoSyntaxError(f"Unexpected token {token.value} in tag {{{self.source}}}", token.line)


def parse_expression(source: str, line_offset: int = 0) -> Expression:
    """
    Удобная функция для разбора одного выражения.

    Raises:
        NanoSyntaxError: При синтаксической ошибке
    """
    return ExpressionParser(source, line_offset).expression()


__all__ = ["ExpressionParser", "parse_expression", "MAX_LOOP_IDENTIFIERS"]
