"""
Рендерер шаблонов.

Асинхронно обходит AST, вычисляет выражения в контексте данных,
исполняет управляющие блоки и разрешает импорты через загрузчик.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from .flags import apply_flags
from .loader import FileSystemLoader, TemplateLoader
from .nodes import (
    ArrayExpression,
    BinaryExpression,
    BlockList,
    CallExpression,
    ConditionalExpression,
    Else,
    Expression,
    For,
    Identifier,
    If,
    Import,
    LogicalExpression,
    MemberExpression,
    Node,
    NodeType,
    Switch,
    Tag,
    Text,
    UnaryExpression,
)
from .parser import parse, parse_cached
from .values import (
    add,
    compare,
    divide,
    get_member,
    is_iterable_value,
    iterate_pairs,
    loose_equals,
    multiply,
    subtract,
    to_display,
    to_number,
    truthy,
)
from ..config import Settings
from ..errors import ImportNotFoundError
from ..paths import resolve_import_path

logger = logging.getLogger(__name__)

# Контекст данных: имя → значение
DataContext = Mapping[str, Any]

_LITERAL_TYPES = {
    NodeType.BOOLEAN_LITERAL,
    NodeType.NULL_LITERAL,
    NodeType.STRING_LITERAL,
    NodeType.NUMERIC_LITERAL,
}

_BINARY_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    "+": add,
    "-": subtract,
    "*": multiply,
    "/": divide,
    "==": loose_equals,
    "!=": lambda left, right: not loose_equals(left, right),
    "<": lambda left, right: compare("<", left, right),
    ">": lambda left, right: compare(">", left, right),
    "<=": lambda left, right: compare("<=", left, right),
    ">=": lambda left, right: compare(">=", left, right),
}


class Renderer:
    """
    Обходчик AST.

    Дочерние узлы рендерятся строго последовательно: каждый дожидается
    завершения предыдущего, чтобы сохранить порядок вывода и побочных
    эффектов вызываемых функций контекста.

    Вложенные области (итерация цикла, импорт) получают поверхностную
    копию контекста со своими привязками, поэтому изменения не утекают наружу.
    """

    def __init__(self, settings: Optional[Settings] = None, loader: Optional[TemplateLoader] = None):
        """
        Args:
            settings: Настройки рендеринга (каталог импортов)
            loader: Загрузчик импортируемых шаблонов (по умолчанию — файловая система)
        """
        self.settings = settings or Settings()
        self.loader = loader or FileSystemLoader()

        self._block_handlers: Dict[NodeType, Callable[[Any, DataContext], Awaitable[str]]] = {
            NodeType.BLOCK_LIST: self._render_block_list,
            NodeType.TEXT: self._render_text,
            NodeType.TAG: self._render_tag,
            NodeType.IF: self._render_if,
            NodeType.ELSE: self._render_else,
            NodeType.FOR: self._render_for,
            NodeType.IMPORT: self._render_import,
            NodeType.SWITCH: self._render_switch,
        }

        self._expression_handlers: Dict[NodeType, Callable[[Any, DataContext], Awaitable[Any]]] = {
            NodeType.IDENTIFIER: self._evaluate_identifier,
            NodeType.ARRAY_EXPRESSION: self._evaluate_array,
            NodeType.MEMBER_EXPRESSION: self._evaluate_member,
            NodeType.CALL_EXPRESSION: self._evaluate_call,
            NodeType.UNARY_EXPRESSION: self._evaluate_unary,
            NodeType.BINARY_EXPRESSION: self._evaluate_binary,
            NodeType.LOGICAL_EXPRESSION: self._evaluate_logical,
            NodeType.CONDITIONAL_EXPRESSION: self._evaluate_conditional,
        }

    async def render(self, ast: BlockList, data: Optional[DataContext] = None) -> str:
        """
        Рендерит AST в строку.

        Raises:
            ImportNotFoundError: Если импортируемый шаблон не найден
            NanoSyntaxError: При синтаксической ошибке в импортируемом шаблоне
        """
        return await self.render_node(ast, dict(data or {}))

    async def render_node(self, node: Node, context: DataContext) -> str:
        """
        Рендерит любой узел.

        Выражения выводятся в строковом представлении; неизвестные типы
        узлов дают пустую строку.
        """
        node_type = node.get_type()

        handler = self._block_handlers.get(node_type)
        if handler is not None:
            return await handler(node, context)

        if isinstance(node, Expression):
            return to_display(await self.evaluate(node, context))

        logger.debug(f"No renderer for node type {node_type.value}, rendering empty string")
        return ""

    # Блоки

    async def _render_block_list(self, node: BlockList, context: DataContext) -> str:
        parts: List[str] = []
        for child in node.nodes:
            parts.append(await self.render_node(child, context))
        return "".join(parts)

    async def _render_text(self, node: Text, context: DataContext) -> str:
        return apply_flags(node.value, node.flags)

    async def _render_tag(self, node: Tag, context: DataContext) -> str:
        value = await self.evaluate(node.value, context)
        return apply_flags(to_display(value), node.flags)

    async def _render_if(self, node: If, context: DataContext) -> str:
        if truthy(await self.evaluate(node.statement.test, context)):
            return await self._render_block_list(node.consequent, context)

        if node.alternate is not None:
            return await self.render_node(node.alternate, context)

        return ""

    async def _render_else(self, node: Else, context: DataContext) -> str:
        return await self._render_block_list(node.body, context)

    async def _render_for(self, node: For, context: DataContext) -> str:
        statement = node.statement
        iterator = await self.evaluate(statement.iterator, context)

        if not is_iterable_value(iterator):
            logger.debug(f"Skipping {{for}} over non-iterable value of type {type(iterator).__name__}")
            return ""

        value_name = statement.identifiers[0]
        key_name = statement.identifiers[1] if len(statement.identifiers) > 1 else None

        parts: List[str] = []
        for value, key in iterate_pairs(iterator):
            scope = dict(context)
            scope[value_name] = value
            if key_name is not None:
                scope[key_name] = key
            parts.append(await self._render_block_list(node.body, scope))

        logger.debug(f"Rendered {{for}} with {len(parts)} iterations")
        return "".join(parts)

    async def _render_import(self, node: Import, context: DataContext) -> str:
        """
        Загружает, разбирает и рендерит импортируемый шаблон.

        Источник ищется сначала в контексте данных (по пути как написан,
        затем по разрешенному пути), затем через загрузчик. Аргументы with
        вычисляются во внешнем контексте и накладываются поверх него.
        """
        statement = node.statement
        path = to_display(await self.evaluate(statement.path, context))
        resolved = resolve_import_path(self.settings.import_directory, path)

        source = self._find_inline_template(context, path, resolved)
        if source is None:
            try:
                source = await self.loader.load(resolved)
            except FileNotFoundError:
                raise ImportNotFoundError(resolved) from None
        else:
            logger.debug(f"Using in-context template for import {path!r}")

        arguments: Dict[str, Any] = {}
        for argument in statement.arguments:
            arguments[argument.key] = await self.evaluate(argument.value, context)

        scope = {**context, **arguments}
        logger.debug(f"Rendering import {resolved!r} with arguments {sorted(arguments)}")
        return await self.render_node(parse_cached(source), scope)

    async def _render_switch(self, node: Switch, context: DataContext) -> str:
        discriminant = await self.evaluate(node.statement.discriminant, context)

        for case in node.cases:
            if loose_equals(await self.evaluate(case.statement.test, context), discriminant):
                return await self._render_block_list(case.body, context)

        return ""

    @staticmethod
    def _find_inline_template(context: DataContext, path: str, resolved: str) -> Optional[str]:
        for key in (path, resolved):
            value = context.get(key)
            if isinstance(value, str):
                return value
        return None

    # Выражения

    async def evaluate(self, node: Node, context: DataContext) -> Any:
        """Вычисляет выражение в контексте данных."""
        node_type = node.get_type()

        if node_type in _LITERAL_TYPES:
            return node.value

        handler = self._expression_handlers.get(node_type)
        if handler is not None:
            return await handler(node, context)

        logger.debug(f"No evaluator for node type {node_type.value}, evaluating to None")
        return None

    async def _evaluate_identifier(self, node: Identifier, context: DataContext) -> Any:
        return context.get(node.name)

    async def _evaluate_array(self, node: ArrayExpression, context: DataContext) -> List[Any]:
        return [await self.evaluate(element, context) for element in node.elements]

    async def _evaluate_member(self, node: MemberExpression, context: DataContext) -> Any:
        target = await self.evaluate(node.object, context)
        if target is None:
            return None

        if node.computed:
            key = await self.evaluate(node.property, context)
        else:
            key = node.property.name

        return get_member(target, key)

    async def _evaluate_call(self, node: CallExpression, context: DataContext) -> Any:
        callee = await self.evaluate(node.callee, context)
        arguments = [await self.evaluate(argument, context) for argument in node.arguments]

        if not callable(callee):
            return None

        result = callee(*arguments)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _evaluate_unary(self, node: UnaryExpression, context: DataContext) -> Any:
        value = await self.evaluate(node.argument, context)

        if node.operator == "!":
            return not truthy(value)
        if node.operator == "-":
            return -to_number(value)
        return to_number(value)

    async def _evaluate_binary(self, node: BinaryExpression, context: DataContext) -> Any:
        left = await self.evaluate(node.left, context)
        right = await self.evaluate(node.right, context)
        return _BINARY_OPERATORS[node.operator](left, right)

    async def _evaluate_logical(self, node: LogicalExpression, context: DataContext) -> Any:
        # Обе стороны вычисляются всегда: вызовы могут иметь побочные эффекты
        left = await self.evaluate(node.left, context)
        right = await self.evaluate(node.right, context)

        if node.operator == "&&":
            return right if truthy(left) else left
        return left if truthy(left) else right

    async def _evaluate_conditional(self, node: ConditionalExpression, context: DataContext) -> Any:
        if truthy(await self.evaluate(node.test, context)):
            return await self.evaluate(node.consequent, context)
        return await self.evaluate(node.alternate, context)


async def render(
    template: str,
    data: Optional[DataContext] = None,
    settings: Optional[Settings] = None,
    loader: Optional[TemplateLoader] = None,
) -> str:
    """
    Удобная функция: разбор и рендеринг шаблона.

    Args:
        template: Исходный текст шаблона
        data: Контекст данных
        settings: Настройки рендеринга
        loader: Загрузчик импортируемых шаблонов

    Returns:
        Отрендеренная строка
    """
    return await Renderer(settings, loader).render(parse(template), data)


__all__ = ["Renderer", "DataContext", "render"]
