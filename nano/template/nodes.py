"""
AST-узлы шаблона.

Два семейства неизменяемых узлов:
- блочные (уровень разметки): BlockList, Text, Tag, If, Else, For, Import, Switch, Case;
- узлы выражений: идентификаторы, литералы, доступ к членам, вызовы, операторы.

Дерево строгое: каждый узел принадлежит ровно одному родителю, циклов нет.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Optional, Tuple, Union


class NodeType(enum.Enum):
    """Типы узлов AST."""
    # Блоки
    BLOCK_LIST = "BlockList"
    TEXT = "Text"
    TAG = "Tag"
    IF = "If"
    ELSE = "Else"
    FOR = "For"
    IMPORT = "Import"
    SWITCH = "Switch"
    CASE = "Case"

    # Операторы (statement) внутри блочных тегов
    IF_STATEMENT = "IfStatement"
    FOR_STATEMENT = "ForStatement"
    IMPORT_STATEMENT = "ImportStatement"
    IMPORT_ARGUMENT = "ImportStatementArgument"
    SWITCH_STATEMENT = "SwitchStatement"
    CASE_STATEMENT = "CaseStatement"

    # Выражения
    IDENTIFIER = "Identifier"
    BOOLEAN_LITERAL = "BooleanLiteral"
    NULL_LITERAL = "NullLiteral"
    STRING_LITERAL = "StringLiteral"
    NUMERIC_LITERAL = "NumericLiteral"
    ARRAY_EXPRESSION = "ArrayExpression"
    MEMBER_EXPRESSION = "MemberExpression"
    CALL_EXPRESSION = "CallExpression"
    UNARY_EXPRESSION = "UnaryExpression"
    BINARY_EXPRESSION = "BinaryExpression"
    LOGICAL_EXPRESSION = "LogicalExpression"
    CONDITIONAL_EXPRESSION = "ConditionalExpression"


# Флаги текста/тегов: '!' сжатие пробелов, '#' HTML-экранирование
FlagList = Tuple[str, ...]


@dataclass(frozen=True)
class Node:
    """Базовый класс для всех узлов AST."""
    node_type: ClassVar[NodeType]

    def get_type(self) -> NodeType:
        """Возвращает тип узла."""
        return self.node_type


# ---------------------------------------------------------------- выражения

@dataclass(frozen=True)
class Expression(Node):
    """Базовый класс узлов выражений."""
    pass


@dataclass(frozen=True)
class Identifier(Expression):
    node_type: ClassVar[NodeType] = NodeType.IDENTIFIER
    name: str


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    node_type: ClassVar[NodeType] = NodeType.BOOLEAN_LITERAL
    value: bool


@dataclass(frozen=True)
class NullLiteral(Expression):
    node_type: ClassVar[NodeType] = NodeType.NULL_LITERAL
    value: None = None


@dataclass(frozen=True)
class StringLiteral(Expression):
    node_type: ClassVar[NodeType] = NodeType.STRING_LITERAL
    value: str


@dataclass(frozen=True)
class NumericLiteral(Expression):
    node_type: ClassVar[NodeType] = NodeType.NUMERIC_LITERAL
    value: Union[int, float]


@dataclass(frozen=True)
class ArrayExpression(Expression):
    """Литерал массива: [a, b, ...]"""
    node_type: ClassVar[NodeType] = NodeType.ARRAY_EXPRESSION
    elements: Tuple[Expression, ...] = ()


@dataclass(frozen=True)
class MemberExpression(Expression):
    """
    Доступ к члену: object.property или object[property].

    Для точечной формы property — Identifier, имя которого является ключом;
    для скобочной (computed=True) — произвольное выражение.
    """
    node_type: ClassVar[NodeType] = NodeType.MEMBER_EXPRESSION
    object: Expression
    property: Expression
    computed: bool = False


@dataclass(frozen=True)
class CallExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.CALL_EXPRESSION
    callee: Expression
    arguments: Tuple[Expression, ...] = ()


@dataclass(frozen=True)
class UnaryExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.UNARY_EXPRESSION
    operator: str
    argument: Expression


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """Арифметика и сравнения: + - * / == != < > <= >="""
    node_type: ClassVar[NodeType] = NodeType.BINARY_EXPRESSION
    operator: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class LogicalExpression(Expression):
    """&& и ||"""
    node_type: ClassVar[NodeType] = NodeType.LOGICAL_EXPRESSION
    operator: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class ConditionalExpression(Expression):
    """Тернарный оператор: test ? consequent : alternate"""
    node_type: ClassVar[NodeType] = NodeType.CONDITIONAL_EXPRESSION
    test: Expression
    consequent: Expression
    alternate: Expression


# ---------------------------------------------------------------- statements

@dataclass(frozen=True)
class IfStatement(Node):
    node_type: ClassVar[NodeType] = NodeType.IF_STATEMENT
    test: Expression


@dataclass(frozen=True)
class ForStatement(Node):
    """
    for value[, key] in iterator

    identifiers содержит одно или два имени: значение и (опционально) индекс/ключ.
    """
    node_type: ClassVar[NodeType] = NodeType.FOR_STATEMENT
    identifiers: Tuple[str, ...]
    iterator: Expression


@dataclass(frozen=True)
class ImportArgument(Node):
    node_type: ClassVar[NodeType] = NodeType.IMPORT_ARGUMENT
    key: str
    value: Expression


@dataclass(frozen=True)
class ImportStatement(Node):
    node_type: ClassVar[NodeType] = NodeType.IMPORT_STATEMENT
    path: Expression
    arguments: Tuple[ImportArgument, ...] = ()


@dataclass(frozen=True)
class SwitchStatement(Node):
    node_type: ClassVar[NodeType] = NodeType.SWITCH_STATEMENT
    discriminant: Expression


@dataclass(frozen=True)
class CaseStatement(Node):
    node_type: ClassVar[NodeType] = NodeType.CASE_STATEMENT
    test: Expression


# ---------------------------------------------------------------- блоки

@dataclass(frozen=True)
class Block(Node):
    """Базовый класс блочных узлов."""
    pass


@dataclass(frozen=True)
class BlockList(Node):
    """Упорядоченная последовательность блоков."""
    node_type: ClassVar[NodeType] = NodeType.BLOCK_LIST
    nodes: Tuple[Block, ...] = ()


@dataclass(frozen=True)
class Text(Block):
    """
    Статический текст.

    flags наследуются от открывающего тега непосредственно охватывающего блока.
    """
    node_type: ClassVar[NodeType] = NodeType.TEXT
    value: str
    flags: FlagList = ()


@dataclass(frozen=True)
class Tag(Block):
    """Вывод выражения: {expression}"""
    node_type: ClassVar[NodeType] = NodeType.TAG
    value: Expression
    flags: FlagList = ()


@dataclass(frozen=True)
class Else(Block):
    node_type: ClassVar[NodeType] = NodeType.ELSE
    body: BlockList = field(default_factory=BlockList)


@dataclass(frozen=True)
class If(Block):
    """
    Условный блок {if}...{else if}...{else}...{/if}.

    alternate — отсутствует, вложенный If (цепочка else if) или Else.
    """
    node_type: ClassVar[NodeType] = NodeType.IF
    statement: IfStatement
    consequent: BlockList = field(default_factory=BlockList)
    alternate: Optional[Union[If, Else]] = None


@dataclass(frozen=True)
class For(Block):
    node_type: ClassVar[NodeType] = NodeType.FOR
    statement: ForStatement
    body: BlockList = field(default_factory=BlockList)


@dataclass(frozen=True)
class Import(Block):
    """Импорт шаблона; разрешается только во время рендеринга."""
    node_type: ClassVar[NodeType] = NodeType.IMPORT
    statement: ImportStatement


@dataclass(frozen=True)
class Case(Block):
    node_type: ClassVar[NodeType] = NodeType.CASE
    statement: CaseStatement
    body: BlockList = field(default_factory=BlockList)


@dataclass(frozen=True)
class Switch(Block):
    node_type: ClassVar[NodeType] = NodeType.SWITCH
    statement: SwitchStatement
    cases: Tuple[Case, ...] = ()


def node_to_dict(node: Any) -> Any:
    """
    Преобразует AST в структуру из словарей и списков (для отладки и CLI).

    Каждый узел получает ключ "type" с именем типа.
    """
    if isinstance(node, Node):
        result: Dict[str, Any] = {"type": node.get_type().value}
        for f in fields(node):
            result[f.name] = node_to_dict(getattr(node, f.name))
        return result
    if isinstance(node, tuple):
        return [node_to_dict(item) for item in node]
    return node


__all__ = [
    "NodeType",
    "FlagList",
    "Node",
    "Expression",
    "Identifier",
    "BooleanLiteral",
    "NullLiteral",
    "StringLiteral",
    "NumericLiteral",
    "ArrayExpression",
    "MemberExpression",
    "CallExpression",
    "UnaryExpression",
    "BinaryExpression",
    "LogicalExpression",
    "ConditionalExpression",
    "IfStatement",
    "ForStatement",
    "ImportArgument",
    "ImportStatement",
    "SwitchStatement",
    "CaseStatement",
    "Block",
    "BlockList",
    "Text",
    "Tag",
    "Else",
    "If",
    "For",
    "Import",
    "Case",
    "Switch",
    "node_to_dict",
]
