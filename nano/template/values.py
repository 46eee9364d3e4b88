"""
Семантика значений при вычислении выражений.

Приведение типов, нестрогое равенство, арифметика, сравнения,
доступ к членам и строковое представление результатов тегов.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any, Iterator, Tuple, Union

Number = Union[int, float]

NAN = float("nan")


def is_number(value: Any) -> bool:
    """Числа без учета bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def truthy(value: Any) -> bool:
    """Истинность по правилам Python."""
    return bool(value)


def to_number(value: Any) -> Number:
    """
    Приводит значение к числу.

    None → 0, bool → 0/1, числовая строка → число, пустая строка → 0,
    всё остальное → NaN.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if is_number(value):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return NAN
    return NAN


def _normalize_number(value: Number) -> Number:
    """Целые float приводятся к int: 4.0 → 4."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def format_number(value: Number) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    return str(_normalize_number(value))


def to_display(value: Any) -> str:
    """
    Строковое представление результата для вывода в шаблон.

    None → "", bool → "true"/"false", списки через запятую,
    словари → "[object Object]".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return "[object Object]"
    if isinstance(value, (list, tuple)):
        return ",".join(to_display(item) for item in value)
    return str(value)


def loose_equals(left: Any, right: Any) -> bool:
    """
    Нестрогое равенство.

    None равно только None; bool сравнивается как число;
    число и числовая строка сравниваются численно; иначе обычное ==.
    """
    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, bool):
        left = int(left)
    if isinstance(right, bool):
        right = int(right)

    if is_number(left) and isinstance(right, str):
        return left == to_number(right)
    if isinstance(left, str) and is_number(right):
        return to_number(left) == right

    return left == right


def _is_concatenable(value: Any) -> bool:
    return isinstance(value, (str, Mapping, list, tuple))


def add(left: Any, right: Any) -> Any:
    """Сложение: конкатенация, если хотя бы один операнд строка/список/словарь."""
    if _is_concatenable(left) or _is_concatenable(right):
        return to_display(left) + to_display(right)
    return _normalize_number(to_number(left) + to_number(right))


def subtract(left: Any, right: Any) -> Number:
    return _normalize_number(to_number(left) - to_number(right))


def multiply(left: Any, right: Any) -> Number:
    return _normalize_number(to_number(left) * to_number(right))


def divide(left: Any, right: Any) -> Number:
    """Деление; на ноль дает ±Infinity или NaN вместо исключения."""
    dividend = to_number(left)
    divisor = to_number(right)

    if divisor == 0:
        if dividend == 0 or math.isnan(dividend):
            return NAN
        return math.copysign(math.inf, dividend) * math.copysign(1, divisor)

    return _normalize_number(dividend / divisor)


def compare(operator: str, left: Any, right: Any) -> bool:
    """
    Отношения < > <= >=.

    Две строки сравниваются лексикографически, иначе численно;
    NaN делает любое сравнение ложным.
    """
    if not (isinstance(left, str) and isinstance(right, str)):
        left = to_number(left)
        right = to_number(right)
        if math.isnan(left) or math.isnan(right):
            return False

    if operator == "<":
        return left < right
    if operator == ">":
        return left > right
    if operator == "<=":
        return left <= right
    if operator == ">=":
        return left >= right

    raise ValueError(f"Unknown relational operator: {operator}")


def _to_index(key: Any) -> Any:
    """Ключ как целочисленный индекс или None."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, float) and key.is_integer():
        return int(key)
    if isinstance(key, str) and key.isascii() and key.isdecimal():
        return int(key)
    return None


def _get_mapping_item(obj: Mapping, key: Any) -> Any:
    """
    Значение словаря по ключу.

    Нехешируемый ключ дает None; числовой ключ при промахе ищется
    в строковом виде, как ключи из JSON/YAML.
    """
    try:
        if key in obj:
            return obj[key]
    except TypeError:
        # нехешируемый ключ: [1], (1, [2]) и т.п.
        return None
    if is_number(key):
        return obj.get(format_number(key))
    return None


def get_member(obj: Any, key: Any) -> Any:
    """
    Доступ к члену объекта; отсутствие члена дает None.

    Словари — по ключу; списки и строки — по индексу и свойству length;
    прочие объекты — по публичному атрибуту.
    """
    if obj is None:
        return None

    if isinstance(obj, Mapping):
        return _get_mapping_item(obj, key)

    if isinstance(obj, (str, list, tuple)):
        if key == "length":
            return len(obj)
        index = _to_index(key)
        if index is not None and 0 <= index < len(obj):
            return obj[index]
        return None

    if isinstance(key, str) and key and not key.startswith("_"):
        return getattr(obj, key, None)

    return None


def iterate_pairs(value: Any) -> Iterator[Tuple[Any, Any]]:
    """
    Раскладывает значение итератора for в пары (значение, индекс/ключ).

    - словарь: (значение, ключ) в порядке вставки;
    - строка: (символ, индекс);
    - число N: (i + 1, i) для всех i < |N| (дробное N округляется вверх);
    - прочие итерируемые: (элемент, индекс).

    Для неитерируемых значений (None, bool, прочие скаляры) пар нет.
    """
    if value is None or isinstance(value, bool):
        return iter(())

    if isinstance(value, Mapping):
        return ((item, key) for key, item in value.items())

    if isinstance(value, str):
        return ((char, index) for index, char in enumerate(value))

    if is_number(value):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return iter(())
        return ((index + 1, index) for index in range(math.ceil(abs(value))))

    if isinstance(value, Iterable):
        return ((item, index) for index, item in enumerate(value))

    return iter(())


def is_iterable_value(value: Any) -> bool:
    """Поддерживается ли значение как итератор {for}."""
    if value is None or isinstance(value, bool):
        return False
    return isinstance(value, (Mapping, str, Iterable)) or is_number(value)


__all__ = [
    "truthy",
    "to_number",
    "to_display",
    "format_number",
    "loose_equals",
    "add",
    "subtract",
    "multiply",
    "divide",
    "compare",
    "get_member",
    "iterate_pairs",
    "is_iterable_value",
]
