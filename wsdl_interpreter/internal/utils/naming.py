"""Нормализация имен и типов контракта в идентификаторы Python"""

import keyword
from typing import Dict, Optional

from pydantic import BaseModel

from ..types.contract import PrimitiveKind, TypeRef

NAMESPACE_SEPARATOR = ":"
ARRAY_SUFFIX = "[]"

# Встроенные примитивы схемы (сравнение без учета регистра)
PRIMITIVE_TYPES: Dict[str, PrimitiveKind] = {
    token.lower(): kind
    for kind, tokens in {
        PrimitiveKind.INTEGER: [
            "int",
            "integer",
            "long",
            "byte",
            "short",
            "negativeInteger",
            "nonNegativeInteger",
            "nonPositiveInteger",
            "positiveInteger",
            "unsignedByte",
            "unsignedInt",
            "unsignedLong",
            "unsignedShort",
        ],
        PrimitiveKind.DOUBLE: ["float", "double", "decimal"],
        PrimitiveKind.STRING: ["string", "token", "normalizedString", "hexBinary"],
    }.items()
    for token in tokens
}

PYTHON_TYPES: Dict[PrimitiveKind, str] = {
    PrimitiveKind.INTEGER: "int",
    PrimitiveKind.DOUBLE: "float",
    PrimitiveKind.STRING: "str",
}

# Имена, которые связывает сам сгенерированный модуль
GENERATED_MODULE_NAMES = frozenset(
    {
        "Any",
        "ClassVar",
        "Dict",
        "List",
        "Optional",
        "Union",
        "BaseModel",
        "ConfigDict",
        "Field",
        "InvocationEngine",
        "int",
        "float",
        "str",
        "dict",
        "getattr",
        "setattr",
        "super",
        "TypeError",
    }
)

# Имена, которые pydantic не дает использовать как поля модели
RESERVED_FIELD_NAMES = (
    frozenset(name for name in dir(BaseModel) if not name.startswith("_"))
    | GENERATED_MODULE_NAMES
)

RESERVED_OPERATION_NAMES = frozenset({"self", "classmap"})


def _is_identifier_char(char: str) -> bool:
    return ("a" + char).isidentifier()


def _strip_leading(name: str, allow_underscore: bool = True) -> str:
    while name and not (
        name[0].isidentifier() and (allow_underscore or name[0] != "_")
    ):
        name = name[1:]
    return name


def _escape_keyword(name: str) -> str:
    return f"{name}_" if keyword.iskeyword(name) else name


def normalize_identifier(name: str) -> str:
    """
    Приводит произвольное имя к допустимому идентификатору Python.

    Из имени удаляются недопустимые символы, затем отрезается ведущая
    последовательность символов, которые не могут начинать идентификатор.
    Результат либо пустой, либо начинается с буквы или "_". Ключевые слова
    получают завершающий "_".

    Examples:
        >>> normalize_identifier("MY-VAR")
        'MYVAR'
        >>> normalize_identifier("123get-Item")
        'getItem'
        >>> normalize_identifier("class")
        'class_'
    """
    name = "".join(c for c in (name or "") if _is_identifier_char(c))
    return _escape_keyword(_strip_leading(name))


def type_identifier(name: str) -> str:
    """Имя класса: нормализация плюс защита от имен сгенерированного модуля"""
    name = normalize_identifier(name)
    return f"{name}_" if name in GENERATED_MODULE_NAMES else name


def class_identifier(raw: str) -> str:
    """
    Имя класса с сохранением пространства имен.

    Совпадает с TypeRef.name из normalize_type для того же сырого имени,
    поэтому "tns:Forecast" в extends и в типе поля находит класс "tns:Forecast".

    Examples:
        >>> class_identifier("tns:Forecast")
        'tns_Forecast'
    """
    namespace_parts = (raw or "").strip().split(NAMESPACE_SEPARATOR)
    local_name = type_identifier(namespace_parts.pop())
    if not local_name:
        return ""

    prefix = [p for p in map(normalize_identifier, namespace_parts) if p]
    return type_identifier("_".join(prefix + [local_name]))


def field_identifier(name: str) -> str:
    """Имя поля модели: нормализация плюс защита от атрибутов BaseModel"""
    # Поле pydantic с ведущим "_" стало бы приватным
    name = _escape_keyword(_strip_leading(normalize_identifier(name), False))

    if name in RESERVED_FIELD_NAMES or name.startswith("model_"):
        name = f"{name}_field"

    return name


def operation_identifier(name: str) -> str:
    # Имена "__x" в теле класса искажаются, "__init__" занят конструктором
    name = _escape_keyword(_strip_leading(normalize_identifier(name), False))
    return f"{name}_" if name in RESERVED_OPERATION_NAMES else name


def primitive_kind(token: str) -> Optional[PrimitiveKind]:
    """Примитивный вид для токена схемы или None"""
    return PRIMITIVE_TYPES.get((token or "").lower())


def normalize_type(raw: str) -> TypeRef:
    """
    Нормализация типа из контракта.

    "xsd:int" -> integer, "tns:Forecast[]" -> массив tns_Forecast.
    Сегменты пространства имен сохраняются через "_", чтобы одинаковые
    локальные имена из разных пространств не сталкивались.
    """
    raw = (raw or "").strip()

    namespace_parts = []
    local = raw
    if NAMESPACE_SEPARATOR in raw:
        namespace_parts = raw.split(NAMESPACE_SEPARATOR)
        local = namespace_parts.pop()

    is_array = False
    if local.endswith(ARRAY_SUFFIX):
        is_array = True
        local = local[: -len(ARRAY_SUFFIX)]

    kind = primitive_kind(local)
    if kind is not None:
        return TypeRef(
            name=kind.value, local_name=kind.value, primitive=kind, is_array=is_array
        )

    return TypeRef(
        name=class_identifier(NAMESPACE_SEPARATOR.join(namespace_parts + [local])),
        local_name=type_identifier(local),
        is_array=is_array,
    )


def strip_array_suffix(raw: str) -> str:
    raw = (raw or "").strip()
    return raw[: -len(ARRAY_SUFFIX)] if raw.endswith(ARRAY_SUFFIX) else raw
