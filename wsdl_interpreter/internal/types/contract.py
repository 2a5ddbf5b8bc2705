"""
Промежуточная модель контракта: сырые дескрипторы и нормализованные узлы
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...errors import InvalidTypeKind


class PrimitiveKind(str, Enum):
    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"


def is_primitive_kind(value: Any) -> bool:
    """Является ли значение именем примитивного вида (integer/double/string)"""
    if isinstance(value, PrimitiveKind):
        return True
    if not isinstance(value, str):
        raise InvalidTypeKind(value)

    return value in {kind.value for kind in PrimitiveKind}


# Сырые дескрипторы в том виде, в каком их отдает внешний трансформер


class EntryDescriptor(BaseModel):
    name: str
    type: str = ""


class ClassDescriptor(BaseModel):
    name: str
    extends: Optional[str] = None
    entries: List[EntryDescriptor] = []

    @field_validator("extends", mode="before")
    def empty_extends(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value


class FunctionDescriptor(BaseModel):
    name: str
    parameters: List[EntryDescriptor] = []
    returns: List[EntryDescriptor] = []


class ServiceDescriptor(BaseModel):
    name: str
    functions: List[FunctionDescriptor] = []


class ContractModel(BaseModel):
    """Промежуточная модель: классы сообщений и сервисы"""

    location: Optional[str] = None
    classes: List[ClassDescriptor] = []
    services: List[ServiceDescriptor] = []


# Нормализованные узлы


class TypeRef(BaseModel):
    """Ссылка на тип: примитив или сплющенное имя с учетом пространства имен"""

    model_config = ConfigDict(frozen=True)

    name: str
    local_name: str = ""
    primitive: Optional[PrimitiveKind] = None
    is_array: bool = False

    @property
    def is_primitive(self) -> bool:
        return self.primitive is not None

    def __str__(self):
        return self.name + ("[]" if self.is_array else "")


class FieldNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_name: str
    validated_name: str
    raw_type: str = ""
    declared_type: TypeRef

    @property
    def renamed(self) -> bool:
        return self.raw_name != self.validated_name


class TypeNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_name: str
    validated_name: str
    base_raw_name: Optional[str] = None
    base_type: Optional[TypeRef] = None
    fields: Tuple[FieldNode, ...] = ()

    @property
    def renamed_fields(self) -> Tuple[FieldNode, ...]:
        return tuple(f for f in self.fields if f.renamed)


class OperationNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_name: str
    validated_name: str
    parameters: Tuple[FieldNode, ...] = ()
    returns: Tuple[FieldNode, ...] = ()

    @property
    def declared_return_types(self) -> Tuple[TypeRef, ...]:
        # Значимым считается только первый элемент returns
        return (self.returns[0].declared_type,) if self.returns else ()


class OverloadGroup(BaseModel):
    """Операции с одинаковым нормализованным именем"""

    model_config = ConfigDict(frozen=True)

    name: str
    operations: Tuple[OperationNode, ...]

    @property
    def wire_name(self) -> str:
        return self.operations[0].raw_name

    @property
    def return_types(self) -> Tuple[TypeRef, ...]:
        unique = []
        for operation in self.operations:
            for ref in operation.declared_return_types:
                if ref not in unique:
                    unique.append(ref)
        return tuple(unique)


ClassMapValue = Union[PrimitiveKind, str]


class ServiceNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_name: str
    validated_name: str
    operations: Tuple[OperationNode, ...] = ()
    groups: Tuple[OverloadGroup, ...] = ()
    class_map: Dict[str, ClassMapValue] = Field(default_factory=dict)


class ClassMap(Mapping):
    """Неизменяемое отображение: сырое имя типа -> примитив или id класса"""

    def __init__(self, entries: Optional[Mapping[str, ClassMapValue]] = None):
        self._entries = MappingProxyType(dict(entries or {}))

    def __getitem__(self, raw_name: str) -> ClassMapValue:
        return self._entries[raw_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self):
        return f"ClassMap({dict(self._entries)!r})"

    def is_primitive(self, raw_name: str) -> bool:
        return is_primitive_kind(self._entries[raw_name])
