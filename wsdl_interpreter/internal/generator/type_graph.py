"""
Граф типов: нормализация классов сообщений, ClassMap и порядок наследования
"""

import logging
from typing import AbstractSet, Dict, Iterator, List, Optional, Sequence

from ...errors import CyclicOrMissingBase
from ..types.contract import (
    ClassDescriptor,
    ClassMap,
    ClassMapValue,
    EntryDescriptor,
    FieldNode,
    TypeNode,
    TypeRef,
)
from ..utils.naming import (
    NAMESPACE_SEPARATOR,
    class_identifier,
    field_identifier,
    normalize_type,
    type_identifier,
)

logger = logging.getLogger(__name__)


def build_field(
    entry: EntryDescriptor, position: int, type_names: AbstractSet[str] = frozenset()
) -> FieldNode:
    """Нормализация одного entry (поле класса или параметр операции)"""
    validated_name = field_identifier(entry.name)
    if validated_name in type_names:
        # Поле не должно заслонять имя класса в аннотациях
        validated_name = f"{validated_name}_field"
    if not validated_name:
        validated_name = f"field{position}"
        logger.warning(
            "Поле %r не содержит допустимых символов, используется %s",
            entry.name,
            validated_name,
        )

    return FieldNode(
        raw_name=entry.name,
        validated_name=validated_name,
        raw_type=entry.type,
        declared_type=normalize_type(entry.type),
    )


def local_index(nodes: Dict[str, TypeNode]) -> Dict[str, TypeNode]:
    """Локальное имя класса без пространства имен -> узел"""
    index: Dict[str, TypeNode] = {}
    for node in nodes.values():
        local_name = type_identifier(node.raw_name.split(NAMESPACE_SEPARATOR)[-1])
        index.setdefault(local_name, node)
    return index


def resolve_ref(
    nodes: Dict[str, TypeNode],
    ref: Optional[TypeRef],
    by_local: Optional[Dict[str, TypeNode]] = None,
) -> Optional[TypeNode]:
    """Поиск узла по сплющенному имени, затем по локальному"""
    if ref is None or ref.is_primitive:
        return None

    return (
        nodes.get(ref.name)
        or nodes.get(ref.local_name)
        or (by_local or {}).get(ref.local_name)
    )


class TypeGraph:
    """Упорядоченные узлы (база раньше наследника) и ClassMap первой фазы"""

    def __init__(
        self,
        nodes: Sequence[TypeNode],
        class_map: ClassMap,
        by_local: Optional[Dict[str, TypeNode]] = None,
    ):
        self.nodes = tuple(nodes)
        self.class_map = class_map
        self._by_name = {node.validated_name: node for node in self.nodes}
        self._by_local = by_local if by_local is not None else local_index(self._by_name)

    def __iter__(self) -> Iterator[TypeNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, validated_name: str) -> bool:
        return validated_name in self._by_name

    def get(self, validated_name: str) -> Optional[TypeNode]:
        return self._by_name.get(validated_name)

    def resolve(self, ref: Optional[TypeRef]) -> Optional[TypeNode]:
        return resolve_ref(self._by_name, ref, self._by_local)

    def base_of(self, node: TypeNode) -> Optional[TypeNode]:
        return self.resolve(node.base_type)

    @property
    def names(self) -> List[str]:
        return [node.validated_name for node in self.nodes]


class TypeGraphBuilder:
    """Строит TypeGraph из сырых дескрипторов классов"""

    def build(self, descriptors: Sequence[ClassDescriptor]) -> TypeGraph:
        class_map: Dict[str, ClassMapValue] = {}
        nodes: Dict[str, TypeNode] = {}
        type_names = {class_identifier(d.name) for d in descriptors} - {""}

        for descriptor in descriptors:
            validated_name = class_identifier(descriptor.name)
            if not validated_name:
                logger.warning("Класс %r пропущен: пустое имя", descriptor.name)
                continue

            class_map[descriptor.name] = validated_name

            if validated_name in nodes:
                logger.warning(
                    "Класс %r перезаписывает ранее загруженный %s",
                    descriptor.name,
                    validated_name,
                )

            nodes[validated_name] = TypeNode(
                raw_name=descriptor.name,
                validated_name=validated_name,
                base_raw_name=descriptor.extends,
                base_type=(
                    normalize_type(descriptor.extends) if descriptor.extends else None
                ),
                fields=tuple(
                    build_field(entry, position, type_names)
                    for position, entry in enumerate(descriptor.entries)
                ),
            )

        by_local = local_index(nodes)

        # Сырые имена базовых классов тоже попадают в ClassMap
        for node in nodes.values():
            if node.base_type is None:
                continue
            if node.base_type.is_primitive:
                class_map.setdefault(node.base_raw_name, node.base_type.primitive)
                continue

            base = resolve_ref(nodes, node.base_type, by_local)
            if base is not None:
                class_map.setdefault(node.base_raw_name, base.validated_name)

        ordered = self._order(nodes, by_local)
        logger.debug("Загружено классов: %d", len(ordered))

        return TypeGraph(ordered, ClassMap(class_map), by_local)

    @staticmethod
    def _base_name(
        nodes: Dict[str, TypeNode], by_local: Dict[str, TypeNode], node: TypeNode
    ) -> Optional[str]:
        if node.base_type is None or node.base_type.is_primitive:
            return None

        base = resolve_ref(nodes, node.base_type, by_local)
        return base.validated_name if base is not None else node.base_type.name

    def _order(
        self, nodes: Dict[str, TypeNode], by_local: Dict[str, TypeNode]
    ) -> List[TypeNode]:
        """
        Упорядочивание "база раньше наследника".

        Остаток многократно просматривается; узел готов, если у него нет базы
        или база уже готова. Проход без единого перемещения означает цикл
        или ссылку на неопределенный класс.
        """
        pending = dict(nodes)
        ready: Dict[str, TypeNode] = {}

        while pending:
            loaded = 0
            for name, node in list(pending.items()):
                base_name = self._base_name(nodes, by_local, node)
                if base_name is None or base_name in ready:
                    ready[name] = node
                    del pending[name]
                    loaded += 1

            if loaded == 0:
                raise CyclicOrMissingBase(pending.keys())

        return list(ready.values())
