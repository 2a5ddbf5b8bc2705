"""
Модель сервисов: нормализация имен, группы перегрузок и classmap сервиса
"""

import logging
from typing import Dict, List, Sequence, Set

from ..types.contract import (
    ClassMapValue,
    FieldNode,
    FunctionDescriptor,
    OperationNode,
    OverloadGroup,
    ServiceDescriptor,
    ServiceNode,
    TypeNode,
)
from ..utils.naming import (
    normalize_identifier,
    normalize_type,
    operation_identifier,
    strip_array_suffix,
)
from .type_graph import TypeGraph, build_field

logger = logging.getLogger(__name__)


class ServiceModelBuilder:
    """Строит ServiceNode поверх уже готового графа типов"""

    def __init__(self, graph: TypeGraph):
        self.graph = graph

    def build_all(self, descriptors: Sequence[ServiceDescriptor]) -> List[ServiceNode]:
        services: Dict[str, ServiceNode] = {}

        for descriptor in descriptors:
            service = self.build(descriptor)
            if service is None:
                continue

            if service.validated_name in services:
                logger.warning(
                    "Сервис %r перезаписывает ранее загруженный %s",
                    descriptor.name,
                    service.validated_name,
                )
            services[service.validated_name] = service

        logger.debug("Загружено сервисов: %d", len(services))
        return list(services.values())

    def build(self, descriptor: ServiceDescriptor):
        # Имена сервисов живут отдельно от типов и в ClassMap не попадают
        validated_name = normalize_identifier(descriptor.name)
        if not validated_name:
            logger.warning("Сервис %r пропущен: пустое имя", descriptor.name)
            return None

        operations = [
            operation
            for operation in map(self._build_operation, descriptor.functions)
            if operation is not None
        ]
        groups = self.group_operations(operations)

        return ServiceNode(
            raw_name=descriptor.name,
            validated_name=validated_name,
            operations=tuple(operations),
            groups=tuple(groups),
            class_map=self.scoped_class_map(operations, groups),
        )

    def _build_operation(self, descriptor: FunctionDescriptor):
        validated_name = operation_identifier(descriptor.name)
        if not validated_name:
            logger.warning("Операция %r пропущена: пустое имя", descriptor.name)
            return None

        return OperationNode(
            raw_name=descriptor.name,
            validated_name=validated_name,
            parameters=tuple(
                build_field(entry, position)
                for position, entry in enumerate(descriptor.parameters)
            ),
            returns=tuple(
                build_field(entry, position)
                for position, entry in enumerate(descriptor.returns)
            ),
        )

    @staticmethod
    def group_operations(operations: Sequence[OperationNode]) -> List[OverloadGroup]:
        """Операции с одинаковым нормализованным именем сливаются в одну группу"""
        buckets: Dict[str, List[OperationNode]] = {}
        for operation in operations:
            buckets.setdefault(operation.validated_name, []).append(operation)

        return [
            OverloadGroup(name=name, operations=tuple(members))
            for name, members in buckets.items()
        ]

    def used_types(
        self, operations: Sequence[OperationNode], groups: Sequence[OverloadGroup]
    ) -> List[TypeNode]:
        """Замыкание типов, достижимых из параметров и результатов сервиса"""
        queue: List[TypeNode] = []

        for operation in operations:
            for entry in operation.parameters + operation.returns:
                node = self.graph.resolve(entry.declared_type)
                if node is not None:
                    queue.append(node)

        # Составной параметр назван по имени группы
        for group in groups:
            node = self.graph.resolve(normalize_type(group.name))
            if node is not None:
                queue.append(node)

        used: Dict[str, TypeNode] = {}
        while queue:
            node = queue.pop(0)
            if node.validated_name in used:
                continue
            used[node.validated_name] = node

            base = self.graph.base_of(node)
            if base is not None:
                queue.append(base)
            for field in node.fields:
                referenced = self.graph.resolve(field.declared_type)
                if referenced is not None:
                    queue.append(referenced)

        return list(used.values())

    def scoped_class_map(
        self, operations: Sequence[OperationNode], groups: Sequence[OverloadGroup]
    ) -> Dict[str, ClassMapValue]:
        """Часть ClassMap, которую действительно использует сервис"""
        used = self.used_types(operations, groups)
        used_names = {node.validated_name for node in used}

        raw_names: Set[str] = set()
        for node in used:
            if node.base_raw_name:
                raw_names.add(node.base_raw_name)
            raw_names.update(_raw_types(node.fields))
        for operation in operations:
            raw_names.update(_raw_types(operation.parameters + operation.returns))

        class_map = self.graph.class_map
        return {
            raw_name: value
            for raw_name, value in class_map.items()
            if raw_name in raw_names
            or (not class_map.is_primitive(raw_name) and value in used_names)
        }


def _raw_types(fields: Sequence[FieldNode]) -> Set[str]:
    return {strip_array_suffix(field.raw_type) for field in fields if field.raw_type}
