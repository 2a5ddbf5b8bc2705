"""
Генерация класса сервиса: classmap, конструктор движка и методы групп операций
"""

import logging
from typing import List, Optional

from ...runtime import CLASSMAP_KEY
from ..types.contract import OverloadGroup, PrimitiveKind, ServiceNode, is_primitive_kind
from ..types.models import Class, CodeBlock, Function, Parameter, Variable
from ..utils.naming import normalize_type
from .class_emitter import ClassEmitter
from .templates import templates
from .type_graph import TypeGraph

logger = logging.getLogger(__name__)


class ServiceEmitter:
    """Превращает ServiceNode в класс-прокси над движком вызовов"""

    def __init__(self, graph: TypeGraph, contract_location: str = ""):
        self.graph = graph
        self.class_emitter = ClassEmitter(graph)
        self.contract_location = contract_location

    @staticmethod
    def classmap_entries(service: ServiceNode) -> List[tuple]:
        """
        Пары (сырое имя, значение) для литерала classmap.

        Примитивы остаются метками вида, сгенерированные классы
        записываются как "<Service>.<TypeId>".
        """
        entries = []
        for raw_name, value in service.class_map.items():
            if is_primitive_kind(value):
                entries.append((raw_name, PrimitiveKind(value).value))
            else:
                entries.append((raw_name, f"{service.validated_name}.{value}"))
        return entries

    def classmap_literal(self, service: ServiceNode) -> str:
        entries = self.classmap_entries(service)
        if not entries:
            return "classmap: ClassVar[Dict[str, str]] = {}"

        return (
            "classmap: ClassVar[Dict[str, str]] = {\n"
            + "".join(f"    {raw!r}: {value!r},\n" for raw, value in entries)
            + "}"
        )

    def emit(
        self, service: ServiceNode, class_name: Optional[str] = None, abstract: bool = False
    ) -> Class:
        class_name = class_name or service.validated_name

        docstring = class_name
        if service.raw_name != class_name:
            docstring += f"\n\nService: {service.raw_name}"

        service_class = Class(name=class_name, docstring=docstring)
        service_class.add_code_block(CodeBlock(code=self.classmap_literal(service), order=40))

        if abstract:
            service_class.add_function(
                Function(
                    name="__new__",
                    parameters=[
                        Parameter(name="cls"),
                        Parameter(name="*args"),
                        Parameter(name="**kwargs"),
                    ],
                    response=None,
                    code=CodeBlock(code=templates.new_body.format(name=class_name)),
                    order=30,
                )
            )

        service_class.add_function(self._constructor())

        for group in service.groups:
            if group.name in service_class.functions:
                logger.warning(
                    "Метод %s.%s совпадает со служебным и пропущен", class_name, group.name
                )
                continue
            service_class.add_function(self.emit_group(group))

        logger.debug(
            "Сервис %s: методов %d, записей classmap %d",
            class_name,
            len(service.groups),
            len(service.class_map),
        )
        return service_class

    def _constructor(self) -> Function:
        return Function(
            name="__init__",
            parameters=[
                Parameter(name="self"),
                Parameter(
                    name="wsdl",
                    var_type=Variable(value="str"),
                    default=Variable(value=repr(self.contract_location or "")),
                ),
                Parameter(
                    name="options",
                    var_type=Variable(
                        value=Variable(value=["str", "Any"], wrap_name="Dict"),
                        wrap_name="Optional",
                    ),
                    default=Variable(value="None"),
                ),
            ],
            response="None",
            docstring=templates.init_docstring,
            code=CodeBlock(code=templates.init_body.format(key=CLASSMAP_KEY)),
            order=20,
        )

    def composite_annotation(self, group: OverloadGroup) -> str:
        """Тип составного параметра: класс с именем группы, если он есть"""
        node = self.graph.resolve(normalize_type(group.name))
        return node.validated_name if node is not None else "Any"

    def return_annotation(self, group: OverloadGroup) -> str:
        annotations = []
        for ref in group.return_types:
            text = str(self.class_emitter.annotation(ref, quote_names=False))
            if text not in annotations:
                annotations.append(text)

        if not annotations:
            return "Any"
        if len(annotations) == 1:
            return annotations[0]
        return f"Union[{', '.join(annotations)}]"

    def group_docstring(self, group: OverloadGroup) -> str:
        lines = [f"Service Call: {group.name}", ""]

        lines.append("Parameter options:")
        for operation in group.operations:
            signature = ", ".join(
                f"({entry.declared_type}) {entry.validated_name}"
                for entry in operation.parameters
            )
            lines.append(f"    {signature or '(no parameters)'}")

        lines += [
            "",
            "Args:",
            f"    {group.name} ({self.composite_annotation(group)}): "
            "Composite call parameter",
            "",
            "Returns:",
            "    " + (" | ".join(map(str, group.return_types)) or "Any"),
        ]
        return "\n".join(lines)

    def emit_group(self, group: OverloadGroup) -> Function:
        """Один метод на группу перегрузок, вызов по имени первой операции"""
        return Function(
            name=group.name,
            parameters=[
                Parameter(name="self"),
                Parameter(
                    name=group.name,
                    var_type=Variable(value=f'"{self.composite_annotation(group)}"'),
                ),
            ],
            response=f'"{self.return_annotation(group)}"',
            docstring=self.group_docstring(group),
            code=CodeBlock(
                code=templates.call_body.format(
                    wire_name=group.wire_name, parameter=group.name
                )
            ),
        )
