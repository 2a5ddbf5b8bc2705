"""
Генерация pydantic моделей для классов сообщений
"""

import logging
from typing import Dict, List

from ..types.contract import FieldNode, TypeNode, TypeRef
from ..types.models import Class, CodeBlock, Function, Parameter, Variable
from ..utils.naming import PYTHON_TYPES
from .type_graph import TypeGraph

logger = logging.getLogger(__name__)

PARAMETER_MAP_NAME = "_parameter_map"


class ClassEmitter:
    """Превращает узел графа типов в объявление класса"""

    def __init__(self, graph: TypeGraph):
        self.graph = graph

    def annotation(self, ref: TypeRef, quote_names: bool = True) -> Variable:
        """Аннотация для ссылки на тип: int, "Forecast", List["Forecast"], Any"""
        if ref.is_primitive:
            inner = PYTHON_TYPES[ref.primitive]
        else:
            node = self.graph.resolve(ref)
            if node is None:
                inner = "Any"
            elif quote_names:
                inner = f'"{node.validated_name}"'
            else:
                inner = node.validated_name

        variable = Variable(value=inner)
        if ref.is_array:
            variable = Variable(value=variable, wrap_name="List")

        return variable

    def emit(self, node: TypeNode) -> Class:
        base = self.graph.base_of(node)

        docstring = node.validated_name
        if node.raw_name != node.validated_name:
            docstring += f"\n\nWire type: {node.raw_name}"

        model_class = Class(
            name=node.validated_name,
            inherits=[base.validated_name if base else "BaseModel"],
            docstring=docstring,
        )

        seen = set()
        for field in node.fields:
            if field.validated_name in seen:
                logger.warning(
                    "Поле %s.%s объявлено повторно (%r)",
                    node.validated_name,
                    field.validated_name,
                    field.raw_name,
                )
            seen.add(field.validated_name)
            model_class.parameters.append(self._field_parameter(field))

        if node.renamed_fields:
            self._add_parameter_map(model_class, node)

        return model_class

    def _field_parameter(self, field: FieldNode) -> Parameter:
        field_type = Variable(
            value=self.annotation(field.declared_type), wrap_name="Optional"
        )

        if field.renamed:
            # Движок заполняет поля по именам из контракта
            default = Variable(value=f"Field(default=None, alias={field.raw_name!r})")
        else:
            default = Variable(value="None")

        return Parameter(name=field.validated_name, var_type=field_type, default=default)

    def parameter_map(self, node: TypeNode) -> Dict[str, str]:
        """Таблица сырое имя -> имя поля, включая унаследованные поля"""
        lineage: List[TypeNode] = []
        current = node
        while current is not None and current not in lineage:
            lineage.insert(0, current)
            current = self.graph.base_of(current)

        table: Dict[str, str] = {}
        declared = set()
        for ancestor in lineage:
            declared.update(f.validated_name for f in ancestor.fields)
            for field in ancestor.renamed_fields:
                table[field.raw_name] = field.validated_name

        missing = sorted(set(table.values()) - declared)
        if missing:
            raise ValueError(
                f"Таблица полей {node.validated_name} ссылается на неизвестные поля: "
                + ", ".join(missing)
            )

        return table

    def _add_parameter_map(self, model_class: Class, node: TypeNode):
        table = self.parameter_map(node)

        model_class.add_code_block(
            CodeBlock(code="model_config = ConfigDict(populate_by_name=True)", order=20)
        )
        model_class.add_code_block(
            CodeBlock(
                code=(
                    f"{PARAMETER_MAP_NAME}: ClassVar[Dict[str, str]] = {{\n"
                    + "".join(
                        f"    {raw!r}: {validated!r},\n"
                        for raw, validated in table.items()
                    )
                    + "}"
                ),
                order=10,
            )
        )

        for field in node.renamed_fields:
            field_type = Variable(
                value=self.annotation(field.declared_type), wrap_name="Optional"
            )
            key = f"self.{PARAMETER_MAP_NAME}[{field.raw_name!r}]"

            model_class.add_function(
                Function(
                    name=f"get_{field.validated_name}",
                    parameters=[Parameter(name="self")],
                    response=str(field_type),
                    docstring=f"Provided for getting the non-standard named field {field.raw_name!r}",
                    code=CodeBlock(code=f"return getattr(self, {key})"),
                )
            )
            model_class.add_function(
                Function(
                    name=f"set_{field.validated_name}",
                    parameters=[
                        Parameter(name="self"),
                        Parameter(name="value", var_type=field_type),
                    ],
                    response="None",
                    docstring=f"Provided for setting the non-standard named field {field.raw_name!r}",
                    code=CodeBlock(code=f"setattr(self, {key}, value)"),
                )
            )
