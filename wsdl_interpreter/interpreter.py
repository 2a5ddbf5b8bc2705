"""
Главный модуль интерпретатора - чистый интерфейс
"""

import keyword
import logging
from datetime import datetime
from functools import cached_property
from typing import Dict, List, Optional

from .errors import NameCollision, NoServicesLoaded
from .internal.generator.class_emitter import ClassEmitter
from .internal.generator.service_emitter import ServiceEmitter
from .internal.generator.service_model import ServiceModelBuilder
from .internal.generator.templates import templates
from .internal.generator.type_graph import TypeGraph, TypeGraphBuilder
from .internal.parser.contract_loader import ContractSource, Transform, load_contract
from .internal.types.contract import ClassMap, ServiceNode
from .internal.types.models import Class, CodeBlock, CodeFile, Project
from .internal.writer.artifact_writer import (
    ArtifactWriter,
    base_file_name,
    stub_file_name,
)
from .runtime import DEFAULT_ENGINE, resolve_engine_path

logger = logging.getLogger(__name__)


class WsdlInterpreter:
    """
    Чистый интерфейс для генерации клиентов сервисов.

    Контракт загружается и проверяется в конструкторе. Граф типов и модель
    сервисов строятся лениво, поэтому CyclicOrMissingBase возникает при
    первой генерации.
    """

    def __init__(
        self,
        contract: ContractSource,
        location: Optional[str] = None,
        transform: Optional[Transform] = None,
        engine: str = DEFAULT_ENGINE,
    ):
        resolve_engine_path(engine)

        self.contract = load_contract(contract, transform=transform, location=location)
        self.location = self.contract.location or ""
        self.engine = engine
        self._service_aliases: Dict[str, str] = {}

    @cached_property
    def type_graph(self) -> TypeGraph:
        return TypeGraphBuilder().build(self.contract.classes)

    @property
    def class_map(self) -> ClassMap:
        return self.type_graph.class_map

    @cached_property
    def services(self) -> List[ServiceNode]:
        return ServiceModelBuilder(self.type_graph).build_all(self.contract.services)

    @cached_property
    def type_classes(self) -> List[Class]:
        emitter = ClassEmitter(self.type_graph)
        return [emitter.emit(node) for node in self.type_graph]

    def set_service_alias(self, service_name: str, alias: str):
        """Имя выходных файлов и классов для сервиса вместо нормализованного"""
        if not alias.isidentifier() or keyword.iskeyword(alias):
            raise ValueError(
                f"Псевдоним сервиса должен быть идентификатором Python: {alias!r}"
            )
        self._service_aliases[service_name] = alias

    def get_service_alias(self, service: ServiceNode) -> str:
        return (
            self._service_aliases.get(service.raw_name)
            or self._service_aliases.get(service.validated_name)
            or service.validated_name
        )

    def _require_services(self) -> List[ServiceNode]:
        if not self.services:
            raise NoServicesLoaded()
        return self.services

    def check_client_names(self, services: List[ServiceNode]):
        """Клиент и его базовый класс не должны заслонять классы контракта"""
        taken: Dict[str, str] = {
            name: f"contract type {name}" for name in self.type_graph.names
        }

        for service in services:
            name = self.get_service_alias(service)
            for class_name in (name, f"{name}Base"):
                if class_name in taken:
                    raise NameCollision(class_name, taken[class_name])
            taken[name] = taken[f"{name}Base"] = f"service {service.raw_name}"

    def base_file(self, service: ServiceNode, generated_on: datetime) -> CodeFile:
        name = self.get_service_alias(service)

        code_file = CodeFile(
            file_name=base_file_name(name),
            header=templates.banner(generated_on, self.location),
            imports=[
                templates.base_imports.format(
                    engine_import=templates.engine_import(self.engine)
                )
            ],
        )

        for model_class in self.type_classes:
            code_file.add_class(model_class.model_copy(update={"order": 20}))

        service_class = ServiceEmitter(self.type_graph, self.location).emit(
            service, class_name=f"{name}Base", abstract=True
        )
        service_class.order = 10
        code_file.add_class(service_class)

        if self.type_classes:
            code_file.add_code_block(
                CodeBlock(
                    code="\n".join(
                        f"{model_class.name}.model_rebuild()"
                        for model_class in self.type_classes
                    ),
                    order=0,
                )
            )

        return code_file

    def stub_file(self, service: ServiceNode, generated_on: datetime) -> CodeFile:
        name = self.get_service_alias(service)

        code_file = CodeFile(
            file_name=stub_file_name(name),
            overwrite=False,
            imports=[templates.stub_imports.format(name=name)],
        )
        code_file.add_class(
            Class(
                name=name,
                inherits=[f"{name}Base"],
                docstring=templates.stub_docstring.format(
                    name=name, generated_on=templates.timestamp(generated_on)
                ),
            )
        )
        return code_file

    def generate(self, generated_on: Optional[datetime] = None) -> Project:
        """Генерация всех файлов в памяти, без записи на диск"""
        services = self._require_services()
        self.check_client_names(services)
        generated_on = generated_on or datetime.now().astimezone()

        project = Project(name=self.location or "wsdl_client")
        for service in services:
            project.add_file(self.base_file(service, generated_on))
            project.add_file(self.stub_file(service, generated_on))

        return project

    def emit(self, output_dir: str, generated_on: Optional[datetime] = None) -> List[str]:
        """
        Запись клиентов всех сервисов в output_dir.

        Returns:
            пути записанных файлов; существующие файлы пользователя пропускаются
        """
        project = self.generate(generated_on)
        written = ArtifactWriter(output_dir).write(project)

        logger.debug("Записано файлов: %d", len(written))
        return written

    def client_exists(self, output_dir: str) -> bool:
        """Есть ли уже в output_dir файл пользователя хотя бы для одного сервиса"""
        services = self._require_services()
        return ArtifactWriter(output_dir).stub_exists(
            self.get_service_alias(service) for service in services
        )
