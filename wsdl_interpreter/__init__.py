"""Генератор Python-клиентов из промежуточной модели контракта сервиса"""

from .errors import (
    ContractLoadError,
    CyclicOrMissingBase,
    DirectoryCreateError,
    InvalidTypeKind,
    NameCollision,
    NoServicesLoaded,
    TransformError,
    WritingError,
    WSDLInterpreterError,
)
from .interpreter import WsdlInterpreter

__all__ = [
    "WsdlInterpreter",
    "WSDLInterpreterError",
    "ContractLoadError",
    "TransformError",
    "CyclicOrMissingBase",
    "NoServicesLoaded",
    "DirectoryCreateError",
    "WritingError",
    "InvalidTypeKind",
    "NameCollision",
]
