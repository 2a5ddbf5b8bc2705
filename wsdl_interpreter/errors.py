"""
Исключения интерпретатора контрактов
"""

from typing import Any, Iterable, Optional


class WSDLInterpreterError(Exception):
    """Базовое исключение для всех неустранимых ошибок интерпретации"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ContractLoadError(WSDLInterpreterError):
    """Документ контракта не удалось загрузить"""

    def __init__(self, location: str, reason: Any):
        self.location = location
        super().__init__(f"Error loading contract document {location} ({reason})")


class TransformError(WSDLInterpreterError):
    """Преобразование документа в промежуточную модель не удалось"""

    def __init__(self, location: Optional[str], reason: Any):
        self.location = location
        super().__init__(
            f"Error interpreting contract document {location or '<memory>'} ({reason})"
        )


class CyclicOrMissingBase(WSDLInterpreterError):
    """Классы, чьи базовые классы образуют цикл или не определены"""

    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(f"Error loading classes: {', '.join(self.names)}")


class NoServicesLoaded(WSDLInterpreterError):
    def __init__(self):
        super().__init__("No services loaded")


class DirectoryCreateError(WSDLInterpreterError):
    def __init__(self, path: str, reason: Any = None):
        self.path = path
        super().__init__(
            f"Unable to create dir {path}" + (f" ({reason})" if reason else "")
        )


class WritingError(WSDLInterpreterError):
    """Ошибка записи сгенерированных файлов"""

    def __init__(self, path: Optional[str] = None, reason: Any = None):
        self.path = path
        message = "Error writing source files"
        if path:
            message += f": {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidTypeKind(WSDLInterpreterError):
    """Внутренняя проверка: вид типа должен быть строкой"""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Given type must be a string, {type(value).__name__} given"
        )


class NameCollision(WSDLInterpreterError):
    """Имя клиента сервиса совпадает с классом контракта или другим клиентом"""

    def __init__(self, name: str, conflict: str):
        self.name = name
        self.conflict = conflict
        super().__init__(
            f"Client name {name} collides with {conflict}; use set_service_alias"
        )
