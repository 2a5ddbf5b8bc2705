"""
Контракт движка вызовов, которым пользуется сгенерированный код сервисов
"""

from typing import Any, Dict, List, Optional, Tuple

# Зарезервированный ключ options, в который сервис вливает свой classmap
CLASSMAP_KEY = "classmap"

DEFAULT_ENGINE = "wsdl_interpreter.runtime:InvocationEngine"


class InvocationEngine:
    """
    Базовый движок удаленных вызовов.

    Сгенерированный сервис создает ровно один экземпляр движка:
    InvocationEngine(wsdl, options), где options[CLASSMAP_KEY] содержит
    отображение сырых имен типов контракта на примитивы или id классов.

    Класс задает только контракт конструктора и call и транспорта не имеет.
    Конкретный движок наследуется от него и переопределяет call, а в
    генератор передается через engine="module:Class". Движок по умолчанию
    позволяет импортировать и создавать сгенерированные сервисы, но любой
    вызов операции на нем завершается NotImplementedError.
    """

    def __init__(self, wsdl: str, options: Optional[Dict[str, Any]] = None):
        self.wsdl = wsdl
        self.options = dict(options or {})
        self.classmap: Dict[str, str] = dict(self.options.get(CLASSMAP_KEY) or {})

    def call(self, method: str, arguments: List[Any]) -> Any:
        """Удаленный вызов операции method с оригинальным именем из контракта"""
        raise NotImplementedError(
            f"{type(self).__name__} не умеет выполнять вызовы ({method}); "
            "укажите движок через параметр engine"
        )


def resolve_engine_path(path: str) -> Tuple[str, str]:
    """
    Разбор ссылки на движок вида "package.module:ClassName".

    Examples:
        >>> resolve_engine_path("wsdl_interpreter.runtime:InvocationEngine")
        ('wsdl_interpreter.runtime', 'InvocationEngine')
    """
    module, separator, attribute = (path or "").partition(":")

    if (
        not separator
        or not attribute.isidentifier()
        or not all(part.isidentifier() for part in module.split("."))
    ):
        raise ValueError(
            f"Некорректная ссылка на движок: {path!r} (ожидается module:Class)"
        )

    return module, attribute
