"""
Загрузка промежуточной модели контракта из файла, URL или словаря
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from xml.etree import ElementTree

import httpx
import jsonref
from pydantic import ValidationError

from ...errors import ContractLoadError, TransformError
from ..types.contract import ContractModel

logger = logging.getLogger(__name__)

# transform(text, location) -> словарь вида {"classes": [...], "services": [...]}
Transform = Callable[[str, str], Mapping[str, Any]]

ContractSource = Union[str, Mapping[str, Any], ContractModel]


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def fetch_document(location: str) -> str:
    """Чтение документа контракта с диска или по HTTP"""
    logger.debug("Загрузка контракта %s", location)

    try:
        if is_url(location):
            response = httpx.get(location, follow_redirects=True)
            response.raise_for_status()
            return response.text

        with open(location, "r", encoding="utf-8") as f:
            return f.read()
    except (httpx.HTTPError, OSError) as e:
        raise ContractLoadError(location, e) from e


def _local_name(tag: str) -> str:
    # {namespace}class -> class
    return tag.rsplit("}", 1)[-1]


def _children(element: ElementTree.Element, name: str) -> List[ElementTree.Element]:
    return [child for child in element.iter() if _local_name(child.tag) == name]


def _first(element: ElementTree.Element, name: str) -> Optional[ElementTree.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _entries(element: Optional[ElementTree.Element]) -> List[Dict[str, str]]:
    if element is None:
        return []

    return [
        {"name": entry.get("name", ""), "type": entry.get("type", "")}
        for entry in _children(element, "entry")
    ]


def parse_xml(text: str) -> Dict[str, Any]:
    """
    Разбор XML-формы промежуточной модели.

    <class name="B" extends="A"> или <class name="B"><extends>A</extends>,
    внутри - <entry name="..." type="..."/>. Сервисы: <service name="...">
    с <function name="..."> и вложенными <parameters>/<returns>.
    """
    root = ElementTree.fromstring(text)

    classes = []
    for element in _children(root, "class"):
        extends = element.get("extends")
        extends_element = _first(element, "extends")
        if extends is None and extends_element is not None:
            extends = extends_element.text

        classes.append(
            {
                "name": element.get("name", ""),
                "extends": extends,
                "entries": _entries(element),
            }
        )

    services = []
    for element in _children(root, "service"):
        services.append(
            {
                "name": element.get("name", ""),
                "functions": [
                    {
                        "name": function.get("name", ""),
                        "parameters": _entries(_first(function, "parameters")),
                        "returns": _entries(_first(function, "returns")),
                    }
                    for function in _children(element, "function")
                ],
            }
        )

    return {"classes": classes, "services": services}


def _base_uri(location: str) -> str:
    if not location or is_url(location):
        return location or ""
    return Path(os.path.abspath(location)).as_uri()


def parse_document(text: str, location: str = "") -> Mapping[str, Any]:
    """Трансформер по умолчанию: XML или JSON с разрешением $ref"""
    if text.lstrip().startswith("<"):
        return parse_xml(text.lstrip())

    return jsonref.loads(text, base_uri=_base_uri(location), proxies=False)


def to_contract_model(
    data: Mapping[str, Any], location: Optional[str] = None
) -> ContractModel:
    if not isinstance(data, Mapping):
        raise TransformError(
            location, f"expected a mapping, got {type(data).__name__}"
        )

    payload = dict(data)
    if location and not payload.get("location"):
        payload["location"] = location

    try:
        return ContractModel.model_validate(payload)
    except ValidationError as e:
        raise TransformError(location, e) from e


def load_contract(
    source: ContractSource,
    transform: Optional[Transform] = None,
    location: Optional[str] = None,
) -> ContractModel:
    """
    Получение ContractModel из любого поддерживаемого источника.

    Args:
        source: путь, URL, готовый словарь или ContractModel
        transform: преобразование текста документа в словарь модели
        location: адрес контракта для баннера и конструктора сервисов

    Raises:
        ContractLoadError: документ не удалось прочитать
        TransformError: документ не удалось преобразовать в модель
    """
    if isinstance(source, ContractModel):
        if location and not source.location:
            return source.model_copy(update={"location": location})
        return source

    if isinstance(source, Mapping):
        return to_contract_model(source, location)

    location = location or source
    text = fetch_document(source)

    try:
        data = (transform or parse_document)(text, location)
    except Exception as e:
        raise TransformError(location, e) from e

    model = to_contract_model(data, location)
    logger.debug(
        "Контракт %s: классов %d, сервисов %d",
        location,
        len(model.classes),
        len(model.services),
    )
    return model
