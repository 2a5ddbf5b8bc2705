"""
Тесты загрузки промежуточной модели контракта
"""

import json

import httpx
import pytest

from wsdl_interpreter import ContractLoadError, TransformError, WsdlInterpreter
from wsdl_interpreter.internal.parser import contract_loader
from wsdl_interpreter.internal.parser.contract_loader import load_contract, parse_xml

XML_CONTRACT = """<?xml version="1.0" encoding="utf-8"?>
<model xmlns="urn:wsdl-interpreter">
  <class name="Base">
    <entry name="id" type="xsd:int"/>
  </class>
  <class name="Forecast">
    <extends>tns:Base</extends>
    <entry name="MY-VAR" type="xsd:string"/>
  </class>
  <class name="Day" extends=""/>
  <service name="Weather">
    <function name="get-Item">
      <parameters>
        <entry name="id" type="xsd:int"/>
      </parameters>
      <returns>
        <entry name="return" type="tns:Forecast"/>
      </returns>
    </function>
    <function name="ping"/>
  </service>
</model>
"""


class TestXml:
    """Тесты XML-формы"""

    def test_parse(self):
        data = parse_xml(XML_CONTRACT)

        assert [c["name"] for c in data["classes"]] == ["Base", "Forecast", "Day"]
        assert data["classes"][1]["extends"] == "tns:Base"
        assert data["classes"][1]["entries"] == [
            {"name": "MY-VAR", "type": "xsd:string"}
        ]

        functions = data["services"][0]["functions"]
        assert functions[0]["parameters"] == [{"name": "id", "type": "xsd:int"}]
        assert functions[0]["returns"] == [{"name": "return", "type": "tns:Forecast"}]
        assert functions[1] == {"name": "ping", "parameters": [], "returns": []}

    def test_load_file(self, tmp_path):
        path = tmp_path / "weather.xml"
        path.write_text(XML_CONTRACT, encoding="utf-8")

        model = load_contract(str(path))

        assert model.location == str(path)
        assert model.classes[2].extends is None
        assert model.services[0].functions[0].name == "get-Item"


class TestJson:
    """Тесты JSON-формы"""

    def test_refs_resolved(self, tmp_path):
        """Тест разрешения $ref"""
        document = {
            "definitions": {"id": {"name": "id", "type": "xsd:int"}},
            "classes": [{"name": "A", "entries": [{"$ref": "#/definitions/id"}]}],
            "services": [
                {
                    "name": "S",
                    "functions": [
                        {"name": "f", "parameters": [{"$ref": "#/definitions/id"}]}
                    ],
                }
            ],
        }
        path = tmp_path / "contract.json"
        path.write_text(json.dumps(document), encoding="utf-8")

        model = load_contract(str(path))

        assert model.classes[0].entries[0].name == "id"
        assert model.services[0].functions[0].parameters[0].type == "xsd:int"

    def test_interpreter_from_path(self, tmp_path, contract_data):
        path = tmp_path / "contract.json"
        path.write_text(json.dumps(contract_data), encoding="utf-8")

        interpreter = WsdlInterpreter(str(path))

        assert interpreter.location == contract_data["location"]
        assert [s.validated_name for s in interpreter.services] == ["Weather"]


class TestErrors:
    """Тесты ошибок загрузки и преобразования"""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ContractLoadError) as error:
            load_contract(str(tmp_path / "missing.json"))

        assert error.value.location == str(tmp_path / "missing.json")
        assert isinstance(error.value.__cause__, OSError)

    def test_broken_document(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(TransformError):
            load_contract(str(path))

    def test_broken_xml(self, tmp_path):
        path = tmp_path / "broken.xml"
        path.write_text("<model><class></model>", encoding="utf-8")

        with pytest.raises(TransformError):
            load_contract(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(TransformError):
            load_contract(str(path))

    def test_invalid_model(self):
        with pytest.raises(TransformError):
            load_contract({"classes": "nope"})

    def test_transform_failure_wrapped(self, tmp_path):
        """Тест обертки исключения внешнего трансформера"""
        path = tmp_path / "contract.wsdl"
        path.write_text("<definitions/>", encoding="utf-8")

        def transform(text, location):
            raise RuntimeError("schema flattening failed")

        with pytest.raises(TransformError) as error:
            load_contract(str(path), transform=transform)

        assert isinstance(error.value.__cause__, RuntimeError)
        assert "schema flattening failed" in str(error.value)


class TestTransformAndHttp:
    """Тесты внешнего трансформера и загрузки по HTTP"""

    def test_custom_transform(self, tmp_path, contract_data):
        path = tmp_path / "contract.wsdl"
        path.write_text("<definitions/>", encoding="utf-8")
        calls = []

        def transform(text, location):
            calls.append((text, location))
            return contract_data

        model = load_contract(str(path), transform=transform)

        assert calls == [("<definitions/>", str(path))]
        assert model.services[0].name == "Weather"

    def test_http(self, monkeypatch, contract_data):
        url = "http://example.com/contract.json"

        def fake_get(location, **kwargs):
            return httpx.Response(
                200,
                text=json.dumps(contract_data),
                request=httpx.Request("GET", location),
            )

        monkeypatch.setattr(contract_loader.httpx, "get", fake_get)

        model = load_contract(url)
        assert model.services[0].name == "Weather"

    def test_http_error(self, monkeypatch):
        url = "http://example.com/missing.json"

        def fake_get(location, **kwargs):
            return httpx.Response(404, request=httpx.Request("GET", location))

        monkeypatch.setattr(contract_loader.httpx, "get", fake_get)

        with pytest.raises(ContractLoadError):
            load_contract(url)
