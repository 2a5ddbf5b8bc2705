"""
Общие фикстуры: промежуточная модель контракта и загрузка сгенерированных модулей
"""

import sys
import types
from datetime import datetime, timezone

import pytest

from wsdl_interpreter.internal.types.contract import ContractModel

CONTRACT_LOCATION = "http://example.com/weather?wsdl"

GENERATED_ON = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def weather_contract_data():
    return {
        "location": CONTRACT_LOCATION,
        "classes": [
            {"name": "Base", "entries": [{"name": "id", "type": "xsd:int"}]},
            {
                "name": "Forecast",
                "extends": "tns:Base",
                "entries": [
                    {"name": "MY-VAR", "type": "xsd:string"},
                    {"name": "days", "type": "tns:Day[]"},
                ],
            },
            {"name": "Day", "entries": [{"name": "temp", "type": "xsd:double"}]},
            {"name": "getItem", "entries": [{"name": "id", "type": "xsd:int"}]},
            {"name": "Code", "extends": "xsd:string", "entries": []},
            {"name": "Unused", "entries": [{"name": "note", "type": "xsd:string"}]},
        ],
        "services": [
            {
                "name": "Weather",
                "functions": [
                    {
                        "name": "get-Item",
                        "parameters": [{"name": "id", "type": "xsd:int"}],
                        "returns": [{"name": "return", "type": "tns:Forecast"}],
                    },
                    {
                        "name": "getItem",
                        "parameters": [
                            {"name": "id", "type": "xsd:int"},
                            {"name": "day", "type": "tns:Day"},
                        ],
                        "returns": [{"name": "return", "type": "tns:Day"}],
                    },
                    {
                        "name": "ping",
                        "returns": [{"name": "return", "type": "xsd:string"}],
                    },
                ],
            }
        ],
    }


@pytest.fixture
def contract_data():
    return weather_contract_data()


@pytest.fixture
def contract():
    return ContractModel.model_validate(weather_contract_data())


@pytest.fixture
def load_source(monkeypatch):
    """Исполнение сгенерированного исходника как модуля с заданным именем"""

    def _load(module_name: str, source: str):
        module = types.ModuleType(module_name)
        monkeypatch.setitem(sys.modules, module_name, module)
        exec(compile(source, f"<{module_name}>", "exec"), module.__dict__)
        return module

    return _load


@pytest.fixture
def generated_on():
    return GENERATED_ON
