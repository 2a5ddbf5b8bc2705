"""
Интеграционные тесты: импорт сгенерированного клиента
"""

import importlib
import sys
import textwrap

import pytest

from wsdl_interpreter import WsdlInterpreter
from wsdl_interpreter.runtime import CLASSMAP_KEY, InvocationEngine

RECORDING_ENGINE = textwrap.dedent(
    '''
    class RecordingEngine:
        """Движок, запоминающий вызовы"""

        def __init__(self, wsdl, options):
            self.wsdl = wsdl
            self.options = options
            self.calls = []

        def call(self, method, arguments):
            self.calls.append((method, arguments))
            return {"method": method}
    '''
)


@pytest.fixture
def client_dir(tmp_path, monkeypatch, contract, generated_on):
    """Сгенерированный клиент с записывающим движком на sys.path"""
    engine_dir = tmp_path / "engines"
    engine_dir.mkdir()
    (engine_dir / "recording_engine.py").write_text(RECORDING_ENGINE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(engine_dir))

    output = tmp_path / "client"
    interpreter = WsdlInterpreter(contract, engine="recording_engine:RecordingEngine")
    interpreter.emit(str(output), generated_on)
    monkeypatch.syspath_prepend(str(output))

    for name in ("generated", "generated.WeatherBase", "Weather"):
        monkeypatch.delitem(sys.modules, name, raising=False)
    importlib.invalidate_caches()

    yield output

    for name in ("generated", "generated.WeatherBase", "Weather"):
        sys.modules.pop(name, None)


@pytest.fixture
def client_module(client_dir):
    return importlib.import_module("Weather")


class TestGeneratedClient:
    """Тесты сгенерированного клиента"""

    def test_base_not_instantiable(self, client_module):
        """Тест запрета создания базового класса"""
        with pytest.raises(TypeError):
            client_module.WeatherBase()

    def test_classmap_merged_without_overwrite(self, client_module):
        """Тест слияния classmap с записями вызывающего"""
        options = {"classmap": {"Forecast": "custom.Forecast"}, "trace": True}
        client = client_module.Weather(options=options)

        engine_options = client._engine.options
        assert engine_options["classmap"]["Forecast"] == "custom.Forecast"
        assert engine_options["classmap"]["Day"] == "Weather.Day"
        assert engine_options["classmap"]["xsd:string"] == "string"
        assert engine_options["trace"] is True
        assert options["classmap"] == {"Forecast": "custom.Forecast"}

    def test_default_wsdl(self, client_module, contract):
        client = client_module.Weather()

        assert client._engine.wsdl == contract.location
        assert "Base" in client._engine.options["classmap"]

    def test_call_uses_wire_name(self, client_module):
        """Тест вызова по сырому имени первой операции группы"""
        client = client_module.Weather()
        payload = client_module.getItem(id=7)

        result = client.getItem(payload)

        assert result == {"method": "get-Item"}
        assert client._engine.calls == [("get-Item", [payload])]

    def test_models_in_stub_namespace(self, client_module):
        """Тест моделей, доступных через файл пользователя"""
        forecast = client_module.Forecast.model_validate(
            {"id": 3, "MY-VAR": "sunny", "days": [{"temp": 1.5}]}
        )

        assert isinstance(forecast, client_module.Base)
        assert forecast.get_MYVAR() == "sunny"
        assert forecast.days[0].temp == 1.5


class TestDefaultEngine:
    """Тесты движка по умолчанию"""

    def test_call_not_implemented(self, contract, generated_on, tmp_path, load_source):
        interpreter = WsdlInterpreter(contract)
        base = str(interpreter.generate(generated_on).files[0])
        module = load_source("weather_base_default_engine", base)

        class Weather(module.WeatherBase):
            pass

        client = Weather(options={"classmap": {}})

        assert client._engine.classmap["Forecast"] == "Weather.Forecast"
        with pytest.raises(NotImplementedError):
            client.ping(None)

    def test_subclass_overrides_call(self):
        """Тест конкретного движка, унаследованного от базового"""

        class EchoEngine(InvocationEngine):
            def call(self, method, arguments):
                return method, arguments, self.classmap

        engine = EchoEngine("weather.wsdl", {CLASSMAP_KEY: {"Day": "Weather.Day"}})

        assert engine.wsdl == "weather.wsdl"
        assert engine.call("ping", [1]) == ("ping", [1], {"Day": "Weather.Day"})
        with pytest.raises(NotImplementedError):
            InvocationEngine("weather.wsdl").call("ping", [])
