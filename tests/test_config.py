"""
Тесты для системы конфигурации
"""

import os
import tempfile
import pytest
from wsdl_interpreter.config import InterpreterConfig, parse_aliases
from wsdl_interpreter.runtime import DEFAULT_ENGINE


class TestInterpreterConfig:
    """Тесты конфигурации интерпретатора"""

    def test_config_creation(self):
        """Тест создания конфигурации"""
        config = InterpreterConfig(contract="weather.json", output="weather_client")

        assert config.contract == "weather.json"
        assert config.output == "weather_client"
        assert config.engine == DEFAULT_ENGINE

    def test_config_save_and_load(self):
        """Тест сохранения и загрузки конфигурации"""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = os.path.join(temp_dir, "test_wsdl_interpreter.toml")

            # Создаем и сохраняем конфиг
            original_config = InterpreterConfig(
                contract="http://example.com/weather.json",
                output="example_client",
                engine="my_engine:SoapEngine",
                aliases={"Weather": "WeatherClient"},
            )
            original_config.save_to_file(config_path)

            # Загружаем конфиг
            loaded_config = InterpreterConfig.from_file(config_path)

            assert loaded_config is not None
            assert loaded_config.contract == "http://example.com/weather.json"
            assert loaded_config.output == "example_client"
            assert loaded_config.engine == "my_engine:SoapEngine"
            assert loaded_config.aliases == {"Weather": "WeatherClient"}

    def test_config_search_dir(self, tmp_path):
        """Тест поиска конфига в директории клиента"""
        InterpreterConfig(contract="weather.json").save_to_file(
            str(tmp_path / "wsdl_interpreter.toml")
        )

        loaded_config = InterpreterConfig.from_file(
            "nonexistent.toml", search_dir=str(tmp_path)
        )

        assert loaded_config is not None
        assert loaded_config.contract == "weather.json"

    def test_config_file_not_exists(self):
        """Тест загрузки несуществующего конфига"""
        config = InterpreterConfig.from_file("nonexistent.toml")
        assert config is None

    def test_config_broken_file(self, tmp_path):
        """Тест загрузки поврежденного конфига"""
        config_path = tmp_path / "broken.toml"
        config_path.write_text("contract = [unclosed", encoding="utf-8")

        assert InterpreterConfig.from_file(str(config_path)) is None

    def test_config_merge_with_args(self):
        """Тест объединения конфига с аргументами"""
        config = InterpreterConfig(
            contract="weather.json",
            output="original_client",
            aliases={"Weather": "WeatherClient", "Geo": "GeoClient"},
        )

        # Мокаем args
        class MockArgs:
            def __init__(self):
                self.contract = "http://api.new.com/contract.json"
                self.output = None
                self.engine = None
                self.alias = ["Weather=Forecasts"]

        args = MockArgs()
        merged = config.merge_with_args(args)

        assert merged.contract == "http://api.new.com/contract.json"  # Переписан из args
        assert merged.output == "original_client"  # Остался из config
        assert merged.engine == DEFAULT_ENGINE
        assert merged.aliases == {"Weather": "Forecasts", "Geo": "GeoClient"}

    def test_default_values(self):
        """Тест значений по умолчанию"""
        config = InterpreterConfig()

        assert config.contract is None
        assert config.output == "wsdl_client"
        assert config.aliases == {}


class TestParseAliases:
    """Тесты разбора псевдонимов"""

    def test_pairs(self):
        assert parse_aliases(["Weather=WeatherClient", " Geo = GeoClient "]) == {
            "Weather": "WeatherClient",
            "Geo": "GeoClient",
        }

    def test_empty(self):
        assert parse_aliases(None) == {}

    @pytest.mark.parametrize("value", ["Weather", "=Client", "Weather="])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_aliases([value])
