"""
Конфигурация для генерации клиентов сервисов
"""

import logging
import os
from typing import Dict, Iterable, Optional
import toml
from dataclasses import dataclass, field

from .runtime import DEFAULT_ENGINE

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "wsdl_interpreter.toml"
DEFAULT_OUTPUT = "wsdl_client"


def parse_aliases(values: Optional[Iterable[str]]) -> Dict[str, str]:
    """["Weather=WeatherClient"] -> {"Weather": "WeatherClient"}"""
    aliases = {}
    for value in values or []:
        raw_name, separator, alias = value.partition("=")
        if not separator or not raw_name.strip() or not alias.strip():
            raise ValueError(f"Ожидается RAW=ALIAS, получено {value!r}")
        aliases[raw_name.strip()] = alias.strip()
    return aliases


@dataclass
class InterpreterConfig:
    """Конфигурация генератора клиентов"""

    contract: Optional[str] = None
    output: Optional[str] = DEFAULT_OUTPUT
    engine: str = DEFAULT_ENGINE
    aliases: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE_NAME, search_dir: str = None
    ) -> Optional["InterpreterConfig"]:
        """Загрузка конфигурации из файла"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE_NAME)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
            return cls(
                contract=config_data.get("contract"),
                output=config_data.get("output", DEFAULT_OUTPUT),
                engine=config_data.get("engine", DEFAULT_ENGINE),
                aliases=dict(config_data.get("aliases", {})),
            )
        except (OSError, TypeError, ValueError, toml.TomlDecodeError) as e:
            logger.warning("Не удалось прочитать конфиг %s: %s", config_path, e)
            return None

    def save_to_file(self, config_path: str = CONFIG_FILE_NAME) -> None:
        """Сохранение конфигурации в файл"""
        config_data = {
            "contract": self.contract,
            "output": self.output,
            "engine": self.engine,
            "aliases": self.aliases,
        }

        with open(config_path, "w") as f:
            toml.dump({k: v for k, v in config_data.items() if v is not None}, f)

    def merge_with_args(self, args) -> "InterpreterConfig":
        """Объединение с аргументами командной строки"""
        return InterpreterConfig(
            contract=args.contract or self.contract,
            output=args.output or self.output,
            engine=args.engine or self.engine,
            aliases={**self.aliases, **parse_aliases(args.alias)},
        )
