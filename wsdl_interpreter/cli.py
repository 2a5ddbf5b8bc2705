import argparse
import logging
import os
import sys
from typing import List, Optional

from wsdl_interpreter.config import CONFIG_FILE_NAME, DEFAULT_OUTPUT, InterpreterConfig
from wsdl_interpreter.errors import WSDLInterpreterError
from wsdl_interpreter.interpreter import WsdlInterpreter


def confirm_choice(message: str) -> bool:
    """Запрос подтверждения у пользователя"""
    while True:
        choice = input(f"{message} (y/n): ").lower().strip()
        if choice in ["y", "yes", "да", ""]:
            return True
        elif choice in ["n", "no", "нет"]:
            return False
        print("Введите y/n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Генерация Python клиента из контракта сервиса"
    )
    parser.add_argument(
        "--contract", type=str, help="Путь или URL к промежуточной модели контракта"
    )
    parser.add_argument("--output", type=str, help="Директория для генерации клиента")
    parser.add_argument(
        "--alias",
        action="append",
        metavar="RAW=ALIAS",
        help="Имя клиента для сервиса (можно указать несколько раз)",
    )
    parser.add_argument(
        "--engine", type=str, help="Движок вызовов в формате module:Class"
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help=f"Создать конфиг файл {CONFIG_FILE_NAME}",
    )
    parser.add_argument(
        "--force", action="store_true", help="Генерировать без подтверждения"
    )
    parser.add_argument("--verbose", action="store_true", help="Подробный лог")
    return parser


def _emit_client(config: InterpreterConfig, force: bool) -> List[str]:
    """Загрузка контракта и запись файлов клиента"""
    print(f"🚀 Генерация клиента из {config.contract}")

    interpreter = WsdlInterpreter(config.contract, engine=config.engine)
    for raw_name, alias in config.aliases.items():
        interpreter.set_service_alias(raw_name, alias)

    output = config.output or DEFAULT_OUTPUT
    if interpreter.client_exists(output) and not force:
        print(f"📁 Клиент уже существует в {output}, пользовательские файлы не изменятся")
        if not confirm_choice("Перегенерировать базовые классы?"):
            return []

    print("⚙️ Генерация кода...")
    return interpreter.emit(output)


def generate(argv: Optional[List[str]] = None):
    """Универсальная команда генерации клиента сервиса"""
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        args_config = InterpreterConfig().merge_with_args(args)
    except ValueError as e:
        print(f"❌ Ошибка: {e}")
        sys.exit(1)

    # Инициализация конфига
    if args.init_config:
        args_config.save_to_file()
        print(f"✅ Создан конфиг файл {CONFIG_FILE_NAME}")
        return

    # Загрузка конфига из файла
    file_config = InterpreterConfig.from_file(search_dir=args.output)
    if file_config:
        print(f"📋 Используется конфиг {CONFIG_FILE_NAME}")
        final_config = file_config.merge_with_args(args)
    else:
        final_config = args_config

    if not final_config.contract:
        print("❌ Ошибка: Укажите --contract или создайте конфиг с --init-config")
        sys.exit(1)

    try:
        written = _emit_client(final_config, args.force)
    except (WSDLInterpreterError, ValueError) as e:
        print(f"❌ Ошибка генерации: {e}")
        sys.exit(1)

    if not written:
        return

    print(f"💾 Записано {len(written)} файлов:")
    for path in written:
        print(f"   {path}")
    print(f"📦 Клиент создан в: {os.path.abspath(final_config.output or DEFAULT_OUTPUT)}")


if __name__ == "__main__":
    generate()
