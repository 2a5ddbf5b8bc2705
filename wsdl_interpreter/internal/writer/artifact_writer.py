"""
Запись сгенерированных файлов: базовые модули перезаписываются всегда,
файлы пользователя создаются только один раз
"""

import logging
import os
from typing import Iterable, List

from ...errors import DirectoryCreateError, WritingError
from ..types.models import CodeFile, Project

logger = logging.getLogger(__name__)

GENERATED_DIR = "generated"


def base_file_name(name: str) -> str:
    return f"{GENERATED_DIR}/{name}Base.py"


def stub_file_name(name: str) -> str:
    return f"{name}.py"


class ArtifactWriter:
    """Сохранение файлов проекта в выходную директорию"""

    def __init__(self, output_dir: str):
        self.output_dir = output_dir

    def path(self, file_name: str) -> str:
        return os.path.join(self.output_dir, *file_name.split("/"))

    def base_path(self, name: str) -> str:
        return self.path(base_file_name(name))

    def stub_path(self, name: str) -> str:
        return self.path(stub_file_name(name))

    def stub_exists(self, names: Iterable[str]) -> bool:
        return any(os.path.exists(self.stub_path(name)) for name in names)

    def ensure_directory(self, directory: str):
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateError(directory, e) from e

    def write_file(self, code_file: CodeFile) -> bool:
        """Запись одного файла; False - файл пользователя уже существует"""
        path = self.path(code_file.file_name)
        self.ensure_directory(os.path.dirname(path) or ".")

        if not code_file.overwrite and os.path.exists(path):
            logger.debug("Файл %s уже существует, пропуск", path)
            return False

        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(str(code_file))
        except OSError as e:
            raise WritingError(path, e) from e

        logger.debug("Записан файл %s", path)
        return True

    def write(self, project: Project) -> List[str]:
        """Запись всех файлов проекта, возвращает пути записанных файлов"""
        written = [
            self.path(code_file.file_name)
            for code_file in project.files
            if self.write_file(code_file)
        ]

        if not written:
            raise WritingError()

        return written
