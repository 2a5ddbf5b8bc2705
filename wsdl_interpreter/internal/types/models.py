import textwrap
from typing import Optional, Union

from pydantic import BaseModel, field_validator

INDENT = "    "


def quote_docstring(text: str) -> str:
    """Оборачивает текст в тройные кавычки, экранируя опасные последовательности"""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"').strip()
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    lines = text.split("\n")

    if len(lines) == 1:
        return f'"""{text}"""'

    return '"""' + "\n".join(lines) + '\n"""'


class Variable(BaseModel):
    """Выражение типа: Optional[List["Forecast"]] и т.п."""

    value: list[Union["Variable", str]] = []
    wrap_name: Optional[str] = None

    @field_validator("value", mode="before")
    def value_check(cls, value):
        _value = value

        if not isinstance(value, list):
            _value = [value]

        return _value

    def __str__(self):
        _value = ", ".join([_.__str__() for _ in self.value])

        if self.wrap_name is None:
            return _value

        return f"{self.wrap_name}[{_value}]" if _value else "Any"


Variable.model_rebuild()


class Parameter(BaseModel):
    name: str

    default: Optional[Variable] = None
    var_type: Optional[Variable] = None

    order: int = 0

    def __str__(self):
        return (
            self.name
            + (f": {self.var_type}" if self.var_type else "")
            + (f" = {self.default}" if self.default else "")
        )


class CodeBlock(BaseModel):
    order: int = 0
    code: str = "pass"

    def __str__(self):
        return self.code.replace("\t", INDENT)


class Function(BaseModel):
    name: str
    parameters: list[Parameter] = []
    response: Optional[str] = "None"

    docstring: Optional[str] = None

    code: CodeBlock = CodeBlock(order=0, code="pass")

    order: int = 0

    def __str__(self) -> str:
        signature = f"def {self.name}({', '.join(map(str, self.parameters))})"
        if self.response:
            signature += f" -> {self.response}"

        body = [quote_docstring(self.docstring)] if self.docstring else []
        body.append(str(self.code))

        return signature + ":\n" + textwrap.indent("\n".join(body), INDENT)


class Class(BaseModel):
    name: str

    inherits: list[str] = []
    docstring: Optional[str] = None

    functions: dict[str, "Function"] = {}
    code_blocks: list["CodeBlock"] = []
    parameters: list[Parameter] = []

    order: int = 0

    def __str__(self) -> str:
        sections = []

        if self.docstring:
            sections.append(quote_docstring(self.docstring))

        if self.parameters:
            sections.append(
                "\n".join(
                    map(str, sorted(self.parameters, key=lambda x: x.order, reverse=True))
                )
            )

        sections.extend(
            map(
                str,
                sorted(
                    self.code_blocks + list(self.functions.values()),
                    key=lambda x: x.order,
                    reverse=True,
                ),
            )
        )

        return (
            f"class {self.name}"
            + (f"({', '.join(self.inherits)})" if self.inherits else "")
            + ":\n"
            + textwrap.indent("\n\n".join(sections) if sections else "pass", INDENT)
        )

    def add_function(self, function: "Function") -> "Function":
        self.functions[function.name] = function
        return function

    def add_code_block(self, code_block: "CodeBlock") -> "Class":
        self.code_blocks.append(code_block)
        return self


class CodeFile(BaseModel):
    file_name: str

    # False - файл пользователя: пишется только если еще не существует
    overwrite: bool = True

    header: list[str] = []
    imports: list[str] = []
    classes: dict[str, "Class"] = {}
    code_blocks: list["CodeBlock"] = []

    def __str__(self):
        return (
            "\n\n\n".join(
                filter(
                    bool,
                    [
                        "\n".join(self.header),
                        "\n".join(self.imports),
                        "\n\n\n".join(
                            map(
                                str,
                                sorted(
                                    self.code_blocks + list(self.classes.values()),
                                    key=lambda x: x.order,
                                    reverse=True,
                                ),
                            )
                        ),
                    ],
                )
            ).replace("\t", INDENT)
            + "\n"
        )

    def add_class(self, cls: "Class") -> "Class":
        if cls.name in self.classes:
            raise ValueError(f"Класс {cls.name} уже объявлен в {self.file_name}")

        self.classes[cls.name] = cls
        return cls

    def add_code_block(self, code_block: "CodeBlock") -> "CodeFile":
        self.code_blocks.append(code_block)
        return self


class Project(BaseModel):
    name: str
    files: list[CodeFile] = []

    def add_file(self, code_file: "CodeFile") -> "CodeFile":
        self.files.append(code_file)
        return code_file

    def get_file(self, file_name: str) -> Optional["CodeFile"]:
        for code_file in self.files:
            if code_file.file_name == file_name:
                return code_file
        return None
