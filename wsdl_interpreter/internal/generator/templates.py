from email.utils import format_datetime
from datetime import datetime
from typing import List

from ...runtime import resolve_engine_path


class Templates:
    """Шаблоны для генерации файлов"""

    banner_width = 74

    banner_lines = [
        "This class was generated using WSDLInterpreter!",
        "Do not modify this file manually!",
        "Generated on {generated_on}",
        "WSDL {location}",
    ]

    base_imports = """from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

{engine_import}"""

    stub_imports = """from generated.{name}Base import *  # noqa: F401,F403
from generated.{name}Base import {name}Base"""

    stub_docstring = """Implementation class of {name}.

You may modify this class for custom logic additions/method overrides.
If you do so, don't forget to call the overridden super-class method!

This stub was generated using WSDLInterpreter on {generated_on}

See {name}Base"""

    init_body = """options = dict(options or {{}})
classmap = dict(options.get({key!r}) or {{}})
for wsdl_class_name, type_id in self.classmap.items():
    classmap.setdefault(wsdl_class_name, type_id)
options[{key!r}] = classmap
self._engine = InvocationEngine(wsdl, options)"""

    init_docstring = """Constructor using wsdl location and options dict

Args:
    wsdl (str): WSDL location for this service
    options (dict): Options for the invocation engine"""

    new_body = """if cls is {name}:
    raise TypeError("{name} is generated and cannot be instantiated directly")
return super().__new__(cls)"""

    call_body = "return self._engine.call({wire_name!r}, [{parameter}])"

    @staticmethod
    def timestamp(moment: datetime) -> str:
        """Дата в формате RFC 2822"""
        if moment.tzinfo is None:
            moment = moment.astimezone()
        return format_datetime(moment)

    def banner(self, generated_on: datetime, location: str) -> List[str]:
        border = "# " + "*" * (self.banner_width + 2)
        lines = [border]
        for line in self.banner_lines:
            text = line.format(
                generated_on=self.timestamp(generated_on), location=location
            )
            lines.append(f"# * {text:<{self.banner_width}}")
        lines.append(border)
        return [line.rstrip() for line in lines]

    @staticmethod
    def engine_import(engine: str) -> str:
        module, attribute = resolve_engine_path(engine)
        if attribute == "InvocationEngine":
            return f"from {module} import InvocationEngine"
        return f"from {module} import {attribute} as InvocationEngine"


templates = Templates()
