import base64
from collections.abc import Callable, Mapping
from typing import Any

import jinja2
import yaml

from templateprocessor.errors import RenderError
from templateprocessor.options import MissingKeyType

UNDEFINED_TYPES: dict[MissingKeyType, type[jinja2.Undefined]] = {
    MissingKeyType.ZERO: jinja2.ChainableUndefined,
    MissingKeyType.ERROR: jinja2.StrictUndefined,
    MissingKeyType.INVALID: jinja2.DebugUndefined,
    MissingKeyType.DEFAULT: jinja2.Undefined,
}


class Renderer:
    """
    Renders template text with a fixed set of helper functions.
    """

    def __init__(
        self,
        missing_key_type: MissingKeyType | str = MissingKeyType.ZERO,
        functions: Mapping[str, Callable[..., Any]] | None = None,
    ) -> None:
        self._env = jinja2.Environment(
            undefined=UNDEFINED_TYPES[MissingKeyType(missing_key_type)],
            keep_trailing_newline=True,
        )

        for key in dir(Filters):
            if not key.startswith("_"):
                self._env.filters[key] = getattr(Filters, key)
        for key in dir(Globals):
            if not key.startswith("_"):
                self._env.globals[key] = getattr(Globals, key)
        self._env.globals.update(functions or {})

    def render(self, template: str, values: Mapping[str, Any] | None = None, name: str | None = None) -> str | None:
        """
        Render *template* with the given *values*. The values are available as top-level variables and as a whole
        via `Values`.

        Returns:
            The rendered text, or `None` if it contains nothing but whitespace.
        Raises:
            RenderError: If the template is invalid or fails to render.
        """

        values = dict(values or {})
        try:
            result = self._env.from_string(template).render({**values, "Values": values})
        except jinja2.TemplateError as exc:
            raise RenderError(str(exc), name) from exc
        except Exception as exc:
            # Errors raised by filters and functions while rendering, e.g. invalid base64 input.
            raise RenderError(f"{type(exc).__name__}: {exc}", name) from exc

        if not result.removesuffix("\n").strip():
            return None
        return result


class Filters:
    @staticmethod
    def toyaml(value: Any) -> str:
        # Let the configured undefined type decide how a missing value renders.
        if isinstance(value, jinja2.Undefined):
            return str(value)
        return yaml.safe_dump(value, default_flow_style=False).rstrip("\n")

    @staticmethod
    def b64enc(value: str) -> str:
        return base64.b64encode(value.encode("utf-8")).decode("ascii")

    @staticmethod
    def b64dec(value: str) -> str:
        return base64.b64decode(value.encode("ascii")).decode("utf-8")

    @staticmethod
    def nindent(value: str, width: int) -> str:
        """
        Indent every line of *value* by *width* spaces and prepend a newline.
        """

        prefix = " " * width
        return "\n" + "\n".join(prefix + line for line in str(value).split("\n"))

    @staticmethod
    def quote(value: Any) -> str:
        return '"' + str(value).replace("\\", "\\\\").replace('"', '\\"') + '"'

    @staticmethod
    def required(value: Any, message: str = "value is required") -> Any:
        if isinstance(value, jinja2.Undefined) or value is None or value == "":
            raise jinja2.TemplateRuntimeError(message)
        return value


class Globals:
    @staticmethod
    def randhex(length: int) -> str:
        from secrets import token_hex

        return token_hex(length)
