"""
Exceptions raised by the template processor. Every error aborts the batch that is currently being processed; there
is no partial success.
"""

from dataclasses import dataclass, field
import textwrap


class TemplateProcessorError(Exception):
    """
    Base class for all errors raised by the template processor.
    """


@dataclass
class ConfigurationError(TemplateProcessorError):
    """
    Raised when the processor options are invalid, e.g. when the delimiter regular expression does not compile or
    does not match the canonical delimiter string.
    """

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class AssetNotFoundError(TemplateProcessorError, KeyError):
    """
    Raised by a `TemplateReader` when the requested asset does not exist.
    """

    name: str

    def __str__(self) -> str:
        return f"Asset not found: {self.name!r}"


@dataclass
class NoAssetsMatchedError(TemplateProcessorError):
    """
    Raised when no asset name matched a path query.
    """

    path: str
    excluded: list[str] = field(default_factory=list)
    recursive: bool = False

    def __str__(self) -> str:
        return f"No asset found in path {self.path!r} with excluded {self.excluded} and recursive {self.recursive}"


@dataclass
class RenderError(TemplateProcessorError):
    """
    Raised when a template fails to parse or to execute, including missing keys under the `error` policy.
    """

    message: str
    name: str | None = None

    def __str__(self) -> str:
        if self.name is None:
            return f"Failed to render template: {self.message}"
        return f"Failed to render template {self.name!r}: {self.message}"


@dataclass
class DecodeError(TemplateProcessorError):
    """
    Raised when a document cannot be converted to JSON or decoded into a structured object.
    """

    message: str
    document: str | None = None

    def __str__(self) -> str:
        if self.document:
            return f"Failed to decode document: {self.message}\n\n" + textwrap.indent(self.document.rstrip(), "  ")
        return f"Failed to decode document: {self.message}"
