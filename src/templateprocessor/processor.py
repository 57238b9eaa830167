"""
The template processor renders assets, splits the output into documents, decodes them and orders the resulting
objects for creation or deletion.
"""

from collections.abc import Callable, Iterable, Mapping
import posixpath
import re
from typing import Any

from loguru import logger

from templateprocessor.documents import split_documents
from templateprocessor.errors import (
    AssetNotFoundError,
    ConfigurationError,
    DecodeError,
    NoAssetsMatchedError,
    RenderError,
)
from templateprocessor.options import Options, SortType
from templateprocessor.ordering import OrderingPolicy
from templateprocessor.reader import TemplateReader
from templateprocessor.templating import Renderer
from templateprocessor.unstructured import Unstructured, to_yamls

HELPERS_ASSET = "_helpers.tpl"
""" An asset with this name is prepended to every other asset in the same directory. """


class TemplateProcessor:
    """
    Renders template assets into objects and orders them for creation or deletion.

    Args:
        reader: The reader to retrieve assets from.
        options: The processor options. Defaults are used if not specified.
        functions: Additional functions available to templates.
    Raises:
        ConfigurationError: If the delimiter options are invalid.
    """

    def __init__(
        self,
        reader: TemplateReader,
        options: Options | None = None,
        functions: Mapping[str, Callable[..., Any]] | None = None,
    ) -> None:
        self.reader = reader
        self.options = options or Options()
        self._delimiter = _compile_delimiter(self.options.delimiter, self.options.delimiter_string)
        self._renderer = Renderer(self.options.missing_key_type, functions)
        self._policies = {
            SortType.CREATE_UPDATE: OrderingPolicy.create_update(self.options.create_update_kinds_order),
            SortType.DELETE: OrderingPolicy.delete(self.options.delete_kinds_order),
        }
        self._sort_type = SortType(self.options.kinds_order)

    @property
    def sort_type(self) -> SortType:
        """
        The ordering mode used when no explicit mode is passed to an ordering operation.
        """

        return self._sort_type

    def set_delete_order(self) -> None:
        self._sort_type = SortType.DELETE

    def set_create_update_order(self) -> None:
        self._sort_type = SortType.CREATE_UPDATE

    def policy(self, sort_type: SortType | None = None) -> OrderingPolicy:
        return self._policies[SortType(sort_type) if sort_type else self._sort_type]

    # Rendering

    def template_bytes(
        self, data: bytes, values: Mapping[str, Any] | None = None, name: str | None = None
    ) -> bytes | None:
        """
        Render a template. Returns `None` if the result is blank.
        """

        try:
            template = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RenderError(f"template is not valid UTF-8: {exc}", name) from exc

        result = self._renderer.render(template, values, name)
        if result is None:
            return None
        logger.trace("Rendered template '{}':\n{}", name or "<bytes>", result)
        return result.encode("utf-8")

    def template_resource(self, name: str, values: Mapping[str, Any] | None = None) -> bytes | None:
        """
        Render a single asset, prefixed with the helpers asset of its directory if one exists. The helpers asset
        itself renders to `None`.
        """

        logger.trace("Rendering asset '{}'", name)
        if posixpath.basename(name) == HELPERS_ASSET:
            return None

        try:
            helpers = self.reader.asset(posixpath.join(posixpath.dirname(name), HELPERS_ASSET))
        except AssetNotFoundError:
            helpers = b""

        return self.template_bytes(helpers + self.reader.asset(name), values, name)

    def template_resources(self, names: Iterable[str], values: Mapping[str, Any] | None = None) -> list[bytes]:
        """
        Render the given assets in order. Assets that render to nothing are skipped; the result is not sorted.
        """

        results = []
        for name in names:
            result = self.template_resource(name, values)
            if result is not None:
                results.append(result)
        return results

    # Assets

    def asset_names_in_path(
        self, path: str, excluded: Iterable[str] | None = None, recursive: bool = False
    ) -> list[str]:
        """
        Return the names of all assets in *path* (and its subdirectories if *recursive* is set), except the ones
        listed in *excluded*.

        Raises:
            NoAssetsMatchedError: If no asset matched.
        """

        excluded = list(excluded or [])
        # Asset names are relative, so "/test", "./test/" and "test//" all refer to "test".
        path = posixpath.normpath(path).lstrip("/") or "."
        names = self.reader.asset_names()
        logger.trace("Asset names: {}", names)

        results = []
        for name in names:
            if name in excluded:
                continue
            directory = posixpath.dirname(name) or "."
            if recursive:
                if path == "." or name.startswith(path + "/"):
                    results.append(name)
            elif directory == path:
                results.append(name)

        if not results:
            raise NoAssetsMatchedError(path, excluded, recursive)
        return results

    def assets(self, path: str, excluded: Iterable[str] | None = None, recursive: bool = False) -> list[bytes]:
        """
        Return the raw content of all assets matched by `asset_names_in_path()`.
        """

        return [self.reader.asset(name) for name in self.asset_names_in_path(path, excluded, recursive)]

    # Decoding

    def bytes_to_unstructured(self, data: bytes) -> Unstructured:
        """
        Decode a single document. A document without a `kind` is returned as an object with an empty kind.
        """

        return Unstructured.from_json(self.reader.to_json(data))

    def bytes_array_to_unstructured(self, payloads: Iterable[bytes]) -> list[Unstructured]:
        """
        Split every payload into its documents and decode each of them, preserving order.
        """

        result = []
        for payload in payloads:
            try:
                text = payload.decode("utf-8")
            except UnicodeDecodeError as exc:
                document = payload.decode("utf-8", errors="replace")
                raise DecodeError(f"payload is not valid UTF-8: {exc}", document) from exc
            for document in split_documents(text, self._delimiter):
                result.append(self.bytes_to_unstructured(document.encode("utf-8")))
        return result

    # Ordering

    def sort_unstructured(
        self, objects: Iterable[Unstructured], sort_type: SortType | None = None
    ) -> list[Unstructured]:
        """
        Order objects for creation or deletion. Uses the processor's current mode unless *sort_type* is given.
        """

        return self.policy(sort_type).sort(objects)

    # Pipelines

    def template_resources_unstructured(
        self,
        names: Iterable[str],
        values: Mapping[str, Any] | None = None,
        sort_type: SortType | None = None,
    ) -> list[Unstructured]:
        """
        Render the given assets into objects, sorted for creation or deletion.
        """

        objects = self.bytes_array_to_unstructured(self.template_resources(names, values))
        return self.sort_unstructured(objects, sort_type)

    def template_resources_in_path_unstructured(
        self,
        path: str,
        excluded: Iterable[str] | None = None,
        recursive: bool = False,
        values: Mapping[str, Any] | None = None,
        sort_type: SortType | None = None,
    ) -> list[Unstructured]:
        """
        Render all assets in *path* into objects, sorted for creation or deletion.
        """

        names = self.asset_names_in_path(path, excluded, recursive)
        logger.debug("Rendering {} asset(s) from '{}'", len(names), path)
        return self.template_resources_unstructured(names, values, sort_type)

    def template_resources_in_path_yaml(
        self,
        path: str,
        excluded: Iterable[str] | None = None,
        recursive: bool = False,
        values: Mapping[str, Any] | None = None,
        sort_type: SortType | None = None,
    ) -> list[str]:
        """
        Like `template_resources_in_path_unstructured()`, but returns every object as a YAML document.
        """

        return to_yamls(self.template_resources_in_path_unstructured(path, excluded, recursive, values, sort_type))


def _compile_delimiter(delimiter: str, delimiter_string: str) -> re.Pattern[str]:
    """
    Compile the delimiter and ensure that it matches the canonical *delimiter_string* exactly once.
    """

    try:
        pattern = re.compile(delimiter)
    except re.error as exc:
        raise ConfigurationError(f"Invalid delimiter regular expression {delimiter!r}: {exc}") from exc

    matches = [match.group(0) for match in pattern.finditer(delimiter_string)]
    if len(matches) != 1 or matches[0] != delimiter_string.removesuffix("\n"):
        raise ConfigurationError(
            f"Delimiter regular expression {delimiter!r} does not exactly match the delimiter string "
            f"{delimiter_string!r}"
        )
    return pattern
