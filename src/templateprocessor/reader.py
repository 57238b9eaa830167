from abc import ABC, abstractmethod
from collections.abc import Mapping
import json
from pathlib import Path

import yaml
from loguru import logger

from templateprocessor.errors import AssetNotFoundError, DecodeError


class JsonSafeLoader(yaml.SafeLoader):
    """
    A safe YAML loader that keeps timestamps as plain strings, as Kubernetes manifests carry them
    (e.g. `metadata.creationTimestamp`).
    """


JsonSafeLoader.yaml_implicit_resolvers = {
    key: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for key, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class TemplateReader(ABC):
    """
    Provides access to the raw template assets that the processor renders.
    """

    @abstractmethod
    def asset(self, name: str) -> bytes:
        """
        Retrieve the content of an asset.

        Raises:
            AssetNotFoundError: If there is no asset with the given name.
        """

    @abstractmethod
    def asset_names(self) -> list[str]:
        """
        List the names of all assets. Names are POSIX-style paths.
        """

    @abstractmethod
    def to_json(self, data: bytes) -> bytes:
        """
        Convert a single document from its native format to JSON.

        Raises:
            DecodeError: If the document can not be converted.
        """


class YamlReader(TemplateReader):
    """
    Base class for readers that serve YAML documents.
    """

    def to_json(self, data: bytes) -> bytes:
        try:
            value = yaml.load(data, Loader=JsonSafeLoader)
        except yaml.YAMLError as exc:
            raise DecodeError(f"invalid YAML: {exc}", data.decode("utf-8", errors="replace")) from exc

        # Binary and set values have no JSON representation.
        try:
            return json.dumps(value).encode("utf-8")
        except (TypeError, ValueError) as exc:
            document = data.decode("utf-8", errors="replace")
            raise DecodeError(f"document can not be represented as JSON: {exc}", document) from exc


class DirectoryReader(YamlReader):
    """
    Reads assets from the files in a directory. Asset names are the file paths relative to the directory.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.root})"

    def asset(self, name: str) -> bytes:
        file = self.root / name
        if not file.is_file():
            raise AssetNotFoundError(name)
        logger.trace("Reading asset '{}' from '{}'", name, file)
        return file.read_bytes()

    def asset_names(self) -> list[str]:
        return sorted(path.relative_to(self.root).as_posix() for path in self.root.rglob("*") if path.is_file())


class MemoryReader(YamlReader):
    """
    Serves assets from an in-memory mapping of asset names to their content.
    """

    def __init__(self, assets: Mapping[str, bytes | str]) -> None:
        self._assets = {
            name: content.encode("utf-8") if isinstance(content, str) else content for name, content in assets.items()
        }

    def asset(self, name: str) -> bytes:
        try:
            return self._assets[name]
        except KeyError:
            raise AssetNotFoundError(name) from None

    def asset_names(self) -> list[str]:
        return list(self._assets)
