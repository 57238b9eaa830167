"""
A generic representation of Kubernetes-style objects that does not require knowledge of the object's schema.
"""

from dataclasses import dataclass, field
import json
from typing import Any, NewType

import yaml
from loguru import logger

from templateprocessor.errors import DecodeError

Manifest = NewType("Manifest", dict[str, Any])
""" Represents a Kubernetes manifest. """


@dataclass
class Unstructured:
    """
    Wraps the key/value tree of a single decoded document. Documents without a `kind` are valid and report an empty
    kind. The accessors return an empty string whenever the field is absent or not a string.
    """

    object: Manifest = field(default_factory=lambda: Manifest({}))

    def _metadata(self, key: str) -> str:
        metadata = self.object.get("metadata")
        if not isinstance(metadata, dict):
            return ""
        value = metadata.get(key)
        return value if isinstance(value, str) else ""

    @property
    def kind(self) -> str:
        value = self.object.get("kind")
        return value if isinstance(value, str) else ""

    @property
    def api_version(self) -> str:
        value = self.object.get("apiVersion")
        return value if isinstance(value, str) else ""

    @property
    def name(self) -> str:
        return self._metadata("name")

    @property
    def namespace(self) -> str:
        return self._metadata("namespace")

    @property
    def is_typed(self) -> bool:
        """
        Whether the document carries a `kind` marker, i.e. is a recognized Kubernetes object.
        """

        return self.kind != ""

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.kind}/{self.namespace}/{self.name}"
        return f"{self.kind}/{self.name}"

    @staticmethod
    def from_json(data: bytes | str) -> "Unstructured":
        """
        Decode a JSON document into an `Unstructured` object.

        Raises:
            DecodeError: If the data is not valid UTF-8 or JSON, or does not represent a JSON object.
        """

        if isinstance(data, bytes):
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise DecodeError(f"invalid UTF-8: {exc}", data.decode("utf-8", errors="replace")) from exc
        else:
            text = data

        try:
            value = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(str(exc), text) from exc

        # An empty YAML document converts to `null`.
        if value is None:
            value = {}
        if not isinstance(value, dict):
            raise DecodeError(f"expected a JSON object, got {type(value).__name__}", text)

        result = Unstructured(Manifest(value))
        if not result.is_typed:
            logger.debug("Document has no 'kind', keeping it as a generic object")
        return result

    def to_json(self) -> str:
        return json.dumps(self.object)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.object, sort_keys=True)


def to_yaml(obj: Unstructured) -> str:
    """
    Serialize an object to a YAML document.
    """

    return obj.to_yaml()


def to_yamls(objects: list[Unstructured]) -> list[str]:
    """
    Serialize every object to a YAML document, preserving order.
    """

    return [to_yaml(obj) for obj in objects]
