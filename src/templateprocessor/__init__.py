"""
Renders templated Kubernetes manifests from a set of assets and orders the resulting objects so that they can be
created, updated or deleted in a deterministic sequence that respects the dependencies implied by their kinds (e.g.
namespaces before the objects that live in them).
"""

from templateprocessor.documents import join_documents, split_documents
from templateprocessor.errors import (
    AssetNotFoundError,
    ConfigurationError,
    DecodeError,
    NoAssetsMatchedError,
    RenderError,
    TemplateProcessorError,
)
from templateprocessor.options import MissingKeyType, Options, SortType
from templateprocessor.ordering import OrderingPolicy
from templateprocessor.processor import TemplateProcessor
from templateprocessor.reader import DirectoryReader, MemoryReader, TemplateReader
from templateprocessor.unstructured import Unstructured, to_yaml, to_yamls

__all__ = [
    "AssetNotFoundError",
    "ConfigurationError",
    "DecodeError",
    "DirectoryReader",
    "MemoryReader",
    "MissingKeyType",
    "NoAssetsMatchedError",
    "Options",
    "OrderingPolicy",
    "RenderError",
    "SortType",
    "TemplateProcessor",
    "TemplateProcessorError",
    "TemplateReader",
    "Unstructured",
    "join_documents",
    "split_documents",
    "to_yaml",
    "to_yamls",
]
