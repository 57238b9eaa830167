from pathlib import Path
from typing import Any, Optional

import yaml
from loguru import logger
from typer import Argument, Exit, Option

from templateprocessor.documents import join_documents
from templateprocessor.errors import ConfigurationError, TemplateProcessorError
from templateprocessor.options import Options, SortType
from templateprocessor.processor import TemplateProcessor
from templateprocessor.reader import DirectoryReader
from templateprocessor.unstructured import to_yamls

from . import app


@app.command()
def render(
    path: str = Argument(".", help="The asset path to render, relative to the --root directory."),
    root: Path = Option(Path("."), help="The directory that contains the template assets."),
    exclude: list[str] = Option([], help="Asset names to skip. Can be specified multiple times."),
    recursive: bool = Option(False, help="Also render the assets in subdirectories of the path."),
    values: Optional[Path] = Option(None, help="A YAML file with the values to render the templates with."),
    config: Optional[Path] = Option(
        None,
        help="Path to the `templateprocessor.yaml` options file. If not set, it will be searched in the current "
        "directory and its parents.",
    ),
    delete: bool = Option(False, help="Order the objects for deletion instead of creation."),
) -> None:
    """
    Render template assets into Kubernetes manifests, ordered for creation or deletion.
    """

    try:
        options = Options.load(config) if config else Options.find()
        template_values = _load_values(values) if values else {}
        processor = TemplateProcessor(DirectoryReader(root), options)
        objects = processor.template_resources_in_path_unstructured(
            path,
            excluded=exclude,
            recursive=recursive,
            values=template_values,
            sort_type=SortType.DELETE if delete else None,
        )
    except TemplateProcessorError as exc:
        logger.error("{}", exc)
        raise Exit(1)

    logger.info("Rendered {} object(s) from '{}'", len(objects), path)
    print(join_documents(to_yamls(objects), options.delimiter_string), end="")


def _load_values(file: Path) -> dict[str, Any]:
    logger.debug("Loading values from '{}'", file)
    try:
        values = yaml.safe_load(file.read_text()) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"invalid values file '{file}': {exc}") from exc
    if not isinstance(values, dict):
        raise ConfigurationError(f"invalid values file '{file}': expected a mapping, got {type(values).__name__}")
    return values
