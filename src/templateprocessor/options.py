from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated

from databind.core import Alias
from loguru import logger

from templateprocessor.errors import ConfigurationError

KUBERNETES_YAMLS_DELIMITER = r"(?m)^-{3}$"
""" Regular expression that matches a line containing exactly three dashes. """

KUBERNETES_YAMLS_DELIMITER_STRING = "---\n"
""" The canonical delimiter that is placed between documents when joining them into a single payload. """

DEFAULT_CREATE_UPDATE_KINDS_ORDER: tuple[str, ...] = (
    "Namespace",
    "NetworkPolicy",
    "ResourceQuota",
    "LimitRange",
    "PodSecurityPolicy",
    "PodDisruptionBudget",
    "Secret",
    "SecretList",
    "ConfigMap",
    "StorageClass",
    "PersistentVolume",
    "PersistentVolumeClaim",
    "CustomResourceDefinition",
    "ClusterRole",
    "ClusterRoleList",
    "ClusterRoleBinding",
    "ClusterRoleBindingList",
    "Role",
    "RoleList",
    "RoleBinding",
    "RoleBindingList",
    "Service",
    "DaemonSet",
    "Pod",
    "ReplicationController",
    "ReplicaSet",
    "Deployment",
    "HorizontalPodAutoscaler",
    "StatefulSet",
    "Job",
    "CronJob",
    "Ingress",
    "APIService",
)
""" The order in which resource kinds are created or updated. Kinds not in this list are applied last. """

DEFAULT_DELETE_KINDS_ORDER: tuple[str, ...] = tuple(reversed(DEFAULT_CREATE_UPDATE_KINDS_ORDER))
""" The order in which resource kinds are deleted. Kinds not in this list are deleted first. """


class SortType(str, Enum):
    # Configuration files refer to the members by their aliases.
    CREATE_UPDATE: Annotated[str, Alias("create-update")] = "create-update"
    DELETE: Annotated[str, Alias("delete")] = "delete"


class MissingKeyType(str, Enum):
    """
    Controls how templates treat references to keys that are not present in the values.
    """

    ZERO: Annotated[str, Alias("zero")] = "zero"
    """ Render the missing value as an empty value. """

    ERROR: Annotated[str, Alias("error")] = "error"
    """ Fail rendering with a `RenderError`. """

    INVALID: Annotated[str, Alias("invalid")] = "invalid"
    """ Render a literal placeholder in place of the missing value. """

    DEFAULT: Annotated[str, Alias("default")] = "default"
    """ Use the template engine's default behaviour. """


@dataclass(frozen=True)
class Options:
    """
    Configuration for a `TemplateProcessor`. Can be loaded from a `templateprocessor.yaml` file.
    """

    FILENAME = "templateprocessor.yaml"

    kinds_order: Annotated[SortType, Alias("kindsOrder")] = SortType.CREATE_UPDATE
    """
    The ordering mode that is active when the processor is created.
    """

    create_update_kinds_order: Annotated[tuple[str, ...], Alias("createUpdateKindsOrder")] = (
        DEFAULT_CREATE_UPDATE_KINDS_ORDER
    )
    """
    Overrides the order of kinds when creating or updating resources. Must not contain duplicates.
    """

    delete_kinds_order: Annotated[tuple[str, ...], Alias("deleteKindsOrder")] = DEFAULT_DELETE_KINDS_ORDER
    """
    Overrides the order of kinds when deleting resources. Must not contain duplicates.
    """

    delimiter: str = KUBERNETES_YAMLS_DELIMITER
    """
    Regular expression to split a rendered payload into documents. It must match `delimiter_string` exactly once.
    """

    delimiter_string: Annotated[str, Alias("delimiterString")] = KUBERNETES_YAMLS_DELIMITER_STRING
    """
    The literal delimiter placed between documents when joining them.
    """

    missing_key_type: Annotated[MissingKeyType, Alias("missingKeyType")] = MissingKeyType.ZERO

    @staticmethod
    def load(file: Path, /) -> "Options":
        """
        Load options from a YAML file. Keys that are not set fall back to the defaults.

        Raises:
            ConfigurationError: If the file can not be read or does not contain valid options.
        """

        from databind.core import ConversionError, NoMatchingConverter
        from databind.json import load as deser
        from yaml import YAMLError, safe_load

        logger.debug("Loading template processor options from '{}'", file)
        try:
            return deser(safe_load(file.read_text()) or {}, Options, filename=str(file))
        except (OSError, UnicodeDecodeError, YAMLError, ConversionError, NoMatchingConverter) as exc:
            raise ConfigurationError(f"invalid options file '{file}': {exc}") from exc

    @staticmethod
    def find(cwd: Path | None = None) -> "Options":
        """
        Look for a `templateprocessor.yaml` in the given *cwd* or any of its parent directories and load it. Returns
        the default options if no such file exists.
        """

        if cwd is None:
            cwd = Path.cwd()

        for directory in [cwd] + list(cwd.parents):
            file = directory / Options.FILENAME
            if file.exists():
                return Options.load(file)

        return Options()
