from pathlib import Path

import pytest

from templateprocessor.errors import ConfigurationError
from templateprocessor.options import (
    DEFAULT_CREATE_UPDATE_KINDS_ORDER,
    DEFAULT_DELETE_KINDS_ORDER,
    KUBERNETES_YAMLS_DELIMITER,
    KUBERNETES_YAMLS_DELIMITER_STRING,
    MissingKeyType,
    Options,
    SortType,
)


def test__Options__defaults() -> None:
    options = Options()
    assert options.kinds_order == SortType.CREATE_UPDATE
    assert options.create_update_kinds_order == DEFAULT_CREATE_UPDATE_KINDS_ORDER
    assert options.delete_kinds_order == DEFAULT_DELETE_KINDS_ORDER
    assert options.delimiter == KUBERNETES_YAMLS_DELIMITER
    assert options.delimiter_string == KUBERNETES_YAMLS_DELIMITER_STRING
    assert options.missing_key_type == MissingKeyType.ZERO


def test__default_kinds_orders() -> None:
    assert DEFAULT_CREATE_UPDATE_KINDS_ORDER[0] == "Namespace"
    assert DEFAULT_CREATE_UPDATE_KINDS_ORDER[-1] == "APIService"
    assert len(DEFAULT_CREATE_UPDATE_KINDS_ORDER) == 33
    assert len(set(DEFAULT_CREATE_UPDATE_KINDS_ORDER)) == len(DEFAULT_CREATE_UPDATE_KINDS_ORDER)
    assert list(DEFAULT_DELETE_KINDS_ORDER) == list(reversed(DEFAULT_CREATE_UPDATE_KINDS_ORDER))


def test__Options__load(tmp_path: Path) -> None:
    file = tmp_path / Options.FILENAME
    file.write_text(
        "kindsOrder: delete\n"
        "createUpdateKindsOrder: [ServiceAccount, ClusterRole]\n"
        "missingKeyType: error\n"
        "delimiter: '(?m)^={3}$'\n"
        "delimiterString: \"===\\n\"\n"
    )

    options = Options.load(file)
    assert options.kinds_order is SortType.DELETE
    assert options.create_update_kinds_order == ("ServiceAccount", "ClusterRole")
    assert options.delete_kinds_order == DEFAULT_DELETE_KINDS_ORDER
    assert options.missing_key_type is MissingKeyType.ERROR
    assert options.delimiter == "(?m)^={3}$"
    assert options.delimiter_string == "===\n"


def test__Options__load__empty_file(tmp_path: Path) -> None:
    file = tmp_path / Options.FILENAME
    file.write_text("")
    assert Options.load(file) == Options()


def test__Options__find(tmp_path: Path) -> None:
    (tmp_path / Options.FILENAME).write_text("missingKeyType: invalid\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert Options.find(nested).missing_key_type == MissingKeyType.INVALID
    assert Options.find(tmp_path / "a").missing_key_type == MissingKeyType.INVALID


def test__Options__find__not_found(tmp_path: Path) -> None:
    # tmp_path's parents are not expected to contain an options file.
    assert Options.find(tmp_path) == Options()


def test__Options__hashable() -> None:
    assert hash(Options()) == hash(Options())


@pytest.mark.parametrize(
    "content",
    [
        "missingKeyType: sometimes\n",
        "kindsOrder: create_update\n",
        "createUpdateKindsOrder: Namespace\n",
        "missingKeyType: [unclosed\n",
        "- a\n- b\n",
    ],
)
def test__Options__load__invalid(tmp_path: Path, content: str) -> None:
    file = tmp_path / Options.FILENAME
    file.write_text(content)
    with pytest.raises(ConfigurationError):
        Options.load(file)


def test__Options__load__missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        Options.load(tmp_path / Options.FILENAME)
