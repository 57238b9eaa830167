"""
Splitting of rendered multi-document payloads and joining documents back into one payload.
"""

from collections.abc import Iterable
import re

from templateprocessor.options import KUBERNETES_YAMLS_DELIMITER, KUBERNETES_YAMLS_DELIMITER_STRING


def split_documents(text: str, delimiter: str | re.Pattern[str] = KUBERNETES_YAMLS_DELIMITER) -> list[str]:
    """
    Split *text* on every match of the *delimiter* regular expression.

    One trailing newline is removed from each fragment. Fragments that contain nothing but whitespace are dropped,
    the remaining fragments are returned in input order.
    """

    pattern = re.compile(delimiter) if isinstance(delimiter, str) else delimiter

    fragments: list[str] = []
    start = 0
    for match in pattern.finditer(text):
        fragments.append(text[start : match.start()])
        start = match.end()
    fragments.append(text[start:])

    result = []
    for fragment in fragments:
        fragment = fragment.removesuffix("\n")
        if fragment.strip():
            result.append(fragment)
    return result


def join_documents(documents: Iterable[str], delimiter_string: str = KUBERNETES_YAMLS_DELIMITER_STRING) -> str:
    """
    Join *documents* into a single payload, separated by the canonical *delimiter_string*.
    """

    return delimiter_string.join(documents)
