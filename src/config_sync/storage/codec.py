"""YAML encoding for documents persisted by ``FileStorage``.

Uses dedicated ``SafeLoader``/``SafeDumper`` subclasses so the global
PyYAML classes are never modified.  The loader drops the implicit
timestamp resolver: ``2024-01-01`` must come back as the string it was
written as, not a ``datetime.date``.
"""

from __future__ import annotations

from typing import Any

import yaml

from ..exceptions import InvalidValueError
from .values import validate_value

FILE_EXTENSION = ".yml"

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class DocumentLoader(yaml.SafeLoader):
    """SafeLoader without timestamp resolution."""


DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class DocumentDumper(yaml.SafeDumper):
    """SafeDumper that indents sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False):
        return super().increase_indent(flow, False)


def encode(data: Any) -> str:
    """Serialize a value tree to YAML text."""
    return yaml.dump(
        data,
        Dumper=DocumentDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def decode(text: str) -> Any:
    """Parse YAML text into a value tree.

    Raises:
        yaml.YAMLError: If the text is not valid YAML.
        InvalidValueError: If the YAML uses types outside the value grammar
            (binary, sets, non-string keys).
    """
    data = yaml.load(text, Loader=DocumentLoader)  # noqa: S506 - safe subclass
    validate_value(data)
    return data


def parse_value(text: str) -> Any:
    """Parse a YAML snippet typed by an operator (e.g. ``config set --format yaml``).

    Unlike ``decode`` this accepts an empty string as ``None``.
    """
    if not text.strip():
        return None
    try:
        return decode(text)
    except yaml.YAMLError as exc:
        raise InvalidValueError(f"Invalid YAML value: {exc}") from exc
