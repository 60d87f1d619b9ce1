"""YAML decoding and normalization into JSON-schema-compatible trees."""

from __future__ import annotations

import base64
import datetime
from typing import Any

import yaml

from kubeschema.exceptions import DecodeError
from kubeschema.logger import get_logger
from kubeschema.types import Document

logger = get_logger(__name__)


class ManifestLoader(yaml.SafeLoader):
    """Safe loader that keeps timestamps as their original text.

    Schemas type timestamps as strings, and re-rendering a parsed
    datetime can change its text.
    """


ManifestLoader.add_constructor(
    "tag:yaml.org,2002:timestamp", yaml.SafeLoader.construct_yaml_str
)


def decode_document(document: Document) -> Any:
    """Decode one document into a generic value tree.

    Only the first YAML document in the span is read; anything after a
    further document marker is ignored.

    Args:
        document: Document to decode

    Returns:
        Decoded tree, ``None`` for empty or comment-only documents

    Raises:
        DecodeError: If the document is not well-formed YAML

    """
    try:
        return next(
            yaml.load_all(document.content, Loader=ManifestLoader), None
        )
    except yaml.YAMLError as e:
        logger.debug("YAML error in %s: %s", document.file_name, e)
        raise DecodeError(str(e), target=document.file_name) from e


def _key_to_string(key: Any) -> str:
    """Render a mapping key in its YAML scalar form."""
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, (datetime.date, datetime.datetime)):
        return key.isoformat()
    return str(key)


def stringify_keys(tree: Any) -> Any:
    """Convert every mapping key in the tree to a string.

    Sequences are normalized element-wise. Scalars that have no JSON
    counterpart are rendered as strings: dates and timestamps in
    ISO-8601 form, binary values base64-encoded. Trees from
    ``decode_document`` already hold timestamps as their source text.

    Args:
        tree: Value tree produced by the YAML decoder

    Returns:
        Normalized tree

    """
    if isinstance(tree, dict):
        return {
            _key_to_string(key): stringify_keys(value)
            for key, value in tree.items()
        }
    if isinstance(tree, (list, tuple)):
        return [stringify_keys(item) for item in tree]
    if isinstance(tree, (datetime.date, datetime.datetime)):
        return tree.isoformat()
    if isinstance(tree, bytes):
        return base64.b64encode(tree).decode("ascii")
    if isinstance(tree, set):
        return {_key_to_string(item): None for item in tree}
    return tree


def is_empty_resource(tree: Any) -> bool:
    """Whether a normalized tree holds no resource.

    Anything but a non-empty mapping (``None``, an empty mapping, a bare
    scalar or sequence) counts as empty.
    """
    return not isinstance(tree, dict) or not tree
