"""
Configuration loading - bundled defaults plus an optional override.

The bundled default-config.yaml holds the real-time defaults and every
description template. An override document is deep-merged on top of it, so a
host only lists what it changes:

    # my-form-config.yaml
    real_time:
      debounce_ms: 250
    messages:
      not_empty: "is required"

Override locations:
- Relative or absolute paths
- file:// - Local filesystem
- http:// / https:// - Remote (fetched with requests)

The merged document is validated against schemas/config.schema.json before
use; an invalid configuration is a setup error and raises ValueError.
"""

import copy
import json
import logging
import os
import urllib.parse
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Union

import requests
import yaml
from importlib.resources import files
from jsonschema import Draft7Validator
from jsonschema import ValidationError as SchemaValidationError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 10  # seconds

PathOrUri = Union[str, "os.PathLike[str]"]


class FormConfig:
    """Validated configuration shared by a form and its fields."""

    def __init__(self, data: Dict[str, Any], source: str = "bundled"):
        self.data = data
        self.source = source

    def __repr__(self) -> str:
        return f"FormConfig(source={self.source!r})"

    @property
    def real_time(self) -> Dict[str, Any]:
        return self.data["real_time"]

    @property
    def messages(self) -> Dict[str, str]:
        return self.data["messages"]

    def message(self, key: str) -> str:
        """Return the description template for key."""
        return message_template(self.messages, key)


def message_template(messages: Mapping[str, str], key: str) -> str:
    """
    Look up a description template.

    Raises:
        KeyError: If messages has no template for key
    """
    try:
        return messages[key]
    except KeyError:
        raise KeyError(f"No message template configured for {key!r}") from None


def load_config(uri: Optional[PathOrUri] = None) -> FormConfig:
    """
    Load the bundled configuration, merged with an optional override.

    Args:
        uri: Path or URI of an override YAML document

    Returns:
        FormConfig

    Raises:
        ValueError: If the merged configuration does not match the schema
        RuntimeError: If a remote override cannot be fetched
    """
    with files("form_validation").joinpath("default-config.yaml").open("r") as f:
        data = yaml.safe_load(f)

    source = "bundled"
    if uri is not None:
        source = os.fspath(uri)
        override = load_yaml_document(source)
        data = _deep_merge(data, override)

    validate_document(data, "config.schema.json", f"configuration {source}")
    logger.info(f"Form configuration loaded from {source}")
    return FormConfig(data, source=source)


@lru_cache(maxsize=None)
def default_config() -> FormConfig:
    """The bundled configuration, loaded once per process."""
    return load_config()


def default_messages() -> Dict[str, str]:
    return default_config().messages


def load_yaml_document(uri: PathOrUri) -> Any:
    """
    Load a YAML document from a path or URI.

    Args:
        uri: Relative/absolute path, file:// URI or http(s):// URI

    Returns:
        Parsed YAML (an empty document yields an empty dict)

    Raises:
        ValueError: If the URI scheme is unsupported
        RuntimeError: If a remote document cannot be fetched
    """
    uri = os.fspath(uri)
    parsed = urllib.parse.urlparse(uri)

    if parsed.scheme in ("http", "https"):
        content = _fetch_uri(uri)
        return yaml.safe_load(content) or {}

    if parsed.scheme == "file":
        path = urllib.parse.unquote(parsed.path)
    elif not parsed.scheme or len(parsed.scheme) == 1:
        # No scheme, or a Windows drive letter
        path = uri
    else:
        raise ValueError(f"Unsupported URI scheme: {parsed.scheme} in {uri}")

    with open(path) as f:
        return yaml.safe_load(f) or {}


def _fetch_uri(uri: str) -> str:
    """Fetch content from an HTTP/HTTPS URI."""
    try:
        response = requests.get(uri, timeout=FETCH_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise RuntimeError(f"Failed to fetch {uri}: {e}") from e
    return response.text


@lru_cache(maxsize=None)
def _load_schema(schema_name: str) -> Dict[str, Any]:
    with files("form_validation").joinpath("schemas").joinpath(schema_name).open("r") as f:
        return json.load(f)


def validate_document(document: Any, schema_name: str, what: str) -> None:
    """
    Validate a parsed document against one of the bundled JSON schemas.

    Raises:
        ValueError: Naming the first failing location and the schema message
    """
    validator = Draft7Validator(_load_schema(schema_name))
    try:
        validator.validate(document)
    except SchemaValidationError as e:
        error_path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
        raise ValueError(f"Invalid {what} at {error_path}: {e.message}") from e


def _deep_merge(base: Dict[str, Any], override: Any) -> Dict[str, Any]:
    """Return base with override merged in; nested mappings merge, anything else replaces."""
    if not isinstance(override, dict):
        raise ValueError(
            f"Configuration override must be a mapping, got {type(override).__name__}"
        )
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
