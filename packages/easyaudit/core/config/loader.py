"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from easyaudit.core.config.models import ROOT_NODE_NAME, AuditConfig

logger = logging.getLogger(__name__)


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("easy_audit.json")
        'json'
        >>> detect_format("easy_audit.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return the raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            with path.open("r", encoding="utf-8") as f:
                content = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                # safe_load returns None for empty files
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root in {path} must be a mapping, got {type(content).__name__}")

    return content


def build_audit_config(raw: Mapping[str, Any]) -> AuditConfig:
    """Validate an in-memory configuration tree.

    The tree may be wrapped in the ``xiidea_easy_audit`` root node, as it
    appears in application config files, or be the bare option mapping.

    Args:
        raw: Configuration tree

    Returns:
        Validated, frozen AuditConfig

    Raises:
        AuditConfigError: If a required option is missing or a channel rule is invalid
        ValidationError: If an option has the wrong type or is unknown
        ValueError: If the root node is not a mapping
    """
    data = dict(raw)
    if set(data) == {ROOT_NODE_NAME}:
        node = data[ROOT_NODE_NAME]
        if node is None:
            node = {}
        if not isinstance(node, Mapping):
            raise ValueError(
                f"Config root node {ROOT_NODE_NAME!r} must be a mapping, got {type(node).__name__}"
            )
        data = dict(node)

    config = AuditConfig.model_validate(data)
    logger.debug(
        "Loaded audit config: %d channel rule(s), default_logger=%s",
        len(config.logger_channel),
        config.default_logger,
    )
    return config


def load_audit_config(path: str | Path) -> AuditConfig:
    """Load and validate audit configuration from a file.

    Supports both JSON and YAML formats.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Validated AuditConfig instance

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If the file cannot be parsed
        AuditConfigError: If the configuration is invalid

    Example:
        >>> config = load_audit_config("config/packages/easy_audit.yaml")
        >>> config.logger_channel["file"].type
        <ChannelType.EXCLUSIVE: 'exclusive'>
    """
    raw_config = load_config(path)
    return build_audit_config(raw_config)
