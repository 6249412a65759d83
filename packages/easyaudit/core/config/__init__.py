"""Configuration management for EasyAudit."""

from easyaudit.core.config.channels import (
    EXCLUSIVE_MARKER,
    ChannelRecord,
    ChannelRule,
    ChannelType,
    coerce_channel_entry,
    infer_channel_type,
    normalize_channel_entry,
    normalize_channel_map,
    reject_empty,
)
from easyaudit.core.config.loader import (
    build_audit_config,
    detect_format,
    load_audit_config,
    load_config,
)
from easyaudit.core.config.models import (
    DEFAULT_RESOLVER,
    ROOT_NODE_NAME,
    AuditConfig,
)

__all__ = [
    # Loaders
    "load_config",
    "load_audit_config",
    "build_audit_config",
    "detect_format",
    # Config models
    "AuditConfig",
    "ROOT_NODE_NAME",
    "DEFAULT_RESOLVER",
    # Channel rules
    "ChannelType",
    "ChannelRecord",
    "ChannelRule",
    "EXCLUSIVE_MARKER",
    "coerce_channel_entry",
    "reject_empty",
    "infer_channel_type",
    "normalize_channel_entry",
    "normalize_channel_map",
]
