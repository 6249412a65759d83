"""Configuration models for EasyAudit."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from easyaudit.core.config.channels import ChannelRule, normalize_channel_map
from easyaudit.core.errors import MissingRequiredFieldError

logger = logging.getLogger(__name__)

ROOT_NODE_NAME = "xiidea_easy_audit"
DEFAULT_RESOLVER = "xiidea.easy_audit.default_event_resolver"

REQUIRED_FIELDS = ("user_property", "audit_log_class")

# Deprecated option -> replacement. Scheduled for removal in 2.0.
DEPRECATED_ALIASES = {
    "entity_class": "audit_log_class",
    "entity_event_resolver": "doctrine_event_resolver",
    "doctrine_entities": "doctrine_objects",
}

# XML configuration uses the singular, camel-cased key.
_XML_CHANNEL_KEY = "loggerChannel"


class AuditConfig(BaseModel):
    """Validated audit configuration.

    Built once per configuration load and frozen afterwards. Deprecated
    options are folded into their replacements before validation, and the
    ``logger_channel`` map is normalized to canonical ``ChannelRule`` values.

    Example:
        >>> config = AuditConfig.model_validate(
        ...     {
        ...         "user_property": "username",
        ...         "audit_log_class": "App\\\\Entity\\\\AuditLog",
        ...         "logger_channel": {"file": "!doctrine"},
        ...     }
        ... )
        >>> config.channel_allowed("file", "doctrine")
        False
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Required
    user_property: str = Field(..., description="Property of the user object to record")
    audit_log_class: str = Field(..., description="Class used to persist audit entries")

    # Default services
    resolver: str = Field(default=DEFAULT_RESOLVER, description="Default event resolver service")
    doctrine_event_resolver: str | None = Field(
        default=None, description="Event resolver service for doctrine events"
    )
    default_logger: bool = Field(default=True, description="Register the default audit logger")

    # Optional
    doctrine_objects: tuple[Any, ...] | Mapping[str, Any] = Field(
        default_factory=tuple, description="Doctrine objects whose events are audited"
    )
    events: tuple[Any, ...] | Mapping[str, Any] = Field(
        default_factory=tuple, description="Events to audit"
    )
    custom_resolvers: tuple[Any, ...] | Mapping[str, Any] = Field(
        default_factory=tuple, description="Event name to resolver service"
    )

    # Channel handlers
    logger_channel: Mapping[str, ChannelRule] = Field(
        default_factory=lambda: MappingProxyType({}),
        description="Logger service to channel rule",
    )

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Any:
        """Fold deprecated aliases and check required options."""
        if not isinstance(data, dict):
            return data

        data = dict(data)

        if _XML_CHANNEL_KEY in data:
            xml_channels = data.pop(_XML_CHANNEL_KEY)
            data.setdefault("logger_channel", xml_channels)

        for alias, replacement in DEPRECATED_ALIASES.items():
            if alias not in data:
                continue
            value = data.pop(alias)
            if _is_blank(data.get(replacement)):
                logger.warning(
                    'The "%s" option is deprecated and will be removed in 2.0. Use "%s" instead.',
                    alias,
                    replacement,
                )
                data[replacement] = value
            else:
                logger.warning(
                    'Ignoring deprecated "%s" option, "%s" is already set.', alias, replacement
                )

        for field in REQUIRED_FIELDS:
            if _is_blank(data.get(field)):
                raise MissingRequiredFieldError(field)

        for field in ("doctrine_objects", "events", "custom_resolvers"):
            if field in data and data[field] is None:
                data[field] = []

        return data

    @field_validator("logger_channel", mode="before")
    @classmethod
    def validate_logger_channel(cls, v: Any) -> Any:
        """Normalize each channel rule; non-mapping input is left to pydantic."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return normalize_channel_map(v)
        return v

    @field_validator(
        "doctrine_objects", "events", "custom_resolvers", "logger_channel", mode="after"
    )
    @classmethod
    def _freeze_containers(cls, v: Any) -> Any:
        """Make validated containers read-only, nested values included."""
        return _freeze(v)

    def channel_rule(self, handler: str) -> ChannelRule | None:
        """Return the channel rule configured for a logger, if any."""
        return self.logger_channel.get(handler)

    def channel_allowed(self, handler: str, channel: str) -> bool:
        """Return True if ``handler`` should record a log on ``channel``.

        Loggers without a channel rule record every channel.
        """
        rule = self.channel_rule(handler)
        return True if rule is None else rule.allows(channel)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value
