"""Configuration errors for EasyAudit.

The domain errors do not derive from ``ValueError``: pydantic only wraps
``ValueError``/``AssertionError`` raised inside validators, so these
propagate unchanged out of ``AuditConfig.model_validate``.
"""

from __future__ import annotations


class AuditConfigError(Exception):
    """Base exception for invalid audit configuration.

    Raised eagerly during the validation pass. Always fatal for the
    configuration load that triggered it.
    """

    pass


class MissingRequiredFieldError(AuditConfigError):
    """A required scalar option is absent or blank."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f'The option "{field}" is required and cannot be empty')


class InvalidTypeValueError(AuditConfigError):
    """A channel rule declares a ``type`` other than inclusive/exclusive."""

    def __init__(self, value: object, channel: str | None = None) -> None:
        self.value = value
        self.channel = channel
        message = "The type of channels has to be inclusive or exclusive"
        if channel is not None:
            message = f"{message} (channel {channel!r}, got {value!r})"
        super().__init__(message)


class MixedChannelTypeError(AuditConfigError):
    """A channel list combines ``!``-prefixed and plain entries."""

    def __init__(self, element: str, channel: str | None = None) -> None:
        self.element = element
        self.channel = channel
        message = "Cannot combine exclusive/inclusive definitions in channels list"
        if channel is not None:
            message = f"{message} (channel {channel!r}, element {element!r})"
        super().__init__(message)
