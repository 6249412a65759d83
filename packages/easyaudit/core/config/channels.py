"""Channel rule normalization for the ``logger_channel`` option.

A channel rule tells an audit log handler which log channels it records.
Rules arrive in several shapes and are normalized by a three stage pipeline:

    coerce_channel_entry -> reject_empty -> infer_channel_type

Accepted input shapes for a single entry:

- ``"!doctrine"``: a bare string, treated as a one-element list
- ``["app", "security"]``: a plain list of channel names
- ``{"type": "exclusive", "elements": ["doctrine"]}``: an explicit record

A leading ``!`` marks an element as excluded. A rule is either inclusive
(only the listed channels are recorded) or exclusive (everything except the
listed channels is recorded); mixing both kinds in one list is an error.

Example:
    >>> normalize_channel_entry("!doctrine")
    ChannelRule(type=<ChannelType.EXCLUSIVE: 'exclusive'>, elements=('doctrine',))
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from functools import partial, reduce
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from easyaudit.core.errors import InvalidTypeValueError, MixedChannelTypeError

logger = logging.getLogger(__name__)

EXCLUSIVE_MARKER = "!"

# Running classification plus the stripped names collected so far.
_FoldState = tuple[bool | None, tuple[str, ...]]


class ChannelType(str, Enum):
    """Channel rule type."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class ChannelRecord(BaseModel):
    """A channel entry after shape coercion.

    ``type`` is optional here; it is inferred from the element markers when
    absent. Element names still carry their ``!`` markers.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: ChannelType | None = Field(default=None, description="Declared rule type")
    elements: tuple[str, ...] = Field(
        default=(), description="Channel names, optionally prefixed with '!'"
    )

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v: Any) -> Any:
        """Reject any declared type other than inclusive/exclusive."""
        if v is None or isinstance(v, ChannelType):
            return v
        if v not in (ChannelType.INCLUSIVE.value, ChannelType.EXCLUSIVE.value):
            raise InvalidTypeValueError(v)
        return v

    @field_validator("elements", mode="before")
    @classmethod
    def _coerce_elements(cls, v: Any) -> Any:
        """Read null as no elements and numeric names (YAML `404`) as strings."""
        if v is None:
            return ()
        if isinstance(v, (list, tuple)):
            return tuple(_scalar_name(e) for e in v)
        return v

    @property
    def is_empty(self) -> bool:
        """True when the record carries neither a type nor any element."""
        return self.type is None and not self.elements


class ChannelRule(BaseModel):
    """Canonical channel rule.

    Attributes:
        type: Whether ``elements`` lists included or excluded channels.
        elements: Bare channel names (markers stripped), in input order.

    Example:
        >>> rule = ChannelRule(type=ChannelType.EXCLUSIVE, elements=("doctrine",))
        >>> rule.allows("security")
        True
        >>> rule.allows("doctrine")
        False
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: ChannelType = Field(..., description="Rule type")
    elements: tuple[str, ...] = Field(default=(), description="Bare channel names")

    @property
    def is_exclusive(self) -> bool:
        return self.type == ChannelType.EXCLUSIVE

    def allows(self, channel: str) -> bool:
        """Return True if a log record on ``channel`` passes this rule."""
        listed = channel in self.elements
        return not listed if self.is_exclusive else listed


def coerce_channel_entry(value: Any) -> ChannelRecord:
    """Coerce a raw channel entry into a ``ChannelRecord``.

    Strings and plain lists become ``{"elements": [...]}``; mappings are
    validated as records. A mapping using the singular ``channel`` key
    (the XML spelling) is read as ``elements``.

    Args:
        value: Raw entry from the configuration tree

    Returns:
        Coerced record, possibly empty

    Raises:
        InvalidTypeValueError: If a declared ``type`` is not inclusive/exclusive
        ValidationError: If the entry is structurally malformed
    """
    if isinstance(value, ChannelRecord):
        return value
    if isinstance(value, ChannelRule):
        return ChannelRecord(type=value.type, elements=value.elements)
    if value is None:
        return ChannelRecord()
    if isinstance(value, str):
        return ChannelRecord(elements=(value,))
    if isinstance(value, (list, tuple)):
        return ChannelRecord(elements=tuple(value))
    if isinstance(value, Mapping):
        if _is_indexed(value):
            return ChannelRecord(elements=tuple(value.values()))

        data = dict(value)
        if "channel" in data and "elements" not in data:
            channel = data.pop("channel")
            data["elements"] = [channel] if isinstance(channel, str) else channel
        return ChannelRecord.model_validate(data)

    # Let pydantic report the unsupported shape.
    return ChannelRecord.model_validate(value)


def reject_empty(record: ChannelRecord) -> ChannelRecord | None:
    """Return None for an empty record so the entry gets unset."""
    if record.is_empty:
        return None
    return record


def infer_channel_type(record: ChannelRecord) -> ChannelRule:
    """Classify the record's elements and build the canonical rule.

    A declared ``type`` seeds the classification; otherwise the first
    element decides it. Every following element must agree. Under a
    declared ``exclusive`` type unmarked names are read as already
    stripped, so canonical exclusive rules normalize to themselves.

    Args:
        record: Coerced, non-empty record

    Returns:
        Canonical rule with markers stripped

    Raises:
        MixedChannelTypeError: If marked and unmarked elements are mixed
    """
    seed = None if record.type is None else record.type == ChannelType.EXCLUSIVE
    append = partial(_append_channel, declared_exclusive=seed is True)
    is_exclusive, elements = reduce(append, record.elements, (seed, ()))

    channel_type = ChannelType.EXCLUSIVE if is_exclusive else ChannelType.INCLUSIVE
    return ChannelRule(type=channel_type, elements=elements)


def normalize_channel_entry(value: Any) -> ChannelRule | None:
    """Run a raw channel entry through the whole pipeline.

    Returns:
        The canonical rule, or None when the entry is empty and must be unset
    """
    record = reject_empty(coerce_channel_entry(value))
    if record is None:
        return None
    return infer_channel_type(record)


def normalize_channel_map(channels: Mapping[str, Any] | None) -> dict[str, ChannelRule]:
    """Normalize every entry of a ``logger_channel`` mapping.

    Empty entries are dropped. Errors are re-raised with the channel
    handler name attached.

    Args:
        channels: Handler name to raw entry

    Returns:
        Handler name to canonical rule
    """
    if channels is None:
        return {}

    normalized: dict[str, ChannelRule] = {}
    for name, value in channels.items():
        try:
            rule = normalize_channel_entry(value)
        except MixedChannelTypeError as e:
            raise MixedChannelTypeError(e.element, channel=name) from e
        except InvalidTypeValueError as e:
            raise InvalidTypeValueError(e.value, channel=name) from e

        if rule is None:
            logger.debug("Channel rule for %r is empty, unsetting it", name)
            continue

        logger.debug("Channel rule for %r: %s %s", name, rule.type.value, list(rule.elements))
        normalized[name] = rule

    return normalized


def _is_indexed(value: Mapping[Any, Any]) -> bool:
    """True for a non-empty mapping keyed only by integers (a list in disguise)."""
    return bool(value) and all(isinstance(k, int) and not isinstance(k, bool) for k in value)


def _scalar_name(element: Any) -> Any:
    if isinstance(element, (int, float)) and not isinstance(element, bool):
        return str(element)
    return element


def _classify(element: str, declared_exclusive: bool = False) -> tuple[bool, str]:
    if element.startswith(EXCLUSIVE_MARKER):
        return True, element[len(EXCLUSIVE_MARKER) :]
    return declared_exclusive, element


def _append_channel(
    state: _FoldState, element: str, *, declared_exclusive: bool = False
) -> _FoldState:
    is_exclusive_list, elements = state
    is_exclusive, name = _classify(element, declared_exclusive)

    if is_exclusive_list is not None and is_exclusive != is_exclusive_list:
        raise MixedChannelTypeError(element)

    return is_exclusive, (*elements, name)
