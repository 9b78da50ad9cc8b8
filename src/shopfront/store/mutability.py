"""Mutability classification for store records.

Seed records (identifiers 1-79) come from the read-only mock catalog; live
records (80 and up) were created through the writable backend. Every check
of whether a product or order may be edited or deleted goes through this
module.
"""

import re
from dataclasses import dataclass

from django.db import models

from .exceptions import ReadOnlyViolation

EDITABLE_THRESHOLD = 80

ORDER_PREFIX = "ORD-"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class Origin(models.TextChoices):
    SEED = "mock", "Mock data (read-only)"
    LIVE = "real", "Real API (editable)"


@dataclass(frozen=True)
class RecordSource:
    """Where a record comes from and whether it may be changed."""

    origin: Origin
    editable: bool


def parse_identifier(identifier) -> int | float | None:
    """Return the numeric part of an identifier, or None for opaque ids.

    ``"ORD-00042"``, ``"42"`` and ``42.0`` all give 42. Ints pass through and
    non-integral floats are returned unchanged.
    """
    if isinstance(identifier, bool) or identifier is None:
        return None
    if isinstance(identifier, float) and identifier.is_integer():
        return int(identifier)
    if isinstance(identifier, (int, float)):
        return identifier

    text = str(identifier).strip()
    if text[: len(ORDER_PREFIX)].upper() == ORDER_PREFIX:
        text = text[len(ORDER_PREFIX):]

    match = _LEADING_INT.match(text)
    if not match:
        return None
    return int(match.group(1))


def is_editable(identifier) -> bool:
    """Check whether the record with this identifier is live, writable data.

    Opaque identifiers without a numeric part are only ever issued by the
    live backend, so they are editable.
    """
    number = parse_identifier(identifier)
    if number is None:
        return True
    return number >= EDITABLE_THRESHOLD


def get_source(identifier) -> RecordSource:
    """Classify an identifier as seed or live data."""
    if is_editable(identifier):
        return RecordSource(origin=Origin.LIVE, editable=True)
    return RecordSource(origin=Origin.SEED, editable=False)


def require_editable(identifier, resource: str = "record", action: str = "edited") -> None:
    """Raise ReadOnlyViolation unless the identifier is writable.

    Call this before issuing any mutating request.
    """
    if not is_editable(identifier):
        raise ReadOnlyViolation(identifier, resource=resource, action=action, threshold=EDITABLE_THRESHOLD)
