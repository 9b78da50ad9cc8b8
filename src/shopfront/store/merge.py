"""Merge and de-duplicate records from the two backends.

One ordering policy for every resource: records of the first sequence in the
order received, then records of the second sequence whose identifier was not
already seen. On an identifier collision the first sequence wins.
"""

from collections.abc import Iterable
from datetime import datetime, timezone


def record_key(identifier) -> str:
    """Canonical key for identifier equality, so ``5`` and ``"5"`` collide."""
    if isinstance(identifier, float) and identifier.is_integer():
        identifier = int(identifier)
    return str(identifier).strip()


def merge_records(first: Iterable, second: Iterable) -> list:
    """Union two record sequences by ``id``, keeping the first occurrence."""
    merged = []
    seen = set()
    for record in (*first, *second):
        key = record_key(record.id)
        if key in seen:
            continue
        seen.add(key)
        merged.append(record)
    return merged


_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def sort_newest_first(orders: Iterable) -> list:
    """Orders by creation time, newest first; undated orders go last.

    A display ordering applied after merging, not part of the merge.
    """
    return sorted(orders, key=lambda order: order.created_at or _OLDEST, reverse=True)
