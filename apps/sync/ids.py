"""Sequential, human-readable identifiers for customers and repairs.

Identifiers look like ``C-001001``: a one-letter prefix, a dash and a
sequence number zero-padded to six digits. Numbers above 999999 widen the
field instead of being truncated.

Two allocation rules exist, one per backend:

* remote store: ``ID_START_BASE + row_count + 1``. The count and the insert
  are separate round trips, so two clients creating records at the same time
  can compute the same identifier; the second insert then fails on the
  primary key. Nothing here guards against that.
* local mirror: highest existing suffix plus one, or ``ID_START_BASE`` for the
  first record. Allocation and persistence happen in one read-modify-write, so
  identifiers are never reused within a process, even after deletions.
"""
from typing import Iterable, Optional

ID_START_BASE = 1000
CUSTOMER_PREFIX = "C"
REPAIR_PREFIX = "R"


def format_id(prefix: str, number: int) -> str:
    return f"{prefix}-{number:06d}"


def parse_id_number(identifier: str) -> Optional[int]:
    """Numeric suffix of an identifier, or None if it has none."""
    _, _, suffix = identifier.partition("-")
    try:
        return int(suffix)
    except ValueError:
        return None


def next_id_from_count(prefix: str, count: Optional[int]) -> str:
    return format_id(prefix, ID_START_BASE + (count or 0) + 1)


def next_id_from_existing(prefix: str, identifiers: Iterable[str]) -> str:
    highest = ID_START_BASE - 1
    for identifier in identifiers:
        number = parse_id_number(identifier)
        if number is not None and number > highest:
            highest = number
    return format_id(prefix, highest + 1)
