"""Utility functions shared across statcube modules."""

from __future__ import annotations

import re

__all__ = [
    "is_time_dimension",
    "parse_hierarchy_label",
    "HIERARCHY_MARKER",
]

# "¬" prefix marks hierarchy depth in PX value labels: "¬¬ Boliger" is depth 2
HIERARCHY_MARKER = "¬"

_HIERARCHY_PREFIX = re.compile(r"^([¬\s]+)")


def is_time_dimension(code: str) -> bool:
    """Returns ``True`` for dimensions treated as time: the code is ``Tid`` or
    contains ``tid`` in any letter case."""
    return code == "Tid" or "tid" in code.lower()


def parse_hierarchy_label(label: str | None) -> tuple[str | None, int]:
    """Split a raw value label into a clean label and its hierarchy depth.

    >>> parse_hierarchy_label("¬¬ Boliger")
    ('Boliger', 2)
    """
    if not label:
        return label, 0

    match = _HIERARCHY_PREFIX.match(label)
    if not match:
        return label, 0

    depth = match.group(1).count(HIERARCHY_MARKER)
    clean = label[match.end() :].strip()
    return clean or label, depth
