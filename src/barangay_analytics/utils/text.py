"""Label normalization for attributes captured with inconsistent casing."""

from __future__ import annotations

import re
from typing import Any, Optional

_ZONE_PATTERN = re.compile(r"^purok\s*[-#]?\s*(\d+)$", re.IGNORECASE)


def normalize_label(value: Any) -> Optional[str]:
    """Capitalize the first letter and lowercase the rest; blank values become None."""

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text[0].upper() + text[1:].lower()


def normalize_zone(value: Any) -> Optional[str]:
    """Canonicalize purok codes so ``purok1``, ``PUROK 1`` and ``Purok 1`` agree."""

    label = normalize_label(value)
    if label is None:
        return None
    match = _ZONE_PATTERN.match(label)
    if match:
        return f"Purok {int(match.group(1))}"
    return label
