"""
Lenient coercion of untrusted JSON values into dashboard field types.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)


def as_text(value: Any, *, field_name: str = "value") -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    logger.warning("Field %s is %s, not a string; stringifying", field_name, type(value).__name__)
    return str(value)


def as_int(value: Any, *, field_name: str = "value", minimum: Optional[int] = None) -> int:
    """
    Coerce a JSON scalar to an integer.

    Missing values become 0 silently. Anything that cannot be read as an
    integer becomes 0 with a warning. Values below ``minimum`` are clamped.
    """
    if value is None:
        return 0

    result: int
    if isinstance(value, bool):
        logger.warning("Field %s is a boolean, expected integer; using 0", field_name)
        result = 0
    elif isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            logger.warning("Field %s is not a finite number; using 0", field_name)
            result = 0
        else:
            if not value.is_integer():
                logger.warning("Field %s is fractional (%s); truncating", field_name, value)
            result = int(value)
    elif isinstance(value, str):
        try:
            result = int(value.strip())
        except ValueError:
            logger.warning("Field %s=%r is not an integer; using 0", field_name, value)
            result = 0
    else:
        logger.warning("Field %s is %s, expected integer; using 0", field_name, type(value).__name__)
        result = 0

    if minimum is not None and result < minimum:
        logger.warning("Field %s=%s below %s; clamping", field_name, result, minimum)
        result = minimum
    return result


def as_text_list(value: Any, *, field_name: str = "value") -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        logger.warning("Field %s is %s, expected list; treating as empty", field_name, type(value).__name__)
        return ()

    seen: set[str] = set()
    items: list[str] = []
    for item in value:
        if item is None:
            logger.warning("Field %s contains a null entry; skipping it", field_name)
            continue
        text = as_text(item, field_name=field_name)
        # repeated entries are kept; each one counts in fan-out totals
        if text in seen:
            logger.warning("Field %s lists %r more than once; keeping every entry", field_name, text)
        seen.add(text)
        items.append(text)
    return tuple(items)
