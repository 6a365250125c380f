# File: clinic_agenda/models/common

import math
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Type, TypeVar, Union

E = TypeVar("E", bound=Enum)


def parse_iso_datetime(date_str: Optional[Union[str, datetime]]) -> Optional[datetime]:
    """Robustly parse ISO date strings with 'Z' or offsets."""
    if not date_str:
        return None
    if isinstance(date_str, datetime):
        return date_str
    try:
        # fromisoformat only accepts 'Z' from Python 3.11 on
        clean_str = date_str.replace('Z', '+00:00')
        return datetime.fromisoformat(clean_str)
    except ValueError:
        # Fallback for simple date strings without time
        try:
            return datetime.strptime(date_str, "%Y-%m-%d")
        except ValueError:
            return None


def coerce_enum(
    enum_cls: Type[E],
    value: Union[str, E, None],
    aliases: Optional[Dict[str, E]] = None,
) -> Optional[E]:
    """
    Convert a raw value into a member of ``enum_cls``.

    Accepts members, values ("confirmed"), names ("CONFIRMED"), dotted names
    ("EventState.CONFIRMED") and any alias from ``aliases``. Raises ValueError
    for anything else.
    """
    if value is None or isinstance(value, enum_cls):
        return value

    raw = str(value).strip()
    clean = raw.split('.')[-1]
    lowered = clean.lower()

    if aliases and lowered in aliases:
        return aliases[lowered]
    try:
        return enum_cls(lowered)
    except ValueError:
        pass
    try:
        return enum_cls[clean.upper()]
    except KeyError:
        raise ValueError(f"Invalid {enum_cls.__name__}: {raw!r}") from None


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)
