"""Field normalization for decoded result rows."""
from datetime import date, datetime, timezone
from typing import Any

import pandas as pd
import structlog

logger = structlog.get_logger()


def normalize_record(row: dict) -> dict[str, str]:
    """Trim every value to a string; missing values become ''."""
    out = {}
    for k, v in row.items():
        if v is None or (isinstance(v, float) and pd.isna(v)):
            out[k] = ""
        else:
            out[k] = str(v).strip()
    return out


def parse_bool(value: str | None) -> bool | None:
    """Parse literal true/false text; anything else is unset."""
    if value is None:
        return None
    text = value.strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    if text:
        logger.warning("row_bool_unparsable", value=value)
    return None


def parse_epoch_millis_date(value: str | None, **context: Any) -> date | None:
    """Parse a millisecond epoch timestamp into a UTC calendar date.

    Blank values are unset; unparsable ones are logged and unset.
    """
    if value is None or not value.strip():
        return None
    try:
        millis = int(float(value.strip()))
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).date()
    except (ValueError, OverflowError, OSError):
        logger.warning("row_date_unparsable", value=value, **context)
        return None
