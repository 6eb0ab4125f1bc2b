"""Missing-value cleaning for raw trip columns.

Two conversions show up before any categorical encoding happens:

  - timestamp columns arrive as strings and need parsing; rows that fail to
    parse become ``NaT``
  - numeric columns carry impossible values (negative fares, 0 passengers)
    or sentinel codes such as ``99`` for "unknown"; these become ``NaN``

Every helper returns a new object and logs how many values it turned into
missing ones.
"""
import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .column_filters import is_numeric_not_bool, is_temporal

log = logging.getLogger("taxicat.cleaning")

_INCLUSIVE = ("both", "neither", "left", "right")


def coerce_datetime_columns(df: pd.DataFrame, columns: Iterable[str],
                            format: Optional[str] = None, utc: bool = False) -> pd.DataFrame:
    """Parse string columns into datetimes, unparseable values become NaT.

    Columns that are already temporal are left as they are.

    Raises:
        KeyError: a named column is not in ``df``
    """
    columns = list(columns)
    absent = [c for c in columns if c not in df.columns]
    if absent:
        raise KeyError(f"columns not found: {absent}")

    out = df.copy()
    for col in columns:
        ser = out[col]
        if is_temporal(ser):
            log.debug("%s is already %s, skipping", col, ser.dtype)
            continue
        parsed = pd.to_datetime(ser, format=format, utc=utc, errors="coerce")
        newly_missing = int((parsed.isna() & ser.notna()).sum())
        if newly_missing:
            log.info("%s: %d values could not be parsed as datetimes", col, newly_missing)
        out[col] = parsed
    return out


def _out_of_range_mask(ser: pd.Series, lower, upper, inclusive: str) -> pd.Series:
    mask = pd.Series(False, index=ser.index)
    if lower is not None:
        if inclusive in ("both", "left"):
            mask |= ser < lower
        else:
            mask |= ser <= lower
    if upper is not None:
        if inclusive in ("both", "right"):
            mask |= ser > upper
        else:
            mask |= ser >= upper
    # nullable dtypes compare to NA, which is never out of range
    return mask.fillna(False).astype(bool)


def _is_missing_scalar(value) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _writable_copy(ser: pd.Series, mask: pd.Series, replacement) -> pd.Series:
    # integer columns can't hold NaN
    if mask.any() and _is_missing_scalar(replacement) and ser.dtype.kind in "iu":
        return ser.astype("float64")
    return ser.copy()


def replace_out_of_range(ser: pd.Series, lower=None, upper=None,
                         inclusive: str = "both", sentinel=np.nan) -> pd.Series:
    """Replace values outside ``[lower, upper]`` with ``sentinel``.

    Either bound may be None to leave that side open. ``inclusive`` follows
    ``pd.Series.between``: "both", "neither", "left" or "right".

    Usage::

        trips['fare_amount'] = replace_out_of_range(trips['fare_amount'], lower=0)
        trips['passenger_count'] = replace_out_of_range(
            trips['passenger_count'], lower=1, upper=6)
    """
    if inclusive not in _INCLUSIVE:
        raise ValueError(f"inclusive must be one of {_INCLUSIVE}, got {inclusive!r}")
    if not is_numeric_not_bool(ser):
        raise TypeError(f"range checks need a numeric column, {ser.name!r} is {ser.dtype}")

    mask = _out_of_range_mask(ser, lower, upper, inclusive)
    out = _writable_copy(ser, mask, sentinel)
    replaced = int(mask.sum())
    if replaced:
        out[mask] = sentinel
        log.info("%s: replaced %d values outside [%s, %s]", ser.name, replaced, lower, upper)
    return out


def replace_sentinels(ser: pd.Series, sentinels: Iterable, replacement=np.nan) -> pd.Series:
    """Replace values equal to any of ``sentinels`` (e.g. ``99`` for unknown)."""
    sentinels = list(sentinels)
    mask = ser.isin(sentinels)
    out = _writable_copy(ser, mask, replacement)
    replaced = int(mask.sum())
    if replaced:
        out[mask] = replacement
        log.info("%s: replaced %d sentinel values %r", ser.name, replaced, sentinels)
    return out


def missing_report(df: pd.DataFrame) -> pd.Series:
    """Missing-value count per column, in column order."""
    return df.isna().sum().astype("int64")
