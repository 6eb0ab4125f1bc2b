"""Dtype predicates for pandas, numpy and polars columns.

The cleaning helpers use these to check a column before rewriting it, and the
frame adapters use them to spot columns that are already categorical.

Note: polars dtype equality (==) is loose with non-polars types
(``np.dtype('O') == pl.Int8`` is True), so polars comparisons only run after
``_is_polars_dtype`` has confirmed the dtype really is a polars one.
"""
import pandas as pd


def _is_polars_dtype(dtype) -> bool:
    try:
        import polars as pl
    except ImportError:
        return False
    if isinstance(dtype, pl.DataType):
        return True
    return isinstance(dtype, type) and issubclass(dtype, pl.DataType)


def dtype_of(col):
    """Return the dtype of a series, or ``col`` itself if it already is one."""
    return getattr(col, 'dtype', col)


def is_numeric(dtype) -> bool:
    dtype = dtype_of(dtype)
    if _is_polars_dtype(dtype):
        return dtype.is_numeric()
    try:
        return bool(pd.api.types.is_numeric_dtype(dtype))
    except TypeError:
        return False


def is_boolean(dtype) -> bool:
    dtype = dtype_of(dtype)
    if _is_polars_dtype(dtype):
        import polars as pl
        return dtype == pl.Boolean
    try:
        return bool(pd.api.types.is_bool_dtype(dtype))
    except TypeError:
        return False


def is_string(dtype) -> bool:
    """True for string and object columns; categoricals are not strings."""
    dtype = dtype_of(dtype)
    if _is_polars_dtype(dtype):
        import polars as pl
        return dtype == pl.String
    if isinstance(dtype, pd.CategoricalDtype):
        return False
    try:
        return bool(pd.api.types.is_string_dtype(dtype))
    except TypeError:
        return False


def is_temporal(dtype) -> bool:
    dtype = dtype_of(dtype)
    if _is_polars_dtype(dtype):
        return dtype.is_temporal()
    try:
        return bool(pd.api.types.is_datetime64_any_dtype(dtype)
                    or pd.api.types.is_timedelta64_dtype(dtype))
    except TypeError:
        return False


def is_categorical(dtype) -> bool:
    """True for pandas ``category`` and polars ``Categorical``/``Enum``."""
    dtype = dtype_of(dtype)
    if _is_polars_dtype(dtype):
        import polars as pl
        return isinstance(dtype, (pl.Categorical, pl.Enum)) or dtype in (pl.Categorical, pl.Enum)
    return isinstance(dtype, pd.CategoricalDtype)


def is_numeric_not_bool(dtype) -> bool:
    return is_numeric(dtype) and not is_boolean(dtype)
