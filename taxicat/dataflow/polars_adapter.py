from typing import Any, List

import polars as pl
from typing_extensions import override

from ..categorical import MISSING_CODE, CategoricalColumn
from ..column_filters import is_categorical
from ..errors import DuplicateLevel
from .frame_adapter import FrameAdapter, log


def _enum_categories(levels) -> List[str]:
    """pl.Enum only holds strings, so levels are cast and must stay distinct."""
    categories = [str(level) for level in levels]
    seen = set()
    for category in categories:
        if category in seen:
            raise DuplicateLevel(category)
        seen.add(category)
    return categories


class PolarsFrameAdapter(FrameAdapter):
    """Concrete polars implementation of FrameAdapter."""

    @override
    def source_values(self, df: pl.DataFrame, column: str) -> List[Any]:
        if column not in df.columns:
            raise KeyError(f"column {column!r} not in dataframe")
        ser = df.get_column(column)
        if is_categorical(ser):
            log.debug("%r is already %s, re-encoding", column, ser.dtype)
        return ser.to_list()

    @override
    def to_native(self, categorical: CategoricalColumn, name: str) -> pl.Series:
        categories = _enum_categories(categorical.levels)
        values = [None if code == MISSING_CODE else categories[code]
                  for code in categorical.codes]
        return pl.Series(name, values, dtype=pl.Enum(categories))

    @override
    def _with_column(self, df: pl.DataFrame, name: str, native: pl.Series) -> pl.DataFrame:
        return df.with_columns(native)

    @override
    def _counts_to_frame(self, levels: List[Any], counts: List[int]) -> pl.DataFrame:
        return pl.DataFrame(
            {
                'level': [None if level is None else str(level) for level in levels],
                'count': counts,
            },
            schema={'level': pl.String, 'count': pl.Int64},
        )
