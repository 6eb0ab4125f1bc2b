from typing import Any, List

import pandas as pd
from typing_extensions import override

from ..categorical import CategoricalColumn
from ..column_filters import is_categorical
from .frame_adapter import FrameAdapter, log


class PandasFrameAdapter(FrameAdapter):
    """Concrete pandas implementation of FrameAdapter."""

    @override
    def source_values(self, df: pd.DataFrame, column: str) -> List[Any]:
        if column not in df.columns:
            raise KeyError(f"column {column!r} not in dataframe")
        ser = df[column]
        if is_categorical(ser):
            log.debug("%r is already categorical with %d categories, re-encoding",
                      column, len(ser.cat.categories))
        return ser.to_list()

    @override
    def to_native(self, categorical: CategoricalColumn, name: str) -> pd.Series:
        cat = pd.Categorical.from_codes(
            categorical.codes.copy(), categories=list(categorical.levels))
        return pd.Series(cat, name=name)

    @override
    def _with_column(self, df: pd.DataFrame, name: str, native: pd.Series) -> pd.DataFrame:
        out = df.copy()
        # positional, df may carry any index
        out[name] = native.array
        return out

    @override
    def _counts_to_frame(self, levels: List[Any], counts: List[int]) -> pd.DataFrame:
        return pd.DataFrame({
            'level': pd.Series(levels, dtype=object),
            'count': pd.Series(counts, dtype='int64'),
        })
