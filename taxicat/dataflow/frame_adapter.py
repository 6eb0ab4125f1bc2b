"""Shared frame-adapter logic.

An adapter moves one column at a time between a dataframe library and
``CategoricalColumn``. Concrete subclasses supply the library-specific pieces:
reading raw values, building the native categorical series, writing it back,
and shaping counts into a frame.
"""
import logging
from typing import Any, List, Tuple

from ..categorical import MISSING, CategoricalColumn

log = logging.getLogger("taxicat.dataflow")


class FrameAdapter:
    """Base class for pandas and polars adapters."""

    def source_values(self, df, column: str) -> List[Any]:
        raise NotImplementedError

    def to_native(self, categorical: CategoricalColumn, name: str):
        raise NotImplementedError

    def _with_column(self, df, name: str, native):
        raise NotImplementedError

    def _counts_to_frame(self, levels: List[Any], counts: List[int]):
        raise NotImplementedError

    def encode(self, df, column: str, levels, labels=None,
               **build_kwargs) -> Tuple[Any, CategoricalColumn]:
        """Encode ``df[column]`` and return ``(new_df, categorical)``.

        ``new_df`` is a copy of ``df`` with the column replaced by the native
        categorical; ``df`` itself is not modified. Extra keyword arguments
        (``on_missing``) go to ``CategoricalColumn.build``.
        """
        values = self.source_values(df, column)
        categorical = CategoricalColumn.build(values, levels, labels=labels, **build_kwargs)
        missing = len(categorical) - sum(categorical.value_counts().values())
        log.debug("encoded %r: %d levels, %d missing of %d rows",
                  column, len(categorical.levels), missing, len(categorical))
        return self._with_column(df, column, self.to_native(categorical, column)), categorical

    def counts_frame(self, categorical: CategoricalColumn, include_missing: bool = False):
        """``value_counts`` as a two column frame, ``level`` and ``count``.

        Rows follow level order; the missing row, if requested, comes last
        with a null level.
        """
        counts = categorical.value_counts(include_missing=include_missing)
        levels = [None if key is MISSING else key for key in counts]
        return self._counts_to_frame(levels, list(counts.values()))
