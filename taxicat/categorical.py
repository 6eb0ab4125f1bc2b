"""Categorical columns with explicit, ordered level sets.

A ``CategoricalColumn`` stores one integer code per row, pointing into an
ordered tuple of level labels. Rows whose raw value matched no declared level
hold ``MISSING_CODE``.

The level table supports two kinds of change:
  - name-table updates (``set_levels``, ``add_level``, assigning a same-length
    or longer list to ``levels``), which never touch codes
  - rebuilds (``recode``), which re-derive every code from the raw source

Shrinking or reordering levels in place is rejected with
``UnsupportedLevelRemoval``; existing codes would silently point at the wrong
label.

Mutating calls are not synchronized. Callers sharing a column across threads
must hold exclusive access for ``set``, ``set_levels``, ``add_level`` and
``recode``.
"""
from __future__ import annotations

import logging
import operator
from numbers import Number
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import MissingObserver, default_observer
from .errors import (
    ArityMismatch, CategoricalError, DuplicateLevel, UnsupportedLevelRemoval,
)

log = logging.getLogger("taxicat.categorical")

MISSING_CODE = -1


class _MissingSentinel:
    """Marker returned by queries for rows that matched no level."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return '<MISSING>'

    def __bool__(self):
        return False


MISSING = _MissingSentinel()

# distinguishes "use the configured default observer" from an explicit None
_DEFAULT = object()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def is_missing_value(value: Any) -> bool:
    """True for None, NaN, pd.NA, pd.NaT and ``MISSING``."""
    if value is None or value is MISSING:
        return True
    try:
        result = pd.isna(value)
    except (TypeError, ValueError):
        return False
    return isinstance(result, (bool, np.bool_)) and bool(result)


def _as_list(values) -> List[Any]:
    if isinstance(values, (str, bytes)):
        raise TypeError("expected a sequence of values, got a single string")
    if isinstance(values, np.ndarray):
        return values.tolist()
    # pandas and polars Series both provide to_list
    if hasattr(values, 'to_list'):
        return values.to_list()
    return list(values)


def _sort_key(value):
    if isinstance(value, Number):
        return (0, value, '')
    return (1, 0, str(value))


def _infer_levels(values: Sequence[Any]) -> List[Any]:
    distinct = []
    seen = set()
    for v in values:
        if is_missing_value(v) or v in seen:
            continue
        seen.add(v)
        distinct.append(v)
    try:
        return sorted(distinct)
    except TypeError:
        # numbers and strings together: numbers first, then strings
        return sorted(distinct, key=_sort_key)


def _check_levels(levels: Sequence[Any]) -> None:
    seen = set()
    for level in levels:
        if is_missing_value(level):
            raise CategoricalError(f"levels may not contain missing values, got {level!r}")
        if level in seen:
            raise DuplicateLevel(level)
        seen.add(level)


def _position_map(levels: Sequence[Any]) -> Dict[Any, int]:
    return {level: i for i, level in enumerate(levels)}


def _code_for(positions: Dict[Any, int], value: Any) -> int:
    if is_missing_value(value):
        return MISSING_CODE
    try:
        return positions.get(value, MISSING_CODE)
    except TypeError:
        # unhashable values can't be a level
        return MISSING_CODE


def _encode(values: Sequence[Any], levels, labels) -> Tuple[Tuple[Any, ...], np.ndarray]:
    """Resolve the level table and derive one code per value."""
    if levels is None:
        levels = _infer_levels(values)
    else:
        levels = _as_list(levels)
        _check_levels(levels)

    if labels is not None:
        labels = _as_list(labels)
        if len(labels) != len(levels):
            raise ArityMismatch(len(levels), len(labels))
        _check_levels(labels)

    # membership is decided against the declared levels, before labels apply
    positions = _position_map(levels)
    codes = np.fromiter(
        (_code_for(positions, v) for v in values), dtype=np.int64, count=len(values))

    stored = labels if labels is not None else levels
    return tuple(stored), codes


# ---------------------------------------------------------------------------
# CategoricalColumn
# ---------------------------------------------------------------------------

class CategoricalColumn:
    """An ordered-level encoder over an array of labels.

    Build one with ``CategoricalColumn.build``::

        col = CategoricalColumn.build(
            ["red", "blue", "green", "red"], levels=["red", "green", "blue"])
        col.codes           # array([0, 2, 1, 0])
        col.value_counts()  # {'red': 2, 'green': 1, 'blue': 1}

    Pass ``levels=None`` to infer the levels as the sorted distinct values of
    the source.
    """

    def __init__(self, levels: Sequence[Any], codes,
                 on_missing: Optional[MissingObserver] = None):
        levels = _as_list(levels)
        _check_levels(levels)
        codes = np.asarray(codes, dtype=np.int64).copy()
        if codes.ndim != 1:
            raise CategoricalError("codes must be one dimensional")
        if len(codes) and (codes.min() < MISSING_CODE or codes.max() >= len(levels)):
            raise CategoricalError(
                f"codes must be {MISSING_CODE} or index into {len(levels)} levels")
        self._codes = codes
        self._on_missing = on_missing
        self._set_level_table(tuple(levels))

    @classmethod
    def build(cls, source, levels, labels=None, on_missing=_DEFAULT) -> CategoricalColumn:
        """Encode ``source`` against ``levels``.

        Args:
            source: iterable of raw scalars (list, numpy array, pandas or
                polars Series)
            levels: ordered level values, or None to infer them as the sorted
                distinct non-missing values of ``source``
            labels: optional display names, paired positionally with
                ``levels``; the stored levels become these labels
            on_missing: observer called as ``on_missing(index, value)`` when
                ``set`` stores a value that matches no level. Defaults to the
                observer configured by ``TAXICAT_WARN_ON_COERCE``.

        Raises:
            ArityMismatch: ``labels`` and ``levels`` differ in length
            DuplicateLevel: ``levels`` or ``labels`` repeat an entry
        """
        values = _as_list(source)
        stored, codes = _encode(values, levels, labels)
        if on_missing is _DEFAULT:
            on_missing = default_observer()
        return cls(stored, codes, on_missing=on_missing)

    def _set_level_table(self, levels: Tuple[Any, ...]) -> None:
        self._levels = levels
        self._positions = _position_map(levels)

    # -- level table --------------------------------------------------------

    @property
    def levels(self) -> Tuple[Any, ...]:
        return self._levels

    @levels.setter
    def levels(self, new_levels) -> None:
        """Rename and optionally append; never shrink."""
        new_levels = _as_list(new_levels)
        current = len(self._levels)
        if len(new_levels) < current:
            raise UnsupportedLevelRemoval(
                f"cannot shrink {current} levels to {len(new_levels)} in place; "
                "use recode() to drop levels")
        renamed = self._validated_rename(new_levels[:current])
        combined = renamed + new_levels[current:]
        _check_levels(combined)
        self._set_level_table(tuple(combined))

    def _validated_rename(self, new_labels: List[Any]) -> List[Any]:
        if len(new_labels) != len(self._levels):
            raise ArityMismatch(len(self._levels), len(new_labels))
        _check_levels(new_labels)
        for i, label in enumerate(new_labels):
            # an existing label moving to another position is a reorder
            if self._positions.get(label, i) != i:
                raise UnsupportedLevelRemoval(
                    f"label {label!r} would move from position {self._positions[label]} "
                    f"to {i}; use recode() to reorder")
        return new_labels

    def set_levels(self, new_labels) -> None:
        """Replace the display name at each level position. Codes are untouched."""
        renamed = self._validated_rename(_as_list(new_labels))
        self._set_level_table(tuple(renamed))

    def add_level(self, new_label) -> None:
        """Append a level no row maps to yet."""
        if is_missing_value(new_label):
            raise CategoricalError(f"levels may not contain missing values, got {new_label!r}")
        if new_label in self._positions:
            raise DuplicateLevel(new_label)
        self._set_level_table(self._levels + (new_label,))

    def recode(self, source, new_levels, labels=None) -> CategoricalColumn:
        """Rebuild every code from the original ``source`` against ``new_levels``.

        This is how levels are dropped or reordered: values of ``source`` that
        are absent from ``new_levels`` become missing.
        """
        values = _as_list(source)
        stored, codes = _encode(values, new_levels, labels)
        self._codes = codes
        self._set_level_table(stored)
        log.debug("recoded %d rows against %d levels", len(codes), len(stored))
        return self

    # -- cells --------------------------------------------------------------

    def _position(self, index) -> int:
        i = operator.index(index)
        n = len(self._codes)
        if i < 0:
            i += n
        if not 0 <= i < n:
            raise IndexError(f"index {index} out of range for column of length {n}")
        return i

    def set(self, index, value) -> None:
        """Store ``value`` at ``index``.

        A value equal to a current level label stores that level. Any other
        value stores a missing code instead of raising; if the value was not
        itself missing, the column's ``on_missing`` observer is told.
        """
        i = self._position(index)
        code = _code_for(self._positions, value)
        self._codes[i] = code
        if code == MISSING_CODE and self._on_missing is not None and not is_missing_value(value):
            self._on_missing(i, value)

    def is_missing(self, index) -> bool:
        return bool(self._codes[self._position(index)] == MISSING_CODE)

    def level_of(self, index):
        code = int(self._codes[self._position(index)])
        if code == MISSING_CODE:
            return MISSING
        return code

    def label_at(self, index):
        code = int(self._codes[self._position(index)])
        if code == MISSING_CODE:
            return MISSING
        return self._levels[code]

    @property
    def codes(self) -> np.ndarray:
        """Read-only view of the code array."""
        view = self._codes.view()
        view.flags.writeable = False
        return view

    @property
    def on_missing(self) -> Optional[MissingObserver]:
        return self._on_missing

    def value_counts(self, include_missing: bool = False) -> Dict[Any, int]:
        """Row count per level, in level order, zero counts included.

        With ``include_missing`` the final ``MISSING`` key holds the number of
        missing rows, so the counts sum to ``len(self)``.
        """
        present = self._codes[self._codes != MISSING_CODE]
        counts = np.bincount(present, minlength=len(self._levels))
        result: Dict[Any, int] = {
            label: int(n) for label, n in zip(self._levels, counts)}
        if include_missing:
            result[MISSING] = int(len(self._codes) - len(present))
        return result

    def to_list(self) -> List[Any]:
        return [MISSING if c == MISSING_CODE else self._levels[c] for c in self._codes]

    def copy(self) -> CategoricalColumn:
        return CategoricalColumn(self._levels, self._codes, on_missing=self._on_missing)

    # -- python protocols ---------------------------------------------------

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.to_list())

    def __getitem__(self, index):
        if isinstance(index, slice):
            return CategoricalColumn(self._levels, self._codes[index], on_missing=self._on_missing)
        return self.label_at(index)

    def __setitem__(self, index, value) -> None:
        self.set(index, value)

    def __eq__(self, other):
        if not isinstance(other, CategoricalColumn):
            return NotImplemented
        return self._levels == other._levels and np.array_equal(self._codes, other._codes)

    __hash__ = None

    def __repr__(self):
        shown = self.to_list()[:10]
        more = ", ..." if len(self) > 10 else ""
        values = ", ".join(repr(v) for v in shown)
        return f"CategoricalColumn([{values}{more}], levels={list(self._levels)!r})"
