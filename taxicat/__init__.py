from .categorical import MISSING, MISSING_CODE, CategoricalColumn, is_missing_value
from .errors import (
    ArityMismatch, CategoricalError, DuplicateLevel, UnsupportedLevelRemoval,
)
from .config import log_coercion
from .cleaning import (
    coerce_datetime_columns, missing_report, replace_out_of_range, replace_sentinels,
)

__version__ = "0.3.0"

__all__ = [
    'CategoricalColumn', 'MISSING', 'MISSING_CODE', 'is_missing_value',
    'CategoricalError', 'ArityMismatch', 'DuplicateLevel', 'UnsupportedLevelRemoval',
    'log_coercion',
    'coerce_datetime_columns', 'replace_out_of_range', 'replace_sentinels', 'missing_report',
]
