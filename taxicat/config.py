"""Environment-driven options.

``TAXICAT_WARN_ON_COERCE``
    When set to ``1``/``true``/``yes``, columns built without an explicit
    ``on_missing`` observer report coerced assignments through logging.

Variables are read each time a column is built, so tests and notebooks can
flip them without reimporting.
"""
import logging
import os
from typing import Any, Callable, Optional

log = logging.getLogger("taxicat.config")

WARN_ON_COERCE_VAR = "TAXICAT_WARN_ON_COERCE"

_TRUTHY = ("1", "true", "yes")

MissingObserver = Callable[[int, Any], None]


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def warn_on_coerce_enabled() -> bool:
    return _env_flag(WARN_ON_COERCE_VAR)


def log_coercion(logger: Optional[logging.Logger] = None,
                 level: int = logging.WARNING) -> MissingObserver:
    """Return an observer that logs out-of-level assignments.

    Usage::

        col = CategoricalColumn.build(ser, levels=None, on_missing=log_coercion())
        col.set(3, "purple")  # logs: row 3: 'purple' matches no level ...
    """
    target = logger if logger is not None else logging.getLogger("taxicat.categorical")

    def observer(index: int, value: Any) -> None:
        target.log(level, "row %d: %r matches no level, stored as missing", index, value)

    return observer


def default_observer() -> Optional[MissingObserver]:
    if warn_on_coerce_enabled():
        log.debug("%s is set, logging coerced assignments", WARN_ON_COERCE_VAR)
        return log_coercion()
    return None
