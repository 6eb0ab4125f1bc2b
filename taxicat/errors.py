"""Error taxonomy for categorical columns.

Every error here is a contract violation reported at the call that caused
it. The column is left untouched when one is raised.

Assigning a value that matches no level is *not* an error; see
``CategoricalColumn.set``.
"""


class CategoricalError(ValueError):
    """Base class for categorical column errors."""
    pass


class ArityMismatch(CategoricalError):
    """A label list does not line up with the level list it renames."""

    def __init__(self, expected: int, got: int, what: str = "labels"):
        self.expected = expected
        self.got = got
        super().__init__(
            f"{what} must have the same length as the current levels: "
            f"expected {expected}, got {got}"
        )


class DuplicateLevel(CategoricalError):
    """A level label would appear twice in the vocabulary."""

    def __init__(self, label):
        self.label = label
        super().__init__(f"level {label!r} is already present")


class UnsupportedLevelRemoval(CategoricalError):
    """Levels were shrunk or reordered in place instead of via ``recode``."""

    def __init__(self, message: str = None):
        if message is None:
            message = (
                "levels can only be renamed or appended in place; "
                "use recode() to drop or reorder levels"
            )
        super().__init__(message)
