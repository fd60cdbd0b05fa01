"""Exception types raised by tabsense."""


class InvalidInputError(ValueError):
    """Caller passed something the engine cannot work with."""


class DimensionMismatchError(InvalidInputError):
    """Two vectors of different lengths were compared."""

    def __init__(self, left: int, right: int):
        super().__init__(f"Vector dimensions must match: {left} != {right}")
        self.left = left
        self.right = right


class CapabilityUnavailableError(RuntimeError):
    """An optional collaborator (text analysis, theme naming) could not serve a call.

    Never escapes the public API: callers of the collaborator catch it and
    degrade to a deterministic fallback.
    """
