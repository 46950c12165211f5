"""Error taxonomy for score normalization and interpretation.

All conditions are local and recoverable. The library raises them
synchronously and the caller decides what the user sees.
"""


class NormformError(Exception):
    """Base class for normform errors."""

    code = "NORMFORM_ERROR"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class NoInput(NormformError):
    """Raised when a raw value is absent or empty.

    Means "not yet assessed". It is never a zero score.
    """

    code = "NO_INPUT"


class InvalidInput(NormformError):
    """Raised when a raw value is non-numeric or outside the accepted set."""

    code = "INVALID_INPUT"


class MissingInterpretation(NormformError):
    """Raised when no authored sentence exists for a requested combination."""

    code = "MISSING_INTERPRETATION"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        scale_key: str | None = None,
        value: str | None = None,
    ) -> None:
        super().__init__(message, field=field)
        self.scale_key = scale_key
        self.value = value
