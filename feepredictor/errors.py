"""Error types raised by the fee predictor."""


class FeePredictorError(Exception):
    """Base class for fee predictor errors."""


class ValidationError(FeePredictorError):
    """Raised when an input is negative, out of range, or overflows."""

    def __init__(self, field: str, value, message: str = None):
        self.field = field
        self.value = value
        self.message = message or f"Invalid value for {field}: {value!r}"
        super().__init__(self.message)


class InsufficientDataError(FeePredictorError):
    """Raised when a caller requires more samples than the window holds."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient historical data: {available} samples, {required} required"
        )


class AuthorizationError(FeePredictorError):
    """Raised when a signer is not the authority of a fee record."""

    def __init__(self, record_id: str, signer: str):
        self.record_id = record_id
        self.signer = signer
        super().__init__(f"Unauthorized access to {record_id} by {signer}")


class RecordNotFoundError(FeePredictorError):
    """Raised when a fee record does not exist."""


class RecordExistsError(FeePredictorError):
    """Raised when initializing a fee record that already exists."""
