class InferenceError(Exception):
    """Base exception for inference provider errors."""


class ProviderTransportError(InferenceError):
    """Raised when a provider call fails: timeout, connection error, non-2xx or non-JSON body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
