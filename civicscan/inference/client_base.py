from abc import ABC, abstractmethod
from typing import Any


class BaseInferenceClient(ABC):
    """Contract for the transport used to reach the inference provider."""

    @abstractmethod
    def post(
        self,
        url: str,
        *,
        headers: dict[str, str],
        timeout: float,
        params: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        """Send one POST request and return the decoded JSON body.

        Raises:
            ProviderTransportError: on timeout, connection failure, non-2xx
                status or a body that is not JSON.
        """

    def close(self) -> None:
        """Release transport resources. No-op unless the adapter holds any."""
