from civicscan.config.settings import Settings
from civicscan.inference.client_base import BaseInferenceClient
from civicscan.inference.httpx_client_adapter import HttpxInferenceClient
from civicscan.inference.orchestrator import InferenceOrchestrator
from civicscan.inference.remote_validator import RemoteImageValidator


class InferenceFactory:
    """Creates inference components that share one transport."""

    @classmethod
    def create_client(cls, settings: Settings) -> BaseInferenceClient:
        return HttpxInferenceClient(user_agent=settings.user_agent)

    @classmethod
    def create(
        cls,
        settings: Settings,
        client: BaseInferenceClient | None = None,
    ) -> tuple[InferenceOrchestrator, RemoteImageValidator]:
        """Build the orchestrator and the remote-image validator."""
        transport = client if client is not None else cls.create_client(settings)
        return (
            InferenceOrchestrator(client=transport, settings=settings),
            RemoteImageValidator(client=transport, settings=settings),
        )
