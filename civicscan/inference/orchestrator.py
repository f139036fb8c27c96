"""Multi-endpoint inference call with ordered fallback."""

import mimetypes
import threading
from collections.abc import Sequence

from civicscan.config.settings import Settings
from civicscan.inference.client_base import BaseInferenceClient
from civicscan.inference.endpoints import DEFAULT_ENDPOINT_CANDIDATES, render_url
from civicscan.inference.exceptions import ProviderTransportError
from civicscan.inference.fallback import (
    CANCELLED,
    ENDPOINTS_EXHAUSTED,
    NOT_CONFIGURED,
    QUICK_DEV_MODE,
    FallbackAnalysis,
)
from civicscan.inference.models import (
    SOURCE_PROVIDER,
    AttemptFailure,
    EndpointCandidate,
    InferenceOutcome,
)
from civicscan.logging.logger import Log

IMAGE_FIELD_NAME = "image"
DEFAULT_FILENAME = "civic_issue.jpg"

_STATUS_HINTS: dict[int, str] = {
    401: "authentication failed: API key may be invalid or expired",
    403: "access forbidden: API key lacks permission for this workspace/workflow",
    404: "not found: workflow may not exist or be unpublished",
    422: "validation error: image format or size rejected by the workflow",
    502: "workflow configuration issue: check the workflow blocks and server setup",
    503: "service temporarily unavailable: provider may be busy",
}


class InferenceOrchestrator:
    """Tries each endpoint candidate in order; degrades to a synthetic result.

    States per call: not configured or quick mode go straight to fallback;
    otherwise each candidate is tried in turn until one succeeds, and
    exhausting the list (or a cancellation) ends in fallback. Provider
    errors are recorded for diagnostics and never raised.
    """

    def __init__(
        self,
        *,
        client: BaseInferenceClient,
        settings: Settings,
        candidates: Sequence[EndpointCandidate] = DEFAULT_ENDPOINT_CANDIDATES,
        fallback: FallbackAnalysis | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._candidates = tuple(candidates)
        self._fallback = fallback or FallbackAnalysis()

    @property
    def is_configured(self) -> bool:
        s = self._settings
        return bool(s.roboflow_api_key and s.roboflow_workspace and s.roboflow_workflow)

    def infer(
        self,
        image_bytes: bytes,
        filename: str = DEFAULT_FILENAME,
        cancel_event: threading.Event | None = None,
    ) -> InferenceOutcome:
        if self._settings.quick_dev_mode:
            Log.info("Quick development mode enabled, using fallback analysis")
            return self._fallback.outcome(QUICK_DEV_MODE)

        if not self.is_configured:
            Log.warning(
                "Inference credentials missing, using fallback analysis "
                f"(api_key={'set' if self._settings.roboflow_api_key else 'missing'}, "
                f"workspace={self._settings.roboflow_workspace or 'missing'}, "
                f"workflow={self._settings.roboflow_workflow or 'missing'})"
            )
            return self._fallback.outcome(NOT_CONFIGURED)

        files = {IMAGE_FIELD_NAME: (filename, image_bytes, _content_type(filename))}
        attempts: list[AttemptFailure] = []
        total = len(self._candidates)

        for index, candidate in enumerate(self._candidates, start=1):
            if _is_cancelled(cancel_event):
                return self._cancelled(attempts)

            url = render_url(
                candidate,
                api_url=self._settings.roboflow_api_url,
                workspace=self._settings.roboflow_workspace,
                workflow=self._settings.roboflow_workflow,
            )
            Log.info(f"Trying endpoint {index}/{total} ({candidate.name}): {url}")
            try:
                response = self._client.post(
                    url,
                    headers={"Authorization": f"Bearer {self._settings.roboflow_api_key}"},
                    params=self._params_for(candidate),
                    files=files,
                    timeout=self._settings.inference_timeout_seconds,
                )
            except ProviderTransportError as exc:
                attempts.append(self._record_failure(index, candidate, exc))
                if _is_cancelled(cancel_event):
                    return self._cancelled(attempts)
                continue

            # A result that arrives after cancellation is discarded.
            if _is_cancelled(cancel_event):
                return self._cancelled(attempts)

            Log.info(f"Endpoint {index} ({candidate.name}) succeeded")
            Log.debug(f"Provider response: {response}")
            return InferenceOutcome(
                source=SOURCE_PROVIDER,
                response=response,
                endpoint=candidate.name,
                attempts=attempts,
            )

        Log.warning(f"All {total} endpoint candidates failed, using fallback analysis")
        return self._fallback.outcome(ENDPOINTS_EXHAUSTED, attempts)

    def health_status(self) -> dict[str, object]:
        s = self._settings
        return {
            "status": "healthy",
            "api_key": bool(s.roboflow_api_key),
            "workspace": bool(s.roboflow_workspace),
            "workflow": bool(s.roboflow_workflow),
            "api_url": s.roboflow_api_url,
            "quick_dev_mode": s.quick_dev_mode,
            "endpoints": [c.name for c in self._candidates],
        }

    def _cancelled(self, attempts: list[AttemptFailure]) -> InferenceOutcome:
        Log.warning("Inference cancelled, using fallback analysis")
        return self._fallback.outcome(CANCELLED, attempts)

    def _params_for(self, candidate: EndpointCandidate) -> dict[str, str] | None:
        if candidate.key_in_query:
            return {"api_key": self._settings.roboflow_api_key}
        return None

    def _record_failure(
        self,
        index: int,
        candidate: EndpointCandidate,
        exc: ProviderTransportError,
    ) -> AttemptFailure:
        error = Log.redact(str(exc), self._settings.roboflow_api_key)
        hint = _STATUS_HINTS.get(exc.status_code) if exc.status_code is not None else None
        Log.warning(
            f"Endpoint {index} ({candidate.name}) failed: {error}"
            + (f" [{hint}]" if hint else "")
        )
        return AttemptFailure(endpoint=candidate.name, error=error, status_code=exc.status_code)


def _is_cancelled(cancel_event: threading.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()


def _content_type(filename: str) -> str:
    guessed, _ = mimetypes.guess_type(filename)
    if guessed and guessed.startswith("image/"):
        return guessed
    return "image/jpeg"
