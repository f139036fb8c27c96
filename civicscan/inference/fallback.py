"""Deterministic synthetic provider response.

Used when the provider is not configured, quick development mode is on, or
every endpoint candidate failed. The payload has the same shape as a live
provider response so it goes through the same normalizer and scorer.
"""

import copy
from typing import Any, ClassVar

from civicscan.inference.models import SOURCE_FALLBACK, AttemptFailure, InferenceOutcome

NOT_CONFIGURED = "not_configured"
QUICK_DEV_MODE = "quick_dev_mode"
ENDPOINTS_EXHAUSTED = "endpoints_exhausted"
CANCELLED = "cancelled"


class FallbackAnalysis:
    """Builds the synthetic single-finding outcome. No network calls."""

    DEFAULT_RESPONSE: ClassVar[dict[str, Any]] = {
        "predictions": [
            {
                "class": "civic_issue_detected",
                "confidence": 75,
                "x": 200,
                "y": 150,
                "width": 100,
                "height": 80,
            }
        ],
    }

    def outcome(
        self,
        reason: str,
        attempts: list[AttemptFailure] | None = None,
    ) -> InferenceOutcome:
        return InferenceOutcome(
            source=SOURCE_FALLBACK,
            response=copy.deepcopy(self.DEFAULT_RESPONSE),
            endpoint=None,
            attempts=list(attempts or []),
            fallback_reason=reason,
        )
