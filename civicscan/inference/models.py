from dataclasses import dataclass, field
from typing import Any

SOURCE_PROVIDER = "provider"
SOURCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class EndpointCandidate:
    """One known URL/auth shape for reaching the provider workflow."""

    name: str
    url_template: str  # placeholders: {api_url}, {workspace}, {workflow}
    key_in_query: bool


@dataclass(frozen=True)
class AttemptFailure:
    """Diagnostic record of a failed endpoint attempt."""

    endpoint: str
    error: str
    status_code: int | None = None


@dataclass(frozen=True)
class InferenceOutcome:
    """Raw provider response (or synthetic fallback) plus how it was obtained."""

    source: str  # SOURCE_PROVIDER or SOURCE_FALLBACK
    response: Any
    endpoint: str | None = None
    attempts: list[AttemptFailure] = field(default_factory=list)
    fallback_reason: str | None = None


@dataclass(frozen=True)
class WorkflowVerdict:
    """Allow/reject decision for an externally hosted image."""

    confidence: float
    model_confidence: float
    assistant_confidence: float
    allow_upload: bool
    message: str
    predictions: list[dict[str, Any]] = field(default_factory=list)
    raw: Any = None
    reachable: bool = True
