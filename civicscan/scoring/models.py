from dataclasses import dataclass, field

from civicscan.normalization.models import BoundingBox


@dataclass(frozen=True)
class Detection:
    """A scored finding, local to one pipeline run."""

    issue_type: str
    confidence: float
    bounding_box: BoundingBox
    priority: float
    urgency: str  # "low", "medium" or "high"
    category: str
    description: str


@dataclass(frozen=True)
class ScoredDetections:
    """Detections in provider order plus the combined image priority."""

    detections: list[Detection] = field(default_factory=list)
    overall_priority: float = 0.0
