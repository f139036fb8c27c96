from dataclasses import asdict, dataclass, field
from typing import Any

from civicscan.scoring.models import Detection


@dataclass(frozen=True)
class Assessment:
    """Final result for one image, handed to the caller for persistence.

    Rejections have ``success=False`` with a reason and suggestions and no
    detections. ``source`` is "provider" or "fallback" once inference ran.
    """

    success: bool
    allow_upload: bool
    stage: str
    detections: list[Detection] = field(default_factory=list)
    overall_priority: float = 0.0
    source: str | None = None
    urgency_level: str | None = None
    category: str | None = None
    reason: str = ""
    suggestions: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
