from dataclasses import dataclass, field


@dataclass(frozen=True)
class BoundingBox:
    """Detection location in provider pixel coordinates."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Finding:
    """One provider-reported detection with a uniform field set."""

    issue_type: str
    confidence: float
    bounding_box: BoundingBox = field(default_factory=BoundingBox)
