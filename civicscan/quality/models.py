from dataclasses import dataclass, field

SUPPORTED_FORMATS = frozenset({"jpeg", "png", "webp"})


@dataclass(frozen=True)
class ImageDescriptor:
    """Decoded image metadata, produced once per validation call."""

    format: str  # "jpeg", "png", "webp" or "other"
    width_px: int
    height_px: int
    size_bytes: int


@dataclass(frozen=True)
class QualityReport:
    """Outcome of the structural quality checks."""

    is_valid: bool
    violations: list[str] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    descriptor: ImageDescriptor | None = None


@dataclass(frozen=True)
class BlanknessReport:
    """Intensity statistics of a decoded image."""

    is_blank: bool
    average_intensity: float
    variance: float
    confidence: float
