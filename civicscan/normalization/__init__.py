from civicscan.normalization.confidence import normalize_confidence
from civicscan.normalization.models import BoundingBox, Finding
from civicscan.normalization.normalizer import ResponseNormalizer

__all__ = ["BoundingBox", "Finding", "ResponseNormalizer", "normalize_confidence"]
