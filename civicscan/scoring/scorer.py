import math

from civicscan.normalization.models import Finding
from civicscan.scoring.keywords import category_for, severity_multiplier, urgency_for
from civicscan.scoring.models import Detection, ScoredDetections

MAX_WEIGHT = 0.7
MEAN_WEIGHT = 0.3


def round2(value: float) -> float:
    """Round to two decimals, halves away from zero for non-negative input."""
    return math.floor(value * 100 + 0.5) / 100


class PriorityScorer:
    """Computes per-detection priority, urgency and category, and the image total."""

    def score_finding(self, finding: Finding) -> Detection:
        priority = min(1.0, finding.confidence * severity_multiplier(finding.issue_type))
        return Detection(
            issue_type=finding.issue_type,
            confidence=finding.confidence,
            bounding_box=finding.bounding_box,
            priority=round2(priority),
            urgency=urgency_for(finding.confidence),
            category=category_for(finding.issue_type),
            description=f"{finding.issue_type} detected",
        )

    def score(self, findings: list[Finding]) -> ScoredDetections:
        detections = [self.score_finding(f) for f in findings]
        return ScoredDetections(
            detections=detections,
            overall_priority=self.overall_priority(detections),
        )

    @staticmethod
    def overall_priority(detections: list[Detection]) -> float:
        """0.7 x max + 0.3 x mean of detection priorities; 0 with no detections."""
        if not detections:
            return 0.0
        priorities = [d.priority for d in detections]
        mean = sum(priorities) / len(priorities)
        return round2(MAX_WEIGHT * max(priorities) + MEAN_WEIGHT * mean)
