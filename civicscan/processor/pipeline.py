import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from civicscan.inference.models import InferenceOutcome
from civicscan.normalization.models import Finding
from civicscan.quality.models import BlanknessReport, QualityReport
from civicscan.scoring.models import ScoredDetections


@dataclass(slots=True)
class PipelineContext:
    image_bytes: bytes
    filename: str
    cancel_event: threading.Event | None = None
    quality_report: QualityReport | None = None
    blankness: BlanknessReport | None = None
    outcome: InferenceOutcome | None = None
    findings: list[Finding] | None = None
    scored: ScoredDetections | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
