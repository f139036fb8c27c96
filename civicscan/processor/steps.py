from civicscan.inference.orchestrator import InferenceOrchestrator
from civicscan.logging.logger import Log
from civicscan.normalization.normalizer import ResponseNormalizer
from civicscan.processor.exceptions import ContentRejected, QualityRejected, UnreadableImageError
from civicscan.processor.pipeline import PipelineContext, PipelineStep
from civicscan.quality.blank_detector import BlankDetector
from civicscan.quality.exceptions import ImageDecodeError
from civicscan.quality.validator import UNREADABLE_IMAGE, QualityValidator
from civicscan.scoring.scorer import PriorityScorer

BLANK_IMAGE_REASON = "Image appears to be blank or has insufficient content"
BLANK_IMAGE_SUGGESTIONS = [
    "Please upload a clearer image",
    "Ensure the image shows the civic issue clearly",
]
UNREADABLE_SUGGESTIONS = [
    "Check if the file is a valid image",
    "Try uploading a different image",
]


class ValidateQualityStep(PipelineStep):
    def __init__(self, validator: QualityValidator) -> None:
        self._validator = validator

    def run(self, context: PipelineContext) -> PipelineContext:
        report = self._validator.validate(context.image_bytes)
        context.quality_report = report
        if report.is_valid:
            return context

        reason = "; ".join(report.messages)
        Log.info(f"Image rejected by quality validation: {report.violations}")
        if UNREADABLE_IMAGE in report.violations:
            raise UnreadableImageError(reason, suggestions=report.suggestions)
        raise QualityRejected(reason, suggestions=report.suggestions)


class DetectBlankStep(PipelineStep):
    def __init__(self, detector: BlankDetector) -> None:
        self._detector = detector

    def run(self, context: PipelineContext) -> PipelineContext:
        try:
            report = self._detector.detect(context.image_bytes)
        except ImageDecodeError as exc:
            raise UnreadableImageError(str(exc), suggestions=UNREADABLE_SUGGESTIONS) from exc
        context.blankness = report
        if report.is_blank:
            Log.info(f"Image rejected as blank: variance={report.variance:.2f}")
            raise ContentRejected(BLANK_IMAGE_REASON, suggestions=BLANK_IMAGE_SUGGESTIONS)
        return context


class RunInferenceStep(PipelineStep):
    def __init__(self, orchestrator: InferenceOrchestrator) -> None:
        self._orchestrator = orchestrator

    def run(self, context: PipelineContext) -> PipelineContext:
        context.outcome = self._orchestrator.infer(
            context.image_bytes,
            filename=context.filename,
            cancel_event=context.cancel_event,
        )
        return context


class NormalizeResponseStep(PipelineStep):
    def __init__(self, normalizer: ResponseNormalizer) -> None:
        self._normalizer = normalizer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.outcome is None:
            raise ValueError("PipelineContext.outcome must be set before normalization")
        context.findings = self._normalizer.normalize(context.outcome.response)
        return context


class ScoreDetectionsStep(PipelineStep):
    def __init__(self, scorer: PriorityScorer) -> None:
        self._scorer = scorer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.findings is None:
            raise ValueError("PipelineContext.findings must be set before scoring")
        context.scored = self._scorer.score(context.findings)
        Log.info(
            f"Scored {len(context.scored.detections)} detections, "
            f"overall priority {context.scored.overall_priority}"
        )
        return context
