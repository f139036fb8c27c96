import threading
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path
from typing import Any

from civicscan.config.settings import Settings
from civicscan.inference.client_base import BaseInferenceClient
from civicscan.inference.factory import InferenceFactory
from civicscan.inference.models import SOURCE_FALLBACK, SOURCE_PROVIDER, InferenceOutcome
from civicscan.inference.orchestrator import DEFAULT_FILENAME
from civicscan.inference.remote_validator import RemoteImageValidator
from civicscan.logging.logger import Log
from civicscan.normalization.normalizer import ResponseNormalizer
from civicscan.processor.exceptions import AssessmentRejection, MissingImageUrlError
from civicscan.processor.file_loader import FileLoader
from civicscan.processor.models import Assessment
from civicscan.processor.pipeline import PipelineContext, PipelineStep
from civicscan.processor.steps import (
    DetectBlankStep,
    NormalizeResponseStep,
    RunInferenceStep,
    ScoreDetectionsStep,
    ValidateQualityStep,
)
from civicscan.quality.blank_detector import BlankDetector
from civicscan.quality.models import BlanknessReport
from civicscan.quality.validator import QualityValidator
from civicscan.scoring.models import Detection, ScoredDetections
from civicscan.scoring.scorer import PriorityScorer

WORKFLOW_STAGE = "workflow_analysis"
FALLBACK_STAGE = "fallback_analysis"
REMOTE_STAGE = "remote_validation"
SERVER_ERROR_STAGE = "server_error"

PROVIDER_REASON = "Image analysis completed successfully"
FALLBACK_REASON = "Civic issue detected using fallback analysis"
FALLBACK_NOTE = "Using fallback analysis - inference workflow unavailable"

SERVER_ERROR_SUGGESTIONS = [
    "Please try uploading a different image",
    "Ensure the image is clear and shows the issue",
]
REMOTE_REJECT_SUGGESTIONS = ["Ensure the image clearly shows the civic issue"]


class Processor:
    """Runs the assessment pipeline for one image.

    Pipeline: validate quality -> detect blank -> infer -> normalize -> score.
    Every failure is returned as an Assessment; nothing is raised.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        *,
        remote_validator: RemoteImageValidator,
        normalizer: ResponseNormalizer,
        scorer: PriorityScorer,
        file_loader: FileLoader | None = None,
    ) -> None:
        self._steps = tuple(steps)
        self._remote_validator = remote_validator
        self._normalizer = normalizer
        self._scorer = scorer
        self._file_loader = file_loader or FileLoader()

    def assess(
        self,
        image_bytes: bytes,
        filename: str = DEFAULT_FILENAME,
        cancel_event: threading.Event | None = None,
    ) -> Assessment:
        Log.info(f"Assessing image '{filename}' ({len(image_bytes)} bytes)")
        context = PipelineContext(
            image_bytes=image_bytes,
            filename=filename,
            cancel_event=cancel_event,
        )
        try:
            for step in self._steps:
                context = step.run(context)
        except AssessmentRejection as exc:
            return _rejection(exc)
        except Exception as exc:
            Log.error(f"Image assessment failed: {exc}")
            return _server_error(exc)

        if context.outcome is None or context.scored is None:
            return _server_error(RuntimeError("Pipeline finished without a scored outcome"))
        assessment = _from_outcome(context, context.outcome, context.scored)
        Log.info(
            f"Assessment complete: stage={assessment.stage} source={assessment.source} "
            f"priority={assessment.overall_priority}"
        )
        return assessment

    def assess_file(self, path: Path, cancel_event: threading.Event | None = None) -> Assessment:
        try:
            image_bytes = self._file_loader.load(path)
        except AssessmentRejection as exc:
            return _rejection(exc)
        except OSError as exc:
            Log.error(f"Could not read image file {path}: {exc}")
            return _server_error(exc)
        return self.assess(image_bytes, filename=path.name, cancel_event=cancel_event)

    def assess_url(self, image_url: str) -> Assessment:
        """Validate an externally hosted image with a single workflow call."""
        if not image_url or not image_url.strip():
            return _rejection(
                MissingImageUrlError(
                    "No image URL provided",
                    suggestions=["Provide the URL of the uploaded image"],
                )
            )

        try:
            verdict = self._remote_validator.validate(image_url.strip())
            findings = self._normalizer.normalize({"predictions": verdict.predictions})
            scored = self._scorer.score(findings)
        except Exception as exc:
            Log.error(f"Remote image validation failed: {exc}")
            return _server_error(exc)

        Log.info(f"Remote validation decision: {'ALLOWED' if verdict.allow_upload else 'REJECTED'}")
        return Assessment(
            success=verdict.reachable,
            allow_upload=verdict.allow_upload,
            stage=REMOTE_STAGE,
            detections=scored.detections,
            overall_priority=scored.overall_priority,
            source=SOURCE_PROVIDER if verdict.reachable else None,
            urgency_level=_top(scored.detections, "urgency"),
            category=_top(scored.detections, "category"),
            reason=verdict.message,
            suggestions=[] if verdict.allow_upload else list(REMOTE_REJECT_SUGGESTIONS),
            metadata={
                "confidence": verdict.confidence,
                "model_confidence": verdict.model_confidence,
                "assistant_confidence": verdict.assistant_confidence,
                "prediction_count": len(scored.detections),
                "raw_response": verdict.raw,
            },
        )


def _from_outcome(
    context: PipelineContext,
    outcome: InferenceOutcome,
    scored: ScoredDetections,
) -> Assessment:
    is_fallback = outcome.source == SOURCE_FALLBACK
    metadata: dict[str, Any] = {
        "image": asdict(context.quality_report.descriptor)
        if context.quality_report is not None and context.quality_report.descriptor is not None
        else None,
        "blankness": _blankness_metadata(context.blankness),
        "prediction_count": len(scored.detections),
        "endpoint": outcome.endpoint,
        "attempts": [asdict(a) for a in outcome.attempts],
        "fallback_reason": outcome.fallback_reason,
        "raw_response": outcome.response,
    }
    if is_fallback:
        metadata["note"] = FALLBACK_NOTE

    return Assessment(
        success=True,
        allow_upload=True,
        stage=FALLBACK_STAGE if is_fallback else WORKFLOW_STAGE,
        detections=scored.detections,
        overall_priority=scored.overall_priority,
        source=outcome.source,
        urgency_level=_top(scored.detections, "urgency"),
        category=_top(scored.detections, "category"),
        reason=FALLBACK_REASON if is_fallback else PROVIDER_REASON,
        metadata=metadata,
    )


def _blankness_metadata(report: BlanknessReport | None) -> dict[str, Any] | None:
    """Blankness stats with confidence floored at 0 for high-variance images."""
    if report is None:
        return None
    data = asdict(report)
    data["confidence"] = max(0.0, report.confidence)
    return data


def _top(detections: list[Detection], attribute: str) -> str | None:
    """Attribute of the highest-priority detection (first one on ties)."""
    if not detections:
        return None
    return getattr(max(detections, key=lambda d: d.priority), attribute)


def _rejection(exc: AssessmentRejection) -> Assessment:
    Log.info(f"Image rejected at {exc.stage}: {exc.reason}")
    return Assessment(
        success=False,
        allow_upload=False,
        stage=exc.stage,
        reason=exc.reason,
        suggestions=list(exc.suggestions),
    )


def _server_error(exc: Exception) -> Assessment:
    return Assessment(
        success=False,
        allow_upload=False,
        stage=SERVER_ERROR_STAGE,
        reason=str(exc),
        suggestions=list(SERVER_ERROR_SUGGESTIONS),
    )


def build_processor(
    settings: Settings,
    client: BaseInferenceClient | None = None,
) -> Processor:
    """Build a Processor with all required components."""
    orchestrator, remote_validator = InferenceFactory.create(settings, client=client)
    normalizer = ResponseNormalizer()
    scorer = PriorityScorer()
    steps = [
        ValidateQualityStep(QualityValidator()),
        DetectBlankStep(BlankDetector()),
        RunInferenceStep(orchestrator),
        NormalizeResponseStep(normalizer),
        ScoreDetectionsStep(scorer),
    ]
    return Processor(
        steps,
        remote_validator=remote_validator,
        normalizer=normalizer,
        scorer=scorer,
    )
