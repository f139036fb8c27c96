"""Single-call validation for images that are already hosted remotely.

The provider workflow returns a list of outputs. Each may carry a detection
model result under ``output2`` and an assistant verdict under ``output``,
either as a JSON object or as loose ``prediction: X, confidence: Y`` text.
"""

import json
import re
from typing import Any

from civicscan.config.settings import Settings
from civicscan.inference.client_base import BaseInferenceClient
from civicscan.inference.exceptions import ProviderTransportError
from civicscan.inference.models import WorkflowVerdict
from civicscan.logging.logger import Log
from civicscan.normalization.confidence import normalize_confidence

_PREDICTION_RE = re.compile(r"prediction:\s*([^\n,]+)", re.IGNORECASE)
_CONFIDENCE_RE = re.compile(r"confidence:\s*(\d*\.?\d+)", re.IGNORECASE)

NO_ISSUE_MESSAGE = "No valid civic issue detected in image."


class RemoteImageValidator:
    """Posts an image URL to the provider workflow and decides allow/reject."""

    def __init__(self, *, client: BaseInferenceClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def validate(self, image_url: str) -> WorkflowVerdict:
        if not image_url:
            raise ValueError("image_url is required")

        payload = {
            "api_key": self._settings.roboflow_api_key,
            "inputs": {"image": {"type": "url", "value": image_url}},
        }
        try:
            raw = self._client.post(
                self._settings.roboflow_model_endpoint,
                headers={"Content-Type": "application/json"},
                json_body=payload,
                timeout=self._settings.workflow_timeout_seconds,
            )
        except ProviderTransportError as exc:
            message = Log.redact(str(exc), self._settings.roboflow_api_key)
            Log.error(f"Remote image validation failed: {message}")
            return WorkflowVerdict(
                confidence=0.0,
                model_confidence=0.0,
                assistant_confidence=0.0,
                allow_upload=False,
                message=message,
                reachable=False,
            )

        Log.debug(f"Workflow response: {raw}")
        return self._decide(raw)

    def _decide(self, raw: Any) -> WorkflowVerdict:
        threshold = self._settings.workflow_confidence_threshold
        outputs = raw.get("outputs") if isinstance(raw, dict) else None
        if not isinstance(outputs, list):
            message = _provider_error(raw) or "Invalid workflow response format."
            return self._verdict(raw, allow=False, message=message)

        model_confidence = 0.0
        model_prediction: str | None = None
        assistant_confidence = 0.0
        assistant_prediction: str | None = None
        predictions: list[dict[str, Any]] = []

        for output in outputs:
            if not isinstance(output, dict):
                continue
            model_result = _parse_model_output(output.get("output2"))
            if model_result is not None:
                model_confidence, model_prediction, predictions = model_result
            text = output.get("output")
            if isinstance(text, str) and text:
                assistant_prediction, assistant_confidence = _parse_assistant_output(text)

        Log.info(
            f"Workflow model result: prediction={model_prediction} "
            f"confidence={model_confidence}; assistant result: "
            f"prediction={assistant_prediction} confidence={assistant_confidence}"
        )

        if model_confidence >= threshold:
            confidence = model_confidence
            allow = True
            message = f"Detected Issue: {model_prediction or 'unknown'}"
        elif assistant_confidence > 0:
            confidence = assistant_confidence
            if assistant_prediction == "None":
                allow = False
                message = "No valid civic issue detected in image (assistant fallback)."
            else:
                allow = assistant_confidence >= threshold
                message = f"Detected Issue: {assistant_prediction or 'unknown'}"
        else:
            confidence = 0.0
            allow = False
            message = NO_ISSUE_MESSAGE

        provider_error = _provider_error(raw)
        if provider_error:
            allow = False
            message = provider_error

        return WorkflowVerdict(
            confidence=confidence,
            model_confidence=model_confidence,
            assistant_confidence=assistant_confidence,
            allow_upload=allow,
            message=message,
            predictions=predictions,
            raw=raw,
        )

    @staticmethod
    def _verdict(raw: Any, *, allow: bool, message: str) -> WorkflowVerdict:
        return WorkflowVerdict(
            confidence=0.0,
            model_confidence=0.0,
            assistant_confidence=0.0,
            allow_upload=allow,
            message=message,
            raw=raw,
        )


def _parse_model_output(
    model_output: Any,
) -> tuple[float, str | None, list[dict[str, Any]]] | None:
    if not isinstance(model_output, dict):
        return None
    predictions = model_output.get("predictions")
    image = model_output.get("image")
    if not isinstance(predictions, list) or not predictions:
        return None
    if not isinstance(image, dict) or not image.get("width") or not image.get("height"):
        return None
    items = [p for p in predictions if isinstance(p, dict)]
    if not items:
        return None
    best = max(normalize_confidence(p.get("confidence"), default=0.0) for p in items)
    first = items[0]
    label = first.get("class") or first.get("label")
    return best, str(label) if label else None, items


def _parse_assistant_output(text: str) -> tuple[str | None, float]:
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None

    if isinstance(parsed, dict) and parsed.get("confidence") is not None:
        prediction = parsed.get("prediction")
        return (
            str(prediction) if prediction is not None else None,
            normalize_confidence(parsed.get("confidence"), default=0.0),
        )

    pred_match = _PREDICTION_RE.search(text)
    prediction = pred_match.group(1).strip() if pred_match else None
    conf_match = _CONFIDENCE_RE.search(text)
    confidence = normalize_confidence(conf_match.group(1), default=0.0) if conf_match else 0.0
    if not prediction and "," in text:
        prediction = text.split(",")[0].strip()
    return prediction, confidence


def _provider_error(raw: Any) -> str | None:
    """Message for a workflow-level failure, or None when there is none."""
    if not isinstance(raw, dict):
        return None
    message = raw.get("message")
    text = message if isinstance(message, str) else ""
    if raw.get("error") or "Failed to assemble" in text:
        return text or "Image validation failed."
    return None
