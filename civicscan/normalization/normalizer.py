"""Flattens provider responses of varying shape into ordered findings."""

from collections.abc import Callable
from typing import Any

from civicscan.logging.logger import Log
from civicscan.normalization.confidence import normalize_confidence
from civicscan.normalization.models import BoundingBox, Finding

DEFAULT_ISSUE_TYPE = "civic_issue"
DEFAULT_CONFIDENCE = 0.5

_BOX_FIELDS = ("x", "y", "width", "height")

ShapeMatcher = Callable[[dict[str, Any]], list[Any] | None]


def _match_top_level(response: dict[str, Any]) -> list[Any] | None:
    """{"predictions": [...]}"""
    predictions = response.get("predictions")
    return predictions if isinstance(predictions, list) else None


def _match_outputs(response: dict[str, Any]) -> list[Any] | None:
    """{"outputs": {"name": {"predictions": [...]}, ...}} or a list of outputs."""
    outputs = response.get("outputs")
    if isinstance(outputs, dict):
        values = list(outputs.values())
    elif isinstance(outputs, list):
        values = outputs
    else:
        return None

    collected: list[Any] = []
    for value in values:
        collected.extend(_output_predictions(value))
    return collected


def _match_result(response: dict[str, Any]) -> list[Any] | None:
    """{"result": {"predictions": [...]}}"""
    result = response.get("result")
    if not isinstance(result, dict):
        return None
    predictions = result.get("predictions")
    return predictions if isinstance(predictions, list) else None


_SHAPE_MATCHERS: tuple[tuple[str, ShapeMatcher], ...] = (
    ("predictions", _match_top_level),
    ("outputs", _match_outputs),
    ("result", _match_result),
)


def _output_predictions(output: Any) -> list[Any]:
    if not isinstance(output, dict):
        return []
    own = output.get("predictions")
    if isinstance(own, list):
        return own
    nested: list[Any] = []
    for value in output.values():
        if isinstance(value, dict) and isinstance(value.get("predictions"), list):
            nested.extend(value["predictions"])
    return nested


class ResponseNormalizer:
    """Locates the detection list in a provider response and maps each entry.

    Shapes are tried in order and the first non-empty list wins. A response
    matching no shape yields no findings rather than an error.
    """

    def __init__(self, matchers: tuple[tuple[str, ShapeMatcher], ...] = _SHAPE_MATCHERS) -> None:
        self._matchers = matchers

    def normalize(self, response: Any) -> list[Finding]:
        if not isinstance(response, dict):
            Log.warning(f"Unexpected provider response type: {type(response).__name__}")
            return []

        for shape, matcher in self._matchers:
            raw_findings = matcher(response)
            if raw_findings:
                findings = [self.to_finding(raw) for raw in raw_findings if isinstance(raw, dict)]
                Log.info(f"Normalized {len(findings)} findings from '{shape}' shape")
                return findings

        Log.info(f"No findings in provider response (keys: {sorted(response)})")
        return []

    @staticmethod
    def to_finding(raw: dict[str, Any]) -> Finding:
        issue_type = raw.get("class") or raw.get("label") or DEFAULT_ISSUE_TYPE
        confidence = raw.get("confidence")
        if confidence is None:
            confidence = raw.get("score")
        return Finding(
            issue_type=str(issue_type),
            confidence=normalize_confidence(confidence, default=DEFAULT_CONFIDENCE),
            bounding_box=_bounding_box(raw),
        )


def _bounding_box(raw: dict[str, Any]) -> BoundingBox:
    bbox = raw.get("bbox")
    array = bbox if isinstance(bbox, (list, tuple)) and len(bbox) >= 4 else None
    values: list[float] = []
    for index, name in enumerate(_BOX_FIELDS):
        value = raw.get(name)
        if not _is_number(value) and array is not None:
            value = array[index]
        values.append(float(value) if _is_number(value) else 0.0)
    return BoundingBox(*values)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
