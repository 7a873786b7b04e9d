"""
Turn model text into a ``DiseaseAnalysis``.

Fields are extracted one by one with defaults, so a half-formed response still
gives a usable analysis and unexpected model fields never reach the output.
"""
import logging
from typing import Any, Dict, List, Mapping, Tuple, Union

from agri_ai.models import ApplicationStep, DiseaseAnalysis, Severity
from agri_ai.services.pricing import enrich_treatments
from agri_ai.utils.json_parser import (
    ParseFailure,
    coerce_list,
    coerce_str,
    coerce_str_list,
    extract_json_object,
)

logger = logging.getLogger(__name__)

DETECTION_DEFAULTS = {
    "disease_name": "Analysis Pending",
    "confidence": "low",
    "description": "No description available.",
}

ADVISORY_DEFAULTS = {
    "disease_name": "Crop Issue",
    "confidence": "medium",
    "description": "No description available.",
}


def normalize_severity(value: Any) -> Severity:
    text = coerce_str(value).lower()
    if text.startswith("low"):
        return Severity.LOW
    if text.startswith("high") or text in ("severe", "critical"):
        return Severity.HIGH
    return Severity.MEDIUM


def normalize_confidence(value: Any, default: str) -> Union[int, float, str]:
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return value
    return coerce_str(value, default)


def treatment_suggestions(data: Mapping[str, Any]) -> List[Any]:
    """Model treatments: "treatments", or chemicals + fertilizers when absent"""
    if "treatments" in data:
        return coerce_list(data.get("treatments"))
    return coerce_list(data.get("recommendedChemicals")) + coerce_list(data.get("recommendedFertilizers"))


def application_steps(value: Any) -> List[ApplicationStep]:
    steps = []
    for item in coerce_list(value):
        if isinstance(item, Mapping):
            step = coerce_str(item.get("step"))
            if step:
                steps.append(ApplicationStep(step=step, timing=coerce_str(item.get("timing"))))
        elif isinstance(item, str) and item.strip():
            steps.append(ApplicationStep(step=item.strip()))
    return steps


def build_analysis(data: Mapping[str, Any], defaults: Mapping[str, str] = DETECTION_DEFAULTS) -> DiseaseAnalysis:
    """Explicit per-field extraction with treatments priced from the static table"""
    return DiseaseAnalysis(
        disease_name=coerce_str(data.get("disease_name") or data.get("disease"), defaults["disease_name"]),
        confidence=normalize_confidence(data.get("confidence"), defaults["confidence"]),
        severity=normalize_severity(data.get("severity")),
        description=coerce_str(data.get("description"), defaults["description"]),
        symptoms=coerce_str_list(data.get("symptoms")),
        treatments=enrich_treatments(treatment_suggestions(data)),
        application_guide=application_steps(data.get("applicationGuide")),
        prevention_tips=coerce_str_list(data.get("preventionTips")),
    )


def parse_analysis(text: str, defaults: Mapping[str, str] = DETECTION_DEFAULTS) -> Union[Tuple[DiseaseAnalysis, Dict[str, Any]], ParseFailure]:
    """
    Parse model text. Returns ``(analysis, raw_data)`` or a ``ParseFailure``.

    The raw dict is returned alongside for checks that need the model's own
    fields (e.g. ``disease`` vs ``disease_name``).
    """
    data = extract_json_object(text)
    if isinstance(data, ParseFailure):
        logger.warning(f"Failed to parse disease analysis: {data.reason}")
        return data
    return build_analysis(data, defaults), data
