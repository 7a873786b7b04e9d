import logging
from typing import Any, Mapping, Union

from agri_ai.config import BANNED_DISEASE_TERMS, CONFIDENCE_THRESHOLD
from agri_ai.models import DiseaseAnalysis, SafetyVerdict
from agri_ai.utils.json_parser import coerce_number

logger = logging.getLogger(__name__)

LOW_CONFIDENCE_MESSAGE = "Low confidence detection. Please upload a clearer image of the affected leaf."
NON_PLANT_MESSAGE = "Please upload a plant leaf image only."


def evaluate_safety(analysis: Union[DiseaseAnalysis, Mapping[str, Any]]) -> SafetyVerdict:
    """
    Decide whether a vision detection may be shown to the farmer.

    Rejects numeric confidence below CONFIDENCE_THRESHOLD, then disease names
    that point at a non-plant subject. Qualitative confidence ("high") is not
    rejected on confidence grounds.
    """
    if isinstance(analysis, DiseaseAnalysis):
        confidence = analysis.confidence
        disease = analysis.disease_name
    else:
        confidence = analysis.get("confidence")
        disease = analysis.get("disease") or analysis.get("disease_name")

    confidence_num = coerce_number(confidence)
    if confidence_num is not None and confidence_num < CONFIDENCE_THRESHOLD:
        logger.warning(f"Rejected low confidence detection: {disease} ({confidence})")
        return SafetyVerdict(rejected=True, error=LOW_CONFIDENCE_MESSAGE)

    disease_lower = str(disease or "").lower()
    for term in BANNED_DISEASE_TERMS:
        if term in disease_lower:
            logger.warning(f"Rejected non-plant detection: {disease} (matched '{term}')")
            return SafetyVerdict(rejected=True, error=NON_PLANT_MESSAGE)

    return SafetyVerdict(rejected=False)
