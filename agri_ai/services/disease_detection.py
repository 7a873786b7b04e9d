import logging
from typing import List, Optional

from agri_ai.errors import InvalidRequestError
from agri_ai.models import DetectionOutcome
from agri_ai.services import gateway
from agri_ai.services.disease.parsing import DETECTION_DEFAULTS, parse_analysis
from agri_ai.services.disease.prompts import (
    IMAGE_CLASSIFICATION_PROMPT,
    PLANT_VALIDATION_PROMPT,
    SYMPTOM_NOTE,
    build_symptom_prompt,
)
from agri_ai.services.disease.safety import NON_PLANT_MESSAGE, evaluate_safety
from agri_ai.utils.json_parser import ParseFailure, extract_json_object

logger = logging.getLogger(__name__)

PARSE_FAILED_MESSAGE = "Failed to parse AI response. Please try again."


async def is_plant_image(image_base64: str) -> bool:
    """Stage 1 gate. Anything other than an explicit ``"isPlant": true`` is False."""
    raw_text = await gateway.analyze_image(image_base64, PLANT_VALIDATION_PROMPT)
    data = extract_json_object(raw_text)
    if isinstance(data, ParseFailure):
        logger.warning(f"Plant validation unparseable, rejecting: {data.reason}")
        return False
    is_plant = data.get("isPlant") is True
    logger.info(f"Plant validation: isPlant={is_plant} ({data.get('reason', '')})")
    return is_plant


async def detect_from_image(image_base64: str) -> DetectionOutcome:
    """
    Image path:
    1. Validate that the image shows a plant (fail closed).
    2. Classify the disease.
    3. Apply the safety filter.
    4. Price the treatments (done while building the analysis).
    """
    logger.info("Starting disease detection (image)")

    if not await is_plant_image(image_base64):
        return DetectionOutcome(error=NON_PLANT_MESSAGE)

    raw_text = await gateway.analyze_image(image_base64, IMAGE_CLASSIFICATION_PROMPT)
    parsed = parse_analysis(raw_text, DETECTION_DEFAULTS)
    if isinstance(parsed, ParseFailure):
        return DetectionOutcome(error=PARSE_FAILED_MESSAGE)
    analysis, raw_data = parsed

    verdict = evaluate_safety(raw_data)
    if verdict.rejected:
        return DetectionOutcome(error=verdict.error)

    logger.info(f"Disease detected: {analysis.disease_name} (Confidence: {analysis.confidence}, Severity: {analysis.severity.value})")
    return DetectionOutcome(analysis=analysis)


async def detect_from_symptoms(symptoms: List[str]) -> DetectionOutcome:
    """Symptom path: text-only classification, no safety filter."""
    logger.info(f"Starting disease detection (symptoms: {symptoms})")

    raw_text = await gateway.generate_text(build_symptom_prompt(symptoms))
    parsed = parse_analysis(raw_text, DETECTION_DEFAULTS)
    if isinstance(parsed, ParseFailure):
        return DetectionOutcome(error=PARSE_FAILED_MESSAGE)
    analysis, _ = parsed
    analysis.note = SYMPTOM_NOTE

    logger.info(f"Disease suggested from symptoms: {analysis.disease_name}")
    return DetectionOutcome(analysis=analysis)


async def detect_disease(method: str, image_base64: Optional[str] = None, symptoms: Optional[List[str]] = None) -> DetectionOutcome:
    """
    Run the detection pipeline selected by *method*.

    Returns a ``DetectionOutcome`` carrying either the analysis or a domain
    rejection (non-plant image, low confidence, unparseable response). Raises
    ``InvalidRequestError`` for unusable input and lets gateway errors propagate.
    """
    if method == "image":
        if not image_base64 or not image_base64.strip():
            raise InvalidRequestError("imageBase64 is required for image detection")
        return await detect_from_image(image_base64)

    if method == "symptom":
        cleaned = [s.strip() for s in (symptoms or []) if s and s.strip()]
        if not cleaned:
            raise InvalidRequestError("symptoms must be a non-empty list for symptom detection")
        return await detect_from_symptoms(cleaned)

    raise InvalidRequestError(f"Unsupported detection method: {method!r}. Use 'image' or 'symptom'.")
