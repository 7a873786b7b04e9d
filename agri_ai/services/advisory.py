import logging
from agri_ai.models import DiseaseAnalysis
from agri_ai.services import gateway
from agri_ai.services.disease.parsing import ADVISORY_DEFAULTS, build_analysis, parse_analysis
from agri_ai.services.disease.prompts import build_advisory_prompt
from agri_ai.utils.json_parser import ParseFailure

logger = logging.getLogger(__name__)

ADVISORY_RETRY_MESSAGE = "Unable to parse AI response. Please try again."


async def generate_advisory(query: str) -> DiseaseAnalysis:
    """
    Single-call advisory for voice/text farming questions.

    Uses the same JSON contract as disease detection; treatments are priced from
    the static table. An unparseable response degrades to a default analysis
    asking the user to retry.
    """
    logger.info(f"Advisory query: {query[:80]}")
    raw_text = await gateway.generate_text(build_advisory_prompt(query))

    parsed = parse_analysis(raw_text, ADVISORY_DEFAULTS)
    if isinstance(parsed, ParseFailure):
        return build_analysis({"description": ADVISORY_RETRY_MESSAGE}, ADVISORY_DEFAULTS)

    analysis, _ = parsed
    return analysis
