import logging
from fastapi import APIRouter, Request

from agri_ai.config import API_PREFIX, RATE_LIMIT
from agri_ai.dependencies import limiter
from agri_ai.models import (
    AdvisoryRequest,
    ChatRequest,
    CropRecommendationRequest,
    CustomerRecommendationRequest,
    DiseaseDetectionRequest,
)
from agri_ai.services.advisory import generate_advisory
from agri_ai.services.chat import generate_agri_chat_response
from agri_ai.services.crop_recommendation import get_crop_recommendations
from agri_ai.services.customer_recommendations import generate_customer_recommendations
from agri_ai.services.disease_detection import detect_disease
from agri_ai.utils.image import validate_image_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix=API_PREFIX)


@router.get("")
async def ai_health():
    return {"success": True, "message": "AI endpoint working successfully"}


@router.post("/agri-chat")
@limiter.limit(RATE_LIMIT)
async def agri_chat(request: Request, payload: ChatRequest):
    reply = await generate_agri_chat_response(payload.message)
    return {"success": True, "reply": reply}


@router.post("/chat")
@limiter.limit(RATE_LIMIT)
async def chat(request: Request, payload: ChatRequest):
    message = await generate_agri_chat_response(payload.message)
    return {"success": True, "message": message}


@router.post("/crop-recommendation")
@limiter.limit(RATE_LIMIT)
async def crop_recommendation(request: Request, payload: CropRecommendationRequest):
    recommendations = await get_crop_recommendations(payload)
    return {"success": True, "recommendations": [r.to_wire() for r in recommendations]}


@router.post("/disease-detection")
@limiter.limit(RATE_LIMIT)
async def disease_detection(request: Request, payload: DiseaseDetectionRequest):
    """
    Run the detection pipeline.

    A rejection (non-plant image, low confidence, unparseable response) is a
    completed run: HTTP 200 with ``analysis: null`` and an ``error`` reason.
    """
    if payload.method == "image" and payload.image_base64:
        validate_image_payload(payload.image_base64)

    outcome = await detect_disease(payload.method, payload.image_base64, payload.symptoms)
    if outcome.rejected:
        logger.info(f"Disease detection declined: {outcome.error}")
        return {"success": True, "analysis": None, "error": outcome.error}

    return {"success": True, "analysis": outcome.analysis.to_wire()}


@router.post("/advisory")
@limiter.limit(RATE_LIMIT)
async def advisory(request: Request, payload: AdvisoryRequest):
    analysis = await generate_advisory(payload.query)
    return {"success": True, **analysis.to_wire()}


@router.post("/customer-recommendations")
@limiter.limit(RATE_LIMIT)
async def customer_recommendations(request: Request, payload: CustomerRecommendationRequest):
    result = await generate_customer_recommendations(payload.customer_id)
    return {"success": True, **result}
