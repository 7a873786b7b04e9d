import os
import logging
from fastapi import APIRouter

from agri_ai.config import GATEWAY_MODEL, GROQ_API_KEY_ENV
from agri_ai.services.services import supabase_client

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def root():
    return {
        "status": "online",
        "service": "Agri AI Backend",
        "version": "1.0.0",
        "features": [
            "Crop Disease Detection (image + symptoms)",
            "Static Treatment Pricing",
            "Crop Recommendation",
            "Customer Recommendations",
            "Agri Chat & Advisory"
        ]
    }


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": "1.0.0",
        "model": GATEWAY_MODEL,
        "services": {
            "gateway": bool(os.getenv(GROQ_API_KEY_ENV)),
            "supabase": bool(supabase_client)
        }
    }
