import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ============================================================================#
# LANGUAGE MODEL GATEWAY
# ============================================================================#
# The credential itself is read at call time (see services/gateway.py) so that a
# missing key fails the request, not the startup.
GROQ_API_KEY_ENV = "GROQ_API_KEY"
GATEWAY_BASE_URL = os.getenv("GATEWAY_BASE_URL", "https://api.groq.com/openai/v1")
GATEWAY_MODEL = os.getenv("GATEWAY_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct")
GATEWAY_TEMPERATURE = float(os.getenv("GATEWAY_TEMPERATURE", "0.7"))
GATEWAY_MAX_TOKENS = int(os.getenv("GATEWAY_MAX_TOKENS", "2048"))

API_TIMEOUT = 60  # seconds
API_CONNECT_TIMEOUT = 15  # seconds

# ============================================================================#
# SUPABASE (customer recommendations)
# ============================================================================#
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

# ============================================================================#
# DISEASE DETECTION
# ============================================================================#
CONFIDENCE_THRESHOLD = 65  # detections below this are rejected
BANNED_DISEASE_TERMS = ("human", "skin", "face", "person", "animal")

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp")
MAX_IMAGE_BYTES = 10 * 1024 * 1024  # 10 MB decoded

CURRENCY = "INR"

# ============================================================================#
# HTTP
# ============================================================================#
API_PREFIX = "/api/ai"
RATE_LIMIT = os.getenv("RATE_LIMIT", "60/minute")
PORT = int(os.getenv("AI_SERVER_PORT", os.getenv("PORT", "5001")))
