# Agri AI Backend v1.0.0
import os
import logging
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from agri_ai.config import GROQ_API_KEY_ENV, GATEWAY_MODEL, PORT
from agri_ai.dependencies import limiter
from agri_ai.errors import AgriAIError, InvalidRequestError
from agri_ai.routers import ai, health
from agri_ai.services import gateway
from agri_ai.services.services import supabase_client

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# ============================================================================#
# Lifespan Events
# ============================================================================#

@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    logger.info("=" * 60)
    logger.info("Starting Agri AI Backend")
    logger.info(f"Model gateway: {'✓' if os.getenv(GROQ_API_KEY_ENV) else '✗'} ({GATEWAY_MODEL})")
    logger.info(f"Supabase: {'✓' if supabase_client else '✗'}")
    logger.info("=" * 60)
    yield
    logger.info("Shutting down gracefully...")
    await gateway.close()


# Initialize FastAPI app
app = FastAPI(
    title="Agri AI Backend",
    description="Crop disease detection, treatment pricing and farming advisory",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================#
# Error Handling
# ============================================================================#

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        problems.append(f"{field}: {err.get('msg')}")
    logger.warning(f"[Input] {request.url.path}: {problems}")
    return error_response(400, "Invalid request: " + "; ".join(problems))


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    logger.warning(f"[Input] {request.url.path}: {exc}")
    return error_response(400, str(exc))


@app.exception_handler(AgriAIError)
async def service_error_handler(request: Request, exc: AgriAIError):
    logger.error(f"{request.url.path} failed: {exc}")
    return error_response(500, str(exc))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return error_response(500, str(exc))


# ============================================================================#
# Routers
# ============================================================================#

app.include_router(health.router)
app.include_router(ai.router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
