"""
Language model gateway.

Thin wrapper over an OpenAI-compatible chat-completions endpoint (Groq by
default) used for text and vision prompts. Returns the raw completion text;
callers extract JSON themselves.
"""
import os
import logging
from typing import Optional

import httpx
from openai import AsyncOpenAI

from agri_ai.config import (
    GROQ_API_KEY_ENV,
    GATEWAY_BASE_URL,
    GATEWAY_MODEL,
    GATEWAY_TEMPERATURE,
    GATEWAY_MAX_TOKENS,
    API_TIMEOUT,
    API_CONNECT_TIMEOUT,
)
from agri_ai.errors import GatewayConfigError, GatewayError

logger = logging.getLogger(__name__)

_http_client: Optional[httpx.AsyncClient] = None
_client: Optional[AsyncOpenAI] = None
_client_key: Optional[str] = None


def get_api_key() -> str:
    api_key = os.getenv(GROQ_API_KEY_ENV)
    if not api_key:
        logger.error(f"{GROQ_API_KEY_ENV} is not configured")
        raise GatewayConfigError(f"{GROQ_API_KEY_ENV} is not configured")
    return api_key


def get_http_client() -> httpx.AsyncClient:
    """Connection pool shared by every gateway client"""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=API_CONNECT_TIMEOUT,
                read=API_TIMEOUT,
                write=API_TIMEOUT,
                pool=API_TIMEOUT
            )
        )
    return _http_client


def get_client() -> AsyncOpenAI:
    """
    Client for the configured credential, created on first use.

    A changed key rebuilds only the AsyncOpenAI wrapper; the httpx pool is reused.
    """
    global _client, _client_key
    api_key = get_api_key()
    pool_closed = _http_client is None or _http_client.is_closed
    if _client is None or _client_key != api_key or pool_closed:
        _client = AsyncOpenAI(base_url=GATEWAY_BASE_URL, api_key=api_key, http_client=get_http_client())
        _client_key = api_key
        logger.info(f"Model gateway initialized ({GATEWAY_MODEL}, {API_TIMEOUT}s timeout)")
    return _client


async def close():
    global _http_client, _client, _client_key
    if _http_client is not None and not _http_client.is_closed:
        await _http_client.aclose()
        logger.info("Model gateway connection pool closed")
    _http_client = None
    _client = None
    _client_key = None


def strip_data_uri(image_base64: str) -> str:
    """'data:image/png;base64,AAAA' -> 'AAAA'"""
    if image_base64.startswith("data:") and "," in image_base64:
        return image_base64.split(",", 1)[1]
    return image_base64


async def _complete(messages: list, error_message: str) -> str:
    client = get_client()
    try:
        response = await client.chat.completions.create(
            model=GATEWAY_MODEL,
            messages=messages,
            temperature=GATEWAY_TEMPERATURE,
            max_tokens=GATEWAY_MAX_TOKENS,
        )
    except Exception as e:
        logger.error(f"Model gateway error: {e}", exc_info=True)
        raise GatewayError(error_message) from e

    if not response.choices:
        return ""
    return response.choices[0].message.content or ""


async def generate_text(prompt: str) -> str:
    """Text-only completion"""
    raw_text = await _complete(
        [{"role": "user", "content": prompt}],
        "AI service temporarily unavailable",
    )
    logger.info(f"Model text response: {raw_text[:200]}...")
    return raw_text


async def analyze_image(image_base64: str, prompt: str) -> str:
    """Vision completion; accepts base64 with or without a data URI prefix"""
    base64_data = strip_data_uri(image_base64)
    raw_text = await _complete(
        [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:image/jpeg;base64,{base64_data}"},
                    },
                ],
            }
        ],
        "AI vision service temporarily unavailable",
    )
    logger.info(f"Model vision response: {raw_text[:200]}...")
    return raw_text
