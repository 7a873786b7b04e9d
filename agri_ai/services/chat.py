import logging
from agri_ai.services import gateway

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an agricultural expert assistant. Answer only agriculture-related questions including crops, soil, fertilizers, irrigation, pests, diseases, weather farming guidance, and market selling tips. If the user asks anything unrelated to agriculture, politely respond: "I can assist only with agriculture-related questions." Provide concise farmer-friendly responses."""


async def generate_agri_chat_response(message: str) -> str:
    """Free-form agriculture Q&A"""
    prompt = f"""{SYSTEM_PROMPT}

User question: {message}

Provide a helpful agriculture-focused response:"""

    logger.info(f"Agri chat: {message[:80]}")
    answer = await gateway.generate_text(prompt)
    return answer.strip()
