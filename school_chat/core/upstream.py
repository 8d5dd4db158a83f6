"""Spricht die Gemini generateContent-API an: ein einzelner, blockierender
POST pro Chat-Nachricht, ohne Retries und ohne Streaming."""
import logging
from typing import Optional

import httpx

from school_chat.core.config import DEFAULT_API_BASE, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


def build_payload(text: str) -> dict:
    """Single-Turn-Konversation mit dem Nutzertext als einzigem Part."""
    return {"contents": [{"parts": [{"text": text}]}]}


class GeminiClient:
    """Kapselt den HTTP-Aufruf an Gemini. Statuscodes werden nicht
    interpretiert; das entscheidet der Relay-Kern."""

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        # Nur für Tests gesetzt (httpx.MockTransport).
        self.transport = transport

    def endpoint(self, model: str) -> str:
        model = model.removeprefix("models/")
        return f"{self.api_base}/models/{model}:generateContent"

    async def generate_content(self, model: str, api_key: str, text: str) -> httpx.Response:
        logger.info(f"Gemini request: model={model} prompt_chars={len(text)}")
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            return await client.post(
                self.endpoint(model),
                params={"key": api_key},
                headers={"Content-Type": "application/json"},
                json=build_payload(text),
            )
