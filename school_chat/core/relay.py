"""Relay-Kern des Schul-Chats: nimmt eine Chat-Nachricht entgegen, leitet sie
an Gemini weiter und gibt den extrahierten Antworttext als JSON zurück.

Beide Deployment-Bindings (HTTP-Host und Cloud Function) rufen nur
:func:`handle_relay` auf; Konfiguration und Upstream-Client werden injiziert.
Kein Fehler verlässt diese Funktion als Exception.
"""
import json
import logging
from typing import Any, Optional, Protocol

import httpx

from school_chat.core.config import RelayConfig
from school_chat.core.errors import InternalError, InvalidInput, InvalidMethod, RelayError, UpstreamError
from school_chat.core.extractors import extract_reply
from school_chat.core.models import RelayHttpRequest, RelayHttpResponse, RelayRequest, RelayResponse

logger = logging.getLogger(__name__)

SUBMIT_METHOD = "POST"
PREFLIGHT_METHOD = "OPTIONS"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": f"{SUBMIT_METHOD}, {PREFLIGHT_METHOD}",
    "Access-Control-Allow-Headers": "Content-Type",
}


class UpstreamClient(Protocol):
    async def generate_content(self, model: str, api_key: str, text: str) -> httpx.Response:
        ...


def parse_json_body(raw: Optional[bytes]) -> Any:
    """Dekodiert einen rohen Request-Body; leer oder kaputt ergibt None."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return None


def _respond(status_code: int, body: Optional[dict] = None) -> RelayHttpResponse:
    return RelayHttpResponse(status_code=status_code, body=body, headers=dict(CORS_HEADERS))


def validate_request(request: RelayHttpRequest) -> RelayRequest:
    """Methoden- und Eingabeprüfung; wirft InvalidMethod/InvalidInput."""
    method = request.method.upper()
    if method != SUBMIT_METHOD:
        raise InvalidMethod()

    body = request.body
    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str):
        raise InvalidInput()
    if not message.strip():
        raise InvalidInput("'message' must not be empty")
    return RelayRequest(message=message)


async def ask_upstream(relay_request: RelayRequest, config: RelayConfig, upstream: UpstreamClient) -> str:
    """Ruft Gemini auf und extrahiert den Antworttext.

    Wirft UpstreamError bei Nicht-2xx; alle anderen Fehler (Transport,
    Timeout, ungültiges JSON) laufen als normale Exceptions nach oben.
    """
    response = await upstream.generate_content(config.model, config.api_key, relay_request.message)

    if not response.is_success:
        logger.error(f"Gemini API error: {response.status_code} {response.text}")
        raise UpstreamError(response.status_code, response.text)

    data = response.json()
    return extract_reply(data, config.reply_max_chars)


async def handle_relay(request: RelayHttpRequest, config: RelayConfig, upstream: UpstreamClient) -> RelayHttpResponse:
    """Verarbeitet genau eine Relay-Anfrage.

    Pipeline:
    1) Preflight (OPTIONS) -> 204 ohne Body.
    2) Methoden- und Eingabeprüfung -> 405 / 400, ohne Upstream-Aufruf.
    3) Fehlender Key -> 200 mit Konfigurationshinweis als Antworttext.
    4) Gemini-Aufruf und Extraktion -> 200 / 502 / 500.
    """
    if request.method.upper() == PREFLIGHT_METHOD:
        return _respond(204)

    try:
        relay_request = validate_request(request)
    except RelayError as exc:
        return _respond(exc.status_code, exc.to_body())

    try:
        if not config.has_credential:
            # Bewusst kein Fehler: der Nutzer soll immer eine Chat-Blase sehen.
            logger.error("Gemini API key missing, answering with configuration hint")
            return _respond(200, RelayResponse(reply=config.missing_key_reply).model_dump())

        reply = await ask_upstream(relay_request, config, upstream)
        return _respond(200, RelayResponse(reply=reply).model_dump())
    except UpstreamError as exc:
        return _respond(exc.status_code, exc.to_body())
    except Exception as exc:
        logger.exception(f"Relay error: {exc}")
        error = InternalError(str(exc))
        return _respond(error.status_code, error.to_body())
