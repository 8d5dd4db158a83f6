"""Datenmodelle des Schul-Chats: Transkript-Nachrichten, Wire-Bodies des
Relay-Endpunkts und die transportneutrale Request/Response-Sicht, die beide
Deployment-Bindings mit dem Relay-Kern austauschen."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class Origin(str, Enum):
    USER = "user"
    BOT = "bot"


class Message(BaseModel):
    """Ein Eintrag im Transkript des Widgets. Lebt nur im Speicher."""

    origin: Origin
    text: str


class RelayRequest(BaseModel):
    """Eingehende Chat-Anfrage: genau ein Textfeld."""

    message: str


class RelayResponse(BaseModel):
    """Erfolgreiche Antwort des Relays."""

    reply: str


class ErrorBody(BaseModel):
    error: str


class UpstreamErrorBody(ErrorBody):
    status: int
    details: str


class InternalErrorBody(ErrorBody):
    detail: str


@dataclass
class RelayHttpRequest:
    method: str
    body: Any = None


@dataclass
class RelayHttpResponse:
    status_code: int
    body: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)
