"""Zustand des schwebenden Chat-Widgets: Transkript, Tipp-Anzeige und der
Aufruf des Relay-Endpunkts. Entspricht der Browser-Komponente, ist aber
ohne UI testbar und wird vom Terminal-Client genutzt."""
import logging
from typing import Callable, List, Optional

import httpx

from school_chat.core.models import Message, Origin

logger = logging.getLogger(__name__)

GREETING = "Hi! I'm the school helper. Ask me about admissions, timings or facilities 😊"
TYPING_TEXT = "🤖 Bot is typing..."
SERVER_ERROR_REPLY = "Sorry 😅, the assistant couldn't respond."
EMPTY_REPLY = "Hmm... no reply from Gemini."
NETWORK_ERROR_REPLY = "⚠️ Network error. Please try again later."


class ChatWidget:
    """Hält das Transkript einer Browser-Session und schickt Eingaben an
    den Relay. Pro angenommener Eingabe wird genau eine Bot-Nachricht
    angehängt; Fehler werden nie an den Aufrufer weitergereicht."""

    def __init__(
        self,
        relay_url: str,
        *,
        timeout: Optional[float] = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_change: Optional[Callable[["ChatWidget"], None]] = None,
    ) -> None:
        self.relay_url = relay_url
        self.timeout = timeout
        self.transport = transport
        self.on_change = on_change
        self.messages: List[Message] = [Message(origin=Origin.BOT, text=GREETING)]
        self.is_typing = False
        self.is_open = False

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def _append(self, origin: Origin, text: str) -> Message:
        message = Message(origin=origin, text=text)
        self.messages.append(message)
        self._changed()
        return message

    def _set_typing(self, value: bool) -> None:
        self.is_typing = value
        self._changed()

    def toggle(self) -> bool:
        self.is_open = not self.is_open
        self._changed()
        return self.is_open

    def close(self) -> None:
        if self.is_open:
            self.is_open = False
            self._changed()

    def transcript(self) -> List[Message]:
        """Nachrichten inkl. der temporären Tipp-Blase."""
        visible = list(self.messages)
        if self.is_typing:
            visible.append(Message(origin=Origin.BOT, text=TYPING_TEXT))
        return visible

    async def _fetch_reply(self, text: str) -> str:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                res = await client.post(self.relay_url, json={"message": text})

            if not res.is_success:
                logger.error(f"Server error: {res.status_code} {res.text}")
                return SERVER_ERROR_REPLY

            data = res.json()
            reply = data.get("reply") if isinstance(data, dict) else None
            return reply if isinstance(reply, str) and reply else EMPTY_REPLY
        except Exception as e:
            logger.error(f"Network error: {e}")
            return NETWORK_ERROR_REPLY

    async def send(self, text: str) -> Optional[Message]:
        """Schickt eine Eingabe ab und liefert die angehängte Bot-Nachricht.

        Leere Eingaben und Eingaben während einer laufenden Anfrage werden
        ignoriert (Rückgabe None).
        """
        text = (text or "").strip()
        if not text or self.is_typing:
            return None

        # Nutzer-Nachricht sofort anzeigen
        self._append(Origin.USER, text)
        self._set_typing(True)
        try:
            reply = await self._fetch_reply(text)
            return self._append(Origin.BOT, reply)
        finally:
            self._set_typing(False)
