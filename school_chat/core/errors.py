"""Fehlerklassen des Relay-Endpunkts. Jede Klasse kennt ihren Statuscode
und ihren JSON-Body; der Relay-Kern wandelt sie an seiner Grenze in eine
Antwort um."""
from typing import Any, Dict

from school_chat.core.models import ErrorBody, InternalErrorBody, UpstreamErrorBody


class RelayError(Exception):
    status_code: int = 500

    def __init__(self, error: str):
        super().__init__(error)
        self.error = error

    def to_body(self) -> Dict[str, Any]:
        return ErrorBody(error=self.error).model_dump()


class InvalidMethod(RelayError):
    status_code = 405

    def __init__(self, error: str = "Only POST allowed"):
        super().__init__(error)


class InvalidInput(RelayError):
    status_code = 400

    def __init__(self, error: str = "Missing 'message' string in body"):
        super().__init__(error)


class UpstreamError(RelayError):
    """Gemini hat mit einem Nicht-2xx-Status geantwortet."""

    status_code = 502

    def __init__(self, upstream_status: int, details: str, error: str = "Gemini API error"):
        super().__init__(error)
        self.upstream_status = upstream_status
        self.details = details

    def to_body(self) -> Dict[str, Any]:
        return UpstreamErrorBody(
            error=self.error, status=self.upstream_status, details=self.details
        ).model_dump()


class InternalError(RelayError):
    """Unerwarteter Fehler innerhalb des Relays."""

    status_code = 500

    def __init__(self, detail: str, error: str = "Internal function error"):
        super().__init__(error)
        self.detail = detail

    def to_body(self) -> Dict[str, Any]:
        return InternalErrorBody(error=self.error, detail=self.detail).model_dump()
