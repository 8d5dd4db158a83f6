"""Konfigurationsmodul für den Schul-Chat-Relay: lädt Gemini-Key, Modell und
Laufzeitwerte via Pydantic-Settings und erzeugt daraus die unveränderliche
RelayConfig, die in den Relay-Kern injiziert wird."""
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 30.0
DEFAULT_REPLY_MAX_CHARS = 2000

# Hinweise für den Betreiber, wenn kein Key gesetzt ist (je Deployment-Ziel).
HOST_MISSING_KEY_REPLY = (
    "⚠️ GEMINI_KEY not set. Go to your host's Settings → Environment Variables → add GEMINI_KEY"
)
FUNCTION_MISSING_KEY_REPLY = (
    "⚠️ Gemini API key not found. Set it with: "
    "gcloud functions deploy geminiChat --set-env-vars GEMINI__KEY=YOUR_KEY"
)


@dataclass(frozen=True)
class RelayConfig:
    """Alles, was der Relay-Kern pro Anfrage braucht. Wird einmal beim
    Start gebaut; der Kern liest selbst keine Umgebungsvariablen."""

    api_key: Optional[str]
    missing_key_reply: str
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout: Optional[float] = DEFAULT_TIMEOUT
    reply_max_chars: int = DEFAULT_REPLY_MAX_CHARS

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)


class Settings(BaseSettings):
    """Werte für das HTTP-Host-Deployment (FastAPI)."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    gemini_key: str = Field("", alias="GEMINI_KEY")  # Muss per Env gesetzt werden.
    gemini_model: str = Field(DEFAULT_MODEL, alias="GEMINI_MODEL")
    gemini_api_base: str = Field(DEFAULT_API_BASE, alias="GEMINI_API_BASE")
    upstream_timeout: float = Field(DEFAULT_TIMEOUT, alias="UPSTREAM_TIMEOUT")
    reply_max_chars: int = Field(DEFAULT_REPLY_MAX_CHARS, alias="REPLY_MAX_CHARS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str = Field("", alias="LOG_FILE")
    service_port: int = Field(8000, alias="SERVICE_PORT")

    def to_relay_config(self) -> RelayConfig:
        return RelayConfig(
            api_key=self.gemini_key or None,
            missing_key_reply=HOST_MISSING_KEY_REPLY,
            model=self.gemini_model,
            api_base=self.gemini_api_base,
            timeout=self.upstream_timeout,
            reply_max_chars=self.reply_max_chars,
        )


class GeminiSection(BaseModel):
    key: str = ""
    model: str = DEFAULT_MODEL


class FunctionSettings(BaseSettings):
    """Werte für das Cloud-Function-Deployment. Der Key liegt in einer
    verschachtelten Sektion ``gemini.key`` (Env: ``GEMINI__KEY``)."""

    model_config = SettingsConfigDict(env_nested_delimiter="__", extra="ignore")

    gemini: GeminiSection = GeminiSection()
    upstream_timeout: float = DEFAULT_TIMEOUT
    reply_max_chars: int = DEFAULT_REPLY_MAX_CHARS

    def to_relay_config(self) -> RelayConfig:
        return RelayConfig(
            api_key=self.gemini.key or None,
            missing_key_reply=FUNCTION_MISSING_KEY_REPLY,
            model=self.gemini.model,
            timeout=self.upstream_timeout,
            reply_max_chars=self.reply_max_chars,
        )


class WidgetSettings(BaseSettings):
    """Ziel-URL des Chat-Widgets (lokal oder deployt)."""

    relay_url: str = Field("http://localhost:8000/api/geminiChat", alias="RELAY_URL")
