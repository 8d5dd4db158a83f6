"""Cloud-Function-Binding des Relays. Die Plattform ruft ``gemini_chat`` mit
einem Flask-Request auf; lokal lässt sich die Funktion über
``create_function_app`` emulieren."""
import asyncio
import logging
from typing import Callable, Optional

from flask import Flask, Request, Response, jsonify, request as flask_request

from school_chat.core.config import FunctionSettings, RelayConfig
from school_chat.core.models import RelayHttpRequest, RelayHttpResponse
from school_chat.core.relay import UpstreamClient, handle_relay, parse_json_body
from school_chat.core.upstream import GeminiClient

logger = logging.getLogger(__name__)

FunctionHandler = Callable[[Request], Response]


def to_flask_response(result: RelayHttpResponse) -> Response:
    if result.body is None:
        response = Response(status=result.status_code)
    else:
        response = jsonify(result.body)
        response.status_code = result.status_code
    response.headers.update(result.headers)
    return response


def create_function_handler(config: RelayConfig, upstream: Optional[UpstreamClient] = None) -> FunctionHandler:
    """Liefert einen HTTP-Handler mit fest injizierter Konfiguration."""
    client = upstream or GeminiClient(config.api_base, config.timeout)

    def handler(request: Request) -> Response:
        relay_request = RelayHttpRequest(method=request.method, body=parse_json_body(request.get_data()))
        result = asyncio.run(handle_relay(relay_request, config, client))
        return to_flask_response(result)

    return handler


_default_handler: Optional[FunctionHandler] = None


def gemini_chat(request: Request) -> Response:
    """Entry point der Cloud Function. Settings werden beim ersten Aufruf
    gelesen und für warme Instanzen wiederverwendet."""
    global _default_handler
    if _default_handler is None:
        config = FunctionSettings().to_relay_config()
        if not config.has_credential:
            logger.error("Gemini API key missing in function settings (GEMINI__KEY)")
        _default_handler = create_function_handler(config)
    return _default_handler(request)


def create_function_app(handler: Optional[FunctionHandler] = None) -> Flask:
    """Flask-App für lokale Emulation und Tests."""
    app = Flask(__name__)
    target = handler or gemini_chat

    @app.route("/geminiChat", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
    def gemini_chat_route():
        return target(flask_request)

    return app


if __name__ == "__main__":
    create_function_app().run(port=5001, debug=True)
