"""Relay-Router: bindet den Relay-Kern an den HTTP-Host (FastAPI)."""
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from school_chat.core.models import RelayHttpRequest, RelayHttpResponse
from school_chat.core.relay import handle_relay, parse_json_body

router = APIRouter(prefix="/api", tags=["Relay"])

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def to_fastapi_response(result: RelayHttpResponse) -> Response:
    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(content=result.body, status_code=result.status_code, headers=result.headers)


@router.api_route("/geminiChat", methods=ALL_METHODS)
async def gemini_chat(request: Request) -> Response:
    """Haupt-Endpunkt des Chat-Widgets. Methoden-Gating passiert im Kern,
    damit beide Bindings identisch antworten."""
    config = request.app.state.relay_config
    upstream = request.app.state.upstream

    body = parse_json_body(await request.body())
    result = await handle_relay(RelayHttpRequest(method=request.method, body=body), config, upstream)
    return to_fastapi_response(result)
