"""Holt den Antworttext aus den bekannten Response-Formen der generativen
API. Die Extraktoren werden in fester Reihenfolge probiert; der erste
nicht-leere String gewinnt."""
import json
from typing import Any, Callable, Optional, Sequence

Extractor = Callable[[Any], Optional[str]]


def _dig(data: Any, *path) -> Any:
    """Folgt ``path`` durch verschachtelte dicts/lists; None bei jeder Lücke."""
    node = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or len(node) <= step:
                return None
        elif not isinstance(node, dict) or step not in node:
            return None
        node = node[step]
    return node


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def candidate_parts_text(data: Any) -> Optional[str]:
    # Gemini generateContent: candidates[0].content.parts[0].text
    return _text(_dig(data, "candidates", 0, "content", "parts", 0, "text"))


def candidate_content_list_text(data: Any) -> Optional[str]:
    return _text(_dig(data, "candidates", 0, "content", 0, "text"))


def output_text(data: Any) -> Optional[str]:
    return _text(_dig(data, "output", 0, "text"))


def chat_completion_text(data: Any) -> Optional[str]:
    # OpenAI-kompatibles Format
    return _text(_dig(data, "choices", 0, "message", "content"))


EXTRACTORS: Sequence[Extractor] = (
    candidate_parts_text,
    candidate_content_list_text,
    output_text,
    chat_completion_text,
)


def render_fallback(data: Any, max_chars: int) -> str:
    """Kompakte JSON-Darstellung der Rohantwort, auf ``max_chars`` gekürzt."""
    if isinstance(data, str) and data:
        return data
    rendered = json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)
    return rendered[:max_chars] or rendered


def extract_reply(data: Any, max_chars: int, extractors: Sequence[Extractor] = EXTRACTORS) -> str:
    """Liefert immer einen nicht-leeren Antworttext."""
    for extractor in extractors:
        reply = extractor(data)
        if reply:
            return reply
    return render_fallback(data, max_chars)
