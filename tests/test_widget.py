import asyncio
import json

import httpx
import pytest

from school_chat.core.models import Origin
from school_chat.core.widget import (
    EMPTY_REPLY,
    GREETING,
    NETWORK_ERROR_REPLY,
    SERVER_ERROR_REPLY,
    TYPING_TEXT,
    ChatWidget,
)

RELAY_URL = "http://relay.test/api/geminiChat"


class TypingRecorder:
    """Zählt, wie oft die Tipp-Anzeige wieder ausgeschaltet wird."""

    def __init__(self):
        self.states = []

    def __call__(self, widget):
        if not self.states or self.states[-1] != widget.is_typing:
            self.states.append(widget.is_typing)

    @property
    def cleared(self):
        return self.states.count(False)


def make_widget(handler):
    recorder = TypingRecorder()
    widget = ChatWidget(RELAY_URL, transport=httpx.MockTransport(handler), on_change=recorder)
    return widget, recorder


def raise_network_error(request):
    raise httpx.ConnectError("unreachable", request=request)


def test_initial_state():
    widget = ChatWidget(RELAY_URL)

    assert [m.text for m in widget.messages] == [GREETING]
    assert widget.messages[0].origin == Origin.BOT
    assert widget.is_typing is False
    assert widget.is_open is False


def test_toggle_and_close():
    widget = ChatWidget(RELAY_URL)

    assert widget.toggle() is True
    assert widget.toggle() is False
    widget.toggle()
    widget.close()
    assert widget.is_open is False


@pytest.mark.asyncio
async def test_successful_reply_is_appended():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"reply": "Admissions open in March."})

    widget, recorder = make_widget(handler)
    reply = await widget.send("  When do admissions open?  ")

    assert seen["body"] == {"message": "When do admissions open?"}
    assert reply.origin == Origin.BOT
    assert reply.text == "Admissions open in March."
    assert [(m.origin, m.text) for m in widget.messages[1:]] == [
        (Origin.USER, "When do admissions open?"),
        (Origin.BOT, "Admissions open in March."),
    ]
    assert widget.is_typing is False
    assert recorder.states == [False, True, False]


@pytest.mark.parametrize(
    "handler, expected",
    [
        (lambda request: httpx.Response(200, json={"reply": "Hi"}), "Hi"),
        (lambda request: httpx.Response(502, json={"error": "Gemini API error"}), SERVER_ERROR_REPLY),
        (lambda request: httpx.Response(500, text="boom"), SERVER_ERROR_REPLY),
        (lambda request: httpx.Response(200, json={}), EMPTY_REPLY),
        (lambda request: httpx.Response(200, json={"reply": ""}), EMPTY_REPLY),
        (lambda request: httpx.Response(200, text="not json"), NETWORK_ERROR_REPLY),
        (raise_network_error, NETWORK_ERROR_REPLY),
    ],
)
@pytest.mark.asyncio
async def test_exactly_one_bot_message_and_typing_cleared_once(handler, expected):
    widget, recorder = make_widget(handler)
    before = len(widget.messages)

    reply = await widget.send("Hello")

    assert reply.text == expected
    assert len(widget.messages) == before + 2
    assert widget.messages[-1].origin == Origin.BOT
    assert widget.is_typing is False
    assert recorder.cleared == 2  # initial False plus the one after the reply


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", None])
async def test_blank_input_is_ignored(text):
    calls = []
    widget, _ = make_widget(lambda request: calls.append(request) or httpx.Response(200, json={"reply": "x"}))

    assert await widget.send(text) is None
    assert len(widget.messages) == 1
    assert calls == []


@pytest.mark.asyncio
async def test_submit_is_ignored_while_reply_pending():
    started = asyncio.Event()
    release = asyncio.Event()
    calls = []

    async def handler(request):
        calls.append(json.loads(request.content)["message"])
        started.set()
        await release.wait()
        return httpx.Response(200, json={"reply": "first answer"})

    widget, _ = make_widget(handler)
    pending = asyncio.create_task(widget.send("first"))
    await asyncio.wait_for(started.wait(), timeout=1)

    assert widget.is_typing is True
    assert widget.transcript()[-1].text == TYPING_TEXT
    assert await widget.send("second") is None

    release.set()
    reply = await pending

    assert reply.text == "first answer"
    assert calls == ["first"]
    assert [m.text for m in widget.transcript()] == [GREETING, "first", "first answer"]


@pytest.mark.asyncio
async def test_unexpected_client_failure_still_yields_one_bot_message():
    def handler(request):
        raise RuntimeError("transport exploded")

    widget, recorder = make_widget(handler)
    reply = await widget.send("Hello")

    assert reply.text == NETWORK_ERROR_REPLY
    assert [m.origin for m in widget.messages[1:]] == [Origin.USER, Origin.BOT]
    assert widget.is_typing is False
    assert recorder.cleared == 2
