"""Terminal-Client für den Schul-Chat: treibt ein ChatWidget gegen einen
laufenden Relay (lokal oder deployt)."""
import argparse
import asyncio

from school_chat.core.config import WidgetSettings
from school_chat.core.widget import GREETING, ChatWidget


async def run_chat(relay_url: str) -> None:
    widget = ChatWidget(relay_url)
    print(f"🤖 {GREETING}")
    print(f"(Relay: {relay_url}, leere Zeile beendet)\n")

    while True:
        try:
            text = await asyncio.to_thread(input, "Du: ")
        except EOFError:
            break
        if not text.strip():
            break

        reply = await widget.send(text)
        if reply is not None:
            print(f"🤖 {reply.text}\n")


def main() -> None:
    parser = argparse.ArgumentParser(description="Chat with the school assistant from the terminal.")
    parser.add_argument("--url", default=None, help="Relay endpoint (default: RELAY_URL)")
    args = parser.parse_args()
    asyncio.run(run_chat(args.url or WidgetSettings().relay_url))


if __name__ == "__main__":
    main()
