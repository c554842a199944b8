"""Terminal front-end for the chat relay using Typer and Rich."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.status import Status
from rich.text import Text

from client.session import ChatSession, Message, Sender, SessionState
from client.transport import ChatApiClient, ChatTransportError
from config.settings import get_settings

load_dotenv()

app = typer.Typer(
    name="study-buddy-chat",
    help="Chat with the Study Buddy relay from the terminal",
    no_args_is_help=False,
)

console = Console()

QUIT_COMMANDS = {"/quit", "/exit", "exit", "quit"}


class ConsoleRenderer:
    """Session listener that prints each new message and shows a spinner while pending."""

    def __init__(self, console: Console) -> None:
        self.console = console
        self._rendered = 0
        self._status: Optional[Status] = None

    @property
    def spinning(self) -> bool:
        return self._status is not None

    def __call__(self, state: SessionState) -> None:
        for message in state.messages[self._rendered:]:
            self.render_message(message)
        self._rendered = len(state.messages)

        if state.pending and self._status is None:
            self._status = self.console.status("[dim]Thinking...[/dim]")
            self._status.start()
        elif not state.pending:
            self.stop()

    def render_message(self, message: Message) -> None:
        stamp = message.timestamp.strftime("%H:%M")
        if message.sender is Sender.USER:
            self.console.print(f"[dim]You · {stamp}[/dim]")
            self.console.print(message.text, markup=False)
            return
        self.console.print(
            Panel(Text(message.text), title="Study Buddy", subtitle=stamp, title_align="left", border_style="blue")
        )

    def stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None


async def _chat_loop(server: str, timeout: Optional[float]) -> None:
    async with ChatApiClient(server, timeout=timeout) as api:
        session = ChatSession(api)
        renderer = ConsoleRenderer(console)
        session.subscribe(renderer)
        try:
            while True:
                try:
                    line = await asyncio.to_thread(console.input, "[bold]>[/bold] ")
                except (EOFError, KeyboardInterrupt):
                    break
                if line.strip().lower() in QUIT_COMMANDS:
                    break
                await session.send(line)
        finally:
            renderer.stop()


@app.command()
def chat(
    server: Optional[str] = typer.Option(
        None,
        "--server",
        "-s",
        help="Base URL of the relay (defaults to CHAT_SERVER_URL)"
    ),
):
    """Start an interactive chat session."""
    settings = get_settings()
    logging.basicConfig(level=logging.WARNING, format="[%(asctime)s] %(levelname)s - %(message)s")

    console.print(Panel("[bold blue]Study Buddy[/bold blue]\nYour AI-Powered Learning Assistant", expand=False))
    console.print("[dim]Type a message and press Enter. /quit to leave.[/dim]")
    asyncio.run(_chat_loop(server or settings.chat_server_url, settings.client_timeout))


@app.command()
def health(
    server: Optional[str] = typer.Option(
        None,
        "--server",
        "-s",
        help="Base URL of the relay (defaults to CHAT_SERVER_URL)"
    ),
):
    """Check that the relay is up."""
    settings = get_settings()

    async def _health():
        async with ChatApiClient(server or settings.chat_server_url, timeout=settings.client_timeout) as api:
            return await api.health()

    try:
        payload = asyncio.run(_health())
    except ChatTransportError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]{payload.get('status', 'unknown')}[/green] {payload.get('message', '')}")


if __name__ == "__main__":
    app()
