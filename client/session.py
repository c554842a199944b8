"""Client-side chat session: the ordered message log and the in-flight flag.

A session runs one turn at a time. ``submit`` appends the user's message and
starts the request; the reply (or an error placeholder) is appended when the
request resolves. While a request is outstanding further submissions are
ignored, so replies can never interleave.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple

from client.transport import ChatTransportError


logger = logging.getLogger("study_buddy.client")

NO_RESPONSE_TEXT = "No response received."
ERROR_TEXT = "Error: Could not get response from server. Check your backend connection."


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


@dataclass(frozen=True)
class Message:
    """One turn's worth of text from either side."""

    id: str
    text: str
    sender: Sender
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class SessionState:
    messages: Tuple[Message, ...] = ()
    pending: bool = False


class ChatTransport(Protocol):
    async def post_chat(self, message: str) -> Optional[str]: ...


Listener = Callable[[SessionState], None]


class ChatSession:
    """Owns the message log for one conversation and drives its turns.

    Listeners registered with ``subscribe`` receive the new ``SessionState``
    after every transition, so a renderer can redraw and scroll to the
    newest message.
    """

    def __init__(
        self,
        transport: ChatTransport,
        error_text: str = ERROR_TEXT,
        empty_reply_text: str = NO_RESPONSE_TEXT,
    ) -> None:
        self._transport = transport
        self._error_text = error_text
        self._empty_reply_text = empty_reply_text
        self._messages: List[Message] = []
        self._pending = False
        self._ids = itertools.count(1)
        self._listeners: List[Listener] = []
        self.draft = ""

    @property
    def state(self) -> SessionState:
        return SessionState(messages=tuple(self._messages), pending=self._pending)

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def pending(self) -> bool:
        return self._pending

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_draft(self, text: str) -> None:
        self.draft = text
        self._notify()

    def submit(self, text: Optional[str] = None) -> Optional["asyncio.Task[Message]"]:
        """Start a turn with ``text`` (the draft when omitted).

        Returns the task resolving to the reply message, or ``None`` when the
        submission was ignored: blank text, or a request already in flight.
        Must be called from within a running event loop.
        """
        text = self.draft if text is None else text
        if not text.strip() or self._pending:
            return None

        self._append(text, Sender.USER)
        self.draft = ""
        self._pending = True
        self._notify()
        return asyncio.get_running_loop().create_task(self._exchange(text))

    async def send(self, text: Optional[str] = None) -> Optional[Message]:
        task = self.submit(text)
        if task is None:
            return None
        return await task

    async def _exchange(self, text: str) -> Message:
        # pending is released even when the task is cancelled mid-request
        try:
            try:
                reply = await self._transport.post_chat(text)
            except ChatTransportError as exc:
                logger.warning("Chat request failed: %s", exc)
                reply_text = self._error_text
            except Exception:
                logger.exception("Unexpected failure while sending chat request")
                reply_text = self._error_text
            else:
                reply_text = reply or self._empty_reply_text

            return self._append(reply_text, Sender.BOT)
        finally:
            self._pending = False
            self._notify()

    def _append(self, text: str, sender: Sender) -> Message:
        # Zero-padded so ids sort the same as strings and as numbers
        message = Message(id=f"{next(self._ids):08d}", text=text, sender=sender)
        self._messages.append(message)
        return message

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Session listener %r failed", listener)
