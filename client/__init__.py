from client.session import ChatSession, Message, Sender, SessionState
from client.transport import ChatApiClient, ChatTransportError

__all__ = [
    "ChatApiClient",
    "ChatSession",
    "ChatTransportError",
    "Message",
    "Sender",
    "SessionState",
]
