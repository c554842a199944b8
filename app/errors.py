from __future__ import annotations

from typing import Optional


class ChatServiceError(Exception):
    """Base for failures the chat endpoint reports as ``{"error": ...}``.

    ``message`` is what the caller sees; anything more detailed belongs in
    the server log.
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidChatRequest(ChatServiceError):
    status_code = 400
    default_message = "Message is required and must be a string"


class ConfigurationError(ChatServiceError):
    status_code = 500
    default_message = "Gemini API key not configured"


class ProviderFailure(ChatServiceError):
    status_code = 500
    default_message = "Internal server error"
