from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from config.settings import Settings, get_settings


def build_llm(settings: Optional[Settings] = None) -> ChatGoogleGenerativeAI:
    settings = settings or get_settings()
    if not settings.gemini_api_key:
        raise RuntimeError(
            "GEMINI_API_KEY not set. Please configure it in environment or .env"
        )

    kwargs: Dict[str, Any] = {
        "model": settings.gemini_model,
        "google_api_key": settings.gemini_api_key,
    }
    if settings.temperature is not None:
        kwargs["temperature"] = settings.temperature
    # One attempt per request; failures surface to the caller immediately.
    return ChatGoogleGenerativeAI(max_retries=0, **kwargs)


def extract_text(content: Union[str, List[Any]]) -> str:
    """Flatten a chat model's message content into plain text.

    Gemini may return either a string or a list of parts, where a part is a
    string or a dict carrying a ``text`` key.
    """
    if isinstance(content, str):
        return content
    texts: List[str] = []
    for part in content or []:
        if isinstance(part, str):
            texts.append(part)
        elif isinstance(part, dict) and isinstance(part.get("text"), str):
            texts.append(part["text"])
    return "".join(texts)


def generate_reply(llm: BaseChatModel, message: str) -> str:
    """Send ``message`` as the whole prompt and return the generated text.

    No system prompt and no prior turns are attached. An empty reply is
    returned as-is; the client decides how to show it.
    """
    result: BaseMessage = llm.invoke([HumanMessage(content=message)])
    return extract_text(result.content)
