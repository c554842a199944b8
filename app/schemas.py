from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, StrictStr


class ChatRequest(BaseModel):
    message: StrictStr = Field(..., min_length=1, description="User's message, sent to the model as-is")


class ChatResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    message: str
