from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.errors import ChatServiceError, ConfigurationError, InvalidChatRequest, ProviderFailure
from app.schemas import ChatRequest, ChatResponse, ErrorResponse, HealthResponse
from config.settings import Settings, get_settings
from provider.gemini import build_llm, generate_reply


settings = get_settings()

logging.basicConfig(level=settings.log_level, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("study_buddy")

app = FastAPI(title="Study Buddy Chat Relay", version="1.0.0")

# CORS: any origin may call the relay
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ChatServiceError)
async def chat_service_error_handler(request: Request, exc: ChatServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    err = InvalidChatRequest()
    return JSONResponse(status_code=err.status_code, content={"error": err.message})


@app.get("/api/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(message="Study Buddy backend is running")


@app.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def chat(req: ChatRequest, settings: Settings = Depends(get_settings)) -> ChatResponse:
    if not settings.gemini_api_key:
        logger.error("Chat request refused: GEMINI_API_KEY is not configured")
        raise ConfigurationError()

    logger.info("Incoming chat: model=%s message_len=%s", settings.gemini_model, len(req.message))
    try:
        llm = build_llm(settings)
        output_text = generate_reply(llm, req.message)
    except Exception as e:
        logger.exception("Chat processing failed: %s", e)
        # Detail stays in the server log; the caller only gets the generic message
        raise ProviderFailure() from e

    logger.info("Model responded: %s chars", len(output_text))
    return ChatResponse(response=output_text)
