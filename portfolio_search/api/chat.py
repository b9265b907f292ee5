"""
Chatbot endpoints: answers, streamed answers and suggested questions.

Failures never surface as server errors to the visitor; they become a
fallback answer with HTTP 200.
"""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from ..chat.engine import ChatEngine, ChatMessage, fallback_response
from ..chat.prompts import analyze_user_intent, suggested_questions
from ..core import config
from ..util.logging import logger
from .rate_limit import RateLimiter, RateLimitExceeded
from .schemas import (
    ChatFallbackResponse,
    ChatRequest,
    ChatResponse,
    HistoryMessage,
    SearchResultModel,
    SuggestionsResponse,
)

router = APIRouter()


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_rate_limit(request: Request, client_ip: str) -> Optional[int]:
    """Count the request; return the minutes until reset when the client is over its limit, else None."""
    limiter: RateLimiter = request.app.state.rate_limiter
    decision = limiter.check(client_ip)
    if decision.allowed:
        return None

    reset_in = decision.retry_after_minutes(limiter.clock())
    logger.log_rate_limited(client_ip, reset_in * 60)
    return reset_in


def enforce_rate_limit(request: Request) -> str:
    """Dependency resolved before the body is validated, so rejected requests still count."""
    client_ip = get_client_ip(request)
    reset_in = _check_rate_limit(request, client_ip)
    if reset_in is not None:
        raise RateLimitExceeded(client_ip, reset_in)
    return client_ip


def _history(messages: List[HistoryMessage]) -> List[ChatMessage]:
    return [ChatMessage(role=m.role, content=m.content, timestamp=m.timestamp) for m in messages]


def _stream(engine: ChatEngine, message: str, history: List[ChatMessage]):
    """Start a streamed answer; the first chunk is pulled eagerly so setup errors still map to a status code."""
    try:
        chunks = engine.stream_response(message, history)
        first = next(chunks, "")
    except Exception as e:
        logger.log_operation("chat.stream", "failed", {"error": str(e)})
        return JSONResponse(status_code=500, content={"error": "Failed to generate streaming response"})

    def body():
        if first:
            yield first
        yield from chunks

    return StreamingResponse(body(), media_type="text/plain; charset=utf-8")


@router.post("/api/chatbot")
def chatbot(req: ChatRequest, request: Request, client_ip: str = Depends(enforce_rate_limit)):
    """Answer a visitor's question with retrieved portfolio context."""
    if not config.CHAT_ENABLED:
        return JSONResponse(
            status_code=200,
            content={
                "error": "AI service not configured",
                "response": ("I'm sorry, the AI service is currently unavailable. Please contact "
                             f"{config.PORTFOLIO_OWNER} directly at {config.CONTACT_EMAIL} for any questions."),
            },
        )

    engine: ChatEngine = request.app.state.chat_engine
    history = _history(req.messages)

    if req.stream:
        return _stream(engine, req.message, history)

    try:
        result = engine.generate_response(req.message, history)
        intent = analyze_user_intent(req.message)
        logger.log_chat_interaction(client_ip, req.message, len(result.search_results),
                                    status="success" if result.error is None else "degraded")

        return ChatResponse(
            response=result.response,
            search_results=[SearchResultModel(**vars(r)) for r in result.search_results],
            intent=intent.intent,
            follow_up_questions=intent.follow_up_questions,
            timestamp=_now(),
        )
    except Exception as e:
        logger.log_operation("chat.request", "failed", {"client": client_ip, "error": str(e)})
        return JSONResponse(
            status_code=200,
            content=ChatFallbackResponse(
                response=fallback_response(config.CONTACT_EMAIL),
                error="Processing error",
                timestamp=_now(),
            ).model_dump(mode="json"),
        )


@router.get("/api/chatbot")
def chatbot_stream(request: Request, message: str = ""):
    """Stream an answer as plain text."""
    if not message:
        return JSONResponse(status_code=400, content={"error": "Message parameter is required"})

    client_ip = get_client_ip(request)
    if _check_rate_limit(request, client_ip) is not None:
        return JSONResponse(status_code=429, content={"error": "Rate limit exceeded"})

    return _stream(request.app.state.chat_engine, message, [])


@router.put("/api/chatbot")
@router.delete("/api/chatbot")
def chatbot_method_not_allowed():
    return JSONResponse(status_code=405, content={"error": "Method not allowed"})


@router.get("/api/chatbot/suggestions", response_model=SuggestionsResponse)
def chatbot_suggestions():
    return SuggestionsResponse(questions=suggested_questions(config.PORTFOLIO_OWNER))
