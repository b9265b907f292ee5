"""
FastAPI application for the portfolio chatbot and semantic search.

The vector store is constructed once per application and shared by every
request; it builds its corpus lazily on the first search.
"""

from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..chat.engine import ChatEngine
from ..core import config
from ..core.config import VERSION, debug_enabled
from ..core.errors import CorpusConstructionError, InitializationTimeoutError
from ..util.logging import logger
from ..vector.index import PortfolioVectorStore
from .chat import router as chat_router
from .rate_limit import RateLimiter, RateLimitExceeded
from .schemas import HealthResponse, SearchRequest, SearchResponse, SearchResultModel


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg", "Invalid request"))
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {message}" if field else message


def create_app(store: Optional[PortfolioVectorStore] = None, chat_engine: Optional[ChatEngine] = None,
               rate_limiter: Optional[RateLimiter] = None) -> FastAPI:
    """
    Build the application around one store instance.

    Args:
        store: Vector store to serve, defaults to a configured store
        chat_engine: Chat engine, defaults to one over `store`
        rate_limiter: Chat rate limiter, defaults to configured limits
    """
    app = FastAPI(
        title="Portfolio Search API",
        version=VERSION,
        description="Semantic search and chatbot over portfolio content",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url="/redoc" if debug_enabled() else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store if store is not None else config.get_vector_store()
    app.state.chat_engine = chat_engine if chat_engine is not None else ChatEngine(app.state.store)
    app.state.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter(
        window_sec=config.RATE_LIMIT_WINDOW_SEC,
        max_requests=config.RATE_LIMIT_MAX_REQUESTS,
    )

    for issue in config.validate_config():
        logger.warning(f"Configuration issue: {issue}")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
        reset_in = exc.retry_after_minutes
        return JSONResponse(
            status_code=429,
            content={
                "error": "Too many requests",
                "message": f"Rate limit exceeded. Please try again in {reset_in} minutes.",
            },
            headers={"Retry-After": str(reset_in)},
        )

    @app.get("/health", response_model=HealthResponse)
    def health_check_endpoint(request: Request):
        """Report store state without triggering initialization."""
        vector_store: PortfolioVectorStore = request.app.state.store
        return HealthResponse(
            status="healthy",
            version=VERSION,
            store_initialized=vector_store.is_initialized,
            embedding_count=len(vector_store),
            embeddings_by_type=vector_store.stats(),
            embedding_provider=vector_store.generator.provider_name,
            chat_enabled=config.CHAT_ENABLED,
        )

    @app.post("/api/search", response_model=SearchResponse)
    def search_endpoint(req: SearchRequest, request: Request):
        """Ranked portfolio content for a query."""
        vector_store: PortfolioVectorStore = request.app.state.store
        try:
            results = vector_store.search(req.query, top_k=req.top_k, min_score=req.min_score,
                                          timeout=config.EMBED_TIMEOUT_SEC)
        except (CorpusConstructionError, InitializationTimeoutError) as e:
            raise HTTPException(status_code=503, detail=f"Search index unavailable: {e}")

        return SearchResponse(results=[SearchResultModel(**vars(r)) for r in results])

    app.include_router(chat_router, tags=["chat"])

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Handle all unhandled exceptions."""
        logger.error(f"Unhandled exception: {exc}")
        content = {"detail": "Internal server error"}
        if debug_enabled():
            content["debug"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    return app


app = create_app()
