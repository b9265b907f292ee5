"""
Request and response models for the portfolio chatbot API.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

MAX_MESSAGE_LENGTH = 500


class HistoryMessage(BaseModel):
    id: Optional[str] = None
    role: Literal["user", "assistant"]
    content: str
    timestamp: Optional[datetime] = None


class ChatRequest(BaseModel):
    message: str
    messages: List[HistoryMessage] = []
    stream: bool = False

    @field_validator('message')
    @classmethod
    def message_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('Message cannot be empty')
        return v

    @field_validator('message')
    @classmethod
    def message_must_be_reasonable_length(cls, v):
        if len(v) > MAX_MESSAGE_LENGTH:
            raise ValueError(f'Message is too long (max {MAX_MESSAGE_LENGTH} characters)')
        return v


class SearchResultModel(BaseModel):
    id: str
    content: str
    metadata: Dict[str, Any]
    type: str
    score: float


class ChatResponse(BaseModel):
    response: str
    search_results: List[SearchResultModel]
    intent: str
    follow_up_questions: List[str]
    timestamp: datetime


class ChatFallbackResponse(BaseModel):
    response: str
    error: str
    timestamp: datetime


class SearchRequest(BaseModel):
    query: str
    top_k: int = Field(default=5, ge=1, le=50)
    min_score: float = Field(default=0.7, ge=-1.0, le=1.0)

    @field_validator('query')
    @classmethod
    def query_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('query cannot be empty')
        return v


class SearchResponse(BaseModel):
    results: List[SearchResultModel]


class SuggestionsResponse(BaseModel):
    questions: List[str]


class HealthResponse(BaseModel):
    status: str
    version: str
    store_initialized: bool
    embedding_count: int
    embeddings_by_type: Dict[str, int]
    embedding_provider: str
    chat_enabled: bool
