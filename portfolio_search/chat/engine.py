"""
Chat engine: retrieves portfolio context and asks an Ollama-served model to answer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

import ollama

from ..core import config
from ..util.logging import logger
from ..vector.index import IVectorStore
from ..vector.types import SearchResult
from .prompts import build_system_prompt

CHAT_TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 500


@dataclass
class ChatMessage:
    """One turn of conversation history."""
    role: str  # "user" or "assistant"
    content: str
    timestamp: Optional[datetime] = None


@dataclass
class ChatResult:
    response: str
    search_results: List[SearchResult] = field(default_factory=list)
    error: Optional[str] = None


def fallback_response(contact_email: str) -> str:
    return ("I'm sorry, I'm having trouble processing your request right now. Please try again or feel free "
            f"to contact me directly at {contact_email}.")


class ChatEngine:
    """
    Answers visitor questions with retrieved portfolio context.

    Any failure, in retrieval or in the model call, becomes a fallback answer
    that points the visitor to the owner's email.
    """

    def __init__(self, store: IVectorStore, client: Optional[ollama.Client] = None,
                 model_name: Optional[str] = None, owner: Optional[str] = None,
                 contact_email: Optional[str] = None, top_k: Optional[int] = None,
                 min_score: Optional[float] = None, history_limit: Optional[int] = None):
        self.store = store
        self.client = client if client is not None else ollama.Client(host=config.OLLAMA_HOST, timeout=config.CHAT_TIMEOUT_SEC)
        self.model_name = model_name or config.OLLAMA_MODEL
        self.owner = owner or config.PORTFOLIO_OWNER
        self.contact_email = contact_email or config.CONTACT_EMAIL
        self.top_k = top_k if top_k is not None else config.SEARCH_TOP_K
        self.min_score = min_score if min_score is not None else config.SEARCH_MIN_SCORE
        self.history_limit = history_limit if history_limit is not None else config.CHAT_HISTORY_LIMIT

    def build_messages(self, message: str, history: List[ChatMessage], results: List[SearchResult]) -> List[Dict[str, str]]:
        """System prompt, the most recent history turns, then the new message."""
        messages = [{
            'role': 'system',
            'content': build_system_prompt(results, self.owner, self.contact_email)
        }]

        recent_history = history[-self.history_limit:] if self.history_limit > 0 else []
        for turn in recent_history:
            messages.append({'role': turn.role, 'content': turn.content})

        messages.append({'role': 'user', 'content': message})
        return messages

    def _options(self) -> Dict[str, Any]:
        return {'temperature': CHAT_TEMPERATURE, 'num_predict': CHAT_MAX_TOKENS}

    def generate_response(self, message: str, history: Optional[List[ChatMessage]] = None) -> ChatResult:
        """
        Answer a message.

        Args:
            message: The visitor's question
            history: Previous turns, oldest first

        Returns:
            ChatResult with the answer and the context it was given
        """
        history = history or []
        try:
            results = self.store.search(message, self.top_k, self.min_score)
            response = self.client.chat(
                model=self.model_name,
                messages=self.build_messages(message, history, results),
                options=self._options(),
            )
            content = response['message']['content']
            if not content:
                content = "I didn't receive a clear response. Could you please rephrase your question?"
            return ChatResult(response=content, search_results=results)

        except Exception as e:
            logger.log_operation("chat.generate", "failed", {"model": self.model_name, "error": str(e)})
            return ChatResult(response=fallback_response(self.contact_email), search_results=[], error=str(e))

    def stream_response(self, message: str, history: Optional[List[ChatMessage]] = None) -> Iterator[str]:
        """Yield the answer in chunks as the model produces them. Errors propagate."""
        history = history or []
        results = self.store.search(message, self.top_k, self.min_score)
        stream = self.client.chat(
            model=self.model_name,
            messages=self.build_messages(message, history, results),
            options=self._options(),
            stream=True,
        )
        for chunk in stream:
            text = chunk['message']['content']
            if text:
                yield text

    def check_health(self) -> bool:
        """Check if the chat model service is reachable."""
        try:
            self.client.list()
            return True
        except Exception:
            return False
