"""
Structured operation logging for the vector store, corpus builder and chat layer.
"""

import logging
from typing import Any, Dict, List

QUERY_PREVIEW_CHARS = 50


def _preview(text: str, limit: int = QUERY_PREVIEW_CHARS) -> str:
    if text is None:
        return ""
    return text[:limit] + "..." if len(text) > limit else text


class StructuredLogger:
    """Structured logger for vector, corpus, search and chat operations."""

    def __init__(self, name: str = "portfolio_search"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status in ("failed", "error"):
            self.logger.error(message)
        elif status in ("masked", "skipped", "timeout"):
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_vector_operation(self, operation: str, record_id: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log a vector operation."""
        log_details = {"record_id": record_id}
        if details:
            log_details.update(details)

        self.log_operation(f"vector.{operation}", status, log_details)

    def log_corpus_build(self, item_count: int, duration_ms: float, status: str = "success", details: Dict[str, Any] = None):
        """Log a full corpus build."""
        log_details = {"item_count": item_count, "duration_ms": round(duration_ms, 2)}
        if details:
            log_details.update(details)

        self.log_operation("corpus.build", status, log_details)

    def log_search(self, query: str, result_count: int, top_k: int, min_score: float, status: str = "success", details: Dict[str, Any] = None):
        """Log a similarity search. Only a preview of the query is recorded."""
        log_details = {
            "query": _preview(query),
            "result_count": result_count,
            "top_k": top_k,
            "min_score": min_score,
        }
        if details:
            log_details.update(details)

        self.log_operation("vector.search", status, log_details)

    def log_chat_interaction(self, client_id: str, message: str, result_count: int, status: str = "success"):
        """Log a chatbot interaction."""
        log_details = {
            "client": client_id,
            "message": _preview(message),
            "context_results": result_count,
        }
        self.log_operation("chat.interaction", status, log_details)

    def log_rate_limited(self, client_id: str, reset_in_sec: int):
        """Log a rejected request."""
        self.log_operation("api.rate_limit", "rejected", {"client": client_id, "reset_in_sec": reset_in_sec})

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()


def sanitize_payload(payload: Any, sensitive_fields: List[str] = None) -> Any:
    """Redact secrets and truncate long strings before they reach the log."""
    if sensitive_fields is None:
        sensitive_fields = ['api_key', 'authorization', 'password', 'secret', 'token']

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if k.lower() in sensitive_fields:
                sanitized[k] = "[REDACTED]"
            else:
                sanitized[k] = sanitize_payload(v, sensitive_fields)
        return sanitized
    elif isinstance(payload, str):
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, sensitive_fields) for item in payload]
    else:
        return payload
