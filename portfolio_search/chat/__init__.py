"""
Chat layer: turns ranked search results into model prompts and answers.
"""

from .engine import ChatEngine, ChatMessage, ChatResult, fallback_response
from .prompts import IntentAnalysis, analyze_user_intent, build_system_prompt, suggested_questions

__all__ = [
    'ChatEngine',
    'ChatMessage',
    'ChatResult',
    'fallback_response',
    'IntentAnalysis',
    'analyze_user_intent',
    'build_system_prompt',
    'suggested_questions'
]
