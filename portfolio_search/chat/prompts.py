"""
Prompt construction, suggested questions and keyword intent analysis for the chatbot.
"""

from dataclasses import dataclass
from typing import List, Sequence

from ..vector.types import SearchResult


@dataclass
class IntentAnalysis:
    intent: str
    follow_up_questions: List[str]


def format_context(results: Sequence[SearchResult]) -> str:
    return "\n\n".join(f"[{result.type.upper()}] {result.content}" for result in results)


def build_system_prompt(results: Sequence[SearchResult], owner: str, contact_email: str) -> str:
    """System prompt with the retrieved portfolio context injected."""
    context_text = format_context(results) or "No specific portfolio context matched this question."

    return f"""You are an AI assistant for {owner}'s portfolio website. You help visitors learn about {owner}'s projects, skills, experience, and background.

CONTEXT INFORMATION:
{context_text}

GUIDELINES:
- Be conversational, helpful, and enthusiastic about {owner}'s work
- Use the context information to provide accurate, specific answers
- When discussing projects, mention specific technologies and outcomes
- If asked about availability, mention {owner} is open to new opportunities
- If you don't know something specific, say so honestly
- Encourage visitors to explore the portfolio or contact {owner} directly
- Keep responses concise but informative (2-3 paragraphs max)

RESPONSE STYLE:
- Start with a direct answer to the question
- Provide relevant details from the context
- End with a helpful suggestion or call-to-action when appropriate

CONTACT INFORMATION:
- Email: {contact_email}

Remember: You represent {owner} professionally, so maintain a positive, knowledgeable, and approachable tone."""


def suggested_questions(owner: str) -> List[str]:
    return [
        f"What's {owner}'s experience with React and TypeScript?",
        f"Tell me about {owner}'s machine learning projects",
        f"What makes {owner} different from other developers?",
        f"Show me {owner}'s most impressive project",
        f"What technologies does {owner} specialize in?",
        f"Is {owner} available for new opportunities?",
        f"What's {owner}'s background in AI and machine learning?",
        f"Can you show me examples of {owner}'s frontend work?",
    ]


# Checked in order; the first rule whose keyword appears wins.
_INTENT_RULES = [
    ("projects", ("project", "work", "portfolio"), [
        "Would you like to see a specific type of project?",
        "Are you interested in the technical details?",
        "Would you like to see the live demo or code?",
    ]),
    ("skills", ("skill", "technology", "experience"), [
        "Which technology stack interests you most?",
        "Would you like to know about the learning journey behind these skills?",
        "Are you curious about specific frameworks or tools?",
    ]),
    ("contact", ("contact", "hire", "available"), [
        "Would you like the contact information?",
        "Are you interested in a specific type of collaboration?",
        "Would you like to know about current availability?",
    ]),
    ("about", ("about", "background", "story"), [
        "Would you like to know about the career journey so far?",
        "Are you interested in the education background?",
        "Would you like to hear about interests outside of work?",
    ]),
]

_GENERAL_FOLLOW_UPS = [
    "What would you like to know?",
    "Are you interested in projects, skills, or experience?",
    "Would you like to see some examples of the work?",
]


def analyze_user_intent(message: str) -> IntentAnalysis:
    lower_message = message.lower()
    for intent, keywords, follow_ups in _INTENT_RULES:
        if any(keyword in lower_message for keyword in keywords):
            return IntentAnalysis(intent=intent, follow_up_questions=list(follow_ups))
    return IntentAnalysis(intent="general", follow_up_questions=list(_GENERAL_FOLLOW_UPS))
