"""
Portfolio Search - semantic retrieval layer behind the portfolio chatbot.
"""

__version__ = "1.0.0"
