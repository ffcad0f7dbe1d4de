"""上下文预算"""

from .token_counter import TokenCounter

__all__ = ["TokenCounter"]
