"""
LLM Provider implementations.
"""

from .nim import ChatCompletionRequest, ChatCompletionResult, NIMProvider

__all__ = ["ChatCompletionRequest", "ChatCompletionResult", "NIMProvider"]
