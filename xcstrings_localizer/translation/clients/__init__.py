"""Translation API clients."""

from .base import ProviderError, TranslationProvider
from .openai_client import OpenAIClient

__all__ = ["OpenAIClient", "ProviderError", "TranslationProvider"]
