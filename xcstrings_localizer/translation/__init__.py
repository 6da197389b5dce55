"""Translation of catalog entries."""

from .cache import TranslationCache
from .localizer import Localizer
from .stats import TranslationStats

__all__ = ["Localizer", "TranslationCache", "TranslationStats"]
