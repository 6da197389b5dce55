"""Run-scoped cache of translations keyed by (text, language, context)."""

from typing import Dict, Optional, Tuple

CacheKey = Tuple[str, str, Optional[str]]


class TranslationCache:
    """
    In-memory translation cache.

    Keys are the exact (text, target language, context) triple; nothing
    is normalized. One instance lives for one orchestration run.
    """

    def __init__(self):
        self._entries: Dict[CacheKey, str] = {}

    def get(self, text: str, target_language: str, context: Optional[str] = None) -> Optional[str]:
        return self._entries.get((text, target_language, context))

    def put(self, text: str, target_language: str, context: Optional[str], translation: str) -> None:
        self._entries[(text, target_language, context)] = translation

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
