"""Base provider interface for translation and review."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ...models.work import AnalysisCandidate, BatchItem, Suggestion, WorkItemId


class ProviderError(Exception):
    """Raised when the provider fails or returns an unusable response."""


class TranslationProvider(ABC):
    """Base class for translation providers."""

    @abstractmethod
    def translate(self, text: str, target_lang: str, context: Optional[str] = None) -> str:
        """Translate a single text."""

    @abstractmethod
    def translate_batch(
        self,
        items: Dict[WorkItemId, BatchItem],
        target_lang: str,
    ) -> Dict[WorkItemId, str]:
        """
        Translate a batch of items in one request.

        Args:
            items: Mapping of item id to text and optional context
            target_lang: Target language code

        Returns:
            Mapping of item id to translated text. Ids the provider produced
            no translation for are absent.

        Raises:
            ProviderError: If the request as a whole fails
        """

    @abstractmethod
    def analyze_batch(
        self,
        candidates: List[AnalysisCandidate],
        target_lang: str,
    ) -> List[Suggestion]:
        """
        Review existing translations and propose improvements.

        Returns:
            Zero or more suggestions; candidates judged fine are omitted.

        Raises:
            ProviderError: If the request as a whole fails
        """
