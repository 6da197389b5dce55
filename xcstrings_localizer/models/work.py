"""Ephemeral work models produced and consumed within a single run."""

from dataclasses import dataclass
from typing import Optional

from .string_entry import VariantRef


@dataclass(frozen=True)
class WorkItemId:
    """Composite identifier of one translatable unit within a batch."""

    key: str
    variant: Optional[VariantRef] = None

    def __str__(self) -> str:
        if self.variant is None:
            return self.key
        return f"{self.key} [{self.variant}]"


@dataclass(frozen=True)
class TranslationWorkItem:
    """One unit of text owed a translation for a target language."""

    key: str
    variant: Optional[VariantRef]
    source_text: str
    context: Optional[str]
    target_language: str

    @property
    def id(self) -> WorkItemId:
        return WorkItemId(self.key, self.variant)

    @property
    def cache_key(self) -> tuple:
        return (self.source_text, self.target_language, self.context)


@dataclass(frozen=True)
class BatchItem:
    """Payload sent to the provider for one work item."""

    text: str
    context: Optional[str] = None


@dataclass(frozen=True)
class AnalysisCandidate:
    """An existing translation offered to the provider for review."""

    key: str
    variant: Optional[VariantRef]
    original: str
    translation: str
    context: Optional[str] = None


@dataclass
class Suggestion:
    """A provider-proposed replacement for an existing translation."""

    key: str
    variant: Optional[VariantRef]
    language: str
    current_translation: str
    suggested_translation: str
    confidence: int  # 1-5
    reasoning: str = ""
