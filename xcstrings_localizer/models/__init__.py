"""Data models for the localization pipeline."""

from .string_entry import StringUnit, Localization, StringEntry, VariantRef, XCStringsFile
from .work import AnalysisCandidate, BatchItem, Suggestion, TranslationWorkItem, WorkItemId

__all__ = [
    "StringUnit",
    "Localization",
    "StringEntry",
    "VariantRef",
    "XCStringsFile",
    "AnalysisCandidate",
    "BatchItem",
    "Suggestion",
    "TranslationWorkItem",
    "WorkItemId",
]
