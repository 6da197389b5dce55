"""Statistics for a localization run."""

from dataclasses import dataclass, fields


@dataclass
class TranslationStats:
    """Counters accumulated across every language and batch of a run."""

    total_keys: int = 0
    translated: int = 0
    skipped_should_not_translate: int = 0
    skipped_already_translated: int = 0
    errors: int = 0

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, 0)

    def merge(self, other: "TranslationStats") -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))

    def rows(self):
        """(label, count) pairs in report order."""
        return [
            ("Total keys", self.total_keys),
            ("Translated", self.translated),
            ("Skipped (shouldTranslate: false)", self.skipped_should_not_translate),
            ("Skipped (already translated)", self.skipped_already_translated),
            ("Errors", self.errors),
        ]
