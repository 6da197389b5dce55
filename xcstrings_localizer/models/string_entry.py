"""Data models for XCStrings file structure."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Set, Tuple


@dataclass
class StringUnit:
    """Represents a single string translation unit."""

    value: str
    state: str = "new"  # new, translated, needs_review, stale

    @property
    def is_current(self) -> bool:
        """A unit is current when it holds a value that is not marked new."""
        return self.state != "new" and self.value != ""


@dataclass(frozen=True, order=True)
class VariantRef:
    """Identifies a plural or device variant inside a localization."""

    kind: str  # plural, device
    selector: str  # one, other, iphone, mac, ...

    def __str__(self) -> str:
        return f"{self.kind}.{self.selector}"


@dataclass
class Localization:
    """Represents a localization entry for a specific language."""

    string_unit: Optional[StringUnit] = None
    # kind -> selector -> nested localization; None when the member is absent
    variations: Optional[Dict[str, Dict[str, "Localization"]]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def iter_units(self) -> Iterator[Tuple[Optional[VariantRef], StringUnit]]:
        """Yield the default unit first, then every variant unit."""
        if self.string_unit is not None:
            yield None, self.string_unit
        variations = self.variations or {}
        for kind in sorted(variations):
            for selector in sorted(variations[kind]):
                unit = variations[kind][selector].string_unit
                if unit is not None:
                    yield VariantRef(kind, selector), unit

    def unit(self, variant: Optional[VariantRef] = None) -> Optional[StringUnit]:
        if variant is None:
            return self.string_unit
        selected = (self.variations or {}).get(variant.kind, {}).get(variant.selector)
        return selected.string_unit if selected else None


@dataclass
class StringEntry:
    """Represents a single localizable string entry."""

    key: str
    comment: Optional[str] = None
    localizations: Dict[str, Localization] = field(default_factory=dict)
    extraction_state: Optional[str] = None  # manual, extracted_with_value, stale
    should_translate: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def localization(self, language: str) -> Optional[Localization]:
        return self.localizations.get(language)

    def iter_units(self, language: str) -> Iterator[Tuple[Optional[VariantRef], StringUnit]]:
        loc = self.localizations.get(language)
        if loc is None:
            return iter(())
        return loc.iter_units()

    def get_source_value(self, source_language: str = "en") -> str:
        """Get the source language value for this string."""
        loc = self.localizations.get(source_language)
        if loc and loc.string_unit and loc.string_unit.value:
            return loc.string_unit.value
        # If no explicit localization, the key itself is the source value
        return self.key

    def has_translation(self, language: str) -> bool:
        """Check if every unit for the language holds a current translation."""
        units = list(self.iter_units(language))
        return bool(units) and all(unit.is_current for _, unit in units)

    def set_unit(
        self,
        language: str,
        value: str,
        variant: Optional[VariantRef] = None,
        state: str = "translated",
    ) -> None:
        """
        Write a translation, creating missing containers on the way.

        Only the addressed unit is replaced; other languages, other
        variants and the default unit of the same language are kept.
        """
        loc = self.localizations.setdefault(language, Localization())
        if variant is None:
            loc.string_unit = StringUnit(value=value, state=state)
            return
        if loc.variations is None:
            loc.variations = {}
        selectors = loc.variations.setdefault(variant.kind, {})
        target = selectors.setdefault(variant.selector, Localization())
        target.string_unit = StringUnit(value=value, state=state)


@dataclass
class XCStringsFile:
    """Represents a complete .xcstrings file."""

    source_language: str
    strings: Dict[str, StringEntry]
    version: str = "1.0"

    def declared_languages(self) -> Set[str]:
        """All languages that appear in any entry, source included."""
        languages: Set[str] = set()
        for entry in self.strings.values():
            languages.update(entry.localizations.keys())
        return languages
