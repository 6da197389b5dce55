"""Decides which catalog entries, languages and variants need translation."""

from typing import Iterable, List, Optional, Set, Tuple

from ..models.string_entry import Localization, StringEntry, VariantRef, XCStringsFile
from ..models.work import TranslationWorkItem


class NoTargetLanguagesError(ValueError):
    """Raised when the requested languages do not match any target language."""

    def __init__(self, requested: Iterable[str], available: Iterable[str]):
        self.requested = sorted(requested)
        self.available = sorted(available)
        super().__init__(
            f"None of the requested languages ({', '.join(self.requested)}) "
            f"are targets of this catalog (available: {', '.join(self.available) or 'none'})"
        )


def languages_to_translate(
    catalog: XCStringsFile,
    requested: Optional[Iterable[str]] = None,
    project_languages: Optional[Iterable[str]] = None,
) -> Set[str]:
    """
    Target languages for a catalog.

    Project-declared and catalog-declared languages are combined and the
    source language removed. When `requested` is given the result is
    intersected with it.

    Raises:
        NoTargetLanguagesError: If `requested` shares no language with the targets
    """
    targets = set(catalog.declared_languages())
    if project_languages:
        targets.update(project_languages)
    targets.discard(catalog.source_language)

    if requested is None:
        return targets

    requested = set(requested)
    selected = targets & requested
    if requested and not selected:
        raise NoTargetLanguagesError(requested, targets)
    return selected


def should_translate_key(entry: StringEntry, force: bool = False) -> bool:
    """An explicit `shouldTranslate: false` excludes the entry, even when forced."""
    return entry.should_translate is not False


def source_texts(entry: StringEntry, source_language: str) -> List[Tuple[str, Optional[VariantRef]]]:
    """
    Source texts of an entry, each paired with the variant it belongs to.

    The default unit of the source localization wins. Without it, every
    non-empty variant unit of the source localization is a source text of
    its own. Without a source localization the key itself is used.
    """
    loc = entry.localization(source_language)
    if loc is None:
        return [(entry.key, None)]

    if loc.string_unit is not None and loc.string_unit.value:
        return [(loc.string_unit.value, None)]

    texts = [(unit.value, variant) for variant, unit in loc.iter_units() if variant and unit.value]
    if texts:
        return texts

    return [(entry.key, None)]


def _covered(target: Localization, variant: Optional[VariantRef]) -> bool:
    """Whether `target` already holds a current translation for `variant`."""
    existing = target.unit(variant)
    if existing is not None:
        return existing.is_current
    if variant is None and target.variations:
        # A plain source string may be translated as plural/device forms
        units = [unit for ref, unit in target.iter_units() if ref is not None]
        return bool(units) and all(unit.is_current for unit in units)
    return False


def needs_translation(
    entry: StringEntry,
    language: str,
    force: bool = False,
    source_language: Optional[str] = None,
) -> bool:
    """
    Whether any unit of `entry` is owed a translation in `language`.

    A missing localization, `force`, or any default/variant unit that is
    `new` or empty all count. A localization with no units at all is
    treated as missing. With `source_language`, a source variant that has
    no unit in the target counts too, so a plural with only `other`
    filled in still needs its `one` form.
    """
    loc = entry.localization(language)
    if loc is None:
        return True
    if force:
        return True

    units = list(loc.iter_units())
    if not units:
        return True
    if any(not unit.is_current for _, unit in units):
        return True

    if source_language is None:
        return False
    return any(not _covered(loc, variant) for _, variant in source_texts(entry, source_language))


def work_items(
    entry: StringEntry,
    language: str,
    source_language: str,
    force: bool = False,
) -> List[TranslationWorkItem]:
    """
    Per-unit work owed by `entry` for `language`.

    Callers are expected to have checked `should_translate_key` and
    `needs_translation`. Units already current in the target are left
    out unless `force` is set, so a partially translated plural only
    yields its missing variants.
    """
    target = entry.localization(language)
    items = []

    for text, variant in source_texts(entry, source_language):
        if not force and target is not None and _covered(target, variant):
            continue
        items.append(
            TranslationWorkItem(
                key=entry.key,
                variant=variant,
                source_text=text,
                context=entry.comment,
                target_language=language,
            )
        )

    return items
