"""Batch translation of .xcstrings catalogs."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from ..extraction.xcstrings_parser import XCStringsParser
from ..extraction.xcstrings_writer import XCStringsWriter
from ..models.string_entry import StringEntry, XCStringsFile
from ..models.work import BatchItem, TranslationWorkItem
from .cache import TranslationCache
from .clients.base import TranslationProvider
from .resolver import (
    NoTargetLanguagesError,
    languages_to_translate,
    needs_translation,
    should_translate_key,
    work_items,
)
from .stats import TranslationStats

DEFAULT_BATCH_SIZE = 15


def chunked(items: List, size: int) -> List[List]:
    """Split a list into consecutive chunks of at most `size` items."""
    return [items[i:i + size] for i in range(0, len(items), size)]


class LanguagePlan:
    """Work for one target language, collected before any write happens."""

    def __init__(self, language: str):
        self.language = language
        # Unique uncached items, in catalog order; these are sent to the provider
        self.pending: List[TranslationWorkItem] = []
        # Items already answered by the cache
        self.cached: List[Tuple[TranslationWorkItem, str]] = []
        # Later items sharing a pending item's (text, language, context)
        self.duplicates: Dict[tuple, List[TranslationWorkItem]] = defaultdict(list)

    @property
    def item_count(self) -> int:
        return len(self.pending) + len(self.cached) + sum(len(d) for d in self.duplicates.values())

    def followers(self, item: TranslationWorkItem) -> List[TranslationWorkItem]:
        return self.duplicates.get(item.cache_key, [])


class Localizer:
    """
    Translates the entries of a catalog in fixed-size provider batches.

    Languages are processed one after another and batches within a
    language likewise. A failing batch only affects its own items: they
    are counted as errors and the run carries on.
    """

    def __init__(
        self,
        provider: TranslationProvider,
        batch_size: int = DEFAULT_BATCH_SIZE,
        console: Optional[Console] = None,
        cache: Optional[TranslationCache] = None,
        stats: Optional[TranslationStats] = None,
    ):
        """
        Initialize the localizer.

        Args:
            provider: Translation provider used for every request
            batch_size: Maximum number of work items per provider call
            console: Console for progress output (stderr if not provided)
            cache: Translation cache; a fresh one if not provided
            stats: Statistics accumulator; a fresh one if not provided
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.provider = provider
        self.batch_size = batch_size
        self.console = console or Console(stderr=True)
        self.cache = cache if cache is not None else TranslationCache()
        self.stats = stats if stats is not None else TranslationStats()
        self.parser = XCStringsParser()
        self.writer = XCStringsWriter()

    def localize(
        self,
        catalog: XCStringsFile,
        keys: Optional[Iterable[str]] = None,
        languages: Optional[Iterable[str]] = None,
        force: bool = False,
        dry_run: bool = False,
        project_languages: Optional[Iterable[str]] = None,
    ) -> TranslationStats:
        """
        Translate a catalog in place.

        Args:
            catalog: Catalog to translate; mutated unless `dry_run`
            keys: Only translate these keys
            languages: Only translate into these languages
            force: Re-translate units that already hold a translation
            dry_run: Enumerate batches without calling the provider
            project_languages: Extra target languages declared by the project

        Returns:
            Statistics of this call
        """
        self.stats.reset()

        try:
            targets = languages_to_translate(
                catalog,
                requested=list(languages) if languages else None,
                project_languages=project_languages,
            )
        except NoTargetLanguagesError as e:
            self.console.print(f"[red]Error:[/red] {escape(str(e))}")
            self.stats.errors += 1
            return self._snapshot()

        self.console.print(f"[blue]Source language:[/blue] {catalog.source_language}")
        self.console.print(f"[blue]Target languages:[/blue] {', '.join(sorted(targets)) or 'none'}")

        entries = self._select_entries(catalog, keys)
        self.stats.total_keys = len(entries)

        for language in sorted(targets):
            plan = self._plan_language(entries, language, catalog.source_language, force)
            if plan.item_count == 0:
                continue
            self._run_plan(catalog, plan, dry_run)

        return self._snapshot()

    def localize_file(
        self,
        input_path: str,
        output_path: Optional[str] = None,
        keys: Optional[Iterable[str]] = None,
        languages: Optional[Iterable[str]] = None,
        force: bool = False,
        dry_run: bool = False,
        project_languages: Optional[Iterable[str]] = None,
    ) -> TranslationStats:
        """
        Load a catalog, translate it and save it once at the end.

        Raises:
            CatalogDecodeError: If the input is not a valid catalog
            OSError: If the output cannot be written
        """
        self.console.print(f"[blue]Loading:[/blue] {input_path}")
        catalog = self.parser.parse(input_path)

        stats = self.localize(
            catalog,
            keys=keys,
            languages=languages,
            force=force,
            dry_run=dry_run,
            project_languages=project_languages,
        )

        if dry_run:
            self.console.print("\n[yellow]Dry run - no changes saved[/yellow]")
        else:
            output = output_path or input_path
            self.console.print(f"\n[blue]Saving to:[/blue] {output}")
            self.writer.write(catalog, output)

        return stats

    def translate_text(self, text: str, target_lang: str, context: Optional[str] = None) -> str:
        """Translate a single string, answering repeats from the cache."""
        cached = self.cache.get(text, target_lang, context)
        if cached is not None:
            return cached

        translated = self.provider.translate(text, target_lang, context)
        self.cache.put(text, target_lang, context, translated)
        return translated

    def _select_entries(
        self, catalog: XCStringsFile, keys: Optional[Iterable[str]]
    ) -> List[StringEntry]:
        if keys is None:
            return list(catalog.strings.values())

        wanted = set(keys)
        missing = sorted(wanted - catalog.strings.keys())
        for key in missing:
            self.console.print(f"[yellow]Warning:[/yellow] key not found: {escape(key)}")

        selected = [entry for key, entry in catalog.strings.items() if key in wanted]
        self.console.print(f"[blue]Translating specific keys:[/blue] {len(selected)}")
        return selected

    def _plan_language(
        self,
        entries: List[StringEntry],
        language: str,
        source_language: str,
        force: bool,
    ) -> LanguagePlan:
        """Collect the work for one language without touching the catalog."""
        plan = LanguagePlan(language)
        queued = set()

        for entry in entries:
            if not should_translate_key(entry, force):
                self.stats.skipped_should_not_translate += 1
                continue

            if not needs_translation(entry, language, force, source_language):
                self.stats.skipped_already_translated += 1
                continue

            items = work_items(entry, language, source_language, force)
            if not items:
                self.stats.skipped_already_translated += 1
                continue

            for item in items:
                hit = self.cache.get(*item.cache_key)
                if hit is not None:
                    plan.cached.append((item, hit))
                elif item.cache_key in queued:
                    plan.duplicates[item.cache_key].append(item)
                else:
                    queued.add(item.cache_key)
                    plan.pending.append(item)

        return plan

    def _run_plan(self, catalog: XCStringsFile, plan: LanguagePlan, dry_run: bool) -> None:
        language = plan.language
        self.console.print(
            f"\n[bold cyan]Translating {plan.item_count} strings to {language}...[/bold cyan]"
        )

        if plan.cached:
            self.console.print(f"  [dim]{len(plan.cached)} answered from cache[/dim]")
            if dry_run:
                self.stats.translated += len(plan.cached)
            else:
                for item, translation in plan.cached:
                    self._apply(catalog, item, translation)

        batches = chunked(plan.pending, self.batch_size)
        for index, batch in enumerate(batches, start=1):
            self.console.print(f"  Batch {index}/{len(batches)} ({len(batch)} strings)")

            if dry_run:
                self.stats.translated += sum(1 + len(plan.followers(item)) for item in batch)
                continue

            request = {item.id: BatchItem(text=item.source_text, context=item.context) for item in batch}
            try:
                translations = self.provider.translate_batch(request, language)
            except Exception as e:
                self.console.print(
                    f"    [red]✗ Batch {index}/{len(batches)} ({language}) failed:[/red] {escape(str(e))}"
                )
                self.stats.errors += sum(1 + len(plan.followers(item)) for item in batch)
                continue

            for item in batch:
                translated = translations.get(item.id)
                followers = plan.followers(item)
                if translated is None:
                    self.console.print(
                        f"    [red]✗ Missing translation ({language}, batch {index}):[/red] "
                        f"{escape(str(item.id))}"
                    )
                    self.stats.errors += 1 + len(followers)
                    continue

                self.cache.put(item.source_text, language, item.context, translated)
                self._apply(catalog, item, translated)
                for follower in followers:
                    self._apply(catalog, follower, translated)

    def _apply(self, catalog: XCStringsFile, item: TranslationWorkItem, translation: str) -> None:
        catalog.strings[item.key].set_unit(item.target_language, translation, item.variant)
        self.stats.translated += 1

    def _snapshot(self) -> TranslationStats:
        result = TranslationStats()
        result.merge(self.stats)
        return result
