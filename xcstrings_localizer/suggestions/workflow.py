"""Interactive review of provider suggestions for existing translations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Union

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ..extraction.xcstrings_parser import XCStringsParser
from ..extraction.xcstrings_writer import XCStringsWriter
from ..models.string_entry import StringEntry, VariantRef, XCStringsFile
from ..models.work import AnalysisCandidate, Suggestion
from ..translation.clients.base import TranslationProvider
from ..translation.localizer import DEFAULT_BATCH_SIZE, chunked
from ..translation.resolver import NoTargetLanguagesError, languages_to_translate


class WorkflowState(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    ANALYZING = "analyzing"
    PRESENTING = "presenting"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DONE = "done"
    STOPPED = "stopped"


class Decision(Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    QUIT = "quit"

    @classmethod
    def parse(cls, answer: Optional[str]) -> "Decision":
        """Map user input to a decision; anything unrecognized rejects."""
        normalized = (answer or "").strip().lower()
        if normalized in ("y", "yes", "a", "accept"):
            return cls.ACCEPT
        if normalized in ("q", "quit"):
            return cls.QUIT
        return cls.REJECT


class DecisionSource(ABC):
    """Supplies a decision for each presented suggestion."""

    @abstractmethod
    def decide(self, suggestion: Suggestion) -> Decision:
        """Return the decision for one suggestion."""


class PromptDecisions(DecisionSource):
    """Asks the user on the terminal."""

    PROMPT = "Accept? [y]es / [n]o / [q]uit"

    def decide(self, suggestion: Suggestion) -> Decision:
        try:
            answer = click.prompt(self.PROMPT, default="n", show_default=False, err=True)
        except click.Abort:
            # End of input
            return Decision.REJECT
        return Decision.parse(answer)


class ScriptedDecisions(DecisionSource):
    """Replays a fixed sequence; once exhausted every suggestion is rejected."""

    def __init__(self, decisions: Iterable[Union[Decision, str]]):
        self._decisions: Iterator[Union[Decision, str]] = iter(decisions)

    def decide(self, suggestion: Suggestion) -> Decision:
        decision = next(self._decisions, Decision.REJECT)
        if isinstance(decision, Decision):
            return decision
        return Decision.parse(decision)


class ConfidenceDecisions(DecisionSource):
    """Accepts suggestions at or above a confidence threshold."""

    def __init__(self, threshold: int = 5):
        self.threshold = threshold

    def decide(self, suggestion: Suggestion) -> Decision:
        if suggestion.confidence >= self.threshold:
            return Decision.ACCEPT
        return Decision.REJECT


@dataclass
class ReviewOutcome:
    """Result of a suggestion run."""

    total: int = 0
    accepted: int = 0
    rejected: int = 0
    unreviewed: int = 0
    errors: int = 0
    stopped: bool = False

    @property
    def changed(self) -> bool:
        return self.accepted > 0


class SuggestionWorkflow:
    """
    Collects existing translations, has the provider analyze them in
    batches, then walks the user through the suggestions one at a time.
    """

    def __init__(
        self,
        provider: TranslationProvider,
        batch_size: int = DEFAULT_BATCH_SIZE,
        console: Optional[Console] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.provider = provider
        self.batch_size = batch_size
        self.console = console or Console(stderr=True)
        self.state = WorkflowState.IDLE
        self.errors = 0
        self.parser = XCStringsParser()
        self.writer = XCStringsWriter()

    def collect_candidates(
        self,
        catalog: XCStringsFile,
        languages: Iterable[str],
        keys: Optional[Iterable[str]] = None,
    ) -> Dict[str, List[AnalysisCandidate]]:
        """Every non-empty existing unit per language, regardless of state."""
        self.state = WorkflowState.COLLECTING
        wanted = set(keys) if keys is not None else None
        candidates: Dict[str, List[AnalysisCandidate]] = {}

        for language in sorted(languages):
            found = []
            for key, entry in catalog.strings.items():
                if wanted is not None and key not in wanted:
                    continue
                if entry.should_translate is False:
                    continue
                for variant, unit in entry.iter_units(language):
                    if not unit.value:
                        continue
                    found.append(
                        AnalysisCandidate(
                            key=key,
                            variant=variant,
                            original=self._original_text(entry, variant, catalog.source_language),
                            translation=unit.value,
                            context=entry.comment,
                        )
                    )
            if found:
                candidates[language] = found

        return candidates

    def analyze(
        self,
        catalog: XCStringsFile,
        languages: Iterable[str],
        keys: Optional[Iterable[str]] = None,
    ) -> List[Suggestion]:
        """Run every candidate batch through the provider and gather suggestions."""
        candidates = self.collect_candidates(catalog, languages, keys)
        self.state = WorkflowState.ANALYZING
        suggestions: List[Suggestion] = []

        for language, items in candidates.items():
            batches = chunked(items, self.batch_size)
            self.console.print(
                f"[cyan]Analyzing {len(items)} {language} translations "
                f"({len(batches)} batches)...[/cyan]"
            )
            for index, batch in enumerate(batches, start=1):
                try:
                    found = self.provider.analyze_batch(batch, language)
                except Exception as e:
                    self.console.print(
                        f"  [red]✗ Analysis batch {index}/{len(batches)} ({language}) failed:[/red] "
                        f"{escape(str(e))}"
                    )
                    self.errors += 1
                    continue
                suggestions.extend(found)

        return suggestions

    def review(
        self,
        catalog: XCStringsFile,
        suggestions: List[Suggestion],
        decisions: DecisionSource,
    ) -> ReviewOutcome:
        """Present suggestions in order and apply the accepted ones."""
        outcome = ReviewOutcome(total=len(suggestions), errors=self.errors)

        for position, suggestion in enumerate(suggestions, start=1):
            self.state = WorkflowState.PRESENTING
            self._present(suggestion, position, len(suggestions))

            decision = decisions.decide(suggestion)
            if decision is Decision.QUIT:
                self.state = WorkflowState.STOPPED
                outcome.stopped = True
                outcome.unreviewed = len(suggestions) - position + 1
                self.console.print("[yellow]Stopped; remaining suggestions left unreviewed[/yellow]")
                return outcome

            if decision is Decision.ACCEPT:
                if not self._apply(catalog, suggestion):
                    self.console.print(
                        f"  [red]✗ Key not in catalog, not applied:[/red] {escape(suggestion.key)}"
                    )
                    outcome.errors += 1
                    continue
                self.state = WorkflowState.ACCEPTED
                outcome.accepted += 1
                self.console.print("  [green]✓ Accepted[/green]")
            else:
                self.state = WorkflowState.REJECTED
                outcome.rejected += 1
                self.console.print("  [dim]Skipped[/dim]")

        self.state = WorkflowState.DONE
        return outcome

    def run(
        self,
        catalog: XCStringsFile,
        decisions: DecisionSource,
        languages: Optional[Iterable[str]] = None,
        keys: Optional[Iterable[str]] = None,
        project_languages: Optional[Iterable[str]] = None,
    ) -> ReviewOutcome:
        """Collect, analyze and review; the catalog is modified in place."""
        self.state = WorkflowState.IDLE
        self.errors = 0

        try:
            targets = languages_to_translate(
                catalog,
                requested=list(languages) if languages else None,
                project_languages=project_languages,
            )
        except NoTargetLanguagesError as e:
            self.console.print(f"[red]Error:[/red] {escape(str(e))}")
            self.state = WorkflowState.DONE
            return ReviewOutcome(errors=1)

        suggestions = self.analyze(catalog, targets, keys)
        if not suggestions:
            self.console.print("[green]No improvements suggested.[/green]")
            self.state = WorkflowState.DONE
            return ReviewOutcome(errors=self.errors)

        self.console.print(f"\n[bold]{len(suggestions)} suggestions to review[/bold]\n")
        return self.review(catalog, suggestions, decisions)

    def run_file(
        self,
        input_path: str,
        decisions: DecisionSource,
        output_path: Optional[str] = None,
        languages: Optional[Iterable[str]] = None,
        keys: Optional[Iterable[str]] = None,
        dry_run: bool = False,
        project_languages: Optional[Iterable[str]] = None,
    ) -> ReviewOutcome:
        """
        Run the workflow on a file, saving only if a suggestion was accepted.

        Raises:
            CatalogDecodeError: If the input is not a valid catalog
            OSError: If the output cannot be written
        """
        self.console.print(f"[blue]Loading:[/blue] {input_path}")
        catalog = self.parser.parse(input_path)

        outcome = self.run(
            catalog,
            decisions,
            languages=languages,
            keys=keys,
            project_languages=project_languages,
        )

        if outcome.changed and not dry_run:
            output = output_path or input_path
            self.console.print(f"\n[blue]Saving {outcome.accepted} accepted changes to:[/blue] {output}")
            self.writer.write(catalog, output)
        elif outcome.changed:
            self.console.print("\n[yellow]Dry run - accepted changes not saved[/yellow]")

        return outcome

    def _present(self, suggestion: Suggestion, position: int, total: int) -> None:
        where = escape(suggestion.key)
        if suggestion.variant is not None:
            where += f" [dim]({suggestion.variant})[/dim]"
        body = (
            f"[bold]Key:[/bold] {where}\n"
            f"[bold]Language:[/bold] {suggestion.language}\n"
            f"[red]- {escape(suggestion.current_translation)}[/red]\n"
            f"[green]+ {escape(suggestion.suggested_translation)}[/green]\n"
            f"[bold]Confidence:[/bold] {suggestion.confidence}/5\n"
            f"[dim]{escape(suggestion.reasoning)}[/dim]"
        )
        self.console.print(Panel(body, title=f"Suggestion {position}/{total}"))

    def _apply(self, catalog: XCStringsFile, suggestion: Suggestion) -> bool:
        entry = catalog.strings.get(suggestion.key)
        if entry is None:
            return False
        entry.set_unit(suggestion.language, suggestion.suggested_translation, suggestion.variant)
        return True

    @staticmethod
    def _original_text(entry: StringEntry, variant: Optional[VariantRef], source_language: str) -> str:
        """Source text matching a unit: same variant, else default unit, else the key."""
        loc = entry.localization(source_language)
        if loc is not None:
            unit = loc.unit(variant)
            if unit is not None and unit.value:
                return unit.value
        return entry.get_source_value(source_language)
