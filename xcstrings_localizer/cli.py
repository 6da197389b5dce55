"""Command-line interface for the xcstrings localizer."""

import os
import click
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .extraction.project import find_xcstrings_files, project_languages
from .extraction.xcstrings_parser import CatalogDecodeError, XCStringsParser
from .extraction.xcstrings_writer import CatalogWriteError
from .suggestions.workflow import ConfidenceDecisions, PromptDecisions, SuggestionWorkflow
from .translation.clients.openai_client import OpenAIClient
from .translation.localizer import Localizer
from .translation.stats import TranslationStats
from .config import config

console = Console(stderr=True)

RULE = "═" * 59


class DefaultCommandGroup(click.Group):
    """Group that runs `default_command` when no subcommand is named."""

    def __init__(self, *args, default_command: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.default_command = default_command

    def parse_args(self, ctx, args):
        if self.default_command and (
            not args or (args[0] not in self.commands and args[0] not in ("--help", "--version"))
        ):
            args.insert(0, self.default_command)
        return super().parse_args(ctx, args)


@click.group(cls=DefaultCommandGroup, default_command="localize")
@click.version_option(version=__version__)
def cli():
    """Localize Xcode .xcstrings files using AI translation.

    Translates every string to all target languages of the catalog,
    respecting shouldTranslate flags, comments and existing translations.
    """
    pass


@cli.command()
@click.argument("input_files", nargs=-1, type=click.Path())
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(),
    help="Output file path (defaults to input file)"
)
@click.option(
    "--keys", "-k",
    multiple=True,
    help="Specific keys to translate (can be specified multiple times)"
)
@click.option(
    "--language", "-l",
    "languages",
    multiple=True,
    help="Specific languages to process (can be specified multiple times)"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Force re-translation of already translated strings"
)
@click.option(
    "--dry-run", "-d",
    is_flag=True,
    help="Preview what would be translated without making changes"
)
@click.option(
    "--suggest", "-s",
    is_flag=True,
    help="Analyze existing translations and suggest improvements (interactive)"
)
@click.option(
    "--auto-accept",
    type=click.IntRange(1, 5),
    default=None,
    help="With --suggest, accept suggestions of at least this confidence without asking"
)
@click.option(
    "--model", "-m",
    default=None,
    help=f"OpenAI model to use (default: {config.openai_model})"
)
@click.option(
    "--api-key",
    default=None,
    help="OpenAI API key (or set OPENAI_API_KEY)"
)
@click.option(
    "--batch-size",
    type=click.IntRange(min=1),
    default=None,
    help=f"Strings per request (default: {config.batch_size})"
)
@click.pass_context
def localize(
    ctx: click.Context,
    input_files: Tuple[str, ...],
    output_path: Optional[str],
    keys: Tuple[str, ...],
    languages: Tuple[str, ...],
    force: bool,
    dry_run: bool,
    suggest: bool,
    auto_accept: Optional[int],
    model: Optional[str],
    api_key: Optional[str],
    batch_size: Optional[int],
):
    """Translate .xcstrings files (default command)."""
    settings = replace(
        config,
        openai_api_key=api_key or config.openai_api_key,
        openai_model=model or config.openai_model,
        batch_size=batch_size or config.batch_size,
    )
    errors = settings.validate()
    if errors:
        console.print("[red]Configuration errors:[/red]")
        for error in errors:
            console.print(f"  - {error}")
        if not settings.openai_api_key:
            console.print("\nSet the API key using one of these methods:")
            console.print("  1. Create a .env file: echo \"OPENAI_API_KEY='your-key'\" > .env")
            console.print("  2. Environment variable: export OPENAI_API_KEY='your-key'")
            console.print("  3. Command line flag: --api-key 'your-key'")
        ctx.exit(1)

    files = _resolve_input_files(ctx, input_files)

    if settings.app_description:
        console.print(f"[blue]Using app context:[/blue] {escape(settings.app_description[:60])}...")

    provider = OpenAIClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        app_description=settings.app_description,
        min_confidence=settings.suggestion_min_confidence,
    )
    size = settings.batch_size
    declared = project_languages(os.getcwd())
    localizer = Localizer(provider, batch_size=size, console=console)
    workflow = SuggestionWorkflow(provider, batch_size=size, console=console)
    decisions = ConfidenceDecisions(auto_accept) if auto_accept else PromptDecisions()

    total_errors = 0
    for index, input_file in enumerate(files, start=1):
        if len(files) > 1:
            console.print(f"\n{RULE}\nProcessing file {index}/{len(files)}\n{RULE}")

        try:
            if suggest:
                outcome = workflow.run_file(
                    input_file,
                    decisions,
                    output_path=output_path,
                    languages=languages or None,
                    keys=keys or None,
                    dry_run=dry_run,
                    project_languages=declared,
                )
                console.print(
                    f"\n[bold]Accepted:[/bold] {outcome.accepted}  "
                    f"[bold]Rejected:[/bold] {outcome.rejected}  "
                    f"[bold]Unreviewed:[/bold] {outcome.unreviewed}"
                )
                total_errors += outcome.errors
            else:
                run_stats = localizer.localize_file(
                    input_file,
                    output_path=output_path,
                    keys=keys or None,
                    languages=languages or None,
                    force=force,
                    dry_run=dry_run,
                    project_languages=declared,
                )
                _print_stats(run_stats)
                total_errors += run_stats.errors
        except CatalogWriteError as e:
            # Translated work would be lost; stop instead of moving on
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            ctx.exit(1)
        except CatalogDecodeError as e:
            console.print(f"[red]Error: Invalid JSON in file {escape(input_file)}[/red]")
            console.print(escape(str(e)))
            total_errors += 1
        except OSError as e:
            console.print(f"[red]Error processing {escape(input_file)}:[/red] {escape(str(e))}")
            total_errors += 1

    if len(files) > 1:
        console.print(f"\n{RULE}\nAll .xcstrings files processed!\n{RULE}")

    if total_errors:
        console.print(f"\n[red]✗ Localization finished with {total_errors} error(s)[/red]")
        ctx.exit(1)

    console.print("\n[green]✓ Localization complete![/green]")


@cli.command()
@click.argument("input_path", type=click.Path(exists=True))
def stats(input_path: str):
    """Show translation coverage for an .xcstrings file."""
    parser = XCStringsParser()
    try:
        xcstrings = parser.parse(input_path)
    except CatalogDecodeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.exceptions.Exit(1)

    table = Table(title=f"Statistics for {Path(input_path).name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    translatable = [e for e in xcstrings.strings.values() if e.should_translate is not False]
    table.add_row("Total strings", str(len(xcstrings.strings)))
    table.add_row("Source language", xcstrings.source_language)
    table.add_row("Translatable strings", str(len(translatable)))

    languages = sorted(xcstrings.declared_languages() - {xcstrings.source_language})
    table.add_row("Languages", ", ".join(languages) or "None")

    for lang in languages:
        translated = sum(1 for entry in translatable if entry.has_translation(lang))
        coverage = (translated / len(translatable)) * 100 if translatable else 0
        table.add_row(f"  {lang} coverage", f"{translated}/{len(translatable)} ({coverage:.1f}%)")

    Console().print(table)


def _resolve_input_files(ctx: click.Context, input_files: Tuple[str, ...]) -> list:
    """Explicit files are validated; without any, the working tree is searched."""
    if not input_files:
        discovered = find_xcstrings_files(os.getcwd())
        if not discovered:
            console.print("[red]Error: No .xcstrings files found in current directory or subdirectories[/red]")
            ctx.exit(1)
        console.print(f"[green]Found {len(discovered)} .xcstrings file(s):[/green]")
        for file in discovered:
            console.print(f"  • {escape(file)}")
        return discovered

    for file in input_files:
        if not os.path.isfile(file):
            console.print(f"[red]Error: File not found: {escape(file)}[/red]")
            ctx.exit(1)
        if not file.endswith(".xcstrings"):
            console.print(f"[yellow]Warning: {escape(file)} doesn't have .xcstrings extension[/yellow]")
    return list(input_files)


def _print_stats(stats: TranslationStats):
    """Print translation statistics."""
    table = Table(title="Translation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")

    for label, count in stats.rows():
        style = "red" if label == "Errors" and count else None
        table.add_row(label, str(count), style=style)

    console.print(table)


def main():
    cli()


if __name__ == "__main__":
    main()
