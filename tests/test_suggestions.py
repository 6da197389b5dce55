"""Tests for the suggestion review workflow."""

import pytest

from conftest import FakeProvider, unit
from xcstrings_localizer.extraction import XCStringsParser, XCStringsWriter
from xcstrings_localizer.models import Suggestion, VariantRef
from xcstrings_localizer.suggestions import (
    ConfidenceDecisions,
    Decision,
    ScriptedDecisions,
    SuggestionWorkflow,
    WorkflowState,
)


def suggestion(key, language="fr", current="", suggested="", confidence=5, variant=None):
    return Suggestion(
        key=key,
        variant=variant,
        language=language,
        current_translation=current,
        suggested_translation=suggested,
        confidence=confidence,
        reasoning="Sounds more natural",
    )


@pytest.fixture
def catalog(make_catalog):
    return make_catalog({
        "welcome": {
            "comment": "Home screen",
            "localizations": {"en": unit("Welcome"), "fr": unit("Bienvenu"), "de": unit("Willkommen")},
        },
        "draft": {"localizations": {"en": unit("Draft"), "fr": unit("Brouillon", state="needs_review")}},
        "empty": {"localizations": {"en": unit("Empty"), "fr": unit("", state="new")}},
        "%lld files": {
            "localizations": {
                "en": {"variations": {"plural": {"one": unit("%lld file"), "other": unit("%lld files")}}},
                "fr": {"variations": {"plural": {"one": unit("%lld fichier"), "other": unit("%lld fichier")}}},
            }
        },
        "hidden": {"shouldTranslate": False, "localizations": {"fr": unit("caché")}},
    })


@pytest.fixture
def fr_suggestions():
    return {
        "fr": [
            suggestion("welcome", current="Bienvenu", suggested="Bienvenue"),
            suggestion(
                "%lld files",
                current="%lld fichier",
                suggested="%lld fichiers",
                variant=VariantRef("plural", "other"),
            ),
        ]
    }


def test_collects_every_existing_unit(catalog, console):
    workflow = SuggestionWorkflow(FakeProvider(), console=console)

    candidates = workflow.collect_candidates(catalog, ["fr"])

    found = [(c.key, c.variant, c.original, c.translation) for c in candidates["fr"]]
    assert found == [
        ("welcome", None, "Welcome", "Bienvenu"),
        ("draft", None, "Draft", "Brouillon"),
        ("%lld files", VariantRef("plural", "one"), "%lld file", "%lld fichier"),
        ("%lld files", VariantRef("plural", "other"), "%lld files", "%lld fichier"),
    ]
    assert candidates["fr"][0].context == "Home screen"


def test_analysis_batches_per_language(catalog, console):
    provider = FakeProvider()
    workflow = SuggestionWorkflow(provider, batch_size=3, console=console)

    workflow.analyze(catalog, ["de", "fr"])

    assert [(len(items), lang) for items, lang in provider.analysis_calls] == [(1, "de"), (3, "fr"), (1, "fr")]
    assert workflow.state is WorkflowState.ANALYZING


def test_rejected_suggestion_leaves_catalog_and_file_unchanged(tmp_path, catalog, console):
    path = tmp_path / "Localizable.xcstrings"
    XCStringsWriter().write(catalog, str(path))
    original = path.read_bytes()
    provider = FakeProvider(suggestions={"fr": [suggestion("welcome", current="Bienvenu", suggested="Bienvenue")]})
    workflow = SuggestionWorkflow(provider, console=console)

    outcome = workflow.run_file(str(path), ScriptedDecisions(["n"]), languages=["fr"])

    assert (outcome.accepted, outcome.rejected) == (0, 1)
    assert not outcome.changed
    assert path.read_bytes() == original
    assert workflow.state is WorkflowState.DONE


def test_accepted_suggestions_are_applied_and_saved(tmp_path, catalog, console, fr_suggestions):
    path = tmp_path / "Localizable.xcstrings"
    XCStringsWriter().write(catalog, str(path))
    workflow = SuggestionWorkflow(FakeProvider(suggestions=fr_suggestions), console=console)

    outcome = workflow.run_file(str(path), ScriptedDecisions([Decision.ACCEPT, Decision.ACCEPT]))

    assert outcome.accepted == 2
    saved = XCStringsParser().parse(str(path))
    assert saved.strings["welcome"].localizations["fr"].string_unit.value == "Bienvenue"
    fr = saved.strings["%lld files"].localizations["fr"]
    assert fr.unit(VariantRef("plural", "other")).value == "%lld fichiers"
    assert fr.unit(VariantRef("plural", "one")).value == "%lld fichier"


def test_suggestion_for_unknown_key_is_not_accepted(tmp_path, catalog, console):
    path = tmp_path / "Localizable.xcstrings"
    XCStringsWriter().write(catalog, str(path))
    original = path.read_bytes()
    provider = FakeProvider(suggestions={"fr": [suggestion("removed", current="Ancien", suggested="Nouveau")]})
    workflow = SuggestionWorkflow(provider, console=console)

    outcome = workflow.run_file(str(path), ScriptedDecisions(["y"]), languages=["fr"])

    assert (outcome.accepted, outcome.rejected, outcome.errors) == (0, 0, 1)
    assert not outcome.changed
    assert path.read_bytes() == original
    assert "Key not in catalog, not applied: removed" in console.file.getvalue()


def test_quit_stops_review(catalog, console, fr_suggestions):
    workflow = SuggestionWorkflow(FakeProvider(suggestions=fr_suggestions), console=console)

    outcome = workflow.run(catalog, ScriptedDecisions(["q", "y"]), languages=["fr"])

    assert outcome.stopped
    assert (outcome.accepted, outcome.rejected, outcome.unreviewed) == (0, 0, 2)
    assert catalog.strings["welcome"].localizations["fr"].string_unit.value == "Bienvenu"
    assert workflow.state is WorkflowState.STOPPED


def test_exhausted_script_rejects(catalog, console, fr_suggestions):
    workflow = SuggestionWorkflow(FakeProvider(suggestions=fr_suggestions), console=console)

    outcome = workflow.run(catalog, ScriptedDecisions(["yes"]), languages=["fr"])

    assert (outcome.accepted, outcome.rejected) == (1, 1)


def test_confidence_decisions(catalog, console):
    provider = FakeProvider(suggestions={"fr": [
        suggestion("welcome", current="Bienvenu", suggested="Bienvenue", confidence=5),
        suggestion("draft", current="Brouillon", suggested="Ébauche", confidence=4),
    ]})
    workflow = SuggestionWorkflow(provider, console=console)

    outcome = workflow.run(catalog, ConfidenceDecisions(5), languages=["fr"])

    assert (outcome.accepted, outcome.rejected) == (1, 1)
    assert catalog.strings["draft"].localizations["fr"].string_unit.value == "Brouillon"


def test_failed_analysis_batch_is_counted(catalog, console, fr_suggestions):
    provider = FakeProvider(suggestions=fr_suggestions, fail_analysis={"de"})
    workflow = SuggestionWorkflow(provider, console=console)

    outcome = workflow.run(catalog, ScriptedDecisions([]))

    assert outcome.errors == 1
    assert outcome.total == 2
    assert "malformed response" in console.file.getvalue()


def test_no_suggestions_means_no_write(tmp_path, catalog, console):
    path = tmp_path / "Localizable.xcstrings"
    XCStringsWriter().write(catalog, str(path))
    original = path.read_bytes()

    outcome = SuggestionWorkflow(FakeProvider(), console=console).run_file(str(path), ScriptedDecisions([]))

    assert outcome.total == 0
    assert path.read_bytes() == original


@pytest.mark.parametrize(
    "answer,expected",
    [("y", Decision.ACCEPT), ("Yes", Decision.ACCEPT), ("q", Decision.QUIT), ("n", Decision.REJECT),
     ("", Decision.REJECT), ("maybe", Decision.REJECT), (None, Decision.REJECT)],
)
def test_decision_parsing(answer, expected):
    assert Decision.parse(answer) is expected
