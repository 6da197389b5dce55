"""Shared fixtures for the localizer tests."""

import io
import json

import pytest
from rich.console import Console

from xcstrings_localizer.extraction.xcstrings_parser import XCStringsParser
from xcstrings_localizer.translation.clients.base import ProviderError, TranslationProvider


class FakeProvider(TranslationProvider):
    """
    Deterministic in-memory provider.

    Translations are `<lang>:<text>` unless overridden. Batch calls listed
    in `fail_calls` (1-based) raise, keys in `omit` are left out of the
    response, and `suggestions` maps a language to the suggestions its
    analysis returns.
    """

    def __init__(self, translations=None, fail_calls=(), omit=(), suggestions=None, fail_analysis=()):
        self.translations = translations or {}
        self.fail_calls = set(fail_calls)
        self.omit = set(omit)
        self.suggestions = suggestions or {}
        self.fail_analysis = set(fail_analysis)
        self.batch_calls = []
        self.single_calls = []
        self.analysis_calls = []

    def _render(self, text, target_lang):
        return self.translations.get((text, target_lang), f"{target_lang}:{text}")

    def translate(self, text, target_lang, context=None):
        self.single_calls.append((text, target_lang, context))
        return self._render(text, target_lang)

    def translate_batch(self, items, target_lang):
        self.batch_calls.append((dict(items), target_lang))
        if len(self.batch_calls) in self.fail_calls:
            raise ProviderError("rate limit exceeded")
        return {
            item_id: self._render(item.text, target_lang)
            for item_id, item in items.items()
            if item_id.key not in self.omit
        }

    def analyze_batch(self, candidates, target_lang):
        self.analysis_calls.append((list(candidates), target_lang))
        if target_lang in self.fail_analysis:
            raise ProviderError("malformed response")
        keys = {c.key for c in candidates}
        return [s for s in self.suggestions.get(target_lang, []) if s.key in keys]


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def make_catalog():
    """Build an XCStringsFile from a plain `strings` mapping."""

    def _make(strings, source_language="en"):
        content = json.dumps({"sourceLanguage": source_language, "strings": strings, "version": "1.0"})
        return XCStringsParser().parse_string(content)

    return _make


def unit(value, state="translated"):
    return {"stringUnit": {"state": state, "value": value}}


def plural(state="translated", **forms):
    return {"variations": {"plural": {form: unit(value, state) for form, value in forms.items()}}}


@pytest.fixture
def sample_strings():
    return {
        "welcome": {
            "comment": "Greeting on the home screen",
            "localizations": {"en": unit("Welcome"), "fr": unit("Bienvenue")},
        },
        "goodbye": {
            "localizations": {"en": unit("Goodbye"), "de": unit("Auf Wiedersehen")},
        },
        "%lld items": {
            "localizations": {
                "en": plural(one="%lld item", other="%lld items"),
                "fr": {"variations": {"plural": {"other": unit("%lld éléments")}}},
            },
        },
        "CFBundleName": {"shouldTranslate": False},
    }
