"""OpenAI client for translation and translation review."""

import json
from typing import Any, Dict, List, Optional
from openai import OpenAI, OpenAIError

from ...config import config
from ...models.work import AnalysisCandidate, BatchItem, Suggestion, WorkItemId
from .base import ProviderError, TranslationProvider


class OpenAIClient(TranslationProvider):
    """Client for OpenAI chat-completion translation."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        app_description: Optional[str] = None,
        min_confidence: Optional[int] = None,
    ):
        """
        Initialize the OpenAI client.

        Args:
            api_key: OpenAI API key. If not provided, uses OPENAI_API_KEY from environment.
            model: Model name. Defaults to the configured model.
            app_description: Description of the app, included in every prompt.
            min_confidence: Lowest confidence (1-5) of suggestions to keep.
        """
        self.api_key = api_key or config.openai_api_key
        if not self.api_key:
            raise ValueError("OpenAI API key is required")
        self.client = OpenAI(api_key=self.api_key)
        self.model = model or config.openai_model
        self.temperature = config.openai_temperature
        self.app_description = app_description
        self.min_confidence = min_confidence or config.suggestion_min_confidence

    def translate(self, text: str, target_lang: str, context: Optional[str] = None) -> str:
        """
        Translate a single text.

        Args:
            text: Text to translate
            target_lang: Target language code (e.g., "de", "fr")
            context: Optional context about where/how the string is used

        Returns:
            Translated text
        """
        lang_name = config.language_name(target_lang)

        prompt = f"Translate to {lang_name}:\n{text}"
        if context:
            prompt += f"\n\n[UI Context: {context}]"

        result = self._complete(self._build_system_prompt(), prompt, json_mode=False)
        return self._clean_response(result)

    def translate_batch(
        self,
        items: Dict[WorkItemId, BatchItem],
        target_lang: str,
    ) -> Dict[WorkItemId, str]:
        """
        Translate multiple texts in a single API call using JSON format.

        Item ids are sent as positional strings so keys containing any
        character survive the round trip.

        Args:
            items: Mapping of item id to text and context
            target_lang: Target language code

        Returns:
            Mapping of item id to translation; missing ids are omitted
        """
        if not items:
            return {}

        lang_name = config.language_name(target_lang)
        ids = list(items.keys())

        batch_items = []
        for index, item_id in enumerate(ids):
            payload = {"id": str(index), "text": items[item_id].text}
            if items[item_id].context:
                payload["context"] = items[item_id].context
            batch_items.append(payload)

        user_prompt = f"Translate to {lang_name}:\n\n" + json.dumps(
            {"translations": batch_items}, indent=2, ensure_ascii=False
        )
        response = self._complete(self._build_batch_system_prompt(), user_prompt, json_mode=True)
        parsed = self._parse_json_list(response, "translations")

        results: Dict[WorkItemId, str] = {}
        for entry in parsed:
            if not isinstance(entry, dict):
                continue
            try:
                index = int(entry.get("id"))
            except (TypeError, ValueError):
                continue
            translation = entry.get("translation")
            if 0 <= index < len(ids) and isinstance(translation, str) and translation:
                results[ids[index]] = translation
        return results

    def analyze_batch(
        self,
        candidates: List[AnalysisCandidate],
        target_lang: str,
    ) -> List[Suggestion]:
        """
        Review existing translations and return high-confidence improvements.

        Args:
            candidates: Existing translations with their source text
            target_lang: Language of the translations

        Returns:
            Suggestions with confidence at or above `min_confidence`
        """
        if not candidates:
            return []

        lang_name = config.language_name(target_lang)
        request_items = []
        for index, candidate in enumerate(candidates):
            payload = {
                "id": str(index),
                "original": candidate.original,
                "translation": candidate.translation,
            }
            if candidate.context:
                payload["context"] = candidate.context
            request_items.append(payload)

        user_prompt = f"Review these {lang_name} translations:\n\n" + json.dumps(
            {"items": request_items}, indent=2, ensure_ascii=False
        )
        response = self._complete(
            self._build_review_system_prompt(lang_name), user_prompt, json_mode=True
        )
        parsed = self._parse_json_list(response, "suggestions")

        suggestions = []
        for entry in parsed:
            if not isinstance(entry, dict):
                continue
            try:
                candidate = candidates[int(entry.get("id"))]
                confidence = int(entry.get("confidence", 0))
            except (TypeError, ValueError, IndexError):
                continue
            suggested = entry.get("suggestion")
            if not isinstance(suggested, str) or not suggested or suggested == candidate.translation:
                continue
            if confidence < self.min_confidence:
                continue
            suggestions.append(
                Suggestion(
                    key=candidate.key,
                    variant=candidate.variant,
                    language=target_lang,
                    current_translation=candidate.translation,
                    suggested_translation=suggested,
                    confidence=min(confidence, 5),
                    reasoning=str(entry.get("reasoning", "")),
                )
            )
        return suggestions

    def _complete(self, system_prompt: str, user_prompt: str, json_mode: bool) -> str:
        """Run one chat completion and return the message text."""
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_completion_tokens": config.openai_batch_max_tokens,
        }
        # Reasoning models only accept the default temperature
        if not self.model.startswith(("gpt-5", "o1", "o3", "o4")):
            kwargs["temperature"] = self.temperature
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise ProviderError(f"OpenAI request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ProviderError("OpenAI returned an empty response")
        return content.strip()

    def _app_line(self) -> str:
        if self.app_description:
            return f"\n\nAPP CONTEXT: {self.app_description}"
        return ""

    def _build_system_prompt(self) -> str:
        """Build the system prompt for single-string translation."""
        return f"""You are an expert iOS app translator.

CRITICAL RULES - FOLLOW EXACTLY:
1. Preserve ALL iOS format specifiers EXACTLY as they appear (%@, %d, %lld, %.2f, %1$@, %%).
2. Positional placeholders may be reordered but MUST keep their numbers.
3. Keep translations concise - mobile UI has limited space.
4. Preserve emojis, leading/trailing whitespace and newlines.
5. Respond with ONLY the translated text: no quotes, no notes, no prefix.{self._app_line()}"""

    def _build_batch_system_prompt(self) -> str:
        """Build system prompt for batch JSON translation."""
        return f"""You are an expert iOS app translator.

You will receive a JSON object with a "translations" array. Each item has "id", "text"
and optionally "context" describing where the string appears.
Return a JSON object with a "translations" array. Each item must have "id" and "translation".

CRITICAL RULES:
1. Return ONLY valid JSON - no explanations, no markdown
2. Preserve ALL iOS format specifiers exactly: %@, %d, %ld, %lld, %f, %.2f, %%, %1$@, %2$lld
3. Positional specifiers (%1$@, %2$@) may be reordered but MUST use the same numbers
4. Keep translations concise for mobile UI
5. Preserve emojis and whitespace exactly
6. Use the context only to choose wording; never translate it{self._app_line()}"""

    def _build_review_system_prompt(self, lang_name: str) -> str:
        """Build the system prompt for reviewing existing translations."""
        return f"""You are an expert translator reviewing {lang_name} translations in an iOS app.

You will receive a JSON object with an "items" array. Each item has "id", "original",
"translation" and optionally "context".
Only propose a change when the translation is wrong, unnatural, inconsistent or too long
for a mobile UI. Ignore purely stylistic preferences.

Return a JSON object with a "suggestions" array (empty if nothing should change). Each item:
{{"id": "<id>", "suggestion": "<improved translation>", "confidence": <1-5>, "reasoning": "<one sentence>"}}

Confidence: 5 = clear error, 4 = clearly better, 3 or lower = marginal.
iOS format specifiers (%@, %d, %1$@, ...) MUST be preserved.{self._app_line()}"""

    def _parse_json_list(self, response: str, member: str) -> List[Any]:
        """Parse a JSON response holding a list, either bare or under `member`."""
        try:
            data = json.loads(response)
        except json.JSONDecodeError as e:
            raise ProviderError(f"Failed to parse response: {e}") from e

        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get(member), list):
            return data[member]
        raise ProviderError(f"Unexpected JSON structure: expected '{member}' array")

    def _clean_response(self, response: str) -> str:
        """Clean up common GPT formatting issues."""
        # Remove surrounding quotes if present
        if len(response) >= 2 and (
            (response.startswith('"') and response.endswith('"'))
            or (response.startswith("'") and response.endswith("'"))
        ):
            response = response[1:-1]

        for prefix in ("Translation:", "Translated:", "Here is the translation:"):
            if response.lower().startswith(prefix.lower()):
                response = response[len(prefix):].strip()

        return response
