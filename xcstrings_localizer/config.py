"""Configuration management for the localizer."""

import os
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

# Current directory first, then its parent; values already in the environment win.
load_dotenv(os.path.join(os.getcwd(), ".env"))
load_dotenv(os.path.join(os.getcwd(), "..", ".env"))

DEFAULT_MODEL = "gpt-5-mini"


def _optional_env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass
class Config:
    """Application configuration."""

    # API Keys
    openai_api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))

    # Describes the app to the model; shared by every request of a run
    app_description: Optional[str] = field(
        default_factory=lambda: _optional_env("APP_DESCRIPTION")
    )

    # OpenAI model settings
    openai_model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", DEFAULT_MODEL))
    openai_temperature: float = 0.3
    openai_batch_max_tokens: int = 4000

    # Batch translation settings
    batch_size: int = field(
        default_factory=lambda: int(os.getenv("LOCALIZER_BATCH_SIZE", "15"))
    )

    # Suggestions below this confidence (1-5) are not returned by the provider
    suggestion_min_confidence: int = field(
        default_factory=lambda: int(os.getenv("SUGGESTION_MIN_CONFIDENCE", "4"))
    )

    # Language display names (for prompts)
    LANGUAGE_NAMES: dict = field(default_factory=lambda: {
        "ar": "Arabic",
        "de": "German",
        "en": "English",
        "es": "Spanish",
        "fr": "French",
        "it": "Italian",
        "ja": "Japanese",
        "ko": "Korean",
        "nl": "Dutch",
        "pl": "Polish",
        "pt-BR": "Brazilian Portuguese",
        "ro": "Romanian",
        "ru": "Russian",
        "sv": "Swedish",
        "tr": "Turkish",
        "uk": "Ukrainian",
        "zh-Hans": "Simplified Chinese",
        "zh-Hant": "Traditional Chinese",
    })

    def language_name(self, code: str) -> str:
        return self.LANGUAGE_NAMES.get(code, code)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.openai_api_key:
            errors.append("OPENAI_API_KEY is not set")
        if self.batch_size < 1:
            errors.append("LOCALIZER_BATCH_SIZE must be at least 1")
        if not 1 <= self.suggestion_min_confidence <= 5:
            errors.append("SUGGESTION_MIN_CONFIDENCE must be between 1 and 5")
        return errors


# Global config instance
config = Config()
