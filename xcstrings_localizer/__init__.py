"""Translate Xcode .xcstrings catalogs with OpenAI."""

__version__ = "0.1.0"
