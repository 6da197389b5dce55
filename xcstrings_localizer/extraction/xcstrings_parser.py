"""Parser for Apple's .xcstrings JSON format (Xcode 15+)."""

import json
from typing import Dict, Any
from pathlib import Path

from ..models.string_entry import StringUnit, Localization, StringEntry, XCStringsFile


class CatalogDecodeError(ValueError):
    """Raised when a catalog cannot be decoded."""

    def __init__(self, message: str, path: str = "<string>"):
        super().__init__(f"{path}: {message}")
        self.path = path


# Members handled explicitly; anything else is carried in `extra`.
_ENTRY_FIELDS = {"comment", "extractionState", "shouldTranslate", "localizations"}
_LOCALIZATION_FIELDS = {"stringUnit", "variations"}


class XCStringsParser:
    """Parser for .xcstrings files."""

    def parse(self, file_path: str) -> XCStringsFile:
        """
        Parse an .xcstrings file and return a structured representation.

        Args:
            file_path: Path to the .xcstrings file

        Returns:
            XCStringsFile object containing all parsed data

        Raises:
            FileNotFoundError: If the file does not exist
            CatalogDecodeError: If the content is not a valid catalog
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        return self._decode(content, str(path))

    def parse_string(self, content: str) -> XCStringsFile:
        """
        Parse .xcstrings content from a string.

        Args:
            content: JSON string content

        Returns:
            XCStringsFile object
        """
        return self._decode(content, "<string>")

    def _decode(self, content: str, origin: str) -> XCStringsFile:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise CatalogDecodeError(f"invalid JSON ({e})", origin) from e

        if not isinstance(data, dict):
            raise CatalogDecodeError("top level must be an object", origin)
        if not isinstance(data.get("strings", {}), dict):
            raise CatalogDecodeError("'strings' must be an object", origin)

        try:
            return self._parse_data(data)
        except (AttributeError, TypeError) as e:
            raise CatalogDecodeError(f"unexpected structure ({e})", origin) from e

    def _parse_data(self, data: Dict[str, Any]) -> XCStringsFile:
        """Parse the JSON data structure into our model."""
        source_language = data.get("sourceLanguage", "en")
        version = data.get("version", "1.0")
        strings = {}

        for key, entry_data in data.get("strings", {}).items():
            strings[key] = self._parse_string_entry(key, entry_data)

        return XCStringsFile(
            source_language=source_language,
            strings=strings,
            version=version,
        )

    def _parse_string_entry(self, key: str, entry_data: Dict[str, Any]) -> StringEntry:
        """Parse a single string entry."""
        localizations = {}

        for lang, loc_data in entry_data.get("localizations", {}).items():
            localizations[lang] = self._parse_localization(loc_data)

        return StringEntry(
            key=key,
            comment=entry_data.get("comment"),
            localizations=localizations,
            extraction_state=entry_data.get("extractionState"),
            should_translate=entry_data.get("shouldTranslate"),
            extra={k: v for k, v in entry_data.items() if k not in _ENTRY_FIELDS},
        )

    def _parse_localization(self, loc_data: Dict[str, Any]) -> Localization:
        """Parse a localization entry, recursing into variations."""
        string_unit = None

        if "stringUnit" in loc_data:
            su = loc_data["stringUnit"]
            string_unit = StringUnit(
                value=su.get("value", ""),
                state=su.get("state", "new"),
            )

        variations = None
        if "variations" in loc_data:
            variations = {
                kind: {
                    selector: self._parse_localization(nested)
                    for selector, nested in selectors.items()
                }
                for kind, selectors in loc_data["variations"].items()
            }

        return Localization(
            string_unit=string_unit,
            variations=variations,
            extra={k: v for k, v in loc_data.items() if k not in _LOCALIZATION_FIELDS},
        )
