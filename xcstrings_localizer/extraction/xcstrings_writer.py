"""Writer for Apple's .xcstrings JSON format (Xcode 15+)."""

import json
import os
import tempfile
from typing import Dict, Any
from pathlib import Path

from ..models.string_entry import XCStringsFile, StringEntry, Localization


class CatalogWriteError(OSError):
    """Raised when a catalog cannot be written to disk."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Failed to write {path}: {cause}")
        self.path = path


class XCStringsWriter:
    """Writer for .xcstrings files."""

    # Xcode writes `"key" : value`; matching it keeps diffs minimal.
    SEPARATORS = (",", " : ")

    def write(self, xcstrings: XCStringsFile, output_path: str) -> None:
        """
        Write an XCStringsFile to disk.

        The file is written to a temporary sibling first and moved into
        place, so a failed write never leaves a truncated catalog behind.

        Args:
            xcstrings: The XCStringsFile to write
            output_path: Path to write the file to

        Raises:
            CatalogWriteError: If the file cannot be written
        """
        content = self.to_string(xcstrings)

        path = Path(output_path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        except OSError as e:
            raise CatalogWriteError(str(path), e) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp_path, path.stat().st_mode & 0o777 if path.exists() else 0o644)
            os.replace(tmp_path, path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise CatalogWriteError(str(path), e) from e

    def to_string(self, xcstrings: XCStringsFile) -> str:
        """
        Convert an XCStringsFile to a JSON string.

        Args:
            xcstrings: The XCStringsFile to convert

        Returns:
            JSON string representation with sorted keys and trailing newline
        """
        data = self._to_dict(xcstrings)
        text = json.dumps(
            data,
            indent=2,
            ensure_ascii=False,
            sort_keys=True,
            separators=self.SEPARATORS,
        )
        return text + "\n"

    def _to_dict(self, xcstrings: XCStringsFile) -> Dict[str, Any]:
        """Convert XCStringsFile to dictionary for JSON serialization."""
        return {
            "sourceLanguage": xcstrings.source_language,
            "strings": {key: self._entry_to_dict(entry) for key, entry in xcstrings.strings.items()},
            "version": xcstrings.version,
        }

    def _entry_to_dict(self, entry: StringEntry) -> Dict[str, Any]:
        """Convert a StringEntry to dictionary."""
        entry_dict: Dict[str, Any] = dict(entry.extra)

        if entry.comment is not None:
            entry_dict["comment"] = entry.comment

        if entry.extraction_state is not None:
            entry_dict["extractionState"] = entry.extraction_state

        if entry.should_translate is not None:
            entry_dict["shouldTranslate"] = entry.should_translate

        if entry.localizations:
            # Empty localizations are kept; they differ from absent ones
            entry_dict["localizations"] = {
                lang: self._localization_to_dict(loc) for lang, loc in entry.localizations.items()
            }

        return entry_dict

    def _localization_to_dict(self, loc: Localization) -> Dict[str, Any]:
        """Convert a Localization to dictionary."""
        loc_dict: Dict[str, Any] = dict(loc.extra)

        if loc.string_unit is not None:
            loc_dict["stringUnit"] = {
                "state": loc.string_unit.state,
                "value": loc.string_unit.value,
            }

        if loc.variations is not None:
            loc_dict["variations"] = {
                kind: {
                    selector: self._localization_to_dict(nested)
                    for selector, nested in selectors.items()
                }
                for kind, selectors in loc.variations.items()
            }

        return loc_dict
