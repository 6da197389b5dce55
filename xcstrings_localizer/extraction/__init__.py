"""String extraction and file handling modules."""

from .xcstrings_parser import CatalogDecodeError, XCStringsParser
from .xcstrings_writer import CatalogWriteError, XCStringsWriter

__all__ = ["CatalogDecodeError", "CatalogWriteError", "XCStringsParser", "XCStringsWriter"]
