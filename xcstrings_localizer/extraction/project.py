"""Discovery of catalog files and Xcode project languages on disk."""

import re
from pathlib import Path
from typing import List, Optional

# Directory suffixes Finder treats as packages; their contents are not searched.
PACKAGE_SUFFIXES = (".xcodeproj", ".xcworkspace", ".xcassets", ".bundle", ".app", ".framework")

KNOWN_REGIONS_PATTERN = re.compile(r"knownRegions\s*=\s*\(\s*([^)]+?)\s*\);", re.DOTALL)


def find_xcstrings_files(directory: str = ".") -> List[str]:
    """Find all .xcstrings files below a directory, sorted by path."""
    found = []
    root = Path(directory)

    for path in root.rglob("*.xcstrings"):
        relative = path.relative_to(root).parts
        if any(part.startswith(".") for part in relative):
            continue
        if any(part.endswith(PACKAGE_SUFFIXES) for part in relative[:-1]):
            continue
        if path.is_file():
            found.append(str(path))

    return sorted(found)


def find_xcode_project(start: str = ".", levels: int = 3) -> Optional[Path]:
    """Find the first .xcodeproj in a directory or up to `levels` parents."""
    current = Path(start).resolve()

    for _ in range(levels):
        projects = sorted(p for p in current.iterdir() if p.suffix == ".xcodeproj")
        if projects:
            return projects[0]
        if current.parent == current:
            break
        current = current.parent

    return None


def extract_known_regions(project_path: Path) -> Optional[List[str]]:
    """
    Extract knownRegions from an Xcode project's project.pbxproj file.

    `Base` and `en` are dropped; `en` is assumed to be the source language.
    """
    pbxproj = Path(project_path) / "project.pbxproj"
    try:
        content = pbxproj.read_text(encoding="utf-8")
    except OSError:
        return None

    match = KNOWN_REGIONS_PATTERN.search(content)
    if not match:
        return None

    languages = []
    for raw in re.split(r"[,\n\r]", match.group(1)):
        code = raw.strip().strip('"')
        if code and code not in ("Base", "en"):
            languages.append(code)

    return languages or None


def project_languages(start: str = ".") -> Optional[List[str]]:
    """Target languages declared by the nearest Xcode project, if any."""
    project = find_xcode_project(start)
    if project is None:
        return None
    return extract_known_regions(project)
