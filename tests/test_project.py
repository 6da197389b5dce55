"""Tests for catalog and project discovery."""

from xcstrings_localizer.extraction.project import (
    extract_known_regions,
    find_xcode_project,
    find_xcstrings_files,
    project_languages,
)

PBXPROJ = """
    attributes = {
        LastUpgradeCheck = 1500;
    };
    knownRegions = (
        en,
        Base,
        fr,
        "zh-Hans",
        de,
    );
    mainGroup = 1234;
"""


def make_project(root, name="App.xcodeproj", content=PBXPROJ):
    project = root / name
    project.mkdir()
    (project / "project.pbxproj").write_text(content, encoding="utf-8")
    return project


def test_find_xcstrings_files_skips_hidden_and_packages(tmp_path):
    (tmp_path / "App").mkdir()
    (tmp_path / "App" / "Localizable.xcstrings").write_text("{}")
    (tmp_path / "InfoPlist.xcstrings").write_text("{}")
    (tmp_path / ".build").mkdir()
    (tmp_path / ".build" / "Cached.xcstrings").write_text("{}")
    (tmp_path / "Assets.xcassets").mkdir()
    (tmp_path / "Assets.xcassets" / "Inner.xcstrings").write_text("{}")

    found = find_xcstrings_files(str(tmp_path))

    assert found == sorted([
        str(tmp_path / "App" / "Localizable.xcstrings"),
        str(tmp_path / "InfoPlist.xcstrings"),
    ])


def test_known_regions_drop_base_and_source(tmp_path):
    project = make_project(tmp_path)

    assert extract_known_regions(project) == ["fr", "zh-Hans", "de"]


def test_known_regions_absent(tmp_path):
    project = make_project(tmp_path, content="mainGroup = 1234;")

    assert extract_known_regions(project) is None
    assert extract_known_regions(tmp_path / "Missing.xcodeproj") is None


def test_project_found_in_parent(tmp_path):
    make_project(tmp_path)
    nested = tmp_path / "Sources" / "App"
    nested.mkdir(parents=True)

    assert find_xcode_project(str(nested)).name == "App.xcodeproj"
    assert project_languages(str(nested)) == ["fr", "zh-Hans", "de"]


def test_no_project(tmp_path):
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    assert find_xcode_project(str(nested)) is None
    assert project_languages(str(nested)) is None
