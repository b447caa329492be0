# tests/unit/test_ignore_filter.py
from pathlib import Path

import pytest

from dupekeeper.domain.errors import ConfigurationError, NonUtf8NameError
from dupekeeper.services.ignore_filter import IgnoreFilter


def test_from_file_skips_comments_and_blank_lines(tmp_path: Path):
    patterns = tmp_path / "ignore.txt"
    patterns.write_text("# comment\n\nThumbs\\.db\n   \n^desktop\\.ini$\n", encoding="utf-8")

    f = IgnoreFilter.from_file(patterns)

    assert f.patterns == ("Thumbs\\.db", "^desktop\\.ini$")
    assert len(f) == 2


def test_matches_base_name_only():
    f = IgnoreFilter.from_patterns(["Thumbs\\.db"])

    assert f.matches(Path("/photos/2020/Thumbs.db"))
    assert not f.matches(Path("/photos/2020/thumbsdb.txt"))
    # directory components never take part
    assert not f.matches(Path("/Thumbs.db/holiday.jpg"))


def test_patterns_are_searched_not_anchored():
    f = IgnoreFilter.from_patterns(["\\.tmp"])
    assert f.matches("report.tmp")
    assert f.matches("report.tmp.bak")
    assert not f.matches("report.txt")


def test_empty_filter_matches_nothing():
    assert not IgnoreFilter().matches("anything.txt")


def test_default_patterns_cover_os_clutter():
    f = IgnoreFilter.default()
    for name in ("desktop.ini", "Thumbs.db", ".DS_Store"):
        assert f.matches(Path("/x") / name)
    assert not f.matches("/x/my.DS_Store.txt")


def test_shipped_ignore_file_loads():
    shipped = Path(__file__).resolve().parents[2] / "dedup_ignore.txt"
    f = IgnoreFilter.from_file(shipped)
    assert f.matches("Thumbs.db")
    assert f.matches(".DS_Store")
    assert not f.matches("photo.jpg")


def test_non_utf8_name_cannot_be_decided():
    f = IgnoreFilter.from_patterns([".*"])
    with pytest.raises(NonUtf8NameError):
        f.matches(Path("/data/bad\udcff.txt"))


def test_path_without_name_cannot_be_decided():
    with pytest.raises(NonUtf8NameError):
        IgnoreFilter().matches(Path("/"))


def test_missing_pattern_file_is_configuration_error(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        IgnoreFilter.from_file(tmp_path / "nope.txt")


def test_invalid_regex_is_configuration_error(tmp_path: Path):
    patterns = tmp_path / "ignore.txt"
    patterns.write_text("ok\\.txt\n([unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="unclosed"):
        IgnoreFilter.from_file(patterns)
