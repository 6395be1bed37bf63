"""Tests for retemplate.paths."""

import re

import pytest

from retemplate.paths import PathFilter, glob_to_regex, iter_files


def _matches(glob, path):
    return re.fullmatch(glob_to_regex(glob), path) is not None


class TestGlobToRegex:
    def test_star_stays_in_segment(self):
        assert _matches("*.py", "a.py")
        assert not _matches("*.py", "pkg/a.py")

    def test_double_star_slash_matches_zero_or_more_dirs(self):
        assert _matches("**/*.py", "a.py")
        assert _matches("**/*.py", "pkg/sub/a.py")
        assert not _matches("**/*.py", "a.pyc")

    def test_trailing_double_star(self):
        assert _matches("vendor/**", "vendor/x/y.c")
        assert not _matches("vendor/**", "src/vendor.c")

    def test_question_mark(self):
        assert _matches("?.txt", "a.txt")
        assert not _matches("?.txt", "ab.txt")

    def test_literal_characters_escaped(self):
        assert _matches("a+b.txt", "a+b.txt")
        assert not _matches("a+b.txt", "aab.txt")


class TestPathFilter:
    def test_default_accepts_everything(self):
        f = PathFilter()
        assert f.accepts("a.txt")
        assert f.accepts("deep/nested/file")

    def test_include_and_exclude(self):
        f = PathFilter.of(include=["**/*.java"], exclude=["third_party/**"])
        assert f.accepts("src/Main.java")
        assert not f.accepts("third_party/lib/Dep.java")
        assert not f.accepts("README.md")

    def test_callable(self):
        f = PathFilter.of(["*.md"])
        assert f("README.md")
        assert not f("docs/a.md")

    def test_empty_include_accepts_nothing(self):
        assert not PathFilter.of(include=[]).accepts("a.txt")

    def test_str(self):
        assert str(PathFilter.of(["*.py"])) == "glob(['*.py'])"
        assert str(PathFilter.of(["*.py"], ["x.py"])) == "glob(include=['*.py'], exclude=['x.py'])"


class TestIterFiles:
    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(NotADirectoryError):
            list(iter_files(tmp_path / "missing"))

    def test_yields_regular_files_sorted(self, tmp_path):
        (tmp_path / "b.txt").write_text("b")
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "d").mkdir()
        (tmp_path / "d" / "c.txt").write_text("c")
        (tmp_path / "empty").mkdir()

        files = [p.relative_to(tmp_path).as_posix() for p in iter_files(tmp_path)]
        assert files == ["a.txt", "b.txt", "d/c.txt"]

    def test_filter_sees_relative_posix_paths(self, tmp_path):
        (tmp_path / "d").mkdir()
        (tmp_path / "d" / "c.txt").write_text("c")
        seen = []

        def accepts(rel):
            seen.append(rel)
            return False

        assert list(iter_files(tmp_path, accepts)) == []
        assert seen == ["d/c.txt"]

    def test_is_lazy(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        it = iter_files(tmp_path)
        assert next(it).name == "a.txt"
