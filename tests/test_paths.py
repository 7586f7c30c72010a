"""Tests for rwbundle.paths -- existence checks and root location."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from rwbundle.exceptions import RootNotFoundError
from rwbundle.paths import dir_exists, file_exists, locate_root


class TestExistenceChecks:
    def test_missing_path_is_neither(self, tmp_path: Path) -> None:
        missing = tmp_path / "nope"
        assert dir_exists(missing) is False
        assert file_exists(missing) is False

    def test_directory(self, tmp_path: Path) -> None:
        assert dir_exists(tmp_path) is True
        assert file_exists(tmp_path) is False

    def test_file(self, tmp_path: Path) -> None:
        f = tmp_path / "a.lib"
        f.write_bytes(b"")
        assert file_exists(f) is True
        assert dir_exists(f) is False

    def test_accepts_strings(self, tmp_path: Path) -> None:
        f = tmp_path / "a.lib"
        f.write_bytes(b"x")
        assert file_exists(str(f)) is True
        assert dir_exists(str(tmp_path)) is True


class TestLocateRoot:
    def test_marker_in_cwd(self, project: Path) -> None:
        assert locate_root("rusty_web_core") == Path.cwd()
        assert Path.cwd() == project

    def test_marker_in_parent_changes_cwd(
        self, project: Path, monkeypatch: pytest.MonkeyPatch, capsys
    ) -> None:
        bundler = project / "bundler"
        bundler.mkdir()
        monkeypatch.chdir(bundler)

        root = locate_root("rusty_web_core")

        assert root.resolve() == project.resolve()
        assert Path(os.getcwd()).resolve() == project.resolve()
        assert "Changed working directory to root" in capsys.readouterr().out

    def test_marker_nowhere(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        with pytest.raises(RootNotFoundError) as exc_info:
            locate_root("rusty_web_core")

        assert "rusty_web_core" in str(exc_info.value)
        assert "project root" in str(exc_info.value)
        assert exc_info.value.exit_code == 1
        assert Path.cwd() == nested

    def test_marker_file_does_not_count(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "rusty_web_core").write_text("not a directory")
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RootNotFoundError):
            locate_root("rusty_web_core")

    def test_grandparent_is_not_searched(
        self, project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        deep = project / "bundler" / "sub"
        deep.mkdir(parents=True)
        monkeypatch.chdir(deep)
        with pytest.raises(RootNotFoundError):
            locate_root("rusty_web_core")
