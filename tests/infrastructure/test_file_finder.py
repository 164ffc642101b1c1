from __future__ import annotations

from pathlib import Path

from infrastructure.environment.file_finder import EnvironmentFileFinder


def test_file_finder_prefers_bru(tmp_path: Path) -> None:
    base_dir = tmp_path / "environments"
    base_dir.mkdir()
    (base_dir / "local.yaml").write_text("variables: {}", encoding="utf-8")
    (base_dir / "local.bru").write_text("vars {\n}\n", encoding="utf-8")

    finder = EnvironmentFileFinder(base_dir)

    found = finder.find_by_name("local")

    assert found is not None
    assert found.suffix == ".bru"


def test_file_finder_uses_yaml_when_no_bru(tmp_path: Path) -> None:
    base_dir = tmp_path / "environments"
    base_dir.mkdir()
    (base_dir / "local.yml").write_text("variables: {}", encoding="utf-8")

    found = EnvironmentFileFinder(base_dir).find_by_name("local")

    assert found is not None
    assert found.suffix == ".yml"


def test_file_finder_returns_none_when_missing(tmp_path: Path) -> None:
    assert EnvironmentFileFinder(tmp_path / "environments").find_by_name("local") is None
