"""Tests for the typefit types / suggest commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from typefit.cli.main import cli
from typefit.cli.utils import find_project_root

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path):
    with patch("typefit.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
        yield


class TestFindProjectRoot:
    """find_project_root() walks up to the nearest package marker."""

    def test_from_nested_file(self, ts_project: Path) -> None:
        assert find_project_root(ts_project / "src" / "app.ts") == ts_project.resolve()

    def test_falls_back_to_start(self, tmp_path: Path) -> None:
        (tmp_path / "loose").mkdir()
        start = tmp_path / "loose"
        with patch.object(Path, "exists", return_value=False):
            assert find_project_root(start) == start.resolve()


class TestTypesCommand:
    """typefit types."""

    def test_json_lists_declared_types(self, ts_project: Path) -> None:
        result = runner.invoke(cli, ["types", str(ts_project), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert sorted(t["name"] for t in data) == ["BasicUser", "Settings", "User", "UserProfile"]
        basic = next(t for t in data if t["name"] == "BasicUser")
        assert basic["properties"] == ["id", "name", "email"]
        assert basic["kind"] == "interface"

    def test_table_output(self, ts_project: Path) -> None:
        result = runner.invoke(cli, ["types", str(ts_project)])
        assert result.exit_code == 0, result.output


class TestSuggestCommand:
    """typefit suggest."""

    def test_json_output(self, ts_project: Path) -> None:
        result = runner.invoke(
            cli,
            ["suggest", str(ts_project / "src" / "app.ts"), "--root", str(ts_project), "--json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        names = [item["name"] for item in data["literals"]]
        assert names == ["user", "partial", "member"]
        assert data["literals"][0]["matches"][0]["type_name"] == "BasicUser"

    def test_max_limits_matches(self, ts_project: Path) -> None:
        result = runner.invoke(
            cli, ["suggest", str(ts_project / "src" / "app.ts"), "--max", "1", "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert all(len(item["matches"]) <= 1 for item in data["literals"])

    def test_min_score_filters(self, ts_project: Path) -> None:
        result = runner.invoke(
            cli, ["suggest", str(ts_project / "src" / "app.ts"), "--min-score", "0.9", "--json"]
        )

        data = json.loads(result.stdout)
        for item in data["literals"]:
            assert all(m["compatibility_score"] >= 0.9 for m in item["matches"])

    def test_min_score_out_of_range_rejected(self, ts_project: Path) -> None:
        result = runner.invoke(
            cli, ["suggest", str(ts_project / "src" / "app.ts"), "--min-score", "2"]
        )
        assert result.exit_code != 0

    def test_table_output(self, ts_project: Path) -> None:
        result = runner.invoke(cli, ["suggest", str(ts_project / "src" / "app.ts")])
        assert result.exit_code == 0, result.output

    def test_unsupported_file_is_click_error(self, ts_project: Path) -> None:
        result = runner.invoke(cli, ["suggest", str(ts_project / "package.json")])

        assert result.exit_code == 1
        assert "EXTRACTION_UNSUPPORTED_LANGUAGE" in result.output

    def test_invalid_repo_config_is_click_error(self, ts_project: Path) -> None:
        (ts_project / ".typefit").mkdir()
        (ts_project / ".typefit" / "config.yaml").write_text("matching:\n  max_suggestions: 0\n")

        result = runner.invoke(cli, ["types", str(ts_project)])

        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output


class TestCliGroup:
    """Top-level group options."""

    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "typefit" in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(cli, ["--help"])
        for command in ("types", "suggest", "watch"):
            assert command in result.output
