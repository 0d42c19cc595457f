"""Tests for configuration loading and the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from orderindex.cli import main
from orderindex.config.settings import Settings


@pytest.fixture
def seeded_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at the in-memory backend with one seeded order."""
    seed = tmp_path / "orders.json"
    seed.write_text(json.dumps([{"id": 1, "number": "1001", "status": "completed"}]))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ORDERINDEX_ALGOLIA__BACKEND", "memory")
    monkeypatch.setenv("ORDERINDEX_PLATFORM__SEED_FILE", str(seed))
    return seed


class TestSettings:
    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ORDERINDEX_ALGOLIA__APPLICATION_ID", "LATENCY")
        monkeypatch.setenv("ORDERINDEX_ALGOLIA__WAIT_ON_DELETE", "true")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.algolia.application_id == "LATENCY"
        assert settings.algolia.wait_on_delete is True

    def test_index_name_prefix(self) -> None:
        settings = Settings(_env_file=None, algolia={"index_name_prefix": "wp_"})  # type: ignore[call-arg]
        assert settings.algolia.index_name("orders") == "wp_orders"

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown index backend"):
            Settings(_env_file=None, algolia={"backend": "solr"})  # type: ignore[call-arg]

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "orderindex-config.yaml"
        path.write_text("algolia:\n  backend: memory\n  hits_per_page: 10\n")
        settings = Settings.from_yaml(path)
        assert settings.algolia.backend == "memory"
        assert settings.algolia.hits_per_page == 10

    def test_from_yaml_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "missing.yaml")


class TestCli:
    def test_push_settings(self, seeded_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["push-settings"]) == 0
        assert "Pushed settings to orders" in capsys.readouterr().out

    def test_reindex(self, seeded_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--log-level", "warning", "reindex", "--batch-size", "10"]) == 0
        assert "Re-indexed 1/1 orders (0 failed, 1 page(s))" in capsys.readouterr().out

    def test_missing_config_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--config", str(tmp_path / "nope.yaml"), "push-settings"]) == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            main([])

    def test_batch_size_must_be_positive(self, seeded_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["reindex", "--batch-size", "0"])
        assert exc_info.value.code == 2
        assert "positive integer" in capsys.readouterr().err
