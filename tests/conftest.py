"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from repopreview.config import Config

from fakes import FakeBrowser, FakeRenderer


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "previews"


@pytest.fixture
def config(tmp_path: Path, output_dir: Path) -> Config:
    """Configuration with no settle delay or idle window."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "github": {"owner": "DapaLMS1", "exclude_repo": "Catalog_of_Repos"},
                "capture": {"settle_delay_ms": 0, "idle_window_ms": 0},
                "output": {"dir": str(output_dir)},
            }
        ),
        encoding="utf-8",
    )
    return Config(str(config_path))


@pytest.fixture
def fake_browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture
def renderer(config: Config, fake_browser: FakeBrowser, output_dir: Path) -> FakeRenderer:
    output_dir.mkdir(parents=True, exist_ok=True)
    renderer = FakeRenderer(config, fake_browser)
    renderer.browser = fake_browser
    return renderer
