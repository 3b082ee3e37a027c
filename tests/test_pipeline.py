"""Tests for the end-to-end preview run."""

import asyncio
from unittest.mock import Mock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from repopreview.github_client import RepositoryLister
from repopreview.models.capture import SkippedBadResponse, SkippedError
from repopreview.pipeline import run_pipeline

from fakes import FakeBrowser, FakeRenderer, FakeResponse


def make_lister(names):
    lister = Mock(spec=RepositoryLister)
    lister.list_repository_names.return_value = list(names)
    return lister


class TestRunPipeline:
    """Test cases for run_pipeline."""

    def run(self, config, names, browser=None):
        browser = browser or FakeBrowser()
        renderers = []

        def factory(cfg):
            renderer = FakeRenderer(cfg, browser)
            renderers.append(renderer)
            return renderer

        summary = asyncio.run(run_pipeline(config, lister=make_lister(names), renderer_factory=factory))
        return summary, renderers

    def test_two_successes_leave_exactly_two_files(self, config, output_dir):
        output_dir.mkdir(parents=True)
        (output_dir / "stale.png").write_bytes(b"old")

        summary, _ = self.run(config, ["alpha", "beta"])

        assert sorted(p.name for p in output_dir.iterdir()) == ["alpha.png", "beta.png"]
        assert [r.repository for r in summary.captured] == ["alpha", "beta"]
        assert summary.skipped == []

    def test_not_found_skips_and_continues(self, config, output_dir):
        browser = FakeBrowser({"alpha": FakeResponse(404)})

        summary, _ = self.run(config, ["alpha", "beta"], browser)

        assert not (output_dir / "alpha.png").exists()
        assert (output_dir / "beta.png").exists()
        assert isinstance(summary.results[0], SkippedBadResponse)
        assert summary.results[1].captured

    def test_timeout_does_not_stop_the_run(self, config, output_dir):
        browser = FakeBrowser({"slow": PlaywrightTimeoutError("Timeout 60000ms exceeded.")})

        summary, _ = self.run(config, ["slow", "fast", "faster"], browser)

        assert isinstance(summary.results[0], SkippedError)
        assert [r.repository for r in summary.captured] == ["fast", "faster"]

    def test_captures_sequentially_in_listing_order(self, config):
        browser = FakeBrowser()

        self.run(config, ["c", "a", "b"], browser)

        assert [ctx.page.visited[0] for ctx in browser.contexts] == [
            "https://dapalms1.github.io/c/",
            "https://dapalms1.github.io/a/",
            "https://dapalms1.github.io/b/",
        ]
        assert all(ctx.closed for ctx in browser.contexts)

    def test_empty_listing_exits_before_browser(self, config, output_dir):
        output_dir.mkdir(parents=True)
        (output_dir / "kept.png").write_bytes(b"old")

        summary, renderers = self.run(config, [])

        assert summary.results == []
        assert renderers == []
        assert (output_dir / "kept.png").exists()

    def test_missing_token_means_no_navigation(self, config, monkeypatch):
        monkeypatch.delenv("ORG_PAT_TOKEN", raising=False)
        renderer_factory = Mock()

        summary = asyncio.run(run_pipeline(config, renderer_factory=renderer_factory))

        assert summary.results == []
        renderer_factory.assert_not_called()

    def test_browser_started_and_stopped_once(self, config):
        _, renderers = self.run(config, ["alpha", "beta"])

        assert len(renderers) == 1
        assert renderers[0].started == 1
        assert renderers[0].stopped == 1

    def test_browser_stopped_when_loop_raises(self, config):
        renderers = []

        class ExplodingRenderer(FakeRenderer):
            async def capture_repository(self, repository):
                raise RuntimeError("renderer crashed")

        def factory(cfg):
            renderer = ExplodingRenderer(cfg, FakeBrowser())
            renderers.append(renderer)
            return renderer

        with pytest.raises(RuntimeError):
            asyncio.run(run_pipeline(config, lister=make_lister(["alpha"]), renderer_factory=factory))

        assert renderers[0].stopped == 1

    def test_running_twice_yields_same_files(self, config, output_dir):
        browser = FakeBrowser({"broken": FakeResponse(500)})
        names = ["alpha", "broken", "gamma"]

        self.run(config, names, browser)
        first = sorted(p.name for p in output_dir.iterdir())
        self.run(config, names, browser)
        second = sorted(p.name for p in output_dir.iterdir())

        assert first == second == ["alpha.png", "gamma.png"]
