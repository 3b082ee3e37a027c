"""Preview generation run: list, reset output, capture, tear down."""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .config import Config
from .github_client import RepositoryLister
from .models.capture import CaptureResult
from .output_dir import reset_output_dir
from .screenshot import PreviewRenderer

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Results of one run, in processing order."""

    results: List[CaptureResult] = field(default_factory=list)

    @property
    def captured(self) -> List[CaptureResult]:
        return [r for r in self.results if r.captured]

    @property
    def skipped(self) -> List[CaptureResult]:
        return [r for r in self.results if not r.captured]


async def run_pipeline(
    config: Config,
    lister: Optional[RepositoryLister] = None,
    renderer_factory: Optional[Callable[[Config], PreviewRenderer]] = None
) -> RunSummary:
    """Generate one preview per repository of the configured owner.

    Args:
        config: Application configuration
        lister: Repository source. Defaults to a ``RepositoryLister`` using
            the token from the environment.
        renderer_factory: Builds the browser session. Defaults to
            ``PreviewRenderer``.

    Raises:
        Exception: Failures of directory setup, browser launch or teardown
    """
    lister = lister or RepositoryLister(config, token=config.token)
    renderer_factory = renderer_factory or PreviewRenderer

    summary = RunSummary()
    names = lister.list_repository_names()
    if not names:
        logger.info("No repositories found. Exiting.")
        return summary

    logger.info("Cleaning up previous screenshots and setting up output directory...")
    reset_output_dir(config.output_dir)

    renderer = renderer_factory(config)
    await renderer.start()
    try:
        for name in names:
            summary.results.append(await renderer.capture_repository(name))
    finally:
        await renderer.stop()

    logger.info(
        f"Captured {len(summary.captured)} of {len(names)} repositories "
        f"({len(summary.skipped)} skipped)."
    )
    return summary
