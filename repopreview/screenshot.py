"""Headless browser session and page capture using Playwright."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional, Dict, Set
from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Request

from .config import Config
from .models.capture import CaptureResult, CaptureSuccess, SkippedBadResponse, SkippedError

logger = logging.getLogger(__name__)


def build_pages_url(owner: str, repository: str, domain: str = "github.io") -> str:
    """Build the GitHub Pages URL of a repository.

    Pages hostnames are lowercase, so the owner is lowercased here only.
    """
    return f"https://{owner.lower()}.{domain}/{repository}/"


class NetworkIdleWatcher:
    """Tracks in-flight requests of a page to detect a mostly idle network.

    The network counts as idle once no more than ``max_inflight`` requests
    have been pending for ``idle_ms`` without interruption.
    """

    POLL_INTERVAL_SECONDS = 0.1

    def __init__(self, page: Page, max_inflight: int = 2, idle_ms: int = 500):
        self.max_inflight = max_inflight
        self.idle_seconds = idle_ms / 1000
        self._pending: Set[Request] = set()
        self._quiet_since: Optional[float] = time.monotonic()

        page.on("request", self._on_request)
        page.on("requestfinished", self._on_request_done)
        page.on("requestfailed", self._on_request_done)

    def reset(self):
        """Restart the quiet window from now."""
        self._quiet_since = time.monotonic() if self.inflight <= self.max_inflight else None

    @property
    def inflight(self) -> int:
        return len(self._pending)

    def _on_request(self, request: Request):
        self._pending.add(request)
        self._update()

    def _on_request_done(self, request: Request):
        self._pending.discard(request)
        self._update()

    def _update(self):
        if self.inflight > self.max_inflight:
            self._quiet_since = None
        elif self._quiet_since is None:
            self._quiet_since = time.monotonic()

    def is_idle(self) -> bool:
        if self._quiet_since is None:
            return False
        return time.monotonic() - self._quiet_since >= self.idle_seconds

    async def wait(self, timeout_ms: float):
        """Wait until the network is idle.

        Raises:
            TimeoutError: If the network is still busy after ``timeout_ms``
        """
        deadline = time.monotonic() + max(timeout_ms, 0) / 1000
        while not self.is_idle():
            if time.monotonic() >= deadline:
                raise TimeoutError(
                    f"Network not idle after {timeout_ms:.0f}ms "
                    f"({self.inflight} requests pending)"
                )
            await asyncio.sleep(self.POLL_INTERVAL_SECONDS)


class PreviewRenderer:
    """One headless browser shared by all captures of a run."""

    def __init__(self, config: Config, output_dir: Optional[Path] = None):
        """Initialize preview renderer.

        Args:
            config: Application configuration
            output_dir: Directory screenshots are written to. Defaults to
                ``config.output_dir``.
        """
        self.config = config
        self.output_dir = Path(output_dir) if output_dir else config.output_dir
        self.viewport: Dict[str, int] = config.viewport
        self.browser: Optional[Browser] = None
        self.playwright = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.stop()

    async def start(self):
        """Launch the headless browser."""
        logger.info("Launching headless browser...")
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.config.headless,
                args=self.config.browser_args
            )
            logger.info("Browser started successfully")
        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            if self.playwright:
                await self.playwright.stop()
                self.playwright = None
            raise

    async def stop(self):
        """Close the browser and stop Playwright."""
        browser, playwright = self.browser, self.playwright
        self.browser = None
        self.playwright = None
        error: Optional[Exception] = None

        if browser:
            try:
                await browser.close()
                logger.info("Browser closed.")
            except Exception as e:
                logger.error(f"Error closing browser: {e}")
                error = e

        # Playwright is stopped even when closing the browser failed
        if playwright:
            try:
                await playwright.stop()
            except Exception as e:
                logger.error(f"Error stopping Playwright: {e}")
                error = error or e

        if error is not None:
            raise error

    def output_path(self, repository: str) -> Path:
        return self.output_dir / f"{repository}.png"

    async def capture_repository(self, repository: str) -> CaptureResult:
        """Screenshot the Pages site of one repository.

        Failures never propagate: they come back as ``SkippedBadResponse``
        or ``SkippedError``.
        """
        if not self.browser:
            raise RuntimeError("Renderer not started. Call start() or use async context manager.")

        logger.info(f"--- Processing {repository} ---")
        url = build_pages_url(self.config.owner, repository, self.config.pages_domain)
        context: Optional[BrowserContext] = None

        try:
            context = await self.browser.new_context(viewport=self.viewport)
            page: Page = await context.new_page()
            watcher = NetworkIdleWatcher(
                page,
                max_inflight=self.config.max_inflight_requests,
                idle_ms=self.config.idle_window_ms
            )

            logger.info(f"Navigating to live URL: {url}")
            timeout = self.config.navigation_timeout_ms
            started = time.monotonic()
            response = await page.goto(url, wait_until="commit", timeout=timeout)

            if response is None or not response.ok:
                status = response.status if response is not None else None
                logger.warning(
                    f"Failed to load {url}. Status: {status or 'No response'}. Skipping screenshot."
                )
                return SkippedBadResponse(repository=repository, url=url, status=status)

            remaining_ms = max(timeout - (time.monotonic() - started) * 1000, 1)
            await page.wait_for_load_state("domcontentloaded", timeout=remaining_ms)

            # Only quiet time after the document is parsed counts towards idle
            watcher.reset()
            remaining_ms = timeout - (time.monotonic() - started) * 1000
            await watcher.wait(remaining_ms)

            # Client-side frameworks keep painting after the network settles
            logger.info(f"Waiting {self.config.settle_delay_ms}ms for client-side rendering...")
            await page.wait_for_timeout(self.config.settle_delay_ms)

            output_path = self.output_path(repository)
            logger.info(f"Taking screenshot and saving to {output_path}...")
            await page.screenshot(
                path=str(output_path),
                full_page=False,
                clip={
                    'x': 0,
                    'y': 0,
                    'width': self.viewport['width'],
                    'height': self.viewport['height']
                }
            )
            logger.info(f"SUCCESS: Live application thumbnail saved for {repository}.")
            return CaptureSuccess(repository=repository, path=output_path)

        except Exception as e:
            logger.error(f"Error processing {repository}: {e}")
            return SkippedError(repository=repository, error=str(e))
        finally:
            if context is not None:
                try:
                    await context.close()
                except Exception as e:
                    logger.warning(f"Could not close page for {repository}: {e}")
