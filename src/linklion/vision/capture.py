"""Screenshot capture of a live LinkedIn page in a real browser."""

from __future__ import annotations

import asyncio
import logging
import time as _time
from dataclasses import dataclass
from typing import Protocol

from ..browser_lock import browser_lock
from ..config import (
    CAPTURE_JPEG_QUALITIES,
    CAPTURE_MAX_BYTES,
    CAPTURE_MAX_HEIGHT,
    CAPTURE_TIMEOUT_MS,
    CAPTURE_VIEWPORT,
    COOKIE_DOMAIN,
    COOKIE_NAME,
)
from ..errors import LinkedInError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedImage:
    data: bytes
    media_type: str = "image/jpeg"
    url: str = ""


class ScreenCapture(Protocol):
    async def capture(self, url: str, token: str) -> CapturedImage: ...


class BrowserScreenCapture:
    """Render *url* with the session cookie and screenshot it.

    Uses patchright's sync API in a worker thread; the global browser lock
    keeps a single Chromium alive at a time.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        viewport: dict | None = None,
        timeout_ms: int = CAPTURE_TIMEOUT_MS,
        max_height: int = CAPTURE_MAX_HEIGHT,
        max_bytes: int = CAPTURE_MAX_BYTES,
    ) -> None:
        self.headless = headless
        self.viewport = viewport or dict(CAPTURE_VIEWPORT)
        self.timeout_ms = timeout_ms
        self.max_height = max_height
        self.max_bytes = max_bytes

    async def capture(self, url: str, token: str) -> CapturedImage:
        async with browser_lock:
            try:
                return await asyncio.to_thread(self._capture_sync, url, token)
            except LinkedInError:
                raise
            except Exception as exc:
                logger.warning("Screen capture failed for %s: %s", url, exc)
                raise LinkedInError.vision_unavailable(f"capture failed: {exc}") from exc

    def _capture_sync(self, url: str, token: str) -> CapturedImage:
        from patchright.sync_api import sync_playwright

        with sync_playwright() as pw:
            browser = pw.chromium.launch(
                headless=self.headless,
                args=[
                    "--disable-blink-features=AutomationControlled",
                    "--no-first-run",
                    "--no-default-browser-check",
                ],
            )
            try:
                context = browser.new_context(viewport=self.viewport)
                context.add_cookies(
                    [
                        {
                            "name": COOKIE_NAME,
                            "value": token,
                            "domain": COOKIE_DOMAIN,
                            "path": "/",
                            "secure": True,
                            "httpOnly": True,
                        }
                    ]
                )
                page = context.new_page()
                page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)
                _time.sleep(2.5)
                self._reader_scroll(page)

                final_url = page.url
                if "/login" in final_url or "/authwall" in final_url:
                    raise LinkedInError.vision_unavailable("browser was sent to the sign-in page")
                if "/checkpoint" in final_url:
                    raise LinkedInError.vision_unavailable("browser hit a security checkpoint")

                data = self._screenshot(page)
                logger.info("Captured %s (%d bytes)", final_url, len(data))
                return CapturedImage(data=data, media_type="image/jpeg", url=final_url)
            finally:
                browser.close()

    def _screenshot(self, page: object) -> bytes:
        """Screenshot the top of the page, bounded in height and encoded size."""
        try:
            page_height = int(page.evaluate("document.documentElement.scrollHeight"))
        except Exception:
            logger.debug("Could not read page height", exc_info=True)
            page_height = self.viewport["height"]
        clip = {
            "x": 0,
            "y": 0,
            "width": self.viewport["width"],
            "height": max(1, min(page_height, self.max_height)),
        }
        for quality in CAPTURE_JPEG_QUALITIES:
            data = page.screenshot(full_page=True, clip=clip, type="jpeg", quality=quality)
            if len(data) <= self.max_bytes:
                return data
            logger.debug("Screenshot at quality %d is %d bytes; retrying smaller", quality, len(data))
        raise LinkedInError.vision_unavailable(f"screenshot exceeds {self.max_bytes} bytes")

    @staticmethod
    def _reader_scroll(page: object) -> None:
        """Scroll down and back so lazy sections render before the shot."""
        try:
            page.evaluate("window.scrollTo(0, 300)")
            _time.sleep(0.6)
            page.evaluate("window.scrollTo(0, document.body.scrollHeight * 0.5)")
            _time.sleep(0.8)
            page.evaluate("window.scrollTo(0, 0)")
            _time.sleep(0.4)
        except Exception:
            logger.debug("Reader scroll failed", exc_info=True)
