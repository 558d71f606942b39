"""
Fetch providers for the answer sheet downloader.

Three ways of producing a file at a destination path:

- save_url_as_file(): one plain HTTP(S) GET streamed to disk
- BrowserSession.render_pdf(): load a page in headless Chromium with the
  quiz site's cookies and print it to an A4 PDF
- save_text(): write literal text from the script

Each provider returns the number of bytes written and translates library
exceptions into the errors in answersheets.errors.
"""

import logging
from pathlib import Path

import requests

from answersheets.cookies import CookieContext
from answersheets.errors import FileSystemError, NetworkError, RenderError
from utils.config import RunConfig

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536


def _ensure_parent(dest_path: Path) -> None:
    try:
        dest_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(f"Cannot create directory {dest_path.parent}: {exc}") from exc


def _file_size(dest_path: Path) -> int:
    try:
        return dest_path.stat().st_size
    except OSError as exc:
        raise FileSystemError(f"Cannot read back {dest_path}: {exc}") from exc


# ---- Plain download ----

def save_url_as_file(session: requests.Session, url: str, dest_path: Path,
                     cookies: CookieContext, timeout: float = 120) -> int:
    """Download *url* to *dest_path* with a single GET.

    The ``Cookie`` header is only sent when *cookies* is non-empty. The
    status code is not enforced: whatever body the server returns is saved,
    and a non-2xx status is logged as a warning. A download that fails part
    way is removed, so a later run fetches it again instead of skipping it.

    Returns:
        Number of bytes written.

    Raises:
        NetworkError: on any transport failure.
        FileSystemError: if the file cannot be written.
    """
    headers = {}
    if cookies:
        headers["Cookie"] = cookies.header()

    _ensure_parent(dest_path)
    try:
        resp = session.get(url, headers=headers, timeout=timeout, stream=True)
    except requests.RequestException as exc:
        raise NetworkError(f"Could not fetch {url}: {exc}") from exc

    try:
        if not resp.ok:
            logger.warning("    [WARN] %s returned HTTP %s, saving the response anyway",
                           url, resp.status_code)
        written = 0
        try:
            with open(dest_path, "wb") as f:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
        except requests.RequestException as exc:
            dest_path.unlink(missing_ok=True)
            raise NetworkError(f"Download of {url} was interrupted: {exc}") from exc
        except OSError as exc:
            dest_path.unlink(missing_ok=True)
            raise FileSystemError(f"Cannot write {dest_path}: {exc}") from exc
    finally:
        resp.close()
    return written


# ---- Literal text ----

def decode_placeholder_spaces(content: str) -> str:
    """Turn the underscores that stand in for spaces in the script back into spaces."""
    return content.replace("_", " ")


def save_text(content: str, dest_path: Path) -> int:
    """Write *content*, with underscores decoded to spaces, as the whole of *dest_path*.

    Returns:
        Number of bytes written.
    """
    data = decode_placeholder_spaces(content).encode("utf-8")
    _ensure_parent(dest_path)
    try:
        dest_path.write_bytes(data)
    except OSError as exc:
        raise FileSystemError(f"Cannot write {dest_path}: {exc}") from exc
    return len(data)


# ---- Browser rendering ----

class BrowserSession:
    """One headless Chromium shared by every render of a run.

    Playwright is started on the first render and stopped by close(), so a
    run with no ``save-pdf`` rows (or with --skip-pdfs) never launches a
    browser. Use as a context manager so the browser is closed even when a
    directive fails.
    """

    def __init__(self, config: RunConfig):
        self.config = config
        self._pw_instance = None
        self._pw_browser = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def started(self) -> bool:
        return self._pw_browser is not None

    def _get_browser(self):
        """Lazily start Playwright and launch Chromium."""
        if self._pw_browser is not None:
            return self._pw_browser

        try:
            from playwright.sync_api import Error as PlaywrightError
            from playwright.sync_api import sync_playwright
        except ImportError as exc:
            raise RenderError(
                "Playwright is required to save PDFs. Install it with:\n"
                "  pip install playwright\n"
                "  python -m playwright install chromium"
            ) from exc

        logger.info("  Starting browser for PDF rendering...")
        try:
            self._pw_instance = sync_playwright().start()
            self._pw_browser = self._pw_instance.chromium.launch(
                headless=self.config.headless,
            )
        except PlaywrightError as exc:
            self.close()
            raise RenderError(f"Could not launch the browser: {exc}") from exc
        return self._pw_browser

    def render_pdf(self, url: str, dest_path: Path, cookies: CookieContext) -> int:
        """Render *url* to an A4 PDF at *dest_path*.

        A fresh browser context is opened for each render, so cookies added
        for one document are never sent with another. The page is given
        ``navigation_timeout_ms`` to load and settle (no network activity
        for 500 ms) before it is printed.

        Returns:
            Size of the PDF in bytes.

        Raises:
            RenderError: if navigation times out or the browser fails.
        """
        browser = self._get_browser()
        from playwright.sync_api import Error as PlaywrightError

        _ensure_parent(dest_path)
        context = None
        try:
            context = browser.new_context()
            if cookies:
                context.add_cookies(cookies.for_url(url))
            page = context.new_page()
            page.goto(url, timeout=self.config.navigation_timeout_ms,
                      wait_until="networkidle")
            page.pdf(path=str(dest_path), format=self.config.page_format,
                     print_background=True)
        except PlaywrightError as exc:
            raise RenderError(f"Could not render {url} to PDF: {exc}") from exc
        finally:
            if context is not None:
                context.close()
        return _file_size(dest_path)

    def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call more than once.

        Raises:
            RenderError: if the browser or Playwright fails to shut down.
        """
        browser, instance = self._pw_browser, self._pw_instance
        self._pw_browser = self._pw_instance = None
        if browser is None and instance is None:
            return
        from playwright.sync_api import Error as PlaywrightError

        try:
            try:
                if browser is not None:
                    browser.close()
            finally:
                if instance is not None:
                    instance.stop()
        except PlaywrightError as exc:
            raise RenderError(f"Could not close the browser: {exc}") from exc
