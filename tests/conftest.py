"""
Pytest fixtures for the answer sheet downloader tests.

Provides a RunConfig rooted in a temporary directory, and fake HTTP session
and renderer objects so no test touches the network or launches a browser.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.config import RunConfig  # noqa: E402


# ── Fakes ─────────────────────────────────────────────────────────────────────

class FakeResponse:
    """Minimal stand-in for a streamed requests.Response."""

    def __init__(self, body: bytes = b"", status_code: int = 200):
        self.body = body
        self.status_code = status_code
        self.closed = False

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i:i + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Records GET calls and serves bodies from a {url: FakeResponse} map."""

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.calls: list[dict] = []

    def get(self, url, headers=None, timeout=None, stream=False):
        self.calls.append({"url": url, "headers": dict(headers or {}),
                           "timeout": timeout, "stream": stream})
        response = self.responses.get(url)
        if isinstance(response, Exception):
            raise response
        if response is None:
            response = FakeResponse(f"body of {url}".encode())
        return response


class FakeRenderer:
    """Writes a fake PDF and records the cookie header each render was given."""

    def __init__(self, pdf_size: int = 8000, fail_on: str | None = None):
        self.pdf_size = pdf_size
        self.fail_on = fail_on
        self.renders: list[dict] = []
        self.closed = False

    def render_pdf(self, url, dest_path, cookies):
        from answersheets.errors import RenderError

        if url == self.fail_on:
            raise RenderError(f"Could not render {url} to PDF: Timeout 300000ms exceeded")
        self.renders.append({"url": url, "dest": dest_path, "cookie": cookies.header()})
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        dest_path.write_bytes(b"%PDF" + b"x" * (self.pdf_size - 4))
        return self.pdf_size

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture()
def output_root(tmp_path):
    return tmp_path / "output"


@pytest.fixture()
def config(output_root):
    """Default run options writing under a temporary output directory."""
    return RunConfig(output_root=output_root)


@pytest.fixture()
def fake_session():
    return FakeSession()


@pytest.fixture()
def fake_renderer():
    return FakeRenderer()
