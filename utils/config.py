"""Configuration management for the answer sheet tools.

Provides:
- Constants shared by the path policy, the engine and the CLI
- RunConfig, the immutable per-run configuration built once at startup
"""

import os as _os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional


# ── Constants ────────────────────────────────────────────────────────────────

# Canonical file name of a subject's primary rendered document. Only this
# file is matched by the subject filter and refetched by the size threshold.
RESPONSE_FILE_NAME = "responses.pdf"

DEFAULT_OUTPUT_ROOT = Path("output")

# Playwright navigation timeout for rendering one document (5 minutes)
NAVIGATION_TIMEOUT_MS = 5 * 60 * 1000

DEFAULT_HTTP_TIMEOUT = 120

PAGE_FORMAT = "A4"


def _env_flag(name: str, default: bool) -> bool:
    raw = _os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class RunConfig:
    """Options for one run of the downloader.

    Built once at startup (environment defaults, then CLI overrides) and
    passed to the path policy and the engine. Frozen so no component can
    change a run option half way through a script.

    Environment variables:
        ANSWERSHEETS_OUTPUT_DIR: Parent directory of run outputs (default: output)
        ANSWERSHEETS_HTTP_TIMEOUT: Socket timeout for plain downloads in seconds
            (default: 120)
        PLAYWRIGHT_HEADLESS: Launch Chromium headless (default: true). PDF
            rendering only works headless.
    """

    subject: Optional[str] = None
    redownload_smaller_than: Optional[int] = None
    skip_pdfs: bool = False
    output_root: Path = DEFAULT_OUTPUT_ROOT
    navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    headless: bool = True
    page_format: str = PAGE_FORMAT

    @classmethod
    def from_env(cls, **overrides: Any) -> "RunConfig":
        """Create a RunConfig from environment variables, then apply *overrides*."""
        config = cls(
            output_root=Path(_os.getenv("ANSWERSHEETS_OUTPUT_DIR", str(DEFAULT_OUTPUT_ROOT))),
            http_timeout=float(_os.getenv("ANSWERSHEETS_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT))),
            headless=_env_flag("PLAYWRIGHT_HEADLESS", True),
        )
        return config.with_overrides(**overrides)

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        """Return a copy with the given fields replaced. None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a JSON-friendly dictionary."""
        data = asdict(self)
        data["output_root"] = str(self.output_root)
        return data
