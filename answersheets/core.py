"""
Core orchestration for the answer sheet downloader.

Contains the ScriptRunner that drains a parsed instruction script, the
programmatic entry point process_file(), and the CLI entry point main().

Directives run strictly in script order, one at a time. Order matters:
a ``cookies`` row only affects the rows after it.
"""

import argparse
import json
import logging
import sys
from collections import deque
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional

import requests

from answersheets.archive import zip_directory
from answersheets.cookies import CookieContext
from answersheets.errors import (
    AnswersheetsError,
    EmptyScriptError,
    FileSystemError,
    ScriptFormatError,
)
from answersheets.policy import Action, PathDecision, PathPolicy
from answersheets.providers import BrowserSession, save_text, save_url_as_file
from answersheets.report import RunReport
from answersheets.script import (
    ArchiveName,
    Cookies,
    Directive,
    SaveFile,
    SavePdf,
    SaveText,
    load_script,
)
from answersheets.sizes import parse_byte_size
from utils.common import elapsed, format_bytes
from utils.config import RunConfig
from utils.http import SessionManager

logger = logging.getLogger(__name__)

__version__ = "1.2.0"


# ---- Run context ----

@dataclass
class RunContext:
    """Mutable state of one run, owned by the ScriptRunner."""

    output_dir: Path
    session: requests.Session
    renderer: BrowserSession
    policy: PathPolicy
    report: RunReport
    cookies: CookieContext = field(default_factory=CookieContext)


# ---- Engine ----

class ScriptRunner:
    """Executes a parsed instruction script and zips the result.

    The HTTP session and the renderer may be injected (tests do); when they
    are not, the runner opens its own and closes them when the run ends,
    whether it succeeded or not.
    """

    def __init__(self, config: RunConfig, session: Optional[requests.Session] = None,
                 renderer: Optional[BrowserSession] = None):
        self.config = config
        self._session = session
        self._renderer = renderer
        self._handlers: dict[type, Callable[[Directive, RunContext], None]] = {
            ArchiveName: self._handle_repeated_archive_name,
            Cookies: self._handle_cookies,
            SaveFile: self._handle_save_file,
            SavePdf: self._handle_save_pdf,
            SaveText: self._handle_save_text,
        }

    def run(self, directives: Iterable[Directive]) -> RunReport:
        """Run *directives* in order and return the run report.

        Raises:
            AnswersheetsError: on the first failure. Files already written are
                kept so a later run can resume, but no archive is produced.
        """
        queue = deque(directives)
        if not queue:
            raise EmptyScriptError("Instruction script is empty!")
        first = queue.popleft()
        if not isinstance(first, ArchiveName):
            raise ScriptFormatError(
                "The first instruction must give the zip-name.", first.line)

        report = RunReport(archive_name=first.name, status="started")
        logger.debug("Run options: %s", json.dumps(self.config.to_dict(), sort_keys=True))
        output_dir = self._prepare_output_dir(first)

        with ExitStack() as stack:
            session = self._session
            if session is None:
                session = stack.enter_context(SessionManager()).session
            renderer = self._renderer
            if renderer is None:
                renderer = stack.enter_context(BrowserSession(self.config))

            ctx = RunContext(
                output_dir=output_dir,
                session=session,
                renderer=renderer,
                policy=PathPolicy(self.config, output_dir),
                report=report,
            )
            try:
                while queue:
                    directive = queue.popleft()
                    self._handlers[type(directive)](directive, ctx)
            except AnswersheetsError:
                report.finish("failed")
                logger.debug("Run report: %s", json.dumps(report.to_dict()))
                raise

        # The browser is closed by now, nothing is still writing to the tree
        report.archive_path = zip_directory(output_dir)
        report.finish("completed")
        logger.info("\nDone: %s in %s", report.console_summary(), elapsed(report.start_time))
        logger.debug("Run report: %s", json.dumps(report.to_dict()))
        return report

    # ── preparation ───────────────────────────────────────────────────────

    def _prepare_output_dir(self, directive: ArchiveName) -> Path:
        output_dir = (Path(self.config.output_root) / directive.name).resolve()
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(f"Cannot create output directory {output_dir}: {exc}") from exc
        logger.info("Using working directory %s.", output_dir)
        return output_dir

    # ── handlers ──────────────────────────────────────────────────────────

    def _handle_repeated_archive_name(self, directive: ArchiveName, ctx: RunContext) -> None:
        raise ScriptFormatError("zip-name may only be given once, on the first line.",
                                directive.line)

    def _handle_cookies(self, directive: Cookies, ctx: RunContext) -> None:
        try:
            ctx.cookies = CookieContext.from_blob(directive.encoded_blob)
        except ValueError as exc:
            raise ScriptFormatError(str(exc), directive.line) from exc
        logger.info("    [COOKIES] Using %d cookie(s) from line %d",
                    len(ctx.cookies.pairs), directive.line)

    def _handle_save_file(self, directive: SaveFile, ctx: RunContext) -> None:
        decision = self._decide(directive.destination, ctx)
        if decision is None:
            return
        size = save_url_as_file(ctx.session, directive.source, decision.path,
                                ctx.cookies, timeout=self.config.http_timeout)
        self._saved(directive.destination, size, ctx)

    def _handle_save_pdf(self, directive: SavePdf, ctx: RunContext) -> None:
        if self.config.skip_pdfs:
            logger.info("    [SKIP] PDFs disabled: %s", directive.destination)
            ctx.report.add_skip("pdf_disabled", directive.destination)
            return
        decision = self._decide(directive.destination, ctx)
        if decision is None:
            return
        size = ctx.renderer.render_pdf(directive.source, decision.path, ctx.cookies)
        self._saved(directive.destination, size, ctx)

    def _handle_save_text(self, directive: SaveText, ctx: RunContext) -> None:
        decision = self._decide(directive.destination, ctx)
        if decision is None:
            return
        size = save_text(directive.content, decision.path)
        self._saved(directive.destination, size, ctx)

    # ── helpers ───────────────────────────────────────────────────────────

    def _decide(self, destination: str, ctx: RunContext) -> Optional[PathDecision]:
        """Consult the path policy; None means the destination is skipped."""
        decision = ctx.policy.decide(destination)
        if not decision.should_fetch:
            ctx.report.add_skip(decision.action.value, destination)
            return None
        if decision.action is Action.REFETCH_TOO_SMALL:
            ctx.report.add_refetch(destination)
        return decision

    def _saved(self, destination: str, size: int, ctx: RunContext) -> None:
        ctx.report.add_fetch(destination, size)
        logger.info("    [OK] %s (%s)", destination, format_bytes(size))


# ---- Programmatic entry point ----

def process_file(instruction_file: Path, config: RunConfig) -> RunReport:
    """Parse *instruction_file*, run it with *config* and return the report.

    This is the interface decoupled from argparse/sys.argv so other scripts
    can drive a download without going through the CLI.
    """
    directives = load_script(instruction_file)
    return ScriptRunner(config).run(directives)


# ---- Main ----

def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="save-answersheets",
        description=(
            "Download the files listed in a quiz answer sheets instruction script "
            "into output/<zip-name>/ and zip them as output/<zip-name>.zip."
        ),
        epilog=(
            "Running the same script again skips files that already exist, "
            "so an interrupted download can be resumed."
        ),
    )
    parser.add_argument(
        "instructions", nargs="*", metavar="INSTRUCTIONS",
        help="Path to the instruction script to process",
    )
    parser.add_argument(
        "-a", "--attempt", dest="subject", metavar="SUBJECT", default=None,
        help="Only (re-)download the responses.pdf of this one attempt directory",
    )
    parser.add_argument(
        "-r", "--redownload-smaller-than", dest="redownload_smaller_than",
        metavar="SIZE", default=None,
        help=("Re-download any existing responses.pdf smaller than SIZE "
              "(e.g. 5KB), clearing its whole directory first"),
    )
    parser.add_argument(
        "--skip-pdfs", action="store_true", dest="skip_pdfs",
        help="Do not render responses to PDF; attachments are still downloaded",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Parse CLI arguments, process the instruction file and return an exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if len(args.instructions) != 1:
        parser.print_usage()
        return 0

    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
    )

    try:
        threshold = None
        if args.redownload_smaller_than is not None:
            threshold = parse_byte_size(args.redownload_smaller_than)
        config = RunConfig.from_env(
            subject=args.subject,
            redownload_smaller_than=threshold,
            skip_pdfs=True if args.skip_pdfs else None,
        )
        process_file(Path(args.instructions[0]), config)
    except AnswersheetsError as exc:
        logger.error("ERROR: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
