"""
Quiz Answer Sheets Downloader Package.

Reads an instruction script exported by the quiz reporting tool, downloads
the files, attachments and rendered PDFs it lists into output/<zip-name>/,
and packages that directory as output/<zip-name>.zip.

Public names are re-exported here so ``from answersheets import X`` works
for every component.
"""

# ---- Errors ----
from answersheets.errors import (
    AnswersheetsError,
    EmptyScriptError,
    FileSystemError,
    InvalidSizeError,
    NetworkError,
    RenderError,
    ScriptFormatError,
)

# ---- Script parsing ----
from answersheets.script import (
    ArchiveName,
    Cookies,
    Directive,
    SaveFile,
    SavePdf,
    SaveText,
    load_script,
    parse_script,
)
from answersheets.sizes import parse_byte_size
from answersheets.cookies import CookieContext

# ---- Policy, providers, archive ----
from answersheets.policy import Action, PathDecision, PathPolicy
from answersheets.providers import BrowserSession, save_text, save_url_as_file
from answersheets.archive import zip_directory
from answersheets.report import RunReport, SkipRecord

# ---- Core: engine and CLI ----
from answersheets.core import (
    RunContext,
    ScriptRunner,
    __version__,
    build_parser,
    main,
    process_file,
)

__all__ = [
    # Errors
    "AnswersheetsError",
    "EmptyScriptError",
    "FileSystemError",
    "InvalidSizeError",
    "NetworkError",
    "RenderError",
    "ScriptFormatError",
    # Script
    "ArchiveName",
    "Cookies",
    "Directive",
    "SaveFile",
    "SavePdf",
    "SaveText",
    "load_script",
    "parse_script",
    "parse_byte_size",
    "CookieContext",
    # Policy / providers / archive
    "Action",
    "PathDecision",
    "PathPolicy",
    "BrowserSession",
    "save_text",
    "save_url_as_file",
    "zip_directory",
    "RunReport",
    "SkipRecord",
    # Core
    "RunContext",
    "ScriptRunner",
    "__version__",
    "build_parser",
    "main",
    "process_file",
]
