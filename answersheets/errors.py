"""Exception hierarchy for the answer sheet downloader.

Every failure the tool can report derives from AnswersheetsError so the CLI
can log it and exit non-zero without catching unrelated exceptions.
Library exceptions are translated at the provider boundary with
``raise ... from exc`` so the original cause stays in the traceback.
"""


class AnswersheetsError(Exception):
    """Base class for all errors raised while processing a script."""


class ScriptFormatError(AnswersheetsError):
    """A line of the instruction script is malformed."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"Line {line}: {message}"
        super().__init__(message)


class EmptyScriptError(AnswersheetsError):
    """The instruction script contains no directives."""


class InvalidSizeError(AnswersheetsError):
    """A size threshold could not be parsed."""


class FileSystemError(AnswersheetsError):
    """A file or directory could not be created, read or removed."""


class NetworkError(AnswersheetsError):
    """A transport-level failure while fetching a URL."""


class RenderError(AnswersheetsError):
    """The headless browser failed to render a page to PDF."""
