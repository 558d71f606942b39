"""
Instruction script parsing for the answer sheet downloader.

An instruction script is produced by the quiz reporting tool. After blank
lines and ``#`` comments are dropped, it looks like::

    zip-name quiz-1-answersheets
    cookies TW9vZGxlU2Vzc2lvbj1hYmM=
    save-pdf https://example.com/review.php?attempt=12 as alice/responses.pdf
    save-file https://example.com/pluginfile.php/1/essay.docx as alice/essay.docx
    save-text Submitted_late as alice/notes.txt

The first row must give the zip name. Every other row is either a
``cookies`` row or ``<verb> <source> as <destination>``. Tokens cannot
contain spaces; ``save-text`` content uses underscores in their place.
Parsing stops at the first bad row.
"""

from dataclasses import dataclass
from pathlib import Path

from answersheets.errors import EmptyScriptError, FileSystemError, ScriptFormatError
from utils.patterns import DISALLOWED_PATH_CHARS, LINE_BREAK, TOKEN_SEPARATOR, ZIP_NAME

ZIP_NAME_VERB = "zip-name"
COOKIES_VERB = "cookies"
SAVE_FILE_VERB = "save-file"
SAVE_PDF_VERB = "save-pdf"
SAVE_TEXT_VERB = "save-text"

SAVE_VERBS = (SAVE_FILE_VERB, SAVE_PDF_VERB, SAVE_TEXT_VERB)


# ---- Directives ----

@dataclass(frozen=True)
class Directive:
    """One validated instruction. ``line`` is the 1-based row in the raw text."""

    line: int


@dataclass(frozen=True)
class ArchiveName(Directive):
    name: str


@dataclass(frozen=True)
class Cookies(Directive):
    encoded_blob: str


@dataclass(frozen=True)
class SaveFile(Directive):
    source: str
    destination: str


@dataclass(frozen=True)
class SavePdf(Directive):
    source: str
    destination: str


@dataclass(frozen=True)
class SaveText(Directive):
    content: str
    destination: str


_SAVE_TYPES = {
    SAVE_FILE_VERB: SaveFile,
    SAVE_PDF_VERB: SavePdf,
    SAVE_TEXT_VERB: SaveText,
}


# ---- Tokenizing ----

def _split_rows(text: str) -> list[tuple[int, list[str]]]:
    """Split *text* into (line number, tokens) pairs, dropping blanks and comments.

    Line numbers are counted on the raw text so error messages point at the
    line the user sees in an editor.
    """
    rows = []
    line_no = 1
    stripped = text.lstrip()
    line_no += text[:len(text) - len(stripped)].count("\n")
    position = 0
    for match in LINE_BREAK.finditer(stripped):
        rows.append((line_no, stripped[position:match.start()]))
        line_no += match.group().count("\n") or 1
        position = match.end()
    rows.append((line_no, stripped[position:]))

    result = []
    for number, line in rows:
        line = line.strip()
        if line == "" or line.startswith("#"):
            continue
        result.append((number, TOKEN_SEPARATOR.split(line)))
    return result


# ---- Validation ----

def _check_destination(destination: str, line: int) -> None:
    """Reject destinations that could escape the output directory or upset a filesystem."""
    if DISALLOWED_PATH_CHARS.search(destination):
        raise ScriptFormatError(
            "The file name to save as may not contain control characters or any of "
            "* ? & < > \" ` | ' : \\. Found " + repr(destination), line)
    if destination.startswith("/"):
        raise ScriptFormatError(
            f"The file name to save as must be a relative path. Found {destination!r}", line)
    segments = destination.split("/")
    if any(segment in ("", ".", "..") for segment in segments):
        raise ScriptFormatError(
            "The file name to save as may not contain empty, '.' or '..' path segments. "
            f"Found {destination!r}", line)


def _parse_zip_name(tokens: list[str], line: int) -> ArchiveName:
    if tokens[0] != ZIP_NAME_VERB:
        raise ScriptFormatError(
            f"The first instruction must give the zip-name. {tokens[0]} found.", line)
    if len(tokens) != 2:
        raise ScriptFormatError(
            "The zip-name line should only say zip-name <filename>. "
            "The filename cannot contain spaces.", line)
    if not ZIP_NAME.match(tokens[1]):
        raise ScriptFormatError(
            "The zip name may only contain the characters -, _, ., a-z, A-Z and 0-9. "
            f"Found {tokens[1]!r}", line)
    return ArchiveName(line=line, name=tokens[1])


def _parse_action(tokens: list[str], line: int) -> Directive:
    verb = tokens[0]
    if verb == ZIP_NAME_VERB:
        raise ScriptFormatError("zip-name may only be given once, on the first line.", line)

    if verb == COOKIES_VERB:
        if len(tokens) != 2:
            raise ScriptFormatError(
                "The cookies line should only say cookies <base64-data>. "
                f"Found {' '.join(tokens)!r}", line)
        return Cookies(line=line, encoded_blob=tokens[1])

    if verb not in SAVE_VERBS:
        raise ScriptFormatError(
            "After the first line, the only recognised actions are cookies, "
            f"{', '.join(SAVE_VERBS)}. {verb} found.", line)
    if len(tokens) != 4 or tokens[2] != "as":
        raise ScriptFormatError(
            f"{verb} actions must be of the form {verb} <source> as <file/path/in/zip>. "
            "The source and file path cannot contain spaces. "
            f"Found {' '.join(tokens)!r}", line)

    _check_destination(tokens[3], line)
    return _SAVE_TYPES[verb](line, tokens[1], tokens[3])


def parse_script(text: str) -> list[Directive]:
    """Parse instruction *text* into an ordered list of validated directives.

    Raises:
        EmptyScriptError: if no directives remain after dropping blanks and comments.
        ScriptFormatError: on the first malformed row.
    """
    rows = _split_rows(text)
    if not rows:
        raise EmptyScriptError("Instruction script is empty!")

    directives: list[Directive] = []
    for index, (line, tokens) in enumerate(rows):
        if index == 0:
            directives.append(_parse_zip_name(tokens, line))
        else:
            directives.append(_parse_action(tokens, line))
    return directives


def load_script(path: Path) -> list[Directive]:
    """Read the instruction file at *path* as UTF-8 and parse it."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileSystemError(f"Cannot read instruction file {path}: {exc}") from exc
    return parse_script(text)
