"""Pre-compiled regex patterns for the answer sheet tools.

All patterns are compiled once at module import so the script parser and
size parser do not recompile them for every line.

Usage:
    from utils.patterns import LINE_BREAK, ZIP_NAME

    lines = LINE_BREAK.split(text)
"""

import re

# Line endings, swallowing trailing blanks before them and any leading
# whitespace (including further blank lines) on the next line
LINE_BREAK = re.compile(r'[ \t]*[\r\n]\s*')

# Separator between tokens on one instruction line
TOKEN_SEPARATOR = re.compile(r'[ \t]+')

# Names usable for the output directory and archive: "quiz-1_attempts.v2"
ZIP_NAME = re.compile(r'^[-_.a-zA-Z0-9]+$')

# Characters that may not appear in a destination path: C0 and C1 control
# characters plus the characters that are hostile on common filesystems
# or shells. Forward slash is allowed, it nests the output.
DISALLOWED_PATH_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f*?&<>\"`|':\\]")

# Human-readable byte sizes: "512B", "5KB", "10 mb"
BYTE_SIZE = re.compile(r'^(\d+)\s*(B|KB|MB|GB)$', re.IGNORECASE)
