"""Byte-size parsing for the ``--redownload-smaller-than`` threshold."""

from answersheets.errors import InvalidSizeError
from utils.patterns import BYTE_SIZE

BYTE_UNITS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}


def parse_byte_size(text: str) -> int:
    """Parse a human-readable size threshold into a byte count.

    Accepts a whole number followed by one of B, KB, MB or GB,
    case-insensitive, optionally separated by whitespace.

    Examples:
        "512B" -> 512, "5KB" -> 5120, "2mb" -> 2097152

    Raises:
        InvalidSizeError: if *text* is not of that form.
    """
    match = BYTE_SIZE.match(str(text).strip())
    if not match:
        raise InvalidSizeError(
            f"Cannot understand the size {text!r}. "
            "Use a whole number followed by B, KB, MB or GB, for example 5KB."
        )
    number, unit = match.groups()
    return int(number) * BYTE_UNITS[unit.upper()]
