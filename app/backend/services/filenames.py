"""
Upload filename helpers.

Some multipart clients send UTF-8 filenames that end up decoded as latin-1,
which turns Thai names into mojibake. repair_filename undoes that one case
and leaves correctly decoded names alone.
"""

DEFAULT_FILENAME = "unnamed.pdf"


def repair_filename(filename: str | None, enabled: bool = True) -> str:
    """
    Re-decode a latin-1 mis-decoded filename as UTF-8.

    Args:
        filename: Filename as received from the upload transport.
        enabled: When False, only the missing-name default is applied.

    Returns:
        The repaired filename, the original one if it was not mojibake,
        or DEFAULT_FILENAME when no name was sent.
    """
    if not filename:
        return DEFAULT_FILENAME
    if not enabled:
        return filename

    try:
        repaired = filename.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        # Not representable as latin-1, or not UTF-8 underneath: already correct
        return filename

    return repaired
