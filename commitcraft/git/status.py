"""Status Mapper - Normalize backend change codes into FileStatus."""

from enum import Enum


class FileStatus(str, Enum):
    """Closed set of change classifications shown to the user."""
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    UNTRACKED = "untracked"
    IGNORED = "ignored"


# Editor git API numeric codes (index and working tree variants)
_NUMERIC_CODES = {
    0: FileStatus.MODIFIED,
    1: FileStatus.ADDED,
    2: FileStatus.DELETED,
    3: FileStatus.RENAMED,
    5: FileStatus.MODIFIED,
    6: FileStatus.DELETED,
    7: FileStatus.UNTRACKED,
    8: FileStatus.IGNORED,
}

# `git status --porcelain` column letters
_PORCELAIN_CODES = {
    'M': FileStatus.MODIFIED,
    'T': FileStatus.MODIFIED,
    'A': FileStatus.ADDED,
    'C': FileStatus.ADDED,
    'D': FileStatus.DELETED,
    'R': FileStatus.RENAMED,
    '?': FileStatus.UNTRACKED,
    '!': FileStatus.IGNORED,
}

STATUS_GLYPHS = {
    FileStatus.MODIFIED: 'M',
    FileStatus.ADDED: 'A',
    FileStatus.DELETED: 'D',
    FileStatus.RENAMED: 'R',
    FileStatus.UNTRACKED: 'U',
    FileStatus.IGNORED: 'I',
}


def map_status(raw_code: int | str | None) -> FileStatus:
    """Map a backend status code to FileStatus.

    Never raises. Unknown codes fall back to MODIFIED so a file is never
    dropped from view because the backend grew a new status.
    """
    if isinstance(raw_code, FileStatus):
        return raw_code
    if isinstance(raw_code, bool):
        return FileStatus.MODIFIED
    if isinstance(raw_code, int):
        return _NUMERIC_CODES.get(raw_code, FileStatus.MODIFIED)
    if isinstance(raw_code, str):
        code = raw_code.strip()
        if code.isdigit():
            return _NUMERIC_CODES.get(int(code), FileStatus.MODIFIED)
        if len(code) == 1:
            return _PORCELAIN_CODES.get(code.upper(), FileStatus.MODIFIED)
        try:
            return FileStatus(code.lower())
        except ValueError:
            return FileStatus.MODIFIED
    return FileStatus.MODIFIED


def status_glyph(status: FileStatus) -> str:
    return STATUS_GLYPHS.get(status, 'M')
