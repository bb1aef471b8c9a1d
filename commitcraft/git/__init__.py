"""Git Operations Package"""

from commitcraft.git.status import FileStatus, map_status, status_glyph
from commitcraft.git.models import FileChange, ChangeSet
from commitcraft.git.gateway import (
    VcsGateway, GitError, ValidationError, NoStagedChangesError, validate_commit_message,
)
from commitcraft.git.cli_gateway import GitCliGateway, parse_porcelain

__all__ = [
    "FileStatus",
    "map_status",
    "status_glyph",
    "FileChange",
    "ChangeSet",
    "VcsGateway",
    "GitError",
    "ValidationError",
    "NoStagedChangesError",
    "validate_commit_message",
    "GitCliGateway",
    "parse_porcelain",
]
