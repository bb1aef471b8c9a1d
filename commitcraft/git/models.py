"""Change Set Models - Immutable snapshots of staged and unstaged files."""

from dataclasses import dataclass, field
from typing import ClassVar, Iterable

from commitcraft.git.status import FileStatus, map_status


@dataclass(frozen=True)
class FileChange:
    """One file's deviation from the last known committed state."""
    path: str
    status: FileStatus = FileStatus.MODIFIED
    original_path: str | None = None

    def __post_init__(self):
        object.__setattr__(self, 'status', map_status(self.status))
        # Only renames carry the previous path
        if self.status is not FileStatus.RENAMED:
            object.__setattr__(self, 'original_path', None)


def _unique_by_path(changes: Iterable[FileChange]) -> tuple[FileChange, ...]:
    seen: set[str] = set()
    unique = []
    for change in changes:
        if change.path in seen:
            continue
        seen.add(change.path)
        unique.append(change)
    return tuple(unique)


@dataclass(frozen=True)
class ChangeSet:
    """Staged and unstaged files at one point in time."""
    staged: tuple[FileChange, ...] = field(default_factory=tuple)
    unstaged: tuple[FileChange, ...] = field(default_factory=tuple)

    EMPTY: ClassVar['ChangeSet']

    @classmethod
    def build(cls, staged: Iterable[FileChange], unstaged: Iterable[FileChange]) -> 'ChangeSet':
        """Build a snapshot, keeping the first entry for a repeated path."""
        return cls(staged=_unique_by_path(staged), unstaged=_unique_by_path(unstaged))

    @property
    def total(self) -> int:
        return len(self.staged) + len(self.unstaged)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def has_staged(self) -> bool:
        return len(self.staged) > 0


ChangeSet.EMPTY = ChangeSet()
