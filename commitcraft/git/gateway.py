"""VCS Gateway - Capability interface a version-control backend implements."""

from typing import Callable, Protocol, runtime_checkable

from commitcraft.git.models import FileChange


ChangeCallback = Callable[[], None]


class GitError(Exception):
    """Raised when a version-control operation fails."""
    pass


class ValidationError(GitError):
    """Raised when a commit request is rejected before touching the backend."""
    pass


class NoStagedChangesError(GitError):
    """Raised when committing with nothing staged in any repository."""
    pass


@runtime_checkable
class VcsGateway(Protocol):
    """Protocol for reading and mutating working-tree state.

    All aggregate operations cover every repository root known to the
    backend. Mutations are idempotent.
    """

    async def list_staged(self) -> list[FileChange]:
        """Files with changes in the index. Empty when no repository is attached."""
        ...

    async def list_unstaged(self) -> list[FileChange]:
        """Files with working-tree changes, untracked files included."""
        ...

    async def list_changes(self) -> tuple[list[FileChange], list[FileChange]]:
        """(staged, unstaged) taken from a single read of the backend."""
        ...

    async def diff(self, staged: bool) -> str:
        """Diff text across all roots. Empty string when retrieval fails."""
        ...

    async def stage(self, path: str) -> None:
        ...

    async def unstage(self, path: str) -> None:
        ...

    async def discard(self, path: str) -> None:
        """Drop working-tree changes: delete untracked files, restore tracked ones."""
        ...

    async def stage_all(self) -> None:
        ...

    async def unstage_all(self) -> None:
        ...

    async def discard_all(self) -> None:
        ...

    async def commit(self, message: str) -> list[str]:
        """Commit staged changes in every root that has some.

        Returns the roots that committed. Raises ValidationError for a blank
        message and NoStagedChangesError when nothing is staged.
        """
        ...

    def on_change(self, callback: ChangeCallback) -> None:
        """Register an observer called after every backend state change."""
        ...


def validate_commit_message(message: str | None) -> str:
    """Return the message unchanged, or raise ValidationError if it is blank."""
    if not message or not message.strip():
        raise ValidationError("Commit message is empty. Write or generate a message first.")
    return message
