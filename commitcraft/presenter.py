"""Sync Presenter - Mirror VCS state into a presentation surface and relay user intents."""

import asyncio
import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import PurePath
from types import MappingProxyType
from typing import Mapping, Protocol, runtime_checkable

from commitcraft.git.gateway import VcsGateway
from commitcraft.git.models import ChangeSet, FileChange
from commitcraft.git.status import status_glyph
from commitcraft.orchestrator import CommitMessageOrchestrator, is_guidance

logger = logging.getLogger(__name__)

class UnknownFileError(LookupError):
    """Raised when a presentation id does not match any file in the current snapshot."""
    pass


def resource_id(path: str) -> str:
    """Stable opaque id for a file path."""
    return hashlib.sha1(path.encode('utf-8')).hexdigest()[:12]


def split_display_path(path: str, root: str | None = None) -> tuple[str, str]:
    """Return (file name, parent directory) with the parent relative to root when possible."""
    pure = PurePath(path)
    if root:
        try:
            pure = pure.relative_to(root)
        except ValueError:
            pass
    return pure.name, pure.parent.as_posix()


@dataclass(frozen=True)
class ResourceView:
    """One file as the presentation surface sees it."""
    id: str
    name: str
    path: str
    status: str
    glyph: str

    @classmethod
    def from_change(cls, change: FileChange, root: str | None = None) -> 'ResourceView':
        name, parent = split_display_path(change.path, root)
        return cls(
            id=resource_id(change.path),
            name=name,
            path=parent,
            status=change.status.value,
            glyph=status_glyph(change.status),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "status": self.status,
            "glyph": self.glyph,
        }


@dataclass(frozen=True)
class Projection:
    """Read-only view of a ChangeSet, published as one unit."""
    changes: ChangeSet
    staged: tuple[ResourceView, ...]
    unstaged: tuple[ResourceView, ...]
    paths: Mapping[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def build(cls, changes: ChangeSet, root: str | None = None) -> 'Projection':
        paths = {resource_id(c.path): c.path for c in changes.staged + changes.unstaged}
        return cls(
            changes=changes,
            staged=tuple(ResourceView.from_change(c, root) for c in changes.staged),
            unstaged=tuple(ResourceView.from_change(c, root) for c in changes.unstaged),
            paths=MappingProxyType(paths),
        )

    def path_for(self, file_id: str) -> str | None:
        return self.paths.get(file_id)

    def to_dict(self) -> dict:
        return {
            "staged": [view.to_dict() for view in self.staged],
            "unstaged": [view.to_dict() for view in self.unstaged],
            "counts": {"staged": len(self.staged), "unstaged": len(self.unstaged)},
        }


@runtime_checkable
class PresentationSurface(Protocol):
    """Anything that can show a projection and a commit message."""

    def render(self, projection: Projection) -> None:
        ...

    def set_message(self, text: str) -> None:
        ...

    def show_info(self, text: str) -> None:
        ...


class SyncPresenter:
    """Keeps a presentation surface in step with a VcsGateway.

    The presenter never edits its projection in response to a user action.
    It forwards the action to the gateway and republishes only after the
    gateway's change notification triggers `refresh()`.
    """

    def __init__(self, vcs: VcsGateway, surface: PresentationSurface,
                 orchestrator: CommitMessageOrchestrator | None = None,
                 root: str | None = None):
        self.vcs = vcs
        self.surface = surface
        self.orchestrator = orchestrator
        self.root = str(root) if root else None
        self._projection = Projection.build(ChangeSet.EMPTY, self.root)
        self._refresh_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()
        self._generation: asyncio.Future | None = None
        self._message = ""
        vcs.on_change(self._on_change)

    @property
    def snapshot(self) -> ChangeSet:
        return self._projection.changes

    @property
    def projection(self) -> Projection:
        return self._projection

    @property
    def message(self) -> str:
        return self._message

    # -- state sync ---------------------------------------------------------

    def _on_change(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Change notification outside an event loop; refresh skipped")
            return
        task = loop.create_task(self.refresh())
        self._pending.add(task)
        task.add_done_callback(self._refresh_done)

    def _refresh_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Refresh failed: %s", task.exception())

    async def refresh(self) -> Projection:
        """Re-read the gateway and publish a new projection.

        Calls are serialized and each one reads the backend when it runs, so
        overlapping refreshes end on the latest state. Both partitions come
        from one `list_changes()` read.
        """
        async with self._refresh_lock:
            staged, unstaged = await self.vcs.list_changes()
            projection = Projection.build(ChangeSet.build(staged, unstaged), self.root)
            self._projection = projection
            self.surface.render(projection)
            return projection

    async def settle(self) -> None:
        """Wait for refreshes triggered by change notifications."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # -- relays -------------------------------------------------------------

    def _resolve(self, file_id: str) -> str:
        path = self._projection.path_for(file_id)
        if path is None:
            raise UnknownFileError(f"No file with id {file_id} in the current change set")
        return path

    async def request_stage(self, file_id: str) -> None:
        await self.vcs.stage(self._resolve(file_id))

    async def request_unstage(self, file_id: str) -> None:
        await self.vcs.unstage(self._resolve(file_id))

    async def request_discard(self, file_id: str) -> None:
        await self.vcs.discard(self._resolve(file_id))

    async def request_stage_all(self) -> None:
        await self.vcs.stage_all()

    async def request_unstage_all(self) -> None:
        await self.vcs.unstage_all()

    async def request_discard_all(self) -> None:
        await self.vcs.discard_all()

    # -- commit message channel ----------------------------------------------

    def set_message(self, text: str) -> None:
        self._message = text
        self.surface.set_message(text)

    async def _generate(self) -> str:
        text = await self.orchestrator.generate()
        if is_guidance(text):
            self.surface.show_info(text)
        else:
            self.set_message(text)
        return text

    async def request_generate(self) -> str:
        """Generate a commit message; joins the generation already in flight, if any."""
        if self.orchestrator is None:
            raise RuntimeError("No commit message orchestrator attached")
        if self._generation is None or self._generation.done():
            self._generation = asyncio.ensure_future(self._generate())
        return await asyncio.shield(self._generation)

    async def request_commit(self, text: str | None = None) -> list[str]:
        message = self._message if text is None else text
        roots = await self.vcs.commit(message)
        self.set_message("")
        return roots

    async def close(self) -> None:
        for task in list(self._pending):
            task.cancel()
        if self._generation is not None and not self._generation.done():
            self._generation.cancel()
        await asyncio.gather(*self._pending, return_exceptions=True)
