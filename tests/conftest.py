"""Shared test doubles: in-memory VCS gateway, scripted AI client, recording surface."""

import asyncio
import shutil
import subprocess
from pathlib import Path

import pytest

from commitcraft.git import FileChange, FileStatus, NoStagedChangesError, validate_commit_message
from commitcraft.llm import LLMClient, LLMResponse


class FakeGateway:
    """In-memory VcsGateway.

    Mutations notify observers when `auto_notify` is on. Set `read_gate` to an
    asyncio.Event to make `list_changes()` take its snapshot and then hold the
    result until the test releases it.
    """

    def __init__(self, staged=(), unstaged=(), diff_text="", auto_notify=True):
        self.staged = list(staged)
        self.unstaged = list(unstaged)
        self.diff_text = diff_text
        self.auto_notify = auto_notify
        self.calls = []
        self.commits = []
        self.listeners = []
        self.read_gate: asyncio.Event | None = None

    # reads

    async def list_staged(self):
        self.calls.append(('list_staged',))
        return list(self.staged)

    async def list_unstaged(self):
        self.calls.append(('list_unstaged',))
        return list(self.unstaged)

    async def list_changes(self):
        self.calls.append(('list_changes',))
        snapshot = (list(self.staged), list(self.unstaged))
        if self.read_gate is not None:
            await self.read_gate.wait()
        return snapshot

    async def diff(self, staged):
        self.calls.append(('diff', staged))
        return self.diff_text

    # mutations

    @staticmethod
    def _pop(changes, path):
        for change in changes:
            if change.path == path:
                changes.remove(change)
                return change
        return None

    @staticmethod
    def _contains(changes, path):
        return any(change.path == path for change in changes)

    async def stage(self, path):
        self.calls.append(('stage', path))
        change = self._pop(self.unstaged, path)
        if change is not None and not self._contains(self.staged, path):
            status = FileStatus.ADDED if change.status is FileStatus.UNTRACKED else change.status
            self.staged.append(FileChange(path, status))
        self._changed()

    async def unstage(self, path):
        self.calls.append(('unstage', path))
        change = self._pop(self.staged, path)
        if change is not None and not self._contains(self.unstaged, path):
            status = FileStatus.UNTRACKED if change.status is FileStatus.ADDED else change.status
            self.unstaged.append(FileChange(path, status))
        self._changed()

    async def discard(self, path):
        self.calls.append(('discard', path))
        self._pop(self.unstaged, path)
        self._changed()

    async def stage_all(self):
        self.calls.append(('stage_all',))
        for change in list(self.unstaged):
            await self.stage(change.path)

    async def unstage_all(self):
        self.calls.append(('unstage_all',))
        for change in list(self.staged):
            await self.unstage(change.path)

    async def discard_all(self):
        self.calls.append(('discard_all',))
        self.unstaged = []
        self._changed()

    async def commit(self, message):
        validate_commit_message(message)
        if not self.staged:
            raise NoStagedChangesError("No staged changes to commit. Stage files first.")
        self.calls.append(('commit', message))
        self.commits.append(message)
        self.staged = []
        self._changed()
        return ['/repo']

    # notifications

    def on_change(self, callback):
        self.listeners.append(callback)

    def emit(self):
        for callback in list(self.listeners):
            callback()

    def _changed(self):
        if self.auto_notify:
            self.emit()

    def replace(self, staged=(), unstaged=()):
        """Simulate the backend changing underneath the presenter."""
        self.staged = list(staged)
        self.unstaged = list(unstaged)
        self.emit()


class FakeAI(LLMClient):
    """LLMClient returning a scripted reply or raising a scripted error."""

    def __init__(self, reply="feat(core): add change tracking", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    @property
    def name(self) -> str:
        return "Fake (test)"

    def generate(self, prompt: str) -> LLMResponse:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, model="fake")


class RecordingSurface:
    """PresentationSurface that remembers everything pushed to it."""

    def __init__(self):
        self.renders = []
        self.messages = []
        self.infos = []

    def render(self, projection):
        self.renders.append(projection)

    def set_message(self, text):
        self.messages.append(text)

    def show_info(self, text):
        self.infos.append(text)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def fake_ai():
    return FakeAI()


@pytest.fixture
def surface():
    return RecordingSurface()


def run_git(cwd: Path, *args: str) -> str:
    result = subprocess.run(['git', *args], cwd=cwd, capture_output=True, text=True, check=True)
    return result.stdout


requires_git = pytest.mark.skipif(shutil.which('git') is None, reason="git executable not available")


@pytest.fixture
def make_repo(tmp_path):
    """Return a factory creating a git repository with one committed file."""
    def _make(name="repo", initial_commit=True):
        root = (tmp_path / name).resolve()
        root.mkdir()
        run_git(root, 'init', '-q')
        run_git(root, 'config', 'user.email', 'dev@example.com')
        run_git(root, 'config', 'user.name', 'Dev')
        run_git(root, 'config', 'commit.gpgsign', 'false')
        if initial_commit:
            (root / 'README.md').write_text("hello\n")
            run_git(root, 'add', 'README.md')
            run_git(root, 'commit', '-q', '-m', 'chore: initial commit')
        return root
    return _make
