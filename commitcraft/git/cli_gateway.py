"""Git CLI Gateway - VcsGateway backed by the git executable."""

import asyncio
import logging
import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable, TypeVar

from commitcraft.git.gateway import (
    ChangeCallback, GitError, NoStagedChangesError, validate_commit_message,
)
from commitcraft.git.models import FileChange
from commitcraft.git.status import FileStatus, map_status

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Paths are literal: a file named "a*.txt" must never match "ab.txt"
LITERAL_PATHSPECS = {'GIT_LITERAL_PATHSPECS': '1'}

STATUS_ARGS = ('status', '--porcelain=v1', '-z', '--untracked-files=all')


def parse_porcelain(output: str, root: Path) -> tuple[list[FileChange], list[FileChange]]:
    """Split `git status --porcelain=v1 -z` output into (staged, unstaged)."""
    staged: list[FileChange] = []
    unstaged: list[FileChange] = []
    entries = output.split('\0')
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        x, y, rel = entry[0], entry[1], entry[3:]
        original = None
        # Renames and copies are followed by the source path
        if x in 'RC' or y in 'RC':
            if i < len(entries):
                original = str(root / entries[i])
            i += 1
        path = str(root / rel)

        if x == '?' and y == '?':
            unstaged.append(FileChange(path, FileStatus.UNTRACKED))
            continue
        if x == '!':
            continue
        if x != ' ':
            staged.append(FileChange(path, map_status(x), original))
        if y != ' ':
            unstaged.append(FileChange(path, map_status(y), original if y == 'R' else None))
    return staged, unstaged


class GitCliGateway:
    """Reads and mutates one or more git repositories through subprocess calls.

    Blocking git calls run in worker threads so the event loop is never held.
    There is no native event source for a plain working tree, so observers are
    notified after every mutation and whenever `poll()` sees the status change.
    """

    def __init__(self, paths: Iterable[str | os.PathLike] | None = None):
        self._verify_git_available()
        self._roots = self._discover_roots(paths if paths is not None else [Path.cwd()])
        self._listeners: list[ChangeCallback] = []
        self._fingerprint: tuple[str, ...] | None = None

    @property
    def roots(self) -> list[str]:
        return [str(root) for root in self._roots]

    # -- git plumbing -------------------------------------------------------

    def _run_git(self, *args: str, cwd: Path | None = None) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=cwd,
                env={**os.environ, **LITERAL_PATHSPECS},
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        self._run_git('--version')

    def _discover_roots(self, paths: Iterable[str | os.PathLike]) -> list[Path]:
        roots: list[Path] = []
        for raw in paths:
            candidate = Path(raw).expanduser().absolute()
            if not candidate.is_dir():
                candidate = candidate.parent
            if not candidate.is_dir():
                logger.warning("Skipping %s: directory does not exist", raw)
                continue
            try:
                top = Path(self._run_git('rev-parse', '--show-toplevel', cwd=candidate).strip())
            except GitError:
                logger.warning("Skipping %s: not inside a git repository", raw)
                continue
            if top not in roots:
                roots.append(top)
        return roots

    def _has_head(self, root: Path) -> bool:
        try:
            self._run_git('rev-parse', '--verify', '-q', 'HEAD', cwd=root)
            return True
        except GitError:
            return False

    def _read_status(self, root: Path, *pathspec: str) -> tuple[list[FileChange], list[FileChange]]:
        args = STATUS_ARGS + (('--', *pathspec) if pathspec else ())
        return parse_porcelain(self._run_git(*args, cwd=root), root)

    def _locate(self, path: str) -> tuple[Path, str]:
        """Return (root, path relative to root) for a file inside a known repository."""
        candidates = [Path(os.path.abspath(path)), Path(path).resolve()]
        # Deepest root first so nested repositories win
        for root in sorted(self._roots, key=lambda r: len(r.parts), reverse=True):
            for candidate in candidates:
                try:
                    return root, candidate.relative_to(root).as_posix()
                except ValueError:
                    continue
        raise GitError(f"{path} is not inside a known repository")

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("Change observer %r failed", callback)

    def _each_root(self, action: Callable[[Path], T], what: str) -> list[T]:
        """Run action for every root; keep going past failures, then report them."""
        results: list[T] = []
        failed: list[str] = []
        for root in self._roots:
            try:
                results.append(action(root))
            except GitError as e:
                logger.error("%s failed in %s: %s", what, root, e)
                failed.append(str(root))
        if failed:
            raise GitError(f"{what} failed in: {', '.join(failed)}")
        return results

    # -- reads --------------------------------------------------------------

    def _collect(self) -> tuple[list[FileChange], list[FileChange]]:
        """One status read per root, split into (staged, unstaged)."""
        staged: list[FileChange] = []
        unstaged: list[FileChange] = []
        for root in self._roots:
            try:
                index_changes, worktree_changes = self._read_status(root)
            except GitError as e:
                logger.warning("Could not read status of %s: %s", root, e)
                continue
            staged.extend(index_changes)
            unstaged.extend(worktree_changes)
        return staged, unstaged

    async def list_staged(self) -> list[FileChange]:
        staged, _ = await asyncio.to_thread(self._collect)
        return staged

    async def list_unstaged(self) -> list[FileChange]:
        _, unstaged = await asyncio.to_thread(self._collect)
        return unstaged

    async def list_changes(self) -> tuple[list[FileChange], list[FileChange]]:
        return await asyncio.to_thread(self._collect)

    def _diff(self, staged: bool) -> str:
        args = ('diff', '--cached') if staged else ('diff',)
        multi_root = len(self._roots) > 1
        segments = []
        for root in self._roots:
            try:
                text = self._run_git(*args, cwd=root)
            except (GitError, OSError) as e:
                logger.warning("Diff unavailable for %s: %s", root, e)
                continue
            if not text.strip():
                continue
            if multi_root:
                segments.append(f"--- Repository: {root} ---\n{text}\n")
            else:
                segments.append(text)
        return "\n".join(segments)

    async def diff(self, staged: bool) -> str:
        return await asyncio.to_thread(self._diff, staged)

    # -- single-file mutations ----------------------------------------------

    def _stage(self, path: str) -> None:
        root, rel = self._locate(path)
        self._run_git('add', '-A', '--', rel, cwd=root)

    def _unstage(self, path: str) -> None:
        root, rel = self._locate(path)
        if self._has_head(root):
            self._run_git('reset', '-q', '--', rel, cwd=root)
        else:
            self._run_git('rm', '--cached', '-r', '-q', '--ignore-unmatch', '--', rel, cwd=root)

    def _restore(self, root: Path, rels: list[str]) -> None:
        if rels:
            self._run_git('checkout', '-q', '--', *rels, cwd=root)

    def _clean(self, root: Path, rels: list[str]) -> None:
        if rels:
            self._run_git('clean', '-f', '-q', '--', *rels, cwd=root)

    def _discard(self, path: str) -> None:
        root, rel = self._locate(path)
        target = str(root / rel)
        try:
            _, worktree = self._read_status(root, rel)
        except GitError as e:
            logger.warning("Status unknown for %s, trying restore and clean: %s", path, e)
            self._discard_best_effort(root, rel)
            return

        change = next((c for c in worktree if c.path == target), None)
        if change is None:
            logger.debug("Nothing to discard for %s", path)
            return
        if change.status is FileStatus.UNTRACKED:
            self._clean(root, [rel])
        else:
            self._restore(root, [rel])

    def _discard_best_effort(self, root: Path, rel: str) -> None:
        for strategy in (self._restore, self._clean):
            try:
                strategy(root, [rel])
            except GitError as e:
                logger.warning("%s of %s failed: %s", strategy.__name__.lstrip('_'), rel, e)

    async def _mutate(self, func: Callable[..., object], *args: object) -> None:
        try:
            await asyncio.to_thread(func, *args)
        finally:
            self._notify()

    async def stage(self, path: str) -> None:
        await self._mutate(self._stage, path)

    async def unstage(self, path: str) -> None:
        await self._mutate(self._unstage, path)

    async def discard(self, path: str) -> None:
        await self._mutate(self._discard, path)

    # -- bulk mutations -----------------------------------------------------

    def _stage_root(self, root: Path) -> None:
        self._run_git('add', '-A', cwd=root)

    def _unstage_root(self, root: Path) -> None:
        if self._has_head(root):
            self._run_git('reset', '-q', cwd=root)
        else:
            self._run_git('rm', '--cached', '-r', '-q', '--ignore-unmatch', '--', '.', cwd=root)

    def _discard_root(self, root: Path) -> None:
        _, worktree = self._read_status(root)
        tracked = [Path(c.path).relative_to(root).as_posix()
                   for c in worktree if c.status is not FileStatus.UNTRACKED]
        untracked = [Path(c.path).relative_to(root).as_posix()
                     for c in worktree if c.status is FileStatus.UNTRACKED]
        self._restore(root, tracked)
        self._clean(root, untracked)

    async def stage_all(self) -> None:
        await self._mutate(self._each_root, self._stage_root, "stage all")

    async def unstage_all(self) -> None:
        await self._mutate(self._each_root, self._unstage_root, "unstage all")

    async def discard_all(self) -> None:
        await self._mutate(self._each_root, self._discard_root, "discard all")

    # -- commit -------------------------------------------------------------

    def _roots_with_staged(self) -> list[Path]:
        roots = []
        for root in self._roots:
            try:
                staged, _ = self._read_status(root)
            except GitError as e:
                logger.warning("Could not read status of %s: %s", root, e)
                continue
            if staged:
                roots.append(root)
        return roots

    def _commit(self, message: str) -> list[str]:
        targets = self._roots_with_staged()
        if not targets:
            raise NoStagedChangesError("No staged changes to commit. Stage files first.")

        committed = []
        for root in targets:
            try:
                self._run_git('commit', '-q', '-m', message, cwd=root)
                committed.append(str(root))
            except GitError as e:
                logger.error("Commit failed in %s: %s", root, e)
        if not committed:
            raise GitError("Commit failed in every repository with staged changes")
        return committed

    async def commit(self, message: str) -> list[str]:
        validate_commit_message(message)
        try:
            return await asyncio.to_thread(self._commit, message)
        finally:
            self._notify()

    # -- notifications ------------------------------------------------------

    def on_change(self, callback: ChangeCallback) -> None:
        self._listeners.append(callback)

    def _status_fingerprint(self) -> tuple[str, ...]:
        parts = []
        for root in self._roots:
            try:
                parts.append(self._run_git(*STATUS_ARGS, cwd=root))
            except GitError:
                parts.append("")
        return tuple(parts)

    async def poll(self) -> bool:
        """Notify observers if the working-tree status changed since the last poll."""
        fingerprint = await asyncio.to_thread(self._status_fingerprint)
        if fingerprint == self._fingerprint:
            return False
        self._fingerprint = fingerprint
        self._notify()
        return True
