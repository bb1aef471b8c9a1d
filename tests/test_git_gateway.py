"""
Tests for GitCliGateway against real temporary repositories.

Run with:
    pytest tests/test_git_gateway.py -v
"""

import shutil
from pathlib import Path

import pytest

from commitcraft.git import (
    FileStatus, GitCliGateway, GitError, NoStagedChangesError, ValidationError,
    VcsGateway, parse_porcelain,
)

from conftest import requires_git, run_git


def paths(changes):
    return [c.path for c in changes]


def by_path(changes):
    return {c.path: c for c in changes}


# ---------------------------------------------------------------------------
# Porcelain parsing
# ---------------------------------------------------------------------------

class TestParsePorcelain:

    def test_splits_index_and_worktree(self):
        output = "?? new.txt\0 M a.py\0M  b.py\0MM c.py\0A  d.py\0 D e.py\0"
        staged, unstaged = parse_porcelain(output, Path("/r"))

        assert [(c.path, c.status) for c in staged] == [
            ("/r/b.py", FileStatus.MODIFIED),
            ("/r/c.py", FileStatus.MODIFIED),
            ("/r/d.py", FileStatus.ADDED),
        ]
        assert [(c.path, c.status) for c in unstaged] == [
            ("/r/new.txt", FileStatus.UNTRACKED),
            ("/r/a.py", FileStatus.MODIFIED),
            ("/r/c.py", FileStatus.MODIFIED),
            ("/r/e.py", FileStatus.DELETED),
        ]

    def test_rename_carries_original_path(self):
        staged, unstaged = parse_porcelain("R  new.py\0old.py\0 M z.py\0", Path("/r"))
        assert staged[0].path == "/r/new.py"
        assert staged[0].status is FileStatus.RENAMED
        assert staged[0].original_path == "/r/old.py"
        assert paths(unstaged) == ["/r/z.py"]

    def test_ignored_entries_skipped(self):
        staged, unstaged = parse_porcelain("!! build/\0", Path("/r"))
        assert staged == [] and unstaged == []

    def test_empty_output(self):
        assert parse_porcelain("", Path("/r")) == ([], [])


# ---------------------------------------------------------------------------
# Reads and single-file mutations
# ---------------------------------------------------------------------------

@requires_git
class TestSingleFile:

    def test_satisfies_protocol(self, make_repo):
        assert isinstance(GitCliGateway([make_repo()]), VcsGateway)

    @pytest.mark.asyncio
    async def test_untracked_stage_unstage_round_trip(self, make_repo):
        root = make_repo()
        target = root / "new.txt"
        target.write_text("x\n")
        gateway = GitCliGateway([root])

        unstaged = await gateway.list_unstaged()
        assert by_path(unstaged)[str(target)].status is FileStatus.UNTRACKED
        assert await gateway.list_staged() == []

        await gateway.stage(str(target))
        staged = await gateway.list_staged()
        assert by_path(staged)[str(target)].status is FileStatus.ADDED
        assert str(target) not in paths(await gateway.list_unstaged())

        await gateway.unstage(str(target))
        assert await gateway.list_staged() == []
        assert by_path(await gateway.list_unstaged())[str(target)].status is FileStatus.UNTRACKED

    @pytest.mark.asyncio
    async def test_modified_round_trip_and_repeated_stage(self, make_repo):
        root = make_repo()
        readme = root / "README.md"
        readme.write_text("hello\nworld\n")
        gateway = GitCliGateway([root])

        await gateway.stage(str(readme))
        await gateway.stage(str(readme))
        staged = await gateway.list_staged()
        assert [(c.path, c.status) for c in staged] == [(str(readme), FileStatus.MODIFIED)]
        assert await gateway.list_unstaged() == []

        await gateway.unstage(str(readme))
        await gateway.unstage(str(readme))
        assert await gateway.list_staged() == []
        assert [(c.path, c.status) for c in await gateway.list_unstaged()] == [
            (str(readme), FileStatus.MODIFIED)
        ]

    @pytest.mark.asyncio
    async def test_nested_untracked_files_listed_individually(self, make_repo):
        root = make_repo()
        (root / "src").mkdir()
        (root / "src" / "a.py").write_text("a\n")
        (root / "src" / "b.py").write_text("b\n")
        gateway = GitCliGateway([root])

        assert sorted(paths(await gateway.list_unstaged())) == [
            str(root / "src" / "a.py"), str(root / "src" / "b.py"),
        ]

    @pytest.mark.asyncio
    async def test_stage_deletion(self, make_repo):
        root = make_repo()
        (root / "README.md").unlink()
        gateway = GitCliGateway([root])

        assert (await gateway.list_unstaged())[0].status is FileStatus.DELETED
        await gateway.stage(str(root / "README.md"))
        assert (await gateway.list_staged())[0].status is FileStatus.DELETED

    @pytest.mark.asyncio
    async def test_rename_reports_original(self, make_repo):
        root = make_repo()
        run_git(root, "mv", "README.md", "DOCS.md")
        gateway = GitCliGateway([root])

        change = (await gateway.list_staged())[0]
        assert change.path == str(root / "DOCS.md")
        assert change.status is FileStatus.RENAMED
        assert change.original_path == str(root / "README.md")

    @pytest.mark.asyncio
    async def test_unstage_without_head(self, make_repo):
        root = make_repo(initial_commit=False)
        target = root / "first.txt"
        target.write_text("1\n")
        gateway = GitCliGateway([root])

        await gateway.stage(str(target))
        assert (await gateway.list_staged())[0].status is FileStatus.ADDED

        await gateway.unstage(str(target))
        assert await gateway.list_staged() == []
        assert (await gateway.list_unstaged())[0].status is FileStatus.UNTRACKED

    @pytest.mark.asyncio
    async def test_path_outside_roots(self, make_repo, tmp_path):
        gateway = GitCliGateway([make_repo()])
        with pytest.raises(GitError):
            await gateway.stage(str(tmp_path / "elsewhere" / "x.txt"))

    @pytest.mark.asyncio
    async def test_stage_glob_name_stages_only_that_file(self, make_repo):
        root = make_repo()
        (root / "a*.txt").write_text("1\n")
        (root / "ab.txt").write_text("2\n")
        gateway = GitCliGateway([root])

        await gateway.stage(str(root / "a*.txt"))

        assert paths(await gateway.list_staged()) == [str(root / "a*.txt")]
        assert paths(await gateway.list_unstaged()) == [str(root / "ab.txt")]

    @pytest.mark.asyncio
    async def test_list_changes_returns_both_partitions(self, make_repo):
        root = make_repo()
        (root / "README.md").write_text("staged\n")
        run_git(root, "add", "README.md")
        (root / "new.txt").write_text("n\n")
        gateway = GitCliGateway([root])

        staged, unstaged = await gateway.list_changes()

        assert paths(staged) == [str(root / "README.md")]
        assert paths(unstaged) == [str(root / "new.txt")]


# ---------------------------------------------------------------------------
# Discard
# ---------------------------------------------------------------------------

@requires_git
class TestDiscard:

    @pytest.mark.asyncio
    async def test_untracked_file_deleted(self, make_repo):
        root = make_repo()
        target = root / "scratch.txt"
        target.write_text("tmp\n")
        gateway = GitCliGateway([root])

        await gateway.discard(str(target))

        assert not target.exists()
        assert await gateway.list_unstaged() == []

    @pytest.mark.asyncio
    async def test_modified_file_restored(self, make_repo):
        root = make_repo()
        readme = root / "README.md"
        readme.write_text("broken\n")
        gateway = GitCliGateway([root])

        await gateway.discard(str(readme))

        assert readme.read_text() == "hello\n"
        assert await gateway.list_unstaged() == []

    @pytest.mark.asyncio
    async def test_deleted_file_restored(self, make_repo):
        root = make_repo()
        (root / "README.md").unlink()
        gateway = GitCliGateway([root])

        await gateway.discard(str(root / "README.md"))

        assert (root / "README.md").read_text() == "hello\n"

    @pytest.mark.asyncio
    async def test_clean_file_is_noop(self, make_repo):
        root = make_repo()
        gateway = GitCliGateway([root])

        await gateway.discard(str(root / "README.md"))
        await gateway.discard(str(root / "README.md"))

        assert (root / "README.md").read_text() == "hello\n"

    @pytest.mark.asyncio
    async def test_discard_keeps_staged_version(self, make_repo):
        root = make_repo()
        readme = root / "README.md"
        readme.write_text("staged\n")
        run_git(root, "add", "README.md")
        readme.write_text("staged\nplus worktree\n")
        gateway = GitCliGateway([root])

        await gateway.discard(str(readme))

        assert readme.read_text() == "staged\n"
        assert paths(await gateway.list_staged()) == [str(readme)]

    @pytest.mark.asyncio
    async def test_glob_characters_are_literal(self, make_repo):
        root = make_repo()
        for name in ("a*.txt", "ab.txt", "a?.md", "ax.md", "[ab].py", "a.py"):
            (root / name).write_text("keep\n")
        gateway = GitCliGateway([root])

        await gateway.discard(str(root / "a*.txt"))
        await gateway.discard(str(root / "a?.md"))
        await gateway.discard(str(root / "[ab].py"))

        assert not (root / "a*.txt").exists()
        assert not (root / "a?.md").exists()
        assert not (root / "[ab].py").exists()
        assert (root / "ab.txt").exists()
        assert (root / "ax.md").exists()
        assert (root / "a.py").exists()

    @pytest.mark.asyncio
    async def test_unreadable_status_tries_restore_and_clean(self, make_repo, monkeypatch):
        root = make_repo()
        gateway = GitCliGateway([root])
        attempts = []

        def status_fails(root, *pathspec):
            raise GitError("index.lock exists")

        def restore(root, rels):
            attempts.append(("restore", rels))
            raise GitError("pathspec did not match")

        def clean(root, rels):
            attempts.append(("clean", rels))
            raise GitError("permission denied")

        monkeypatch.setattr(gateway, "_read_status", status_fails)
        monkeypatch.setattr(gateway, "_restore", restore)
        monkeypatch.setattr(gateway, "_clean", clean)

        await gateway.discard(str(root / "scratch.txt"))

        assert attempts == [("restore", ["scratch.txt"]), ("clean", ["scratch.txt"])]

    @pytest.mark.asyncio
    async def test_unreadable_status_still_removes_untracked_file(self, make_repo, monkeypatch):
        root = make_repo()
        target = root / "scratch.txt"
        target.write_text("tmp\n")
        gateway = GitCliGateway([root])

        def status_fails(root, *pathspec):
            raise GitError("index.lock exists")

        monkeypatch.setattr(gateway, "_read_status", status_fails)

        await gateway.discard(str(target))

        assert not target.exists()
        assert (root / "README.md").read_text() == "hello\n"


# ---------------------------------------------------------------------------
# Bulk operations
# ---------------------------------------------------------------------------

@requires_git
class TestBulk:

    @pytest.fixture
    def dirty_repo(self, make_repo):
        root = make_repo()
        (root / "README.md").write_text("changed\n")
        (root / "new.txt").write_text("new\n")
        return root

    @pytest.mark.asyncio
    async def test_stage_all_and_unstage_all(self, dirty_repo):
        gateway = GitCliGateway([dirty_repo])

        await gateway.stage_all()
        assert by_path(await gateway.list_staged()).keys() == {
            str(dirty_repo / "README.md"), str(dirty_repo / "new.txt"),
        }
        assert await gateway.list_unstaged() == []

        await gateway.unstage_all()
        assert await gateway.list_staged() == []
        statuses = {c.path: c.status for c in await gateway.list_unstaged()}
        assert statuses == {
            str(dirty_repo / "README.md"): FileStatus.MODIFIED,
            str(dirty_repo / "new.txt"): FileStatus.UNTRACKED,
        }

    @pytest.mark.asyncio
    async def test_discard_all(self, dirty_repo):
        gateway = GitCliGateway([dirty_repo])

        await gateway.discard_all()

        assert await gateway.list_unstaged() == []
        assert not (dirty_repo / "new.txt").exists()
        assert (dirty_repo / "README.md").read_text() == "hello\n"

    @pytest.mark.asyncio
    async def test_bulk_ops_cover_every_root(self, make_repo):
        first, second = make_repo("a"), make_repo("b")
        (first / "one.txt").write_text("1\n")
        (second / "two.txt").write_text("2\n")
        gateway = GitCliGateway([first, second])

        await gateway.stage_all()

        assert sorted(paths(await gateway.list_staged())) == sorted([
            str(first / "one.txt"), str(second / "two.txt"),
        ])

    @pytest.mark.asyncio
    async def test_unstage_all_without_head(self, make_repo):
        root = make_repo(initial_commit=False)
        (root / "a.txt").write_text("a\n")
        gateway = GitCliGateway([root])

        await gateway.stage_all()
        await gateway.unstage_all()

        assert await gateway.list_staged() == []


# ---------------------------------------------------------------------------
# Diff
# ---------------------------------------------------------------------------

@requires_git
class TestDiff:

    @pytest.mark.asyncio
    async def test_staged_diff(self, make_repo):
        root = make_repo()
        (root / "README.md").write_text("hello\nstaged line\n")
        run_git(root, "add", "README.md")
        (root / "README.md").write_text("hello\nstaged line\nworktree line\n")
        gateway = GitCliGateway([root])

        staged = await gateway.diff(staged=True)
        unstaged = await gateway.diff(staged=False)

        assert "diff --git a/README.md b/README.md" in staged
        assert "+staged line" in staged
        assert "worktree line" not in staged
        assert "+worktree line" in unstaged
        assert "--- Repository:" not in staged

    @pytest.mark.asyncio
    async def test_empty_when_nothing_staged(self, make_repo):
        gateway = GitCliGateway([make_repo()])
        assert await gateway.diff(staged=True) == ""

    @pytest.mark.asyncio
    async def test_multi_root_sections(self, make_repo):
        first, second = make_repo("a"), make_repo("b")
        for root in (first, second):
            (root / "README.md").write_text(f"hello from {root.name}\n")
            run_git(root, "add", "README.md")
        gateway = GitCliGateway([first, second])

        diff = await gateway.diff(staged=True)

        assert f"--- Repository: {first} ---" in diff
        assert f"--- Repository: {second} ---" in diff
        assert diff.index(str(first)) < diff.index("hello from a") < diff.index(str(second))

    @pytest.mark.asyncio
    async def test_clean_roots_contribute_nothing(self, make_repo):
        first, second = make_repo("a"), make_repo("b")
        (first / "README.md").write_text("only a\n")
        run_git(first, "add", "README.md")
        gateway = GitCliGateway([first, second])

        diff = await gateway.diff(staged=True)

        assert f"--- Repository: {first} ---" in diff
        assert str(second) not in diff


# ---------------------------------------------------------------------------
# Commit
# ---------------------------------------------------------------------------

@requires_git
class TestCommit:

    @pytest.mark.asyncio
    async def test_commit_staged(self, make_repo):
        root = make_repo()
        (root / "README.md").write_text("hello\nagain\n")
        gateway = GitCliGateway([root])
        await gateway.stage(str(root / "README.md"))

        committed = await gateway.commit("docs(readme): add greeting")

        assert committed == [str(root)]
        assert run_git(root, "log", "-1", "--format=%s").strip() == "docs(readme): add greeting"
        assert await gateway.list_staged() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   ", "\n\n"])
    async def test_blank_message_rejected_before_commit(self, make_repo, message):
        root = make_repo()
        (root / "README.md").write_text("changed\n")
        run_git(root, "add", "README.md")
        head = run_git(root, "rev-parse", "HEAD")
        gateway = GitCliGateway([root])
        notified = []
        gateway.on_change(lambda: notified.append(True))

        with pytest.raises(ValidationError):
            await gateway.commit(message)

        assert run_git(root, "rev-parse", "HEAD") == head
        assert notified == []

    @pytest.mark.asyncio
    async def test_nothing_staged(self, make_repo):
        root = make_repo()
        (root / "README.md").write_text("unstaged only\n")
        head = run_git(root, "rev-parse", "HEAD")
        gateway = GitCliGateway([root])

        with pytest.raises(NoStagedChangesError):
            await gateway.commit("fix: something")

        assert run_git(root, "rev-parse", "HEAD") == head

    @pytest.mark.asyncio
    async def test_only_roots_with_staged_changes_commit(self, make_repo):
        first, second = make_repo("a"), make_repo("b")
        (first / "README.md").write_text("a changed\n")
        run_git(first, "add", "README.md")
        (second / "README.md").write_text("b changed, not staged\n")
        head_b = run_git(second, "rev-parse", "HEAD")
        gateway = GitCliGateway([first, second])

        committed = await gateway.commit("feat: update a")

        assert committed == [str(first)]
        assert run_git(first, "log", "-1", "--format=%s").strip() == "feat: update a"
        assert run_git(second, "rev-parse", "HEAD") == head_b

    @pytest.mark.asyncio
    async def test_first_commit_in_unborn_repo(self, make_repo):
        root = make_repo(initial_commit=False)
        (root / "a.txt").write_text("a\n")
        gateway = GitCliGateway([root])
        await gateway.stage_all()

        assert await gateway.commit("chore: initial commit") == [str(root)]


# ---------------------------------------------------------------------------
# Roots and notifications
# ---------------------------------------------------------------------------

@requires_git
class TestRootsAndNotifications:

    @pytest.mark.asyncio
    async def test_no_repository(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
        plain = tmp_path / "plain"
        plain.mkdir()
        gateway = GitCliGateway([plain])

        assert gateway.roots == []
        assert await gateway.list_staged() == []
        assert await gateway.list_unstaged() == []
        assert await gateway.diff(staged=True) == ""
        with pytest.raises(NoStagedChangesError):
            await gateway.commit("feat: nothing")

    def test_subdirectory_resolves_to_root(self, make_repo):
        root = make_repo()
        (root / "pkg").mkdir()
        gateway = GitCliGateway([root / "pkg", root])
        assert gateway.roots == [str(root)]

    @pytest.mark.asyncio
    async def test_every_observer_notified_after_mutation(self, make_repo):
        root = make_repo()
        (root / "new.txt").write_text("x\n")
        gateway = GitCliGateway([root])
        calls = []

        def broken():
            raise RuntimeError("observer bug")

        gateway.on_change(lambda: calls.append("first"))
        gateway.on_change(broken)
        gateway.on_change(lambda: calls.append("third"))

        await gateway.stage(str(root / "new.txt"))

        assert calls == ["first", "third"]

    @pytest.mark.asyncio
    async def test_observers_notified_when_mutation_fails(self, make_repo, tmp_path):
        gateway = GitCliGateway([make_repo()])
        calls = []
        gateway.on_change(lambda: calls.append(True))

        with pytest.raises(GitError):
            await gateway.unstage(str(tmp_path / "outside.txt"))

        assert calls == [True]

    @pytest.mark.asyncio
    async def test_poll_detects_changes(self, make_repo):
        root = make_repo()
        gateway = GitCliGateway([root])
        calls = []
        gateway.on_change(lambda: calls.append(True))

        assert await gateway.poll() is True
        assert await gateway.poll() is False

        (root / "README.md").write_text("edited outside\n")

        assert await gateway.poll() is True
        assert len(calls) == 2

    @pytest.fixture
    def one_broken_root(self, make_repo, tmp_path, monkeypatch):
        """Two repositories; the first loses its .git after the gateway found it."""
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.resolve()))
        broken, healthy = make_repo("broken"), make_repo("healthy")
        for root in (broken, healthy):
            (root / "README.md").write_text(f"changed in {root.name}\n")
            run_git(root, "add", "README.md")
        (healthy / "extra.txt").write_text("x\n")
        gateway = GitCliGateway([broken, healthy])
        shutil.rmtree(broken / ".git")
        return gateway, broken, healthy

    @pytest.mark.asyncio
    async def test_reads_skip_failing_root(self, one_broken_root):
        gateway, _, healthy = one_broken_root

        assert paths(await gateway.list_staged()) == [str(healthy / "README.md")]
        assert paths(await gateway.list_unstaged()) == [str(healthy / "extra.txt")]

    @pytest.mark.asyncio
    async def test_diff_skips_failing_root(self, one_broken_root):
        gateway, broken, healthy = one_broken_root

        diff = await gateway.diff(staged=True)

        assert f"--- Repository: {healthy} ---" in diff
        assert "changed in healthy" in diff
        assert str(broken) not in diff

    @pytest.mark.asyncio
    async def test_bulk_mutation_finishes_healthy_root_then_reports(self, one_broken_root):
        gateway, broken, healthy = one_broken_root

        with pytest.raises(GitError, match="broken"):
            await gateway.stage_all()

        assert str(healthy / "extra.txt") in paths(await gateway.list_staged())

    @pytest.mark.asyncio
    async def test_commit_in_healthy_root(self, one_broken_root):
        gateway, _, healthy = one_broken_root

        assert await gateway.commit("fix: keep going") == [str(healthy)]
        assert run_git(healthy, "log", "-1", "--format=%s").strip() == "fix: keep going"
