"""Tests for GitUtilities — command construction and output mapping."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from asini.config.models import GitConfig
from asini.errors import CommandExecutionError
from asini.infrastructure.git import GitUtilities
from asini.infrastructure.process import ProcessRunner
from tests.conftest import argv_calls


@pytest.fixture
def git(runner: ProcessRunner) -> GitUtilities:
    return GitUtilities(runner)


# ---------------------------------------------------------------------------
# Existence checks
# ---------------------------------------------------------------------------


class TestIsInitialized:
    def test_true_when_command_succeeds(self, git: GitUtilities, runner) -> None:
        assert git.is_initialized() is True
        assert argv_calls(runner.exec_sync) == [["git", "rev-parse"]]

    def test_false_when_command_fails(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.side_effect = CommandExecutionError("fatal: Not a git repository")
        assert git.is_initialized() is False


class TestHasCommit:
    def test_true_when_command_succeeds(self, git: GitUtilities, runner) -> None:
        assert git.has_commit() is True
        assert argv_calls(runner.exec_sync) == [["git", "log"]]

    @pytest.mark.parametrize(
        "message",
        [
            "fatal: your current branch 'master' does not have any commits yet",
            "fatal: not a git repository",
            "",
        ],
    )
    def test_false_for_any_failure(self, git: GitUtilities, runner, message: str) -> None:
        runner.exec_sync.side_effect = CommandExecutionError(message)
        assert git.has_commit() is False


class TestHasTags:
    def test_true_when_tags_exist(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.return_value = "foo"
        assert git.has_tags() is True
        assert argv_calls(runner.exec_sync) == [["git", "tag"]]

    def test_false_when_no_tags(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.return_value = ""
        assert git.has_tags() is False

    def test_whitespace_only_is_empty(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.return_value = "  \n "
        assert git.has_tags() is False

    def test_failure_propagates(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.side_effect = CommandExecutionError("boom")
        with pytest.raises(CommandExecutionError):
            git.has_tags()


class TestIsDetachedHead:
    def test_attached(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.return_value = "main"
        assert git.is_detached_head() is False

    def test_detached(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.side_effect = CommandExecutionError("fatal: ref HEAD is not a symbolic ref")
        assert git.is_detached_head() is True


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


class TestMutations:
    def test_add_file(self, git: GitUtilities, runner) -> None:
        git.add_file("foo")
        assert argv_calls(runner.exec_sync) == [["git", "add", "foo"]]

    def test_commit(self, git: GitUtilities, runner) -> None:
        git.commit("foo")
        assert argv_calls(runner.exec_sync) == [["git", "commit", "-m", "foo"]]

    def test_commit_multiline_message_is_one_argument(self, git: GitUtilities, runner) -> None:
        git.commit('foo\nbar "$(rm -rf /)"')
        assert argv_calls(runner.exec_sync) == [["git", "commit", "-m", 'foo\nbar "$(rm -rf /)"']]

    def test_add_tag(self, git: GitUtilities, runner) -> None:
        git.add_tag("foo")
        assert argv_calls(runner.exec_sync) == [["git", "tag", "foo"]]

    def test_remove_tag(self, git: GitUtilities, runner) -> None:
        git.remove_tag("foo")
        assert argv_calls(runner.exec_sync) == [["git", "tag", "-d", "foo"]]

    def test_checkout_changes(self, git: GitUtilities, runner) -> None:
        git.checkout_changes("packages/*/package.json")
        assert argv_calls(runner.exec_sync) == [["git", "checkout", "--", "packages/*/package.json"]]

    def test_init_returns_output(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.return_value = "stdout for logger"
        assert git.init() == "stdout for logger"
        assert argv_calls(runner.exec_sync) == [["git", "init"]]

    @pytest.mark.parametrize(
        "call",
        [
            lambda g: g.add_file("foo"),
            lambda g: g.commit("msg"),
            lambda g: g.add_tag("v1"),
            lambda g: g.remove_tag("v1"),
            lambda g: g.checkout_changes("*.json"),
        ],
    )
    def test_failures_propagate(self, git: GitUtilities, runner, call) -> None:
        runner.exec_sync.side_effect = CommandExecutionError("fatal: nope")
        with pytest.raises(CommandExecutionError, match="fatal: nope"):
            call(git)


class TestPushWithTags:
    def test_pushes_branch_then_tags(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.side_effect = ["master", "", ""]
        git.push_with_tags(["foo@1.0.1", "foo-bar@1.0.0"])
        assert argv_calls(runner.exec_sync) == [
            ["git", "symbolic-ref", "--short", "HEAD"],
            ["git", "push", "origin", "master"],
            ["git", "push", "origin", "foo@1.0.1", "foo-bar@1.0.0"],
        ]

    def test_configured_remote(self, runner) -> None:
        git = GitUtilities(runner, GitConfig(remote="upstream"))
        runner.exec_sync.side_effect = ["main", "", ""]
        git.push_with_tags(["v1"])
        assert argv_calls(runner.exec_sync)[1:] == [
            ["git", "push", "upstream", "main"],
            ["git", "push", "upstream", "v1"],
        ]

    def test_branch_push_failure_skips_tag_push(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.side_effect = ["main", CommandExecutionError("rejected")]
        with pytest.raises(CommandExecutionError, match="rejected"):
            git.push_with_tags(["v1"])
        assert len(runner.exec_sync.call_args_list) == 2


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    @pytest.mark.parametrize(
        ("call", "argv", "output"),
        [
            (lambda g: g.get_last_tagged_commit(), ["rev-list", "--tags", "--max-count=1"], "deadbeef"),
            (lambda g: g.get_first_commit(), ["rev-list", "--max-parents=0", "HEAD"], "beefcafe"),
            (lambda g: g.describe_tag("deadbeef"), ["describe", "--tags", "deadbeef"], "foo@1.0.0"),
            (
                lambda g: g.diff_since_in("foo@1.0.0", "packages/foo"),
                ["diff", "--name-only", "foo@1.0.0", "--", "packages/foo"],
                "stuff maybe",
            ),
            (lambda g: g.get_current_sha(), ["rev-parse", "HEAD"], "deadcafe"),
            (lambda g: g.get_short_sha(), ["rev-parse", "--short", "HEAD"], "deadcaf"),
            (lambda g: g.get_top_level_directory(), ["rev-parse", "--show-toplevel"], "/path/to/foo"),
            (lambda g: g.get_current_branch(), ["symbolic-ref", "--short", "HEAD"], "foo"),
        ],
    )
    def test_returns_command_output(self, git: GitUtilities, runner, call, argv, output) -> None:
        runner.exec_sync.return_value = output
        assert call(git) == output
        assert argv_calls(runner.exec_sync) == [["git", *argv]]

    def test_changed_files_since_in(self, git: GitUtilities, runner) -> None:
        runner.exec_sync.return_value = "packages/foo/a.js\npackages/foo/b.js"
        assert git.changed_files_since_in("v1", "packages/foo") == [
            "packages/foo/a.js",
            "packages/foo/b.js",
        ]

    def test_runs_in_configured_directory(self, runner, tmp_path: Path) -> None:
        GitUtilities(runner, cwd=tmp_path).get_current_sha()
        assert runner.exec_sync.call_args.args[0].cwd == tmp_path

    def test_configured_executable(self, runner) -> None:
        GitUtilities(runner, GitConfig(executable="/usr/local/bin/git")).get_current_sha()
        assert argv_calls(runner.exec_sync) == [["/usr/local/bin/git", "rev-parse", "HEAD"]]


# ---------------------------------------------------------------------------
# Against a real repository
# ---------------------------------------------------------------------------


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, check=True)
    return result.stdout.strip()


@pytest.mark.integration
class TestRealRepository:
    def test_fresh_directory_has_no_commits(self, tmp_path: Path) -> None:
        fresh = tmp_path / "fresh"
        fresh.mkdir()
        git = GitUtilities(cwd=fresh)
        git.init()
        assert git.is_initialized() is True
        assert git.has_commit() is False

    def test_commit_and_tag_roundtrip(self, git_repo: Path) -> None:
        git = GitUtilities(cwd=git_repo)
        (git_repo / "a.txt").write_text("a", encoding="utf-8")
        git.add_file("a.txt")
        git.commit('first line\n\nbody with "quotes" and $(subshell)')
        assert _git(git_repo, "log", "-1", "--format=%B") == (
            'first line\n\nbody with "quotes" and $(subshell)'
        )

        assert git.has_tags() is False
        git.add_tag("foo@1.0.0")
        assert git.has_tags() is True
        assert git.get_last_tagged_commit() == git.get_current_sha()
        assert git.describe_tag(git.get_current_sha()) == "foo@1.0.0"

        git.remove_tag("foo@1.0.0")
        assert git.has_tags() is False

    def test_first_commit_and_diff(self, git_repo: Path) -> None:
        git = GitUtilities(cwd=git_repo)
        first = git.get_first_commit()
        pkg = git_repo / "packages" / "foo"
        pkg.mkdir(parents=True)
        (pkg / "index.js").write_text("1", encoding="utf-8")
        (git_repo / "other.txt").write_text("x", encoding="utf-8")
        git.add_file(".")
        git.commit("add foo")
        assert git.changed_files_since_in(first, "packages/foo") == ["packages/foo/index.js"]

    def test_checkout_changes(self, git_repo: Path) -> None:
        git = GitUtilities(cwd=git_repo)
        (git_repo / ".keep").write_text("dirty", encoding="utf-8")
        git.checkout_changes(".keep")
        assert (git_repo / ".keep").read_text(encoding="utf-8") == ""

    def test_branch_and_toplevel(self, git_repo: Path) -> None:
        git = GitUtilities(cwd=git_repo)
        assert git.get_current_branch() == _git(git_repo, "symbolic-ref", "--short", "HEAD")
        assert Path(git.get_top_level_directory()).resolve() == git_repo.resolve()
        assert git.is_detached_head() is False

    def test_latin1_commit_message(self, git_repo: Path) -> None:
        message = git_repo.parent / "message.txt"
        message.write_bytes(b"caf\xe9 cr\xe8me\n")
        subprocess.run(
            ["git", "commit", "--allow-empty", "-F", str(message)],
            cwd=git_repo,
            capture_output=True,
            check=True,
        )
        git = GitUtilities(cwd=git_repo)
        assert git.has_commit() is True
        assert git.get_current_sha() == _git(git_repo, "rev-parse", "HEAD")
