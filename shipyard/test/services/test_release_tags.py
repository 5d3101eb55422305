from __future__ import annotations

from pathlib import Path

from shipyard.core.result import Err, Ok
from shipyard.git.repository import Repository
from shipyard.output.console import MockConsole
from shipyard.platform.context import RepositoryContext
from shipyard.services.release.model import OnExisting, TagOutcome, Version
from shipyard.services.release.tags import publish_tag
from shipyard.test._fakes import FakeRunner

V = Version(raw="v1.0.3", major=1, minor=0, patch=3)


def _publish(
    tmp_path: Path,
    runner: FakeRunner,
    *,
    on_existing: OnExisting,
    push_branch: str | None = None,
    console: MockConsole | None = None,
    dry_run: bool = False,
):
    return publish_tag(
        repo=Repository(RepositoryContext(root=tmp_path, runner=runner)),
        remote="origin",
        version=V,
        message="Release v1.0.3",
        on_existing=on_existing,
        push_branch=push_branch,
        console=console or MockConsole(),
        dry_run=dry_run,
    )


def _existing() -> FakeRunner:
    return FakeRunner().on("git", "tag", "--list", "v1.0.3", stdout="v1.0.3\n")


def test_creates_and_pushes_branch_then_tag(tmp_path: Path) -> None:
    runner = FakeRunner()
    result = _publish(tmp_path, runner, on_existing=OnExisting.FAIL, push_branch="main")

    assert result == Ok(TagOutcome(tag="v1.0.3", status="created"))
    assert runner.commands[1:] == [
        "git tag -a v1.0.3 -m Release v1.0.3",
        "git push origin main",
        "git push origin v1.0.3",
    ]


def test_tag_only_push(tmp_path: Path) -> None:
    runner = FakeRunner()
    _publish(tmp_path, runner, on_existing=OnExisting.SKIP)
    assert not runner.called("git", "push", "origin", "main")
    assert runner.called("git", "push", "origin", "v1.0.3")


def test_existing_tag_fails_with_fail_policy(tmp_path: Path) -> None:
    runner = _existing()
    result = _publish(tmp_path, runner, on_existing=OnExisting.FAIL, push_branch="main")

    assert isinstance(result, Err)
    assert result.error.kind == "tag_exists"
    assert result.error.category == "TagError"
    assert not runner.called("git", "tag", "-a")
    assert not runner.called("git", "push")


def test_existing_tag_skipped_with_warning(tmp_path: Path) -> None:
    runner = _existing()
    console = MockConsole()
    result = _publish(tmp_path, runner, on_existing=OnExisting.SKIP, console=console)

    assert result == Ok(TagOutcome(tag="v1.0.3", status="skipped"))
    assert not result.value.created
    assert console.has_warning()
    assert not runner.called("git", "tag", "-a")


def test_push_failure_is_tag_failed(tmp_path: Path) -> None:
    runner = FakeRunner().on("git", "push", returncode=1, stderr="remote rejected")
    result = _publish(tmp_path, runner, on_existing=OnExisting.FAIL, push_branch="main")

    assert isinstance(result, Err)
    assert result.error.kind == "tag_failed"
    assert result.error.hint == "remote rejected"


def test_dry_run_plans_without_mutating(tmp_path: Path) -> None:
    runner = FakeRunner()
    console = MockConsole()
    result = _publish(
        tmp_path, runner, on_existing=OnExisting.FAIL, push_branch="main", console=console, dry_run=True
    )

    assert result == Ok(TagOutcome(tag="v1.0.3", status="planned"))
    assert runner.commands == ["git tag --list v1.0.3"]
    assert console.find("git push origin v1.0.3")
