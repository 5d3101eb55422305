from __future__ import annotations

from pathlib import Path

from shipyard.platform.context import RepositoryContext
from shipyard.platform.process import SubprocessRunner
from shipyard.test._fakes import FakeRunner


def test_default_runner_is_subprocess(tmp_path: Path) -> None:
    ctx = RepositoryContext(root=tmp_path)
    assert isinstance(ctx.runner, SubprocessRunner)


def test_path_is_relative_to_root(tmp_path: Path) -> None:
    ctx = RepositoryContext(root=tmp_path, runner=FakeRunner())
    assert ctx.path("rancher/deployment.yaml") == tmp_path / "rancher" / "deployment.yaml"
