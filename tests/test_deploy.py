import subprocess

import pytest

from wordma import deploy
from wordma.config import DATABASE_ENV
from wordma.errors import DeployError


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.setenv(DATABASE_ENV, "unused.db")
    monkeypatch.setattr("wordma.executable_utils.shutil.which", lambda name: f"/usr/bin/{name}")
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    return tmp_path


def _fake_clone(calls):
    def fake_run(cmd, cwd=None, check=None):
        calls.append(cmd)
        (cwd / ".deploy").mkdir()
        return subprocess.CompletedProcess(cmd, 0)

    return fake_run


def test_requires_project_root(tmp_path):
    with pytest.raises(DeployError, match="package.json"):
        deploy.init_deploy(tmp_path, "https://example.com/site.git", lambda m: True)
    with pytest.raises(DeployError):
        deploy.delete_deploy(tmp_path, lambda m: True)


def test_init_clones_into_deploy_dir(project, monkeypatch):
    calls = []
    monkeypatch.setattr("wordma.deploy.subprocess.run", _fake_clone(calls))
    asked = []
    assert deploy.init_deploy(project, "https://example.com/site.git", asked.append)
    assert calls == [
        ["/usr/bin/git", "clone", "https://example.com/site.git", str(project / ".deploy")]
    ]
    assert not asked


def test_init_existing_declined_keeps_directory(project, monkeypatch):
    existing = project / ".deploy"
    existing.mkdir()
    (existing / "keep.txt").write_text("x", encoding="utf-8")
    monkeypatch.setattr(
        "wordma.deploy.subprocess.run", lambda *a, **k: pytest.fail("should not clone")
    )
    assert deploy.init_deploy(project, "https://example.com/site.git", lambda m: False) is False
    assert (existing / "keep.txt").exists()


def test_init_existing_confirmed_recreates(project, monkeypatch):
    existing = project / ".deploy"
    existing.mkdir()
    (existing / "old.txt").write_text("x", encoding="utf-8")
    calls = []
    monkeypatch.setattr("wordma.deploy.subprocess.run", _fake_clone(calls))
    assert deploy.init_deploy(project, "https://example.com/site.git", lambda m: True)
    assert len(calls) == 1
    assert not (existing / "old.txt").exists()


def test_init_clone_failure(project, monkeypatch):
    def fake_run(cmd, cwd=None, check=None):
        raise subprocess.CalledProcessError(128, cmd)

    monkeypatch.setattr("wordma.deploy.subprocess.run", fake_run)
    with pytest.raises(DeployError, match="Cloning"):
        deploy.init_deploy(project, "https://example.com/site.git", lambda m: True)


def test_delete_deploy(project):
    assert deploy.delete_deploy(project, lambda m: True) is False

    target = project / ".deploy"
    target.mkdir()
    assert deploy.delete_deploy(project, lambda m: False) is False
    assert target.exists()

    assert deploy.delete_deploy(project, lambda m: True) is True
    assert not target.exists()
