from pathlib import Path

from wordma import config as config_mod
from wordma.config import DATABASE_ENV, DEFAULT_CONFIG, load_config, resolve_path


def test_load_config_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(DATABASE_ENV, raising=False)
    monkeypatch.setattr(config_mod, "default_database_path", lambda: tmp_path / "app" / "wordma.db")
    config = load_config(tmp_path)
    assert config["themes_dir"] == "themes"
    assert config["deploy_dir"] == ".deploy"
    assert config["build_output"] == ".deploy/.temp"
    assert config["theme_branches"] == ["main", "master"]
    assert config["database"] == str(tmp_path / "app" / "wordma.db")
    # defaults are not mutated
    assert DEFAULT_CONFIG["database"] is None


def test_load_config_from_yaml_and_env(tmp_path, monkeypatch):
    monkeypatch.delenv(DATABASE_ENV, raising=False)
    (tmp_path / "wordma.yaml").write_text(
        "package_manager: npm\ndatabase: data/site.db\n", encoding="utf-8"
    )
    config = load_config(tmp_path)
    assert config["package_manager"] == "npm"
    assert config["database"] == "data/site.db"

    monkeypatch.setenv(DATABASE_ENV, "/tmp/override.db")
    assert load_config(tmp_path)["database"] == "/tmp/override.db"


def test_load_config_ignores_non_mapping(tmp_path, monkeypatch):
    monkeypatch.setenv(DATABASE_ENV, "db.sqlite")
    (tmp_path / "wordma.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    config = load_config(tmp_path)
    assert config["themes_dir"] == "themes"


def test_resolve_path(tmp_path):
    assert resolve_path(tmp_path, "themes") == tmp_path / "themes"
    assert resolve_path(tmp_path, "/abs/dir") == Path("/abs/dir")
    assert resolve_path(tmp_path, "~/x") == Path.home() / "x"
