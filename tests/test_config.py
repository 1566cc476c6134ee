"""Tests for settings defaults."""

from pathlib import Path

from bingo.core.config import Settings
from bingo.db.seed import load_seed_yaml


def test_default_seed_path_ignores_working_directory(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("SEED_PATH", raising=False)
    monkeypatch.chdir(tmp_path)

    settings = Settings(_env_file=None)
    seed_path = Path(settings.SEED_PATH)
    assert seed_path.is_absolute()
    assert seed_path.is_file()
    assert load_seed_yaml(seed_path)["templates"]


def test_default_database_url_from_sqlite_path() -> None:
    settings = Settings(_env_file=None, SQLITE_PATH="other.db", DATABASE_URL=None)
    assert settings.DATABASE_URL == "sqlite:///other.db"
