# tests/config/test_env.py

import os
import pytest
from pathlib import Path

from easypost_shipping.config.env import (
    EnvError,
    load_env,
    load_project_dotenv,
    get_app_env,
    env as env_get,
)
from easypost_shipping.models.env_cfg import DEFAULT_BASE_URL

KEYS = ("EASYPOST_API_KEY", "EASYPOST_BASE_URL", "EASYPOST_TIMEOUT")


def _write_env_file(dirpath, text=""):
    f = dirpath / ".env"
    f.write_text(text)
    return f


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for k in KEYS:
        monkeypatch.delenv(k, raising=False)
    yield
    # load_dotenv writes os.environ directly; keep it from leaking
    for k in KEYS:
        os.environ.pop(k, None)


def test_load_env_reads_file_and_sets_process_env(tmp_path):
    f = _write_env_file(tmp_path, "EASYPOST_API_KEY=EZTK_file\n# comment\nEASYPOST_TIMEOUT=12\n")

    loaded = load_env(f, strict=True, required_keys=("EASYPOST_API_KEY",))

    assert loaded == {"EASYPOST_API_KEY": "EZTK_file", "EASYPOST_TIMEOUT": "12"}
    assert os.environ["EASYPOST_API_KEY"] == "EZTK_file"


def test_process_env_wins_over_dotenv(tmp_path, monkeypatch):
    f = _write_env_file(tmp_path, "EASYPOST_API_KEY=EZTK_file\nEASYPOST_BASE_URL=https://file/v2\n")
    monkeypatch.setenv("EASYPOST_API_KEY", "EZTK_env")

    cfg = get_app_env(f)

    assert cfg.EASYPOST_API_KEY == "EZTK_env"
    assert cfg.EASYPOST_BASE_URL == "https://file/v2"


def test_load_env_override_true_file_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("EASYPOST_API_KEY", "EZTK_env")
    f = _write_env_file(tmp_path, "EASYPOST_API_KEY=EZTK_file\n")

    load_env(f, override=True)

    assert os.environ["EASYPOST_API_KEY"] == "EZTK_file"


def test_get_app_env_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("EASYPOST_API_KEY", "EZTK_env")

    cfg = get_app_env(tmp_path / "missing.env")

    assert cfg.EASYPOST_BASE_URL == DEFAULT_BASE_URL
    assert cfg.EASYPOST_TIMEOUT == 30


def test_get_app_env_bad_timeout_raises(monkeypatch, tmp_path):
    monkeypatch.setenv("EASYPOST_API_KEY", "EZTK_env")
    monkeypatch.setenv("EASYPOST_TIMEOUT", "soon")

    with pytest.raises(EnvError):
        get_app_env(tmp_path / "missing.env")


def test_get_app_env_strict_raises_when_missing(tmp_path: Path):
    with pytest.raises(RuntimeError) as e:
        get_app_env(dotenv_path=tmp_path / ".env", strict=True)
    assert "EASYPOST_API_KEY" in str(e.value)


def test_get_app_env_non_strict_allows_missing_key(tmp_path):
    cfg = get_app_env(dotenv_path=tmp_path / ".env", strict=False)
    assert cfg.EASYPOST_API_KEY == ""


def test_env_required_flag_raises():
    with pytest.raises(KeyError):
        env_get("EASYPOST_SOME_MISSING_VAR", required=True)


def test_env_default_and_cast(monkeypatch):
    assert env_get("EASYPOST_OPTIONAL", default="fallback") == "fallback"
    monkeypatch.setenv("EASYPOST_OPTIONAL", "5")
    assert env_get("EASYPOST_OPTIONAL", cast=int) == 5


def test_load_project_dotenv_searches_upward(tmp_path, monkeypatch):
    _write_env_file(tmp_path, "EASYPOST_API_KEY=EZTK_project\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    found = load_project_dotenv(start=nested)

    assert found == (tmp_path / ".env").resolve()
    assert os.environ["EASYPOST_API_KEY"] == "EZTK_project"
