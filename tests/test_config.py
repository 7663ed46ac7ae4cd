"""Tests for config loading, env overlay and saving."""

from __future__ import annotations

import json
import os
from pathlib import Path

from notegen.config import (
    GenerationConfig,
    NotegenConfig,
    default_store_dir,
    load_config,
    mask_secret,
    save_config,
)


def test_defaults_when_nothing_configured() -> None:
    config = load_config(env={})
    assert config.generation.url == ""
    assert config.generation.is_configured is False
    assert config.generation.timeout_seconds is None
    assert config.store.url == ""
    assert config.server.port == 8000


def test_env_overrides() -> None:
    env = {
        "NOTEBOOK_GENERATION_URL": "https://gen.test/run",
        "NOTEBOOK_GENERATION_AUTH": "secret",
        "SUPABASE_URL": "https://project.supabase.co",
        "SUPABASE_SERVICE_ROLE_KEY": "service-key",
    }
    config = load_config(env=env)
    assert config.generation.url == "https://gen.test/run"
    assert config.generation.auth == "secret"
    assert config.generation.is_configured is True
    assert config.store.url == "https://project.supabase.co"
    assert config.store.key == "service-key"


def test_is_configured_needs_both() -> None:
    assert GenerationConfig(url="https://x").is_configured is False
    assert GenerationConfig(auth="token").is_configured is False
    assert GenerationConfig(url="https://x", auth="token").is_configured is True


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    config = NotegenConfig()
    config.generation.url = "https://gen.test/run"
    config.generation.timeout_seconds = 90
    config.store.url = f"file://{tmp_path / 'data'}"
    save_config(config)

    path = Path(os.environ["NOTEGEN_HOME"]) / "config.json"
    assert json.loads(path.read_text())["generation"]["url"] == "https://gen.test/run"

    loaded = load_config(env={})
    assert loaded.generation.timeout_seconds == 90
    assert loaded.store.url == config.store.url


def test_env_wins_over_file_but_empty_env_does_not() -> None:
    config = NotegenConfig()
    config.generation.url = "https://from-file"
    config.generation.auth = "file-token"
    save_config(config)

    loaded = load_config(env={"NOTEBOOK_GENERATION_URL": "https://from-env", "NOTEBOOK_GENERATION_AUTH": ""})
    assert loaded.generation.url == "https://from-env"
    assert loaded.generation.auth == "file-token"


def test_default_store_dir_under_home() -> None:
    assert default_store_dir() == Path(os.environ["NOTEGEN_HOME"]) / "store"


def test_mask_secret() -> None:
    assert mask_secret("") == ""
    assert mask_secret("abc") == "****"
    assert mask_secret("supersecret") == "****cret"
