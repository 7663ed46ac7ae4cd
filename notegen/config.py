"""Configuration management for notegen."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

# Environment variables overlaid onto the file config: (section, field).
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "NOTEBOOK_GENERATION_URL": ("generation", "url"),
    "NOTEBOOK_GENERATION_AUTH": ("generation", "auth"),
    "SUPABASE_URL": ("store", "url"),
    "SUPABASE_SERVICE_ROLE_KEY": ("store", "key"),
}


class GenerationConfig(BaseModel):
    url: str = ""
    auth: str = ""
    timeout_seconds: float | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.url) and bool(self.auth)


class StoreConfig(BaseModel):
    url: str = ""
    key: str = ""


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


class NotegenConfig(BaseModel):
    generation: GenerationConfig = GenerationConfig()
    store: StoreConfig = StoreConfig()
    server: ServerConfig = ServerConfig()


def _config_dir() -> Path:
    home = os.environ.get("NOTEGEN_HOME")
    if home:
        return Path(home)
    return Path.home() / ".notegen"


def _config_path() -> Path:
    return _config_dir() / "config.json"


def default_store_dir() -> Path:
    """Return the directory used by the file store when no store URL is set."""
    return _config_dir() / "store"


def load_config(env: Mapping[str, str] | None = None) -> NotegenConfig:
    """Load config from ~/.notegen/config.json, then overlay environment variables.

    Empty environment values are ignored so they never blank out a file setting.
    """
    if env is None:
        env = os.environ
    path = _config_path()
    config = NotegenConfig.model_validate_json(path.read_text()) if path.exists() else NotegenConfig()

    for var, (section, field) in ENV_OVERRIDES.items():
        value = env.get(var, "")
        if value:
            setattr(getattr(config, section), field, value)
    return config


def save_config(config: NotegenConfig) -> None:
    """Save config to ~/.notegen/config.json."""
    path = _config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.model_dump(), indent=2) + "\n")


def mask_secret(value: str) -> str:
    """Mask all but the last four characters of a secret."""
    if not value:
        return ""
    if len(value) <= 4:
        return "****"
    return "****" + value[-4:]
