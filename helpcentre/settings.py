from __future__ import annotations

import logging.config
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent
SETTINGS_FILENAME = "helpcentre.yml"

yaml = YAML()

LOGGING: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {"format": '%(levelname)s %(asctime)s (%(pathname)s %(funcName)s): "%(message)s"'},
        "simple": {"format": "%(levelname)s %(message)s"},
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "helpcentre": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": True,
        },
    },
}


@dataclass
class Settings:
    content_root: Path
    default_group: str = "uki"
    admin_token: str = "admin123"
    cache_entries: int = 256
    debug: bool = False


def _env_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _resolve(path: str | Path) -> Path:
    p = Path(path)
    return p if p.is_absolute() else (PROJECT_ROOT / p)


def _settings_path() -> Path:
    env = os.environ.get("HELPCENTRE_CONFIG")
    if env:
        return _resolve(env)
    return PROJECT_ROOT / SETTINGS_FILENAME


def _load_settings_file(path: Path) -> CommentedMap:
    if not path.exists():
        return CommentedMap()
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.load(handle) or CommentedMap()
    if not isinstance(data, CommentedMap):
        raise TypeError(f"{path.name} must contain a mapping at the top level.")
    return data


def load_settings(path: Path | None = None) -> Settings:
    """Build settings from the optional YAML file, then environment overrides."""
    data = _load_settings_file(path or _settings_path())
    content_root = os.environ.get("HELPCENTRE_CONTENT_ROOT") or data.get("content_root") or "public/data"
    cache_entries = os.environ.get("HELPCENTRE_CACHE_ENTRIES", data.get("cache_entries", 256))
    return Settings(
        content_root=_resolve(str(content_root)),
        default_group=os.environ.get("HELPCENTRE_DEFAULT_GROUP") or str(data.get("default_group") or "uki"),
        admin_token=os.environ.get("HELPCENTRE_ADMIN_TOKEN") or str(data.get("admin_token") or "admin123"),
        cache_entries=int(cache_entries),
        debug=_env_bool(os.environ.get("HELPCENTRE_DEBUG"), bool(data.get("debug", False))),
    )


def configure_logging(debug: bool = False) -> None:
    config = {**LOGGING, "handlers": {k: dict(v) for k, v in LOGGING["handlers"].items()}}
    if debug:
        config["handlers"]["console"]["formatter"] = "verbose"
    logging.config.dictConfig(config)
