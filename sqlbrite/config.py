from __future__ import annotations

# sqlbrite/config.py
import logging
import os
from typing import Optional

import yaml
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class Settings(BaseModel):
    db_path: Optional[str] = None
    test_db_path: Optional[str] = None
    error_log_path: Optional[str] = None
    log_failures: bool = False
    log_level: str = "WARNING"


def config_path() -> str:
    return os.environ.get("SQLBRITE_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")


def load_settings(path: str | None = None) -> Settings:
    """Read config.yaml; a missing or broken file yields the defaults."""
    cfg_path = path or config_path()
    if not os.path.exists(cfg_path):
        return Settings()
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {cfg_path}: {e}")
        return Settings()
    if not isinstance(raw, dict):
        logger.warning(f"Ignoring config {cfg_path}: top level is not a mapping")
        return Settings()
    # blank strings count as unset
    cleaned = {
        k: (v.strip() or None) if isinstance(v, str) else v
        for k, v in raw.items()
        if isinstance(k, str)
    }
    cleaned["log_level"] = cleaned.get("log_level") or "WARNING"
    try:
        return Settings(**cleaned)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid config {cfg_path}: {e}")
        return Settings()
