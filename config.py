from __future__ import annotations

"""Application configuration handling."""

from dataclasses import dataclass, asdict
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """User adjustable settings for the application."""

    model: str = "gemini-2.5-flash"
    dev_mode: bool = False
    tutorial: bool = True
    log_level: str = "INFO"


def load_config(path: str | Path) -> AppConfig:
    """Load configuration from *path*.

    Returns a default :class:`AppConfig` if the file is missing.  Unknown
    keys are dropped so settings written by newer versions still load.
    """

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return AppConfig()
    known = AppConfig.__dataclass_fields__
    ignored = sorted(set(data) - set(known))
    if ignored:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(ignored))
    return AppConfig(**{k: v for k, v in data.items() if k in known})


def save_config(cfg: AppConfig, path: str | Path) -> None:
    """Persist *cfg* to *path* as JSON."""

    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(cfg), f, indent=2)
