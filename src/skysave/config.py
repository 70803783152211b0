"""
Editor configuration persisted as JSON.

Stored at ``~/.skysave/config.json`` unless ``SKYSAVE_CONFIG`` names another
file. Shared by the command-line tool and the desktop editor.
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SKYSAVE_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".skysave" / "config.json"
MAX_RECENT = 10
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EditorConfig:
    """User preferences."""
    make_backup: bool = True
    log_level: str = "WARNING"
    last_directory: Optional[str] = None
    recent_files: List[str] = field(default_factory=list)

    def __post_init__(self):
        level = str(self.log_level).upper()
        if level not in LOG_LEVELS:
            logger.warning("Unknown log level %r in config; using WARNING", self.log_level)
            level = "WARNING"
        self.log_level = level

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "EditorConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def add_recent_file(self, path: str):
        """Move ``path`` to the front of the recent list."""
        path = str(path)
        if path in self.recent_files:
            self.recent_files.remove(path)
        self.recent_files.insert(0, path)
        del self.recent_files[MAX_RECENT:]
        self.last_directory = str(Path(path).parent)


def config_path() -> Path:
    env = os.environ.get(CONFIG_ENV_VAR)
    return Path(env) if env else DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> EditorConfig:
    """Load the config, falling back to defaults when missing or unreadable."""
    path = Path(path) if path is not None else config_path()
    if not path.exists():
        return EditorConfig()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not read config %s: %s; using defaults", path, e)
        return EditorConfig()
    if not isinstance(data, dict):
        logger.warning("Config %s is not a JSON object; using defaults", path)
        return EditorConfig()
    return EditorConfig.from_dict(data)


def save_config(config: EditorConfig, path: Optional[Path] = None) -> Path:
    path = Path(path) if path is not None else config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.debug("Saved config to %s", path)
    return path
