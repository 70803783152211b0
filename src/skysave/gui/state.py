"""
Global application state.
Single source of truth for the UI.

Opening and writing saves happens here, so panels only react to events and
call the save model's setters.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config import EditorConfig, load_config, save_config
from ..errors import SaveError
from ..save_editor.save_manager import SkySave
from .events import EventBus, Events

logger = logging.getLogger(__name__)

MAX_LOG_ENTRIES = 1000


@dataclass
class AppState:
    """Global application state container."""

    current_save: Optional[SkySave] = None
    current_path: Optional[Path] = None
    config: EditorConfig = field(default_factory=EditorConfig)

    # Logs (append-only)
    logs: list = field(default_factory=list)

    def log(self, message: str, level: str = "INFO"):
        """Add log entry (the status bar shows the latest one)."""
        self.logs.append({
            "time": time.strftime("%H:%M:%S"),
            "level": level,
            "message": message,
        })
        if len(self.logs) > MAX_LOG_ENTRIES:
            self.logs = self.logs[-MAX_LOG_ENTRIES:]

    def load_config(self, path: Optional[Path] = None):
        self.config = load_config(path)

    # ------------------------------------------------------------------------
    # Save lifecycle
    # ------------------------------------------------------------------------

    def open_save(self, path) -> bool:
        """Load ``path``; on failure the current save stays open."""
        path = Path(path)
        try:
            sky = SkySave.open(path)
        except SaveError as e:
            logger.error("Failed to open %s: %s", path, e)
            EventBus.publish(Events.SAVE_FAILED, str(e))
            EventBus.publish(Events.STATUS_UPDATE, f"Open failed: {path.name}")
            return False

        self.current_save = sky
        self.current_path = path
        self._remember(path)
        EventBus.publish(Events.SAVE_OPENED, sky)
        EventBus.publish(Events.STATUS_UPDATE,
                         f"Loaded {path.name} ({sky.active_block.name.lower()} block)")
        return True

    def write_save(self, path=None) -> bool:
        """Write the open save to ``path`` (default: where it came from)."""
        if self.current_save is None:
            EventBus.publish(Events.STATUS_UPDATE, "No save loaded")
            return False
        target = Path(path) if path is not None else self.current_path
        try:
            self.current_save.save(target, backup=self.config.make_backup)
        except (SaveError, ValueError) as e:
            logger.error("Failed to write %s: %s", target, e)
            EventBus.publish(Events.SAVE_FAILED, str(e))
            EventBus.publish(Events.STATUS_UPDATE, "Save failed")
            return False

        self.current_path = target
        self._remember(target)
        EventBus.publish(Events.SAVE_WRITTEN, target)
        EventBus.publish(Events.STATUS_UPDATE, f"Saved {target.name}")
        return True

    def mark_modified(self):
        EventBus.publish(Events.SAVE_MODIFIED, self.current_save)

    def _remember(self, path: Path):
        self.config.add_recent_file(str(path))
        try:
            save_config(self.config)
        except OSError as e:
            logger.warning("Could not save config: %s", e)

    def clear(self):
        """Clear all state."""
        self.current_save = None
        self.current_path = None


class StateLogHandler(logging.Handler):
    """Mirror log records into ``AppState.logs``."""

    def __init__(self, state: AppState, level=logging.INFO):
        super().__init__(level)
        self.state = state

    def emit(self, record: logging.LogRecord):
        self.state.log(self.format(record), record.levelname)


def install_log_handler(state: AppState, name: str = "skysave") -> StateLogHandler:
    """Mirror the package's records at the configured level into ``state.logs``."""
    handler = StateLogHandler(state, level=state.config.log_level)
    package_logger = logging.getLogger(name)
    package_logger.setLevel(state.config.log_level)
    package_logger.addHandler(handler)
    return handler


# Singleton instance
STATE = AppState()
