"""
Status Bar Component.
Displays application status and the unsaved-changes marker.
"""

import dearpygui.dearpygui as dpg

from ..events import EventBus, Events
from ..theme import Colors


class StatusBar:
    """Application status bar."""

    TAG = "status_bar"
    TEXT_TAG = "status_text"
    DIRTY_TAG = "status_dirty"

    def __init__(self, width: int = 1000, height: int = 30, y_pos: int = 860):
        self.width = width
        self.height = height
        self.y_pos = y_pos
        self._create_bar()
        self._subscribe_events()

    def _create_bar(self):
        with dpg.window(
            tag=self.TAG,
            no_title_bar=True,
            no_resize=True,
            no_move=True,
            no_close=True,
            no_collapse=True,
            no_scrollbar=True,
            pos=(0, self.y_pos),
            width=self.width,
            height=self.height
        ):
            with dpg.group(horizontal=True):
                dpg.add_text("Sky Save Suite", color=Colors.ACCENT_YELLOW)
                dpg.add_text(" | ", color=Colors.SEPARATOR)
                dpg.add_text("Ready", tag=self.TEXT_TAG, color=Colors.TEXT_DIM)
                dpg.add_text("", tag=self.DIRTY_TAG, color=Colors.ACCENT_YELLOW)

    def _subscribe_events(self):
        EventBus.subscribe(Events.STATUS_UPDATE, self._on_status_update)
        EventBus.subscribe(Events.SAVE_MODIFIED, lambda _: dpg.set_value(self.DIRTY_TAG, "  [modified]"))
        EventBus.subscribe(Events.SAVE_OPENED, lambda _: dpg.set_value(self.DIRTY_TAG, ""))
        EventBus.subscribe(Events.SAVE_WRITTEN, lambda _: dpg.set_value(self.DIRTY_TAG, ""))

    def _on_status_update(self, message: str):
        dpg.set_value(self.TEXT_TAG, message)
