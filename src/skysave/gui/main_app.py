"""
Sky Save Suite Main Application Frame

DearPyGUI window setup, menu bar, file dialogs, and panel initialization.
"""

import logging
from pathlib import Path

import dearpygui.dearpygui as dpg

from .. import SAVE_EXTENSIONS, __version__
from .events import EventBus, Events
from .panels.save_editor_panel import SaveEditorPanel
from .panels.status_bar import StatusBar
from .state import STATE, install_log_handler
from .theme import Colors, setup_theme

logger = logging.getLogger(__name__)

OPEN_DIALOG_TAG = "open_dialog"
SAVE_AS_DIALOG_TAG = "save_as_dialog"


class MainApp:
    """Main application frame and window manager."""

    def __init__(self, width: int = 1000, height: int = 900):
        self.width = width
        self.height = height
        self.panels = {}

        STATE.load_config()
        install_log_handler(STATE)

        dpg.create_context()
        setup_theme()

        dpg.create_viewport(
            title="Sky Save Suite - Explorers of Sky Save Editor",
            width=width,
            height=height,
        )

        self._create_file_dialogs()
        self._create_menu_bar()
        self._init_panels()
        self._subscribe_events()

    def _subscribe_events(self):
        EventBus.subscribe(Events.OPEN_REQUESTED, STATE.open_save)
        EventBus.subscribe(Events.WRITE_REQUESTED, STATE.write_save)

    def _create_file_dialogs(self):
        start_dir = STATE.config.last_directory or str(Path.cwd())
        filters = "Save files ({}){{{}}}".format(
            " ".join(f"*{ext}" for ext in SAVE_EXTENSIONS), ",".join(SAVE_EXTENSIONS))
        for tag, callback in ((OPEN_DIALOG_TAG, self._on_open_selected),
                              (SAVE_AS_DIALOG_TAG, self._on_save_as_selected)):
            with dpg.file_dialog(tag=tag, directory_selector=False, show=False,
                                 callback=callback, width=720, height=420,
                                 default_path=start_dir):
                dpg.add_file_extension(filters, color=Colors.ACCENT_YELLOW)
                dpg.add_file_extension(".*")

    def _create_menu_bar(self):
        """Create the application menu bar."""
        with dpg.viewport_menu_bar():
            with dpg.menu(label="File"):
                dpg.add_menu_item(label="Open...", callback=lambda: dpg.show_item(OPEN_DIALOG_TAG))
                dpg.add_menu_item(label="Save", callback=lambda: EventBus.publish(Events.WRITE_REQUESTED))
                dpg.add_menu_item(label="Save As...", callback=lambda: dpg.show_item(SAVE_AS_DIALOG_TAG))
                with dpg.menu(label="Recent"):
                    for path in STATE.config.recent_files:
                        dpg.add_menu_item(label=path, user_data=path,
                                          callback=lambda s, a, u: EventBus.publish(Events.OPEN_REQUESTED, u))
                dpg.add_separator()
                dpg.add_menu_item(label="Exit", callback=lambda: dpg.stop_dearpygui())

            with dpg.menu(label="View"):
                dpg.add_menu_item(label="Save Editor", callback=SaveEditorPanel.show)

            with dpg.menu(label="Help"):
                dpg.add_menu_item(label="About", callback=self._show_about)

    def _on_open_selected(self, sender, app_data):
        EventBus.publish(Events.OPEN_REQUESTED, app_data["file_path_name"])

    def _on_save_as_selected(self, sender, app_data):
        EventBus.publish(Events.WRITE_REQUESTED, app_data["file_path_name"])

    def _show_about(self):
        with dpg.window(label="About Sky Save Suite", modal=True, width=360, height=180) as about:
            dpg.add_text("Sky Save Suite", color=Colors.ACCENT_YELLOW)
            dpg.add_text("Explorers of Sky save editor")
            dpg.add_separator()
            dpg.add_text(f"Version {__version__}")
            dpg.add_spacer(height=10)
            dpg.add_button(label="Close", callback=lambda: dpg.delete_item(about))

    def _init_panels(self):
        self.panels["save_editor"] = SaveEditorPanel(width=self.width - 20, height=self.height - 90,
                                                     pos=(10, 30))
        self.panels["status_bar"] = StatusBar(width=self.width, height=30, y_pos=self.height - 65)

    def show(self):
        dpg.setup_dearpygui()
        dpg.show_viewport()

    def run(self):
        """Run the main event loop."""
        while dpg.is_dearpygui_running():
            dpg.render_dearpygui_frame()

    def shutdown(self):
        dpg.destroy_context()


def main() -> int:
    """Entry point."""
    app = MainApp()
    app.show()
    app.run()
    app.shutdown()
    return 0
