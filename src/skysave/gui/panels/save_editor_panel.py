"""
Save Editor Panel - Explorers of Sky save editor

Edit team data, the stored roster and the active party. Every edit goes
through the save model's setters; nothing touches the bytes directly.
"""

from dataclasses import fields
from typing import Optional

import dearpygui.dearpygui as dpg

from ...errors import EncodingError
from ...formats.active import ActiveCreature
from ...formats.moves import ActiveMove, StoredMove
from ...formats.offsets import ActiveLayout, IQ_MAP_LEN, StoredLayout
from ...formats.stored import StoredCreature
from ...formats.text import EncodedString
from ..events import EventBus, Events
from ..state import STATE
from ..theme import Colors

# Fields shown elsewhere or not editable as a single value
_SKIP_FIELDS = ("raw", "moves", "iq_map", "name", "reserved_4")

RECORD_KINDS = {
    "stored": (StoredCreature, StoredMove, StoredLayout.COUNT),
    "active": (ActiveCreature, ActiveMove, ActiveLayout.COUNT),
}

GENERAL_FIELDS = [
    ("Held money", "held_money"),
    ("SP episode money", "sp_episode_held_money"),
    ("Stored money", "stored_money"),
    ("Adventures", "number_of_adventures"),
    ("Explorer rank", "explorer_rank"),
]


def editable_text(encoded: EncodedString) -> str:
    """Display form up to the first zero byte, escapes kept."""
    out = []
    for c in encoded:
        if c.byte == 0:
            break
        out.append(c.display)
    return "".join(out)


def _is_flag(f) -> bool:
    return isinstance(f.default, bool)


class SaveEditorPanel:
    """Save editor panel - team data, stored roster, active party."""

    TAG = "save_editor"
    STATUS_TAG = "save_status"
    MESSAGE_TAG = "save_message"

    def __init__(self, width: int = 620, height: int = 820, pos: tuple = (10, 30)):
        self.width = width
        self.height = height
        self.pos = pos
        self._create_panel()
        self._subscribe_events()

    def _subscribe_events(self):
        EventBus.subscribe(Events.SAVE_OPENED, self._on_save_opened)
        EventBus.subscribe(Events.SAVE_WRITTEN, self._on_save_written)
        EventBus.subscribe(Events.SAVE_FAILED, self._on_save_failed)

    # ------------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------------

    def _create_panel(self):
        with dpg.window(
            label="Save Editor",
            tag=self.TAG,
            width=self.width,
            height=self.height,
            pos=self.pos,
            on_close=self._on_close,
        ):
            dpg.add_text("Explorers of Sky Save Editor", color=Colors.ACCENT_YELLOW)
            dpg.add_text("No save loaded", tag=self.STATUS_TAG, color=Colors.TEXT_DIM)
            dpg.add_separator()

            with dpg.collapsing_header(label="General", default_open=True):
                with dpg.group(horizontal=True):
                    dpg.add_text("Team name:", color=Colors.ACCENT_BLUE)
                    dpg.add_input_text(tag="general_team_name", width=200, on_enter=True,
                                       callback=self._on_team_name)
                for label, name in GENERAL_FIELDS:
                    with dpg.group(horizontal=True):
                        dpg.add_text(f"{label}:", color=Colors.ACCENT_BLUE)
                        dpg.add_input_int(tag=f"general_{name}", width=160, on_enter=True,
                                          callback=self._on_general, user_data=name)

            for kind, header in (("stored", "Stored Roster"), ("active", "Active Party")):
                with dpg.collapsing_header(label=header, default_open=kind == "active"):
                    self._build_record_editor(kind)

            dpg.add_separator()
            with dpg.group(horizontal=True):
                dpg.add_button(label="Save", width=120, callback=lambda: STATE.write_save())
                dpg.add_button(label="Revert", width=100, callback=self._revert_changes)
            dpg.add_text("", tag=self.MESSAGE_TAG, color=Colors.ACCENT_GREEN)

    def _build_record_editor(self, kind: str):
        record_cls, move_cls, count = RECORD_KINDS[kind]

        with dpg.group(horizontal=True):
            dpg.add_text("Index:", color=Colors.ACCENT_BLUE)
            dpg.add_input_int(tag=f"{kind}_index", width=120, min_value=0, max_value=count - 1,
                              min_clamped=True, max_clamped=True,
                              callback=lambda s, a, u: self._refresh_record(u), user_data=kind)
            dpg.add_text(f"of {count}", color=Colors.TEXT_DIM)

        with dpg.group(horizontal=True):
            dpg.add_text("Name:", color=Colors.ACCENT_BLUE)
            dpg.add_input_text(tag=f"{kind}_name", width=200, on_enter=True,
                               callback=self._on_record_name, user_data=kind)

        for f in fields(record_cls):
            if f.name in _SKIP_FIELDS:
                continue
            tag = f"{kind}_{f.name}"
            if _is_flag(f):
                dpg.add_checkbox(label=f.name, tag=tag, callback=self._on_record_field,
                                 user_data=(kind, f.name))
            else:
                dpg.add_input_int(label=f.name, tag=tag, width=140, on_enter=True,
                                  callback=self._on_record_field, user_data=(kind, f.name))

        dpg.add_text("Moves", color=Colors.ACCENT_YELLOW)
        for slot in range(4):
            with dpg.group(horizontal=True):
                dpg.add_text(f"[{slot}]", color=Colors.TEXT_DIM)
                for f in fields(move_cls):
                    if f.name == "raw":
                        continue
                    tag = f"{kind}_move{slot}_{f.name}"
                    user_data = (kind, slot, f.name)
                    if _is_flag(f):
                        dpg.add_checkbox(label=f.name[:4], tag=tag,
                                         callback=self._on_move_field, user_data=user_data)
                    else:
                        dpg.add_input_int(label=f.name, tag=tag, width=80, on_enter=True,
                                          callback=self._on_move_field, user_data=user_data)

        with dpg.tree_node(label="IQ skills"):
            for row_start in range(0, IQ_MAP_LEN, 10):
                with dpg.group(horizontal=True):
                    for skill in range(row_start, min(row_start + 10, IQ_MAP_LEN)):
                        dpg.add_checkbox(label=f"{skill:02}", tag=f"{kind}_iq{skill}",
                                         callback=self._on_iq_skill, user_data=(kind, skill))

    # ------------------------------------------------------------------------
    # Populate
    # ------------------------------------------------------------------------

    def _on_save_opened(self, sky):
        dpg.set_value(self.STATUS_TAG, f"Loaded: {STATE.current_path.name}  "
                                       f"({sky.active_block.name.lower()} block)")
        dpg.configure_item(self.STATUS_TAG, color=Colors.ACCENT_GREEN)
        dpg.set_value("general_team_name", editable_text(sky.general.team_name))
        for _, name in GENERAL_FIELDS:
            dpg.set_value(f"general_{name}", getattr(sky.general, name))
        for kind in RECORD_KINDS:
            self._refresh_record(kind)
        self._message("", Colors.ACCENT_GREEN)

    def _index(self, kind: str) -> int:
        return dpg.get_value(f"{kind}_index")

    def _refresh_record(self, kind: str):
        sky = STATE.current_save
        if sky is None:
            return
        record = getattr(sky, kind)[self._index(kind)]
        dpg.set_value(f"{kind}_name", editable_text(record.name))
        for f in fields(record):
            if f.name not in _SKIP_FIELDS:
                dpg.set_value(f"{kind}_{f.name}", getattr(record, f.name))
        for slot, move in enumerate(record.moves):
            for f in fields(move):
                if f.name != "raw":
                    dpg.set_value(f"{kind}_move{slot}_{f.name}", getattr(move, f.name))
        for skill, enabled in enumerate(record.iq_map):
            dpg.set_value(f"{kind}_iq{skill}", enabled)

    # ------------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------------

    def _apply(self, action, kind: Optional[str] = None):
        """Run a setter, reporting encoding and range errors in the panel."""
        if STATE.current_save is None:
            self._message("No save loaded", Colors.ACCENT_RED)
            return
        try:
            action(STATE.current_save)
        except (EncodingError, ValueError, IndexError) as e:
            self._message(str(e), Colors.ACCENT_RED)
            if kind:
                self._refresh_record(kind)
            return
        STATE.mark_modified()
        self._message("Modified (unsaved)", Colors.ACCENT_YELLOW)

    def _on_team_name(self, sender, value):
        self._apply(lambda sky: sky.set_team_name(value))

    def _on_general(self, sender, value, name):
        self._apply(lambda sky: sky.set_general(name, value))

    def _on_record_name(self, sender, value, kind):
        idx = self._index(kind)
        if kind == "stored":
            self._apply(lambda sky: sky.set_stored_name(idx, value), kind)
        else:
            self._apply(lambda sky: sky.set_active_name(idx, value), kind)

    def _on_record_field(self, sender, value, user_data):
        kind, name = user_data
        idx = self._index(kind)
        if kind == "stored":
            self._apply(lambda sky: sky.set_stored(idx, name, value), kind)
        else:
            self._apply(lambda sky: sky.set_active(idx, name, value), kind)

    def _on_move_field(self, sender, value, user_data):
        kind, slot, name = user_data
        idx = self._index(kind)
        if kind == "stored":
            self._apply(lambda sky: sky.set_stored_move(idx, slot, name, value), kind)
        else:
            self._apply(lambda sky: sky.set_active_move(idx, slot, name, value), kind)

    def _on_iq_skill(self, sender, value, user_data):
        kind, skill = user_data
        idx = self._index(kind)
        if kind == "stored":
            self._apply(lambda sky: sky.set_stored_iq_skill(idx, skill, value), kind)
        else:
            self._apply(lambda sky: sky.set_active_iq_skill(idx, skill, value), kind)

    # ------------------------------------------------------------------------
    # Save / revert
    # ------------------------------------------------------------------------

    def _on_save_written(self, path):
        backup = " (backup created)" if STATE.config.make_backup else ""
        self._message(f"Saved {path.name}{backup}", Colors.ACCENT_GREEN)

    def _on_save_failed(self, message):
        self._message(message, Colors.ACCENT_RED)

    def _revert_changes(self):
        """Reload the save, discarding changes."""
        if STATE.current_path and STATE.open_save(STATE.current_path):
            self._message("Changes reverted", Colors.ACCENT_GREEN)

    def _message(self, text: str, color):
        dpg.set_value(self.MESSAGE_TAG, text)
        dpg.configure_item(self.MESSAGE_TAG, color=color)

    def _on_close(self):
        dpg.configure_item(self.TAG, show=False)

    @classmethod
    def show(cls):
        if dpg.does_item_exist(cls.TAG):
            dpg.configure_item(cls.TAG, show=True)
            dpg.focus_item(cls.TAG)
