"""
Theme and color definitions for the save editor GUI.
Dusk-sky palette.
"""

import dearpygui.dearpygui as dpg


# =============================================================================
# APPLICATION COLORS (RGBA 0-255)
# =============================================================================
class Colors:
    """Global application color palette."""
    BG_DARK = (18, 20, 32, 255)
    BG_PANEL = (26, 30, 46, 255)
    BG_CHILD = (34, 39, 58, 255)
    TITLE_BG = (40, 46, 70, 255)
    TITLE_ACTIVE = (60, 70, 110, 255)
    FRAME_BG = (44, 50, 72, 255)
    BUTTON = (70, 80, 130, 255)
    BUTTON_HOVER = (95, 105, 160, 255)
    BUTTON_ACTIVE = (85, 95, 145, 255)
    TEXT_DIM = (140, 145, 165, 255)
    TEXT_BRIGHT = (225, 228, 240, 255)
    ACCENT_GREEN = (110, 200, 130, 255)
    ACCENT_BLUE = (120, 165, 240, 255)
    ACCENT_YELLOW = (240, 205, 100, 255)
    ACCENT_RED = (230, 100, 110, 255)
    SEPARATOR = (60, 66, 90, 255)
    SCROLLBAR = (40, 45, 65, 255)
    SCROLLBAR_GRAB = (80, 88, 120, 255)


def setup_theme():
    """Apply the global application theme."""
    with dpg.theme() as global_theme:
        with dpg.theme_component(dpg.mvAll):
            dpg.add_theme_color(dpg.mvThemeCol_WindowBg, Colors.BG_PANEL)
            dpg.add_theme_color(dpg.mvThemeCol_ChildBg, Colors.BG_CHILD)
            dpg.add_theme_color(dpg.mvThemeCol_PopupBg, Colors.BG_PANEL)
            dpg.add_theme_color(dpg.mvThemeCol_MenuBarBg, Colors.BG_DARK)

            dpg.add_theme_color(dpg.mvThemeCol_TitleBg, Colors.TITLE_BG)
            dpg.add_theme_color(dpg.mvThemeCol_TitleBgActive, Colors.TITLE_ACTIVE)

            dpg.add_theme_color(dpg.mvThemeCol_FrameBg, Colors.FRAME_BG)
            dpg.add_theme_color(dpg.mvThemeCol_FrameBgHovered, (54, 60, 86, 255))
            dpg.add_theme_color(dpg.mvThemeCol_CheckMark, Colors.ACCENT_YELLOW)

            dpg.add_theme_color(dpg.mvThemeCol_Button, Colors.BUTTON)
            dpg.add_theme_color(dpg.mvThemeCol_ButtonHovered, Colors.BUTTON_HOVER)
            dpg.add_theme_color(dpg.mvThemeCol_ButtonActive, Colors.BUTTON_ACTIVE)

            dpg.add_theme_color(dpg.mvThemeCol_Header, (50, 58, 88, 255))
            dpg.add_theme_color(dpg.mvThemeCol_HeaderHovered, (62, 72, 108, 255))

            dpg.add_theme_color(dpg.mvThemeCol_ScrollbarBg, Colors.SCROLLBAR)
            dpg.add_theme_color(dpg.mvThemeCol_ScrollbarGrab, Colors.SCROLLBAR_GRAB)

            dpg.add_theme_color(dpg.mvThemeCol_Separator, Colors.SEPARATOR)
            dpg.add_theme_color(dpg.mvThemeCol_Text, Colors.TEXT_BRIGHT)
            dpg.add_theme_color(dpg.mvThemeCol_TextDisabled, Colors.TEXT_DIM)

            dpg.add_theme_style(dpg.mvStyleVar_FrameRounding, 4)
            dpg.add_theme_style(dpg.mvStyleVar_WindowRounding, 6)
            dpg.add_theme_style(dpg.mvStyleVar_FramePadding, 8, 4)
            dpg.add_theme_style(dpg.mvStyleVar_ItemSpacing, 8, 6)

    dpg.bind_theme(global_theme)
    return global_theme
