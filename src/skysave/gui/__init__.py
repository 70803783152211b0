"""dearpygui desktop editor. ``main_app`` and the panels need dearpygui installed."""
