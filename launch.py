#!/usr/bin/env python3
"""
Sky Save Suite - Explorers of Sky Save Editor

Desktop editor for Pokémon Mystery Dungeon: Explorers of Sky save files.

Usage:
    python launch.py
"""

import sys
from pathlib import Path

# Setup paths so the editor runs from a source checkout
root_dir = Path(__file__).parent
src_dir = root_dir / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

APP_NAME = "Sky Save Suite"


def get_version() -> str:
    from skysave import __version__
    return __version__


def show_splash():
    """Show splash screen info."""
    banner = f"""
╔══════════════════════════════════════════════════════════╗
║                                                          ║
║   {APP_NAME:<54} ║
║   Explorers of Sky Save Editor                           ║
║   Version {get_version():<46} ║
║                                                          ║
╚══════════════════════════════════════════════════════════╝
"""
    print(banner)


def check_dependencies() -> bool:
    """Check that the GUI dependencies are available."""
    missing = []

    try:
        import dearpygui  # noqa: F401
    except ImportError:
        missing.append("dearpygui")

    if missing:
        print("\n⚠️  Missing dependencies:")
        for dep in missing:
            print(f"   - {dep}")
        print("\n   Install with: pip install -e .[gui]\n")
        return False

    return True


def main():
    """Launch the application."""
    show_splash()

    if not check_dependencies():
        return 1

    from skysave.gui.main_app import MainApp

    print("Starting application...")
    app = MainApp()
    app.show()
    print("Application ready.\n")

    app.run()
    app.shutdown()

    print("\nApplication closed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
