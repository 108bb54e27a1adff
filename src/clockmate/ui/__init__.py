"""Qt-facing adapters for the game layer."""

from clockmate.ui.qt_bridge import GameSignals

__all__ = ["GameSignals"]
