"""Undo/redo history for lvgl-studio documents.

Example:
    >>> from studio.history import HistoryEngine
    >>> history = HistoryEngine(project)
    >>> history.set(lambda p: add_widget(p, ...), "Add Button")
    >>> history.undo()
"""

from .lib import HistoryEngine, HistoryItem

__all__ = ["HistoryEngine", "HistoryItem"]
