"""lvgl-studio: editor core for embedded GUI layouts with LLM-backed code export."""

from studio.editor import Editor
from studio.model import Project, Screen, Widget, WidgetType, validate_project
from studio.serialize import CodeLanguage, load_project, save_project

__all__ = [
    # Document
    "Project",
    "Screen",
    "Widget",
    "WidgetType",
    "validate_project",
    # Editing
    "Editor",
    # Files
    "CodeLanguage",
    "load_project",
    "save_project",
]
