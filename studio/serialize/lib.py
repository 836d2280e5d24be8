"""Project file format and the code-generation payload.

Project files are JSON documents carrying a format version tag, a save
timestamp, the canvas settings, every screen and the style presets.
Transient editor state (selection, drag, current screen) is never written.
"""

import json
import logging
import re
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from studio.layers import render_order
from studio.model import (
    DEFAULT_STYLE_PRESETS,
    DEVICE_PRESETS,
    PROPS_BY_TYPE,
    EventAction,
    Project,
    Widget,
    WidgetType,
    new_id,
)

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0.0"


class ProjectFormatError(Exception):
    """Raised when a project file cannot be read as a Project."""


class WidgetParseError(Exception):
    """Raised when an AI-produced widget description is malformed."""


class CodeLanguage(str, Enum):
    """Target languages for generated code."""

    C = "c"
    MICROPYTHON = "micropython"

    @property
    def display_name(self) -> str:
        return "C (LVGL v8/v9)" if self == CodeLanguage.C else "MicroPython"

    @property
    def comment_prefix(self) -> str:
        return "//" if self == CodeLanguage.C else "#"


# =============================================================================
# Project files
# =============================================================================


def project_to_dict(project: Project) -> dict[str, Any]:
    """The project file payload as plain JSON types."""
    data = project.model_dump(mode="json")
    return {
        "version": FORMAT_VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
        "settings": data["settings"],
        "screens": data["screens"],
        "style_presets": data["style_presets"],
    }


def project_from_dict(data: Any) -> Project:
    """Build a Project from a decoded project file.

    Files saved without style presets get the built-in ones.

    Raises:
        ProjectFormatError: If the version is unsupported or the structure
            does not describe a valid project.
    """
    if not isinstance(data, dict):
        raise ProjectFormatError("Project file must contain a JSON object")

    version = str(data.get("version", FORMAT_VERSION))
    if version.split(".")[0] != FORMAT_VERSION.split(".")[0]:
        raise ProjectFormatError(f"Unsupported project file version: {version}")

    missing = [key for key in ("settings", "screens") if key not in data]
    if missing:
        raise ProjectFormatError(f"Invalid project file structure, missing: {', '.join(missing)}")

    payload = {
        "settings": data["settings"],
        "screens": data["screens"],
        "style_presets": data.get("style_presets", [p.model_dump() for p in DEFAULT_STYLE_PRESETS]),
    }
    try:
        return Project.model_validate(payload)
    except ValidationError as e:
        raise ProjectFormatError(f"Invalid project file: {e}") from e


def dumps_project(project: Project, indent: int | None = 2) -> str:
    return json.dumps(project_to_dict(project), indent=indent)


def loads_project(text: str) -> Project:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProjectFormatError(f"Project file is not valid JSON: {e}") from e
    return project_from_dict(data)


def save_project(project: Project, path: Path | str) -> Path:
    """Write a project file, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_project(project), encoding="utf-8")
    logger.info(f"Saved project '{project.settings.project_name}' to {path}")
    return path


def load_project(path: Path | str) -> Project:
    """Read a project file.

    Raises:
        ProjectFormatError: If the file is missing or malformed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProjectFormatError(f"Cannot read project file {path}: {e}") from e
    project = loads_project(text)
    logger.info(f"Loaded project '{project.settings.project_name}' from {path}")
    return project


def default_filename(project: Project, when: datetime | None = None) -> str:
    """``My_Project_2024-05-01.json`` style file name for a save."""
    when = when or datetime.now(UTC)
    stem = re.sub(r"\s+", "_", project.settings.project_name.strip()) or "project"
    return f"{stem}_{when.date().isoformat()}.json"


# =============================================================================
# Code generation payload
# =============================================================================


def _export_widget(widget: Widget, screen_ids: set[str]) -> dict[str, Any]:
    data = widget.model_dump(mode="json", exclude_none=True)
    data["type"] = data["props"].pop("type")
    # Preview bitmaps are heavy and useless to the generator
    data["props"].pop("image_data", None)
    data["events"] = [
        event
        for event in data.get("events", [])
        if event.get("action") != EventAction.NAVIGATE.value
        or event.get("target_screen_id") in screen_ids
    ]
    return data


def export_payload(project: Project, language: CodeLanguage | str = CodeLanguage.C) -> dict[str, Any]:
    """Serialized subset of a project sent to code generation.

    Only visible layers are kept, widgets are listed in paint order without
    image data, navigation events to deleted screens are dropped, and the
    target device is described when one is set. The document is not changed.
    """
    language = CodeLanguage(language)
    settings = project.settings
    screen_ids = {s.id for s in project.screens}

    screens = []
    for screen in project.screens:
        screens.append(
            {
                "id": screen.id,
                "name": screen.name,
                "background_color": screen.background_color,
                "layers": [layer.name for layer in screen.layers if layer.visible],
                "widgets": [
                    _export_widget(w, screen_ids)
                    for w in render_order(screen, visible_only=True)
                ],
            }
        )

    payload: dict[str, Any] = {
        "language": language.value,
        "settings": settings.model_dump(mode="json"),
        "screens": screens,
    }
    device = DEVICE_PRESETS.get(settings.target_device or "")
    if device is not None:
        payload["device"] = {
            "id": device.id,
            "name": device.name,
            "manufacturer": device.manufacturer,
            "width": settings.width,
            "height": settings.height,
            "rotation": settings.rotation,
        }
    return payload


# =============================================================================
# AI widget descriptions
# =============================================================================

_FENCE_PATTERN = re.compile(r"^\s*```[a-zA-Z]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)

_WIDGET_FIELDS = ("name", "x", "y", "width", "height", "style", "events", "group_id")


def strip_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    match = _FENCE_PATTERN.match(text)
    return (match.group(1) if match else text).strip()


def parse_widget_description(
    description: str | dict[str, Any],
    layer_id: str,
    widget_id: str | None = None,
) -> Widget:
    """Turn an AI-produced widget description into a Widget.

    Accepts a dict or JSON text, optionally wrapped in a markdown fence.
    The ``type`` key selects the widget type; type-specific fields may sit
    at the top level or under ``props``.

    Raises:
        WidgetParseError: If the description is not a valid widget.
    """
    if isinstance(description, str):
        try:
            data = json.loads(strip_fences(description))
        except json.JSONDecodeError as e:
            raise WidgetParseError(f"Widget description is not valid JSON: {e}") from e
    else:
        data = description

    if not isinstance(data, dict):
        raise WidgetParseError("Widget description must be a JSON object")
    raw_props = data.get("props") or {}
    if not isinstance(raw_props, dict):
        kind = type(raw_props).__name__
        raise WidgetParseError(f"Widget props must be a JSON object, got {kind}")

    try:
        widget_type = WidgetType(data.get("type") or raw_props.get("type"))
    except ValueError as e:
        raise WidgetParseError(f"Unknown widget type: {data.get('type')!r}") from e

    # Type-specific fields may be given at the top level
    props_fields = PROPS_BY_TYPE[widget_type].model_fields
    props = dict(raw_props)
    for key, value in data.items():
        if key in props_fields and key != "type":
            props.setdefault(key, value)
    props["type"] = widget_type.value

    fields = {k: data[k] for k in _WIDGET_FIELDS if k in data}
    try:
        return Widget.model_validate(
            {
                **fields,
                "id": widget_id or new_id("widget"),
                "layer_id": layer_id,
                "name": fields.get("name") or widget_type.value,
                "props": props,
            }
        )
    except ValidationError as e:
        raise WidgetParseError(f"Invalid widget description: {e}") from e


__all__ = [
    "FORMAT_VERSION",
    "ProjectFormatError",
    "WidgetParseError",
    "CodeLanguage",
    "project_to_dict",
    "project_from_dict",
    "dumps_project",
    "loads_project",
    "save_project",
    "load_project",
    "default_filename",
    "export_payload",
    "strip_fences",
    "parse_widget_description",
]
