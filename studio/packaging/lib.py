"""Board project packaging.

Bundles generated UI sources with an ``lv_conf.h`` tailored by a board
manifest into a zip archive. Manifests follow the lvgl_project_creator
layout: each board lists configuration fields whose regex actions rewrite
the configuration template for the chosen value.
"""

import io
import json
import logging
import re
import zipfile
from datetime import UTC, datetime
from typing import Any, Mapping

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

MANIFEST_URL = (
    "https://raw.githubusercontent.com/lvgl/lvgl_project_creator/master/manifest_all.json"
)

LV_CONF_TEMPLATE = """\
/**
 * @file lv_conf.h
 * Configuration file for v8.3
 */

#ifndef LV_CONF_H
#define LV_CONF_H

/* Color depth: 1 (1 byte per pixel), 8 (RGB332), 16 (RGB565), 32 (ARGB8888) */
#define LV_COLOR_DEPTH 16

/* Swap the 2 bytes of RGB565 color. Useful if the display has an 8-bit interface (e.g. SPI) */
#define LV_COLOR_16_SWAP 0

/* 1: Enable complex draw engine, 0: Disable it to save memory */
#define LV_USE_DRAW_MASKS 1

/* Default display refresh period in milliseconds */
#define LV_DISP_DEF_REFR_PERIOD 30

/* Input device read period in milliseconds */
#define LV_INDEV_DEF_READ_PERIOD 30

#endif /*LV_CONF_H*/
"""


class PackagingError(Exception):
    """Raised for unknown boards or option values."""


class _ManifestModel(BaseModel):
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )


class ManifestAction(_ManifestModel):
    """Regex rewrite of a template file.

    ``new_content`` may contain ``{value}``, replaced by the chosen value.
    """

    to_replace: str = Field(validation_alias=AliasChoices("to_replace", "toReplace"))
    new_content: str = Field(validation_alias=AliasChoices("new_content", "newContent"))
    file_path: str = Field(
        default="lv_conf.h", validation_alias=AliasChoices("file_path", "filePath")
    )


class ManifestChoice(_ManifestModel):
    name: str
    value: str


class ManifestOption(_ManifestModel):
    """A user-facing configuration field of a board."""

    type: str = "dropdown"
    label: str
    choices: tuple[ManifestChoice, ...] = Field(
        default=(), validation_alias=AliasChoices("choices", "options")
    )
    actions: tuple[ManifestAction, ...] = ()

    def accepts(self, value: str) -> bool:
        return not self.choices or any(c.value == value for c in self.choices)


class ManifestBoard(_ManifestModel):
    """A target board and its configuration fields."""

    name: str
    description: str = ""
    url_to_clone: str = Field(
        default="", validation_alias=AliasChoices("url_to_clone", "urlToClone")
    )
    options: tuple[ManifestOption, ...] = Field(
        default=(), validation_alias=AliasChoices("options", "ui")
    )

    def option(self, label: str) -> ManifestOption | None:
        return next((o for o in self.options if o.label == label), None)


def fallback_manifest() -> list[ManifestBoard]:
    """Built-in boards used when the live manifest is unavailable."""
    return [
        ManifestBoard(
            name="PC Simulator (SDL)",
            description="Standard PC simulator using SDL2. Best for testing.",
            url_to_clone="https://github.com/lvgl/lv_port_pc_eclipse",
        ),
        ManifestBoard(
            name="ESP32-S3-BOX",
            description='Espressif ESP32-S3 Box with 2.4" display.',
            url_to_clone="https://github.com/lvgl/lv_port_esp32",
            options=(
                ManifestOption(
                    label="Color Depth",
                    choices=(
                        ManifestChoice(name="16-bit", value="16"),
                        ManifestChoice(name="32-bit", value="32"),
                    ),
                    actions=(
                        ManifestAction(
                            to_replace=r"LV_COLOR_DEPTH \d+",
                            new_content="LV_COLOR_DEPTH {value}",
                        ),
                    ),
                ),
            ),
        ),
    ]


def parse_manifest(data: Any) -> list[ManifestBoard]:
    """Boards from a decoded manifest; invalid entries are skipped."""
    if not isinstance(data, list):
        raise PackagingError("Manifest must be a JSON list of boards")
    boards = []
    for entry in data:
        try:
            boards.append(ManifestBoard.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping invalid manifest entry: {e.error_count()} error(s)")
    return boards


def fetch_manifest(url: str = MANIFEST_URL, timeout: float = 10.0) -> list[ManifestBoard]:
    """Fetch the board manifest, falling back to the built-in boards."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
        boards = parse_manifest(response.json())
    except (httpx.HTTPError, ValueError, PackagingError) as e:
        logger.warning(f"Failed to fetch live manifest, using fallback list: {e}")
        return fallback_manifest()
    return boards or fallback_manifest()


def find_board(boards: list[ManifestBoard], name: str) -> ManifestBoard:
    """Look a board up by name, case-insensitively.

    Raises:
        PackagingError: If no board matches.
    """
    for board in boards:
        if board.name.lower() == name.lower():
            return board
    known = ", ".join(b.name for b in boards)
    raise PackagingError(f"Unknown board '{name}'. Available: {known}")


def resolve_actions(board: ManifestBoard, config: Mapping[str, str]) -> list[ManifestAction]:
    """Actions for the chosen option values, with ``{value}`` filled in.

    Raises:
        PackagingError: If a key names no option or a value is not offered.
    """
    actions: list[ManifestAction] = []
    for label, value in config.items():
        option = board.option(label)
        if option is None:
            raise PackagingError(f"Board '{board.name}' has no option '{label}'")
        if not option.accepts(value):
            allowed = ", ".join(c.value for c in option.choices)
            raise PackagingError(f"Invalid value '{value}' for '{label}' (expected {allowed})")
        for action in option.actions:
            actions.append(
                action.model_copy(update={"new_content": action.new_content.replace("{value}", value)})
            )
    return actions


def apply_actions(content: str, actions: list[ManifestAction]) -> str:
    """Apply every regex action in order; invalid patterns are logged and skipped."""
    for action in actions:
        try:
            pattern = re.compile(action.to_replace)
        except re.error as e:
            logger.error(f"Failed to apply action {action.to_replace!r}: {e}")
            continue
        content = pattern.sub(lambda _m, text=action.new_content: text, content)
    return content


def _readme(board: ManifestBoard, config: Mapping[str, str]) -> str:
    lines = [
        "Generated by LVGL Studio",
        "",
        f"Target Board: {board.name}",
    ]
    if board.url_to_clone:
        lines.append(f"Board project: {board.url_to_clone}")
    for label, value in config.items():
        lines.append(f"{label}: {value}")
    lines += [
        "",
        "This archive contains your UI code (ui/) and configuration (lv_conf.h).",
        "Verify the lv_conf.h settings against your hardware before building.",
    ]
    return "\n".join(lines) + "\n"


def build_project_archive(
    board: ManifestBoard,
    files: Mapping[str, str],
    config: Mapping[str, str] | None = None,
    template: str = LV_CONF_TEMPLATE,
) -> bytes:
    """Zip the generated files for ``board``.

    Args:
        board: Target board.
        files: Generated sources by file name, stored under ``ui/``.
        config: Chosen value per option label.
        template: ``lv_conf.h`` template the actions rewrite.

    Returns:
        The zip archive as bytes.

    Raises:
        PackagingError: For unknown options or values.
    """
    config = dict(config or {})
    actions = resolve_actions(board, config)
    conf_actions = [a for a in actions if a.file_path.endswith("lv_conf.h")]
    if len(conf_actions) != len(actions):
        logger.warning(f"Ignoring {len(actions) - len(conf_actions)} action(s) for other files")

    manifest = {
        "board": board.name,
        "url_to_clone": board.url_to_clone,
        "config": config,
        "files": sorted(f"ui/{name}" for name in files),
        "generated_at": datetime.now(UTC).isoformat(),
    }

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("lv_conf.h", apply_actions(template, conf_actions))
        for name, content in files.items():
            archive.writestr(f"ui/{name}", content)
        archive.writestr("project.json", json.dumps(manifest, indent=2))
        archive.writestr("README.txt", _readme(board, config))

    logger.info(f"Packaged {len(files)} file(s) for {board.name}")
    return buffer.getvalue()


__all__ = [
    "MANIFEST_URL",
    "LV_CONF_TEMPLATE",
    "PackagingError",
    "ManifestAction",
    "ManifestChoice",
    "ManifestOption",
    "ManifestBoard",
    "fallback_manifest",
    "parse_manifest",
    "fetch_manifest",
    "find_board",
    "resolve_actions",
    "apply_actions",
    "build_project_archive",
]
