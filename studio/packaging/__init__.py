"""Board project packaging.

Example:
    >>> from studio.packaging import build_project_archive, fallback_manifest, find_board
    >>> board = find_board(fallback_manifest(), "ESP32-S3-BOX")
    >>> data = build_project_archive(board, {"ui.c": code}, {"Color Depth": "32"})
"""

from .lib import (
    LV_CONF_TEMPLATE,
    MANIFEST_URL,
    ManifestAction,
    ManifestBoard,
    ManifestChoice,
    ManifestOption,
    PackagingError,
    apply_actions,
    build_project_archive,
    fallback_manifest,
    fetch_manifest,
    find_board,
    parse_manifest,
    resolve_actions,
)

__all__ = [
    "LV_CONF_TEMPLATE",
    "MANIFEST_URL",
    "ManifestAction",
    "ManifestBoard",
    "ManifestChoice",
    "ManifestOption",
    "PackagingError",
    "apply_actions",
    "build_project_archive",
    "fallback_manifest",
    "fetch_manifest",
    "find_board",
    "parse_manifest",
    "resolve_actions",
]
