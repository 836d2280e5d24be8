"""Unit tests for board manifests and project archives."""

import io
import json
import zipfile
from unittest.mock import MagicMock, patch

import httpx
import pytest

from .lib import (
    ManifestAction,
    ManifestBoard,
    PackagingError,
    apply_actions,
    build_project_archive,
    fallback_manifest,
    fetch_manifest,
    find_board,
    parse_manifest,
    resolve_actions,
)


@pytest.fixture
def esp32() -> ManifestBoard:
    return find_board(fallback_manifest(), "ESP32-S3-BOX")


def _open(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


# =============================================================================
# Manifest
# =============================================================================


class TestManifest:
    """Tests for manifest parsing and board lookup."""

    @pytest.mark.unit
    def test_parses_creator_layout(self):
        boards = parse_manifest(
            [
                {
                    "name": "Board",
                    "urlToClone": "https://example.com/repo",
                    "ui": [
                        {
                            "type": "dropdown",
                            "label": "Color Depth",
                            "options": [{"name": "16-bit", "value": 16}],
                            "actions": [
                                {"toReplace": "A", "newContent": "B", "filePath": "lv_conf.h"}
                            ],
                        }
                    ],
                },
                {"description": "missing name"},
            ]
        )
        assert len(boards) == 1
        assert boards[0].url_to_clone == "https://example.com/repo"
        option = boards[0].option("Color Depth")
        assert option.choices[0].value == "16"
        assert option.actions[0].to_replace == "A"

    @pytest.mark.unit
    def test_find_board_case_insensitive(self):
        assert find_board(fallback_manifest(), "pc simulator (sdl)").name == "PC Simulator (SDL)"
        with pytest.raises(PackagingError, match="Unknown board"):
            find_board(fallback_manifest(), "Nope")

    @pytest.mark.unit
    def test_fetch_falls_back_on_http_error(self):
        with patch("studio.packaging.lib.httpx.get", side_effect=httpx.ConnectError("down")):
            boards = fetch_manifest()
        assert [b.name for b in boards] == [b.name for b in fallback_manifest()]

    @pytest.mark.unit
    def test_fetch_uses_live_manifest(self):
        response = MagicMock()
        response.json.return_value = [{"name": "Live Board"}]
        with patch("studio.packaging.lib.httpx.get", return_value=response):
            boards = fetch_manifest()
        assert [b.name for b in boards] == ["Live Board"]


# =============================================================================
# Actions
# =============================================================================


class TestActions:
    """Tests for option resolution and template rewriting."""

    @pytest.mark.unit
    def test_value_substituted(self, esp32):
        actions = resolve_actions(esp32, {"Color Depth": "32"})
        assert actions[0].new_content == "LV_COLOR_DEPTH 32"

    @pytest.mark.unit
    def test_unknown_option_or_value(self, esp32):
        with pytest.raises(PackagingError, match="no option"):
            resolve_actions(esp32, {"Refresh": "60"})
        with pytest.raises(PackagingError, match="Invalid value"):
            resolve_actions(esp32, {"Color Depth": "24"})

    @pytest.mark.unit
    def test_invalid_regex_skipped(self):
        actions = [
            ManifestAction(to_replace="(unclosed", new_content="x"),
            ManifestAction(to_replace=r"SWAP \d", new_content=r"SWAP 1\n"),
        ]
        result = apply_actions("#define LV_COLOR_16_SWAP 0", actions)
        # Replacement text is literal, backslashes included
        assert result == "#define LV_COLOR_16_SWAP 1\\n"


# =============================================================================
# Archive
# =============================================================================


class TestArchive:
    """Tests for the generated zip contents."""

    @pytest.mark.unit
    def test_archive_contents(self, esp32):
        data = build_project_archive(esp32, {"ui.c": "void create_ui(void) {}"}, {"Color Depth": "32"})
        archive = _open(data)

        assert set(archive.namelist()) == {"lv_conf.h", "ui/ui.c", "project.json", "README.txt"}
        conf = archive.read("lv_conf.h").decode()
        assert "#define LV_COLOR_DEPTH 32" in conf
        assert "LV_COLOR_DEPTH 16" not in conf

        manifest = json.loads(archive.read("project.json"))
        assert manifest["board"] == "ESP32-S3-BOX"
        assert manifest["config"] == {"Color Depth": "32"}
        assert manifest["files"] == ["ui/ui.c"]
        assert "Target Board: ESP32-S3-BOX" in archive.read("README.txt").decode()

    @pytest.mark.unit
    def test_default_config_keeps_template(self, esp32):
        archive = _open(build_project_archive(esp32, {}))
        assert "#define LV_COLOR_DEPTH 16" in archive.read("lv_conf.h").decode()

    @pytest.mark.unit
    def test_rejects_bad_config(self, esp32):
        with pytest.raises(PackagingError):
            build_project_archive(esp32, {"ui.c": ""}, {"Color Depth": "8"})
