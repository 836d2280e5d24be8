"""Tests for the command line entry point."""

import subprocess
import sys
import zipfile
from pathlib import Path

import pytest

from studio.model import Project, WidgetEvent
from studio.serialize import save_project

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        timeout=60,
    )


@pytest.fixture
def project_file(tmp_path, button, screen_with, project_with) -> Path:
    project = project_with(screen_with(button("ok", x=20, y=40), button("cancel", x=160, y=40)))
    return save_project(project, tmp_path / "ui.json")


@pytest.mark.integration
def test_help_lists_commands():
    result = run_cli("--help")
    assert result.returncode == 0
    for command in ("generate", "validate", "info", "package", "samples", "providers"):
        assert command in result.stdout


@pytest.mark.integration
def test_unknown_command_fails():
    assert run_cli("frobnicate").returncode == 1


@pytest.mark.integration
def test_validate_clean_project(project_file):
    assert run_cli("validate", str(project_file)).returncode == 0


@pytest.mark.integration
def test_validate_reports_dangling_navigation(tmp_path, button, screen_with, project_with):
    lost = WidgetEvent(id="e1", target_screen_id="nowhere")
    project = project_with(screen_with(button("nav", events=(lost,))))
    path = save_project(project, tmp_path / "broken.json")

    result = run_cli("validate", str(path))
    assert result.returncode == 1
    assert "nav" in result.stdout


@pytest.mark.integration
def test_validate_missing_file(tmp_path):
    assert run_cli("validate", str(tmp_path / "missing.json")).returncode == 1


@pytest.mark.integration
def test_info_shows_paint_order(project_file):
    result = run_cli("info", str(project_file))
    assert result.returncode == 0
    assert "Screen 'Main Screen'" in result.stdout
    assert result.stdout.index(" ok ") < result.stdout.index(" cancel ")


@pytest.mark.integration
def test_package_lists_boards():
    result = run_cli("package", "--list-boards")
    assert result.returncode == 0
    assert "ESP32-S3-BOX" in result.stdout
    assert "Color Depth" in result.stdout


@pytest.mark.integration
def test_package_rejects_bad_option(project_file, tmp_path):
    result = run_cli(
        "package", str(project_file), "-b", "ESP32-S3-BOX", "--option", "Color Depth", "-o",
        str(tmp_path / "out.zip"),
    )
    assert result.returncode == 1
    assert not (tmp_path / "out.zip").exists()


@pytest.mark.integration
@pytest.mark.llm
def test_package_with_live_provider(project_file, tmp_path, llm_provider):
    out = tmp_path / "esp.zip"
    result = run_cli(
        "package", str(project_file), "-b", "ESP32-S3-BOX", "--option", "Color Depth=32",
        "-p", llm_provider, "-o", str(out),
    )
    assert result.returncode == 0, result.stderr
    assert "ui/ui.c" in zipfile.ZipFile(out).namelist()


@pytest.mark.integration
def test_empty_project_round_trip(tmp_path):
    path = save_project(Project.create(), tmp_path / "empty.json")
    assert run_cli("info", str(path)).returncode == 0


@pytest.mark.integration
def test_samples_listed():
    result = run_cli("samples")
    assert result.returncode == 0
    for sample_id in ("thermostat", "ebike_dash", "audio_player", "wifi_settings"):
        assert sample_id in result.stdout


@pytest.mark.integration
def test_saved_sample_validates(tmp_path):
    path = tmp_path / "menu.json"
    assert run_cli("samples", "wifi_settings", "-o", str(path)).returncode == 0
    assert run_cli("validate", str(path)).returncode == 0

    info = run_cli("info", str(path))
    assert "Wi-Fi Networks" in info.stdout


@pytest.mark.integration
def test_unknown_sample_fails():
    assert run_cli("samples", "toaster").returncode == 1
