"""Fixtures shared by the cross-package tests."""

from studio.conftest import button, project_with, screen_with  # noqa: F401
