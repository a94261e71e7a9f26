"""Shared fixtures: one QApplication per session and per-test settings.

Runs headless by default (QT_QPA_PLATFORM=offscreen).  Run with:
    python -m pytest tests -v
"""
from __future__ import annotations

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

# Ensure project root is on sys.path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import settings
from settings import SettingsManager


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Provide a single QApplication for the entire test session.

    Autouse: QTimer and QGraphicsItem need an application object even in
    tests that never spin the event loop.
    """
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point get_settings() at an empty config dir so user files never leak in."""
    manager = SettingsManager(settings_dir=tmp_path / "config")
    monkeypatch.setattr(settings, "_settings_manager", manager)
    return manager
