"""
settings.py

Default arrow parameters and debounce delays, persisted as TOML.

The config directory comes from platformdirs.

Settings file location:
    - Windows: %APPDATA%/pixelarrow/settings.toml
    - macOS: ~/Library/Application Support/pixelarrow/settings.toml
    - Linux: ~/.config/pixelarrow/settings.toml

Every field carries its default inline.  An unreadable settings.toml falls
back to those defaults with a logged warning.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

APP_NAME = "pixelarrow"

log = logging.getLogger(__name__)

# Shared instance, see get_settings()
_settings_manager: Optional["SettingsManager"] = None


def get_settings() -> "SettingsManager":
    """Process-wide SettingsManager, created on first use."""
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager


# =============================================================================
# Arrow Settings
# =============================================================================

@dataclass
class ArrowShapeSettings:
    """Default arrow shape, in device pixels and degrees.

    Defaults:
        width: 1.5
        length: 24.0
        point_angle: 36.0
        point_ratio: 0.7
        arrow_type: "start"
    """
    width: float = 1.5           # Default: 1.5 pixels (shaft width)
    length: float = 24.0         # Default: 24.0 pixels (head side length)
    point_angle: float = 36.0    # Default: 36 degrees (full head angle)
    point_ratio: float = 0.7     # Default: 0.7 (0 = sharp, 1 = flat head base)
    arrow_type: str = "start"    # Default: "start" (start | stop | both)


@dataclass
class ArrowStyleSettings:
    """Default arrow outline and fill style.

    Defaults:
        edge_alpha: 1.0
        edge_width: 0.5
        edge_style: "none"
        edge_color: "black"
        face_alpha: 1.0
        face_color: "black"
        filled: True
    """
    edge_alpha: float = 1.0        # Default: 1.0 (opaque)
    edge_width: float = 0.5        # Default: 0.5 pixels
    edge_style: str = "none"       # Default: "none" (no outline)
    edge_color: str = "black"      # Default: black
    face_alpha: float = 1.0        # Default: 1.0 (opaque)
    face_color: str = "black"      # Default: black
    filled: bool = True            # Default: True


@dataclass
class DebounceSettings:
    """Quiet periods before debounced work runs.

    Defaults:
        position_delay_ms: 200
        style_delay_ms: 100
    """
    position_delay_ms: int = 200   # Default: 200 ms (geometry recompute)
    style_delay_ms: int = 100      # Default: 100 ms (style application)


@dataclass
class ViewSettings:
    """Host view behavior settings.

    Defaults:
        wheel_factor: 1.15
    """
    wheel_factor: float = 1.15  # Default: 1.15 (15% per scroll step)


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Everything stored in settings.toml, one attribute per top-level table.

    Attributes:
        arrow: Default arrow shape.
        style: Default arrow style.
        debounce: Debounce delays.
        view: Host view behavior.
    """
    arrow: ArrowShapeSettings = field(default_factory=ArrowShapeSettings)
    style: ArrowStyleSettings = field(default_factory=ArrowStyleSettings)
    debounce: DebounceSettings = field(default_factory=DebounceSettings)
    view: ViewSettings = field(default_factory=ViewSettings)


# =============================================================================
# Settings Manager
# =============================================================================

class SettingsManager:
    """Reads and writes settings.toml.

    A missing file means defaults; the file is written by save() or, with
    every table present, by ensure_file_complete().

    Args:
        app_name: Application name used for the config directory.
        settings_dir: Override for the config directory (tests, portable installs).
    """

    def __init__(self, app_name: str = APP_NAME, settings_dir: Optional[Path] = None):
        if settings_dir is None:
            settings_dir = Path(platformdirs.user_config_dir(app_name))
        self.settings_dir = Path(settings_dir)
        self.settings_file = self.settings_dir / "settings.toml"
        self.settings = self.load()
        self._needs_save = not self.settings_file.exists()  # Save if file didn't exist

    def ensure_file_complete(self) -> None:
        """Write settings.toml if none existed when this manager loaded."""
        if self._needs_save or not self.settings_file.exists():
            self.save()
            self._needs_save = False

    def load(self) -> AppSettings:
        """Read settings.toml; defaults for a missing, unreadable or malformed file."""
        if not self.settings_file.exists():
            return AppSettings()

        try:
            with open(self.settings_file, "rb") as f:
                data = tomllib.load(f)

            return self._parse_toml(data)
        except (OSError, tomllib.TOMLDecodeError, AttributeError) as e:
            log.warning("Could not read %s, using defaults: %s", self.settings_file, e)
            return AppSettings()

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Overlay the keys present in ``data`` on a default AppSettings.

        Raises AttributeError when a table has the wrong TOML type.
        """
        settings = AppSettings()

        arrow = data.get("arrow", {})
        settings.arrow.width = arrow.get("width", settings.arrow.width)
        settings.arrow.length = arrow.get("length", settings.arrow.length)
        settings.arrow.point_angle = arrow.get("point_angle", settings.arrow.point_angle)
        settings.arrow.point_ratio = arrow.get("point_ratio", settings.arrow.point_ratio)
        settings.arrow.arrow_type = arrow.get("arrow_type", settings.arrow.arrow_type)

        style = data.get("style", {})
        if "edge" in style:
            e = style["edge"]
            settings.style.edge_alpha = e.get("alpha", settings.style.edge_alpha)
            settings.style.edge_width = e.get("width", settings.style.edge_width)
            settings.style.edge_style = e.get("style", settings.style.edge_style)
            settings.style.edge_color = e.get("color", settings.style.edge_color)
        if "face" in style:
            fc = style["face"]
            settings.style.face_alpha = fc.get("alpha", settings.style.face_alpha)
            settings.style.face_color = fc.get("color", settings.style.face_color)
            settings.style.filled = fc.get("filled", settings.style.filled)

        debounce = data.get("debounce", {})
        settings.debounce.position_delay_ms = debounce.get("position_delay_ms", settings.debounce.position_delay_ms)
        settings.debounce.style_delay_ms = debounce.get("style_delay_ms", settings.debounce.style_delay_ms)

        view = data.get("view", {})
        settings.view.wheel_factor = view.get("wheel_factor", settings.view.wheel_factor)

        return settings

    def save(self) -> None:
        """Write settings.toml, creating the directory as needed."""
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        data = self._to_toml_dict()

        with open(self.settings_file, "wb") as f:
            tomli_w.dump(data, f)

    def _to_toml_dict(self) -> Dict[str, Any]:
        """Nested dict mirroring the on-disk table layout."""
        s = self.settings
        return {
            "arrow": {
                "width": s.arrow.width,
                "length": s.arrow.length,
                "point_angle": s.arrow.point_angle,
                "point_ratio": s.arrow.point_ratio,
                "arrow_type": s.arrow.arrow_type,
            },
            "style": {
                "edge": {
                    "alpha": s.style.edge_alpha,
                    "width": s.style.edge_width,
                    "style": s.style.edge_style,
                    "color": s.style.edge_color,
                },
                "face": {
                    "alpha": s.style.face_alpha,
                    "color": s.style.face_color,
                    "filled": s.style.filled,
                },
            },
            "debounce": {
                "position_delay_ms": s.debounce.position_delay_ms,
                "style_delay_ms": s.debounce.style_delay_ms,
            },
            "view": {
                "wheel_factor": s.view.wheel_factor,
            },
        }

    def to_toml(self) -> str:
        """Current settings rendered as TOML text."""
        return tomli_w.dumps(self._to_toml_dict())

    def get_settings_path(self) -> Path:
        """Location of settings.toml (it may not exist yet)."""
        return self.settings_file
