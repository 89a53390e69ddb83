"""
Configuration - Storage keys, file names and defaults for promptpanel
"""

import os
from pathlib import Path


# Key holding the whole serialized prompt collection
STORAGE_KEY = "prompt_panel_data"

# Per-prompt view mode is stored under VIEW_MODE_KEY_PREFIX + prompt id
VIEW_MODE_KEY_PREFIX = "prompt_panel_view_mode_"
VIEW_MODES = ("plain", "rendered")
DEFAULT_VIEW_MODE = "plain"

THEME_KEY = "prompt_panel_theme"
THEMES = ("light", "dark", "sepia", "high-contrast")
DEFAULT_THEME = "light"

EXPORT_FILENAME = "prompts_export.json"
EXPORT_MEDIA_TYPE = "application/json"

HOME_ENV_VAR = "PROMPTPANEL_HOME"


def default_repo_path() -> Path:
    """Data directory: $PROMPTPANEL_HOME, else ~/.promptpanel."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".promptpanel"
