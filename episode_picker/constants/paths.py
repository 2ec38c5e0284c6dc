"""File and directory path constants."""

import os
from pathlib import Path

# Directory names
ASSETS_DIR = Path("assets")
LIBRARY_DIR_NAME = "library"

# Directory paths
LIBRARY_DIR = Path(os.environ.get("EPISODE_PICKER_DATA_DIR", ASSETS_DIR / LIBRARY_DIR_NAME))

# File names (relative to the library directory)
SHOWS_JSON_FILENAME = "shows.json"
HISTORY_JSON_FILENAME = "history.json"
SETTINGS_JSON_FILENAME = "settings.json"
SESSION_JSON_FILENAME = "session.json"

# Backup-related constants
BACKUP_FILENAME_PATTERN = "random-episode-picker-backup-{date}.json"
