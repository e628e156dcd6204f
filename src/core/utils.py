import os
import sys
from pathlib import Path

APP_FOLDER_NAME = "PrivacyConsole"


def cls():
    os.system('cls' if os.name == 'nt' else 'clear')


def user_data_path() -> Path:
    """Per-user application folder: %LOCALAPPDATA%\\PrivacyConsole, ~/.privacyconsole elsewhere."""
    local_app_data = os.environ.get('LOCALAPPDATA')
    if local_app_data:
        return Path(local_app_data) / APP_FOLDER_NAME
    return Path.home() / f".{APP_FOLDER_NAME.lower()}"


def get_folder_path(folder_name: str) -> Path:
    """
    Return absolute Path to a given folder.
    - If running from exe (PyInstaller), use exe directory as base.
    - If running from source, use the project root (one level above 'src').
    - If running as an installed package, use the per-user application folder.
    """
    if getattr(sys, 'frozen', False):
        # Running from compiled exe
        base_path = Path(sys.executable).parent
    else:
        src_path = Path(__file__).resolve().parent.parent
        if src_path.name == 'src':
            # Running from source
            base_path = src_path.parent
        else:
            base_path = user_data_path()

    return base_path / folder_name
