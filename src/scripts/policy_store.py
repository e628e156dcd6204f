# policy_store.py
import winreg
from typing import Optional, Tuple

# ============================
# --- Helper functions ---
# ============================
HIVE_MAP = {
    "HKLM": winreg.HKEY_LOCAL_MACHINE,
    "HKEY_LOCAL_MACHINE": winreg.HKEY_LOCAL_MACHINE,
    "HKCU": winreg.HKEY_CURRENT_USER,
    "HKEY_CURRENT_USER": winreg.HKEY_CURRENT_USER,
    "HKU": winreg.HKEY_USERS,
    "HKEY_USERS": winreg.HKEY_USERS,
}


def parse_full_path(full_path: str) -> Tuple[int, str]:
    parts = full_path.split("\\", 1)
    hive_key = parts[0].upper()
    if hive_key not in HIVE_MAP:
        raise ValueError(f"Unknown registry hive prefix: '{hive_key}'")
    subkey = parts[1] if len(parts) > 1 else ""
    return HIVE_MAP[hive_key], subkey


# ============================
# --- Policy store ---
# ============================
class RegistryPolicyStore:
    """REG_DWORD policy values under full registry paths ("HKLM\\SOFTWARE\\...")."""

    def ensure_path(self, path: str) -> None:
        hive, subkey = parse_full_path(path)
        winreg.CloseKey(winreg.CreateKeyEx(hive, subkey, 0, winreg.KEY_WRITE))

    def set_value(self, path: str, name: str, value: int) -> None:
        hive, subkey = parse_full_path(path)
        with winreg.CreateKeyEx(hive, subkey, 0, winreg.KEY_WRITE) as key:
            winreg.SetValueEx(key, name, 0, winreg.REG_DWORD, int(value))

    def get_value(self, path: str, name: str) -> Optional[int]:
        hive, subkey = parse_full_path(path)
        try:
            with winreg.OpenKey(hive, subkey, 0, winreg.KEY_READ) as key:
                value, vtype = winreg.QueryValueEx(key, name)
        except FileNotFoundError:
            return None
        if vtype != winreg.REG_DWORD:
            return None
        return int(value)

    def delete_value(self, path: str, name: str) -> bool:
        """ Delete a value if it exists. Returns False when there was nothing to delete. """
        hive, subkey = parse_full_path(path)
        try:
            with winreg.OpenKey(hive, subkey, 0, winreg.KEY_SET_VALUE) as key:
                winreg.DeleteValue(key, name)
        except FileNotFoundError:
            return False
        return True

    def remove_path(self, path: str) -> bool:
        """ Delete the key with its values. Returns False when the key does not exist. """
        hive, subkey = parse_full_path(path)
        try:
            winreg.DeleteKey(hive, subkey)
        except FileNotFoundError:
            return False
        return True
