"""
Typed accessors over a QSettings group.
"""

from typing import TYPE_CHECKING, List, Optional, cast

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings


class SettingsSection:
    """Base for settings subsystems sharing one QSettings instance.

    QSettings hands back strings for everything stored in INI files, and a
    single-element list comes back as a bare string, so every read goes
    through these helpers.
    """

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    def _get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        if default is None:
            default = []
        value = self.settings.value(key, default)
        if isinstance(value, list):
            return [str(item) for item in cast(list[object], value) if item is not None]
        if isinstance(value, str):
            return [value] if value else []
        return list(default)

    def _set(self, key: str, value: object) -> None:
        self.settings.setValue(key, value)
        self.settings.sync()
