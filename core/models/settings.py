"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           core/models/settings.py
Version:        1.0.0
Description:    The persisted user-settings singleton (presentation
                preferences and external mirror configuration).
------------------------------------------------------------------------------
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# attribute -> UserSettings column
SETTINGS_COLUMNS: Dict[str, str] = {
    "theme": "theme",
    "language": "language",
    "pdf_viewer": "pdfViewer",
    "font_size": "fontSize",
    "storage_path": "storagePath",
    "external_storage_path": "externalStoragePath",
    "use_external_storage": "useExternalStorage",
}


class UserSettings(BaseModel):
    """Snapshot of the UserSettings row."""
    model_config = ConfigDict(extra="ignore")

    id: int
    theme: str = "light"
    language: str = "English"
    pdf_viewer: str = "system"
    font_size: int = 14
    # Advisory only: the active root is resolved from the run mode
    storage_path: Optional[str] = None
    external_storage_path: str = ""
    use_external_storage: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def mirror_enabled(self) -> bool:
        """True when copies should also go to the external folder."""
        return bool(self.use_external_storage and self.external_storage_path)


class UserSettingsUpdate(BaseModel):
    """Partial settings update; only explicitly passed fields are written."""
    model_config = ConfigDict(extra="forbid")

    theme: Optional[str] = None
    language: Optional[str] = None
    pdf_viewer: Optional[str] = None
    font_size: Optional[int] = Field(None, gt=0)
    storage_path: Optional[str] = None
    external_storage_path: Optional[str] = None
    use_external_storage: Optional[bool] = None

    def provided(self) -> Dict[str, Any]:
        values = {name: getattr(self, name) for name in SETTINGS_COLUMNS if name in self.model_fields_set}
        if values.get("external_storage_path", "") is None:
            values["external_storage_path"] = ""
        for name in ("theme", "language", "pdf_viewer", "font_size", "use_external_storage"):
            if name in values and values[name] is None:
                del values[name]
        return values
