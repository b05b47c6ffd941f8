# src/fxconv/adapters/persistence/preferences_store.py
"""
Preferences Store - JSON Persistence for User Preferences

This module reads and writes the preference record (default "from" currency,
favorite currencies, API key) as a pretty-printed JSON file. Writes are atomic
(temp file + rename) and reads never fail: a missing file yields defaults and a
corrupt file is backed up and replaced by defaults.

Files that USE this module:
- fxconv.application.preferences (Preferences.load and Preferences.save)
- tests.test_preferences (unit tests)

Files that this module USES:
- fxconv.config (settings for the default file path)
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fxconv.config import settings

log = logging.getLogger(__name__)


class PreferencesRecord(BaseModel):
    """On-disk shape of the preference file."""
    
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    
    default_from_currency: str = Field(default="", alias="defaultFromCurrency")
    favorite_currencies: List[str] = Field(default_factory=list, alias="favoriteCurrencies")
    api_key: str = Field(default="", alias="apiKey")

    @field_validator("default_from_currency", "api_key", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("favorite_currencies", mode="before")
    @classmethod
    def none_as_empty_list(cls, v):
        return [] if v is None else v

    @field_validator("favorite_currencies")
    @classmethod
    def drop_duplicates(cls, v: List[str]) -> List[str]:
        """Keep the first occurrence of each code, preserving order."""
        return list(dict.fromkeys(code for code in v if code))

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


def preferences_path(path: Optional[Path] = None) -> Path:
    """
    Resolve the preference file path.
    
    Args:
        path: Explicit path, or None to use settings.preferences_file
        
    Returns:
        Path object pointing to the preference file
    """
    return Path(path) if path is not None else Path(settings.preferences_file)


def _backup_corrupt(p: Path, reason: Exception) -> None:
    backup_path = p.with_name(p.name + ".corrupt")
    try:
        shutil.copy2(p, backup_path)
        log.warning("Preference file unreadable, backed up to %s: %s", backup_path, reason)
    except OSError as backup_error:
        log.error("Failed to back up unreadable preference file: %s", backup_error)


def load_record(path: Optional[Path] = None) -> PreferencesRecord:
    """
    Load the preference record.
    
    A missing file is normal on first start. Any read, JSON, or schema failure
    is logged and yields a default record.
    
    Returns:
        PreferencesRecord (defaults when the file is absent or unusable)
    """
    p = preferences_path(path)
    if not p.exists():
        log.info("No preference file at %s, using defaults", p)
        return PreferencesRecord()
    
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        _backup_corrupt(p, e)
        return PreferencesRecord()
    except (OSError, UnicodeDecodeError) as e:
        log.error("Failed to read preference file %s: %s", p, e)
        return PreferencesRecord()
    
    if data is None:
        return PreferencesRecord()
    
    try:
        record = PreferencesRecord.model_validate(data)
    except ValidationError as e:
        _backup_corrupt(p, e)
        return PreferencesRecord()
    
    log.info("Loaded preferences from %s (%d favorites)", p, len(record.favorite_currencies))
    return record


def save_record(record: PreferencesRecord, path: Optional[Path] = None) -> None:
    """
    Write the full preference record using an atomic write.
    
    Raises:
        OSError: If the file cannot be written; the previous file is left intact
    """
    p = preferences_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    
    temp_fd, temp_path = tempfile.mkstemp(
        suffix=".json.tmp",
        dir=str(p.parent),
        text=True,
    )
    
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(record.to_json(), f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        
        os.replace(temp_path, str(p))
    except OSError:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
    
    log.debug("Saved preferences to %s", p)
