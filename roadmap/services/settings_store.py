"""
Typed settings groups persisted as one ``AppSettings`` row each.

Settings are read explicitly with ``load()`` (once per request or command)
and written explicitly with ``save()``; nothing is cached in-process.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields, asdict
from typing import ClassVar

from flask import current_app
from sqlalchemy.sql import func

from roadmap.errors import ValidationError
from roadmap.extensions import db
from roadmap.models.app_settings import AppSettings
from roadmap.utils.validators import clean_str, is_valid_hex_color

POSITION_BOTTOM_RIGHT = "bottom-right"
POSITION_BOTTOM_LEFT = "bottom-left"
POSITION_TOP_RIGHT = "top-right"
POSITION_TOP_LEFT = "top-left"
POSITIONS = (POSITION_BOTTOM_RIGHT, POSITION_BOTTOM_LEFT, POSITION_TOP_RIGHT, POSITION_TOP_LEFT)


def _as_bool(value, default=False) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _as_str_list(value, max_len: int = 255, lower: bool = False) -> list:
    """Accept a list or a comma/newline separated string; drop blanks and duplicates, keep order."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.replace("\n", ",").split(",")
    if not isinstance(value, (list, tuple)):
        return []
    out = []
    for v in value:
        s = clean_str(str(v), max_len=max_len) if v is not None else None
        if s and lower:
            s = s.lower()
        if s and s not in out:
            out.append(s)
    return out


class SettingsGroup(ABC):
    """Base for a settings dataclass stored under ``group``."""

    group: ClassVar[str] = ""

    @classmethod
    def _row(cls):
        return db.session.execute(
            db.select(AppSettings).where(AppSettings.group == cls.group)
        ).scalar_one_or_none()

    @classmethod
    def load(cls):
        """Read the group from the database; missing keys fall back to defaults."""
        row = cls._row()
        stored = (row.settings if row else None) or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in stored.items() if k in known})

    def save(self, commit: bool = True):
        """Upsert the row; with ``commit=False`` the caller owns the transaction."""
        row = self._row()
        data = self.to_dict()
        if row is None:
            row = AppSettings(group=self.group, settings=data, settings_version=1)
            db.session.add(row)
        else:
            row.settings = data
            row.settings_version = (row.settings_version or 1) + 1
            # keep updated_at fresh
            row.updated_at = func.now()
        if not commit:
            db.session.flush()
            return row
        db.session.commit()
        current_app.logger.info(
            "settings_saved",
            extra={"event": "settings_saved", "group": self.group, "version": row.settings_version},
        )
        return row

    @classmethod
    def version(cls) -> int:
        row = cls._row()
        return row.settings_version if row else 0

    def to_dict(self) -> dict:
        return asdict(self)

    @abstractmethod
    def merged(self, incoming: dict):
        """Return a copy with ``incoming`` applied and coerced; raises ValidationError."""


@dataclass
class WidgetSettings(SettingsGroup):
    group: ClassVar[str] = "widget"

    enabled: bool = False
    position: str = POSITION_BOTTOM_RIGHT
    primary_color: str = "#2563EB"
    button_text: str = "Feedback"
    allowed_domains: list = field(default_factory=list)

    def public_config(self) -> dict:
        """What the embedded widget needs to render itself."""
        return {
            "enabled": bool(self.enabled),
            "position": self.position,
            "primary_color": self.primary_color,
            "button_text": self.button_text,
        }

    def merged(self, incoming: dict):
        errors = {}
        data = self.to_dict()
        if "enabled" in incoming:
            data["enabled"] = _as_bool(incoming.get("enabled"))
        if "position" in incoming:
            pos = str(incoming.get("position") or "").strip().lower()
            if pos not in POSITIONS:
                errors["position"] = [f"The position must be one of: {', '.join(POSITIONS)}."]
            data["position"] = pos
        if "primary_color" in incoming:
            color = str(incoming.get("primary_color") or "").strip()
            if not is_valid_hex_color(color):
                errors["primary_color"] = ["The primary color must be a hex color like #2563EB."]
            data["primary_color"] = color.upper()
        if "button_text" in incoming:
            text = clean_str(str(incoming.get("button_text") or ""), max_len=40)
            if not text:
                errors["button_text"] = ["The button text field is required."]
            data["button_text"] = text
        if "allowed_domains" in incoming:
            data["allowed_domains"] = _as_str_list(incoming.get("allowed_domains"), lower=True)
        if errors:
            raise ValidationError(errors)
        return WidgetSettings(**data)


@dataclass
class GeneralSettings(SettingsGroup):
    group: ClassVar[str] = "general"

    board_centered: bool = False
    create_default_boards: bool = False
    default_boards: list = field(default_factory=list)
    show_projects_sidebar_without_boards: bool = True
    allow_general_creation_of_item: bool = False

    def merged(self, incoming: dict):
        data = self.to_dict()
        for key in ("board_centered", "create_default_boards",
                    "show_projects_sidebar_without_boards", "allow_general_creation_of_item"):
            if key in incoming:
                data[key] = _as_bool(incoming.get(key))
        if "default_boards" in incoming:
            data["default_boards"] = _as_str_list(incoming.get("default_boards"), max_len=100)
        return GeneralSettings(**data)


SETTINGS_GROUPS = {
    GeneralSettings.group: GeneralSettings,
    WidgetSettings.group: WidgetSettings,
}
