"""
Declarative schema for the admin settings screen.

Each group is an ordered list of fields; the UI layer renders them in order
and hides any field whose ``visible_when`` predicate is false for the
current values.
"""
from typing import Callable, NamedTuple

from roadmap.services.settings_store import POSITIONS

TOGGLE = "toggle"
TAGS = "tags"
TEXT = "text"
COLOR = "color"
SELECT = "select"


def _always(values: dict) -> bool:
    return True


class SettingsField(NamedTuple):
    key: str
    type: str
    label: str
    help_text: str = ""
    visible_when: Callable[[dict], bool] = _always
    column_span: int = 1
    options: tuple = ()
    reactive: bool = False

    def to_dict(self) -> dict:
        out = {
            "key": self.key,
            "type": self.type,
            "label": self.label,
            "help_text": self.help_text,
            "column_span": self.column_span,
            "reactive": self.reactive,
        }
        if self.options:
            out["options"] = list(self.options)
        return out


GENERAL_SCHEMA = (
    SettingsField(
        "board_centered", TOGGLE, "Center boards in project views",
        "When centering, this will always show the boards in the center of the content area.",
        column_span=2,
    ),
    SettingsField(
        "create_default_boards", TOGGLE, "Create default boards for new projects",
        "When creating a new project, some default boards can be created.",
        reactive=True,
    ),
    SettingsField(
        "default_boards", TAGS, "Default boards",
        visible_when=lambda values: bool(values.get("create_default_boards")),
    ),
    SettingsField(
        "show_projects_sidebar_without_boards", TOGGLE, "Show projects in sidebar without boards",
        "If you don't want to show projects without boards in the sidebar, toggle this off.",
        column_span=2,
    ),
    SettingsField(
        "allow_general_creation_of_item", TOGGLE, "Allow general creation of an item",
        "This allows your users to create an item without a board.",
    ),
)

WIDGET_SCHEMA = (
    SettingsField(
        "enabled", TOGGLE, "Enable feedback widget",
        "Allow external websites to embed the feedback widget.",
        column_span=2, reactive=True,
    ),
    SettingsField(
        "position", SELECT, "Position",
        visible_when=lambda values: bool(values.get("enabled")),
        options=POSITIONS,
    ),
    SettingsField(
        "primary_color", COLOR, "Primary color",
        visible_when=lambda values: bool(values.get("enabled")),
    ),
    SettingsField(
        "button_text", TEXT, "Button text",
        visible_when=lambda values: bool(values.get("enabled")),
    ),
    SettingsField(
        "allowed_domains", TAGS, "Allowed domains",
        "Leave empty to allow every website. Otherwise only these hosts may use the widget.",
        visible_when=lambda values: bool(values.get("enabled")),
        column_span=2,
    ),
)

SCHEMAS = {
    "general": GENERAL_SCHEMA,
    "widget": WIDGET_SCHEMA,
}


def visible_fields(group: str, values: dict) -> list:
    return [f for f in SCHEMAS[group] if f.visible_when(values)]
