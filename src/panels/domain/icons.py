"""Icon library for the panel customizers.

Icons are identified by the file stem they were published under. Labels and
categories are derived from that stem unless given explicitly.
"""

from __future__ import annotations

import re

from .value_objects import IconSpec

ICON_CATEGORIES: tuple[str, ...] = (
    "Bathroom",
    "Room Lights",
    "Curtains & Blinds",
    "Guest Services",
    "Scenes",
    "General",
    "TAG",
    "PIR",
)

_LIGHT_WORDS = ("light", "lamp", "chandelier", "master", "bulb", "sconce")
_CURTAIN_WORDS = ("curtain", "blind", "sheer")
_GUEST_SERVICE_WORDS = (
    "butler",
    "service",
    "bell",
    "dnd",
    "mur",
    "privacy",
    "make up",
    "makeup",
    "make-up",
    "do not disturb",
)
_SCENE_WORDS = ("scene", "bedroom", "dining")
_BATHROOM_WORDS = ("bathroom", "shower", "bathtub")


def label_from_name(name: str) -> str:
    """Turn a file stem such as ``"MasterLight_on"`` into ``"Master Light on"``."""
    label = re.sub(r"(?<=[a-z0-9])([A-Z])", r" \1", name)
    label = re.sub(r"[-_]+", " ", label)
    return re.sub(r"\s+", " ", label).strip()


def categorize_icon(name: str) -> str:
    """Guess the library category of an icon from its name."""
    lower = name.lower()
    if any(word in lower for word in _BATHROOM_WORDS):
        return "Bathroom"
    if any(word in lower for word in _LIGHT_WORDS):
        return "Room Lights"
    if any(word in lower for word in _CURTAIN_WORDS):
        return "Curtains & Blinds"
    if any(word in lower for word in _GUEST_SERVICE_WORDS):
        return "Guest Services"
    if any(word in lower for word in _SCENE_WORDS):
        return "Scenes"
    return "General"


def _icon(icon_id: str, label: str | None = None, category: str | None = None) -> IconSpec:
    return IconSpec(
        id=icon_id,
        label=label or label_from_name(icon_id),
        category=category or categorize_icon(label or icon_id),
    )


PIR_ICON = IconSpec(id="PIR", label="PIR", category="PIR")

DEFAULT_ICONS: tuple[IconSpec, ...] = (
    PIR_ICON,
    _icon("Bathroom"),
    _icon("Shower"),
    _icon("Bathtub"),
    _icon("MasterLight"),
    _icon("ReadingLamp"),
    _icon("Chandelier"),
    _icon("WallSconce"),
    _icon("CurtainOpen"),
    _icon("CurtainClose"),
    _icon("SheerOpen"),
    _icon("BlindUp"),
    _icon("DND", label="DND"),
    _icon("Privacy"),
    _icon("MUR", label="MUR"),
    _icon("MakeUpRoom", label="Make Up Room"),
    _icon("Butler"),
    _icon("Doorbell"),
    _icon("WelcomeScene"),
    _icon("BedroomScene"),
    _icon("DiningScene"),
    _icon("G1", label="Guest Light 1", category="General"),
    _icon("G2", label="Guest Light 2", category="General"),
    _icon("G3", label="Guest Light 3", category="General"),
    _icon("TemperatureUp", category="TAG"),
    _icon("TemperatureDown", category="TAG"),
    _icon("FanSpeed", category="TAG"),
)


class IconLibrary:
    """Lookup over a set of icons.

    Example:
        >>> library = IconLibrary()
        >>> library.get("G1").label
        'Guest Light 1'
    """

    def __init__(self, icons: tuple[IconSpec, ...] | list[IconSpec] = DEFAULT_ICONS) -> None:
        self._icons: dict[str, IconSpec] = {icon.id: icon for icon in icons}

    def get(self, icon_id: str) -> IconSpec | None:
        return self._icons.get(icon_id)

    def __contains__(self, icon_id: object) -> bool:
        return icon_id in self._icons

    def __len__(self) -> int:
        return len(self._icons)

    def by_category(self, category: str) -> list[IconSpec]:
        """Return the icons of one category in catalogue order."""
        return [icon for icon in self._icons.values() if icon.category == category]

    def categories(self) -> list[str]:
        """Return the categories that have at least one icon, in display order."""
        present = {icon.category for icon in self._icons.values()}
        ordered = [c for c in ICON_CATEGORIES if c in present]
        return ordered + sorted(present - set(ordered))

    def selectable(self, panel_type: str) -> list[IconSpec]:
        """Icons offered to the user for a panel type.

        Fan icons are reserved for thermostat (TAG) panels.
        """
        if panel_type == "TAG":
            return list(self._icons.values())
        return [
            icon
            for icon in self._icons.values()
            if icon.category != "TAG" and "fan" not in icon.id.lower()
        ]
