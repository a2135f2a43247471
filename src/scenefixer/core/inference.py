"""Heuristic manufacturer, protocol and category inference.

Each table is an ordered list of ``(substrings, result)`` rules. Matching is
case-insensitive substring containment and the first matching rule wins, so
more specific vendor strings must come before broader ones.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from scenefixer.models import DeviceCategory, DeviceManufacturer, DeviceProtocol

T = TypeVar("T")

Rule = tuple[tuple[str, ...], T]

MANUFACTURER_RULES: list[Rule[DeviceManufacturer]] = [
    (("philips", "hue", "signify"), DeviceManufacturer.PHILIPS_HUE),
    (("lutron",), DeviceManufacturer.LUTRON),
    (("ikea", "tradfri"), DeviceManufacturer.IKEA),
    (("nanoleaf",), DeviceManufacturer.NANOLEAF),
    (("ecobee",), DeviceManufacturer.ECOBEE),
    (("schlage",), DeviceManufacturer.SCHLAGE),
    (("yale",), DeviceManufacturer.YALE),
    (("august",), DeviceManufacturer.AUGUST),
    (("eve", "elgato"), DeviceManufacturer.EVE),
    (("lifx",), DeviceManufacturer.LIFX),
    (("wemo", "belkin"), DeviceManufacturer.WEMO),
    (("tp-link", "kasa"), DeviceManufacturer.TP_LINK),
    (("meross",), DeviceManufacturer.MEROSS),
    (("aqara", "xiaomi", "lumi"), DeviceManufacturer.AQARA),
    (("sonos",), DeviceManufacturer.SONOS),
    (("apple",), DeviceManufacturer.APPLE),
]

# Evaluated against the raw vendor string, not the inferred manufacturer.
PROTOCOL_RULES: list[Rule[DeviceProtocol]] = [
    (("hue", "ikea", "aqara"), DeviceProtocol.ZIGBEE),
    (("eve",), DeviceProtocol.THREAD),
    (("lifx", "nanoleaf", "meross"), DeviceProtocol.WIFI),
]

CATEGORY_ALIASES: dict[str, DeviceCategory] = {
    "lightbulb": DeviceCategory.LIGHT,
    "bulb": DeviceCategory.LIGHT,
    "plug": DeviceCategory.OUTLET,
    "door_lock": DeviceCategory.LOCK,
    "doorlock": DeviceCategory.LOCK,
    "garage": DeviceCategory.GARAGE_DOOR,
    "garage_door_opener": DeviceCategory.GARAGE_DOOR,
    "ip_camera": DeviceCategory.CAMERA,
    "video_doorbell": DeviceCategory.CAMERA,
    "window_covering": DeviceCategory.BLIND,
}


def match_rules(value: str | None, rules: Sequence[Rule[T]], default: T) -> T:
    if not value:
        return default
    lowered = value.lower()
    for needles, result in rules:
        if any(needle in lowered for needle in needles):
            return result
    return default


def infer_manufacturer(
    vendor: str | None, rules: Sequence[Rule[DeviceManufacturer]] = MANUFACTURER_RULES
) -> DeviceManufacturer:
    return match_rules(vendor, rules, DeviceManufacturer.UNKNOWN)


def infer_protocol(
    vendor: str | None, rules: Sequence[Rule[DeviceProtocol]] = PROTOCOL_RULES
) -> DeviceProtocol:
    return match_rules(vendor, rules, DeviceProtocol.UNKNOWN)


def parse_category(value: str | None) -> DeviceCategory:
    if not value:
        return DeviceCategory.OTHER
    normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return DeviceCategory(normalized)
    except ValueError:
        return CATEGORY_ALIASES.get(normalized, DeviceCategory.OTHER)
