import logging

from videoenhancer.filter_library import clamp, to_number
from videoenhancer.presets import (
    PRESET_DEFAULTS,
    SELECT_KEYS,
    SLIDER_KEYS,
    WarmthMode,
    default_config,
    factory_preset,
    is_preset_modified,
    normalize_config,
)

logger = logging.getLogger(__name__)

SLIDER_RANGES = {
    "brightness": (0, 300),
    "contrast": (0, 300),
    "saturate": (0, 300),
    "warmth": (-100, 100),
    "intensity": (0, 100),
    "sharpness": (0, 100),
}


def describe(key, value):
    """Text shown next to a slider."""
    if key == "warmth":
        sign = "+" if value > 0 else ""
        return f"{sign}{value}°"
    if key == "sharpness":
        return "Off" if value == 0 else f"{value}%"
    return f"{value}%"


class SettingsPanel:
    """
    Settings the user edits: enabled flag, active preset and the per-preset
    slider values. Every change is written back to the store.
    """

    def __init__(self, store):
        self.store = store
        self.state = default_config()

    @property
    def active_values(self):
        return self.state["presets"].get(self.state["activePreset"])

    async def load(self):
        try:
            stored = await self.store.get(None)
        except Exception as e:
            logger.error(f"[Video Enhancer] Failed to load state: {e}")
            self.state = default_config()
            return self.state
        self.state = normalize_config(stored)
        return self.state

    async def save(self):
        try:
            await self.store.set(
                {
                    "enabled": self.state["enabled"],
                    "activePreset": self.state["activePreset"],
                    "presets": self.state["presets"],
                }
            )
            return True
        except Exception as e:
            logger.error(f"[Video Enhancer] Failed to save state: {e}")
            return False

    def set_enabled(self, enabled):
        self.state["enabled"] = bool(enabled)

    def select_preset(self, name):
        if name not in PRESET_DEFAULTS or name == self.state["activePreset"]:
            return False
        self.state["activePreset"] = name
        return True

    def set_value(self, key, value, preset=None):
        name = preset or self.state["activePreset"]
        values = self.state["presets"].get(name)
        if values is None:
            raise KeyError(f"Unknown preset: {name}")

        if key in SLIDER_KEYS:
            low, high = SLIDER_RANGES[key]
            number = to_number(value, None)
            if number is None:
                raise ValueError(f"Invalid value for {key}: {value!r}")
            values[key] = clamp(int(number), low, high)
        elif key in SELECT_KEYS:
            if value not in WarmthMode.ALL:
                raise ValueError(f"Invalid warmth mode: {value!r}")
            values[key] = value
        else:
            raise KeyError(f"Unknown setting: {key}")
        return values[key]

    def reset_preset(self, name):
        preset = factory_preset(name)
        if preset is None:
            return False
        self.state["presets"][name] = preset
        return True

    def reset_all(self):
        self.state = default_config()

    def is_modified(self, name):
        return is_preset_modified(name, self.state["presets"].get(name))

    def modified_presets(self):
        return [name for name in PRESET_DEFAULTS if self.is_modified(name)]

    def warmth_mode_badge(self):
        values = self.active_values or {}
        if to_number(values.get("warmth"), 0) == 0:
            return "Inactive"
        return "Cinematic" if values.get("warmthMode") == WarmthMode.CINEMATIC else "Simple"

    def snapshot(self):
        return {
            **self.state,
            "modified": self.modified_presets(),
            "warmthModeBadge": self.warmth_mode_badge(),
        }
