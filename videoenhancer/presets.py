import copy
import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)


class WarmthMode:
    SIMPLE = "simple"
    CINEMATIC = "cinematic"

    ALL = (SIMPLE, CINEMATIC)


SLIDER_KEYS = ["brightness", "contrast", "saturate", "warmth", "intensity", "sharpness"]
SELECT_KEYS = ["warmthMode"]
SETTING_KEYS = SLIDER_KEYS + SELECT_KEYS

DEFAULT_ACTIVE_PRESET = "balanced"

PRESET_DEFAULTS = {
    "subtle": {
        "brightness": 102,
        "contrast": 108,
        "saturate": 110,
        "warmth": 0,
        "warmthMode": WarmthMode.SIMPLE,
        "intensity": 100,
        "sharpness": 0,
    },
    "balanced": {
        "brightness": 105,
        "contrast": 115,
        "saturate": 120,
        "warmth": 0,
        "warmthMode": WarmthMode.SIMPLE,
        "intensity": 100,
        "sharpness": 0,
    },
    "vivid": {
        "brightness": 108,
        "contrast": 125,
        "saturate": 140,
        "warmth": 0,
        "warmthMode": WarmthMode.SIMPLE,
        "intensity": 100,
        "sharpness": 0,
    },
    "cinema": {
        "brightness": 100,
        "contrast": 120,
        "saturate": 115,
        "warmth": 15,
        "warmthMode": WarmthMode.CINEMATIC,
        "intensity": 100,
        "sharpness": 0,
    },
    "gaming": {
        "brightness": 110,
        "contrast": 130,
        "saturate": 135,
        "warmth": -5,
        "warmthMode": WarmthMode.SIMPLE,
        "intensity": 100,
        "sharpness": 0,
    },
    "warm": {
        "brightness": 105,
        "contrast": 110,
        "saturate": 115,
        "warmth": 25,
        "warmthMode": WarmthMode.CINEMATIC,
        "intensity": 100,
        "sharpness": 0,
    },
}


def factory_preset(name):
    """Fresh copy of a factory preset, or None for unknown names."""
    if name not in PRESET_DEFAULTS:
        return None
    return dict(PRESET_DEFAULTS[name])


def default_config():
    return {
        "enabled": True,
        "activePreset": DEFAULT_ACTIVE_PRESET,
        "presets": copy.deepcopy(PRESET_DEFAULTS),
    }


def coerce_warmth_mode(value, fallback=WarmthMode.SIMPLE):
    return value if value in WarmthMode.ALL else fallback


def resolve_active_preset(config):
    """
    Returns the parameters of the active preset.
    Falls back to the factory "balanced" values whenever the config, its
    preset map or the named entry is missing.
    """
    fallback = PRESET_DEFAULTS[DEFAULT_ACTIVE_PRESET]
    if not isinstance(config, Mapping):
        return fallback

    presets = config.get("presets")
    if not isinstance(presets, Mapping):
        presets = PRESET_DEFAULTS

    name = config.get("activePreset") or DEFAULT_ACTIVE_PRESET
    try:
        values = presets.get(name)
    except TypeError:
        # Unhashable preset name
        return fallback
    if not isinstance(values, Mapping):
        return fallback
    return values


def merge_preset(name, stored):
    """Stored keys win over the factory entry; an invalid warmthMode does not."""
    factory = PRESET_DEFAULTS[name]
    merged = dict(factory)
    if isinstance(stored, Mapping):
        merged.update(stored)

    mode = merged.get("warmthMode")
    merged["warmthMode"] = coerce_warmth_mode(mode, factory["warmthMode"])
    if merged["warmthMode"] != mode:
        logger.warning(f"[Video Enhancer] Invalid warmthMode {mode!r} for preset '{name}', using factory value")
    return merged


def merge_presets(stored_presets):
    if not isinstance(stored_presets, Mapping):
        return copy.deepcopy(PRESET_DEFAULTS)
    return {name: merge_preset(name, stored_presets.get(name)) for name in PRESET_DEFAULTS}


def normalize_config(stored):
    """Builds a complete persisted configuration out of whatever the store returned."""
    if not isinstance(stored, Mapping):
        return default_config()

    enabled = stored.get("enabled")
    active = stored.get("activePreset") or DEFAULT_ACTIVE_PRESET
    if not isinstance(active, str) or active not in PRESET_DEFAULTS:
        active = DEFAULT_ACTIVE_PRESET

    return {
        "enabled": True if enabled is None else bool(enabled),
        "activePreset": active,
        "presets": merge_presets(stored.get("presets")),
    }


def is_preset_modified(name, values):
    factory = PRESET_DEFAULTS.get(name)
    if not factory or not isinstance(values, Mapping):
        return False
    return any(values.get(key) != factory[key] for key in SETTING_KEYS)


class PresetCatalogue:
    def __init__(self, presets=None):
        self.presets = merge_presets(presets)

    def names(self):
        return list(PRESET_DEFAULTS)

    def get(self, name):
        return self.presets.get(name, self.presets[DEFAULT_ACTIVE_PRESET])

    def is_modified(self, name):
        return is_preset_modified(name, self.presets.get(name))
