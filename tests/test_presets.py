from videoenhancer.presets import (
    DEFAULT_ACTIVE_PRESET,
    PRESET_DEFAULTS,
    PresetCatalogue,
    WarmthMode,
    default_config,
    is_preset_modified,
    merge_preset,
    merge_presets,
    normalize_config,
    resolve_active_preset,
)


class TestResolveActivePreset:
    def test_returns_named_preset(self):
        config = default_config()
        config["activePreset"] = "vivid"
        assert resolve_active_preset(config) == PRESET_DEFAULTS["vivid"]

    def test_unknown_preset_falls_back_to_balanced(self):
        config = default_config()
        config["activePreset"] = "does-not-exist"
        assert resolve_active_preset(config) == PRESET_DEFAULTS["balanced"]

    def test_missing_active_preset_uses_balanced(self):
        config = default_config()
        del config["activePreset"]
        assert resolve_active_preset(config) == PRESET_DEFAULTS["balanced"]

    def test_missing_presets_map_uses_factory(self):
        assert resolve_active_preset({"activePreset": "cinema"}) == PRESET_DEFAULTS["cinema"]

    def test_structurally_invalid_input_never_raises(self):
        assert resolve_active_preset(None) == PRESET_DEFAULTS["balanced"]
        assert resolve_active_preset([]) == PRESET_DEFAULTS["balanced"]
        assert resolve_active_preset({"presets": "nope"}) == PRESET_DEFAULTS["balanced"]
        assert resolve_active_preset({"activePreset": ["x"], "presets": {}}) == PRESET_DEFAULTS["balanced"]
        assert resolve_active_preset({"activePreset": "vivid", "presets": {"vivid": 3}}) == PRESET_DEFAULTS["balanced"]

    def test_does_not_mutate_config(self):
        config = default_config()
        before = default_config()
        resolve_active_preset(config)
        assert config == before


class TestMergePresets:
    def test_missing_warmth_mode_takes_factory_value(self):
        merged = merge_preset("cinema", {"warmth": 40})
        assert merged["warmthMode"] == WarmthMode.CINEMATIC
        assert merged["warmth"] == 40

    def test_invalid_warmth_mode_is_replaced(self):
        merged = merge_preset("warm", {"warmthMode": "sepia"})
        assert merged["warmthMode"] == PRESET_DEFAULTS["warm"]["warmthMode"]

    def test_valid_warmth_mode_wins(self):
        assert merge_preset("cinema", {"warmthMode": "simple"})["warmthMode"] == "simple"

    def test_stored_fields_are_merged_key_by_key(self):
        merged = merge_preset("vivid", {"brightness": 130, "extra": 1})
        assert merged["brightness"] == 130
        assert merged["contrast"] == PRESET_DEFAULTS["vivid"]["contrast"]
        assert merged["extra"] == 1

    def test_missing_presets_are_filled(self):
        merged = merge_presets({"subtle": {"sharpness": 20}})
        assert set(merged) == set(PRESET_DEFAULTS)
        assert merged["subtle"]["sharpness"] == 20
        assert merged["gaming"] == PRESET_DEFAULTS["gaming"]

    def test_factory_is_not_mutated(self):
        merged = merge_presets(None)
        merged["balanced"]["brightness"] = 1
        assert PRESET_DEFAULTS["balanced"]["brightness"] == 105


class TestNormalizeConfig:
    def test_empty_store_gives_defaults(self):
        assert normalize_config({}) == default_config()

    def test_invalid_active_preset_falls_back(self):
        config = normalize_config({"activePreset": "bogus", "enabled": False})
        assert config["activePreset"] == DEFAULT_ACTIVE_PRESET
        assert config["enabled"] is False

    def test_non_mapping(self):
        assert normalize_config("garbage") == default_config()


class TestModified:
    def test_factory_values_are_not_modified(self):
        assert not is_preset_modified("balanced", dict(PRESET_DEFAULTS["balanced"]))

    def test_changed_value_is_modified(self):
        values = dict(PRESET_DEFAULTS["balanced"], contrast=116)
        assert is_preset_modified("balanced", values)

    def test_catalogue(self):
        catalogue = PresetCatalogue({"gaming": {"warmth": 10}})
        assert catalogue.is_modified("gaming")
        assert not catalogue.is_modified("vivid")
        assert catalogue.get("nope") == PRESET_DEFAULTS["balanced"]
        assert catalogue.names() == list(PRESET_DEFAULTS)
