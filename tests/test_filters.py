import pytest

from videoenhancer.filters import VideoFilters


class TestBuildFilterString:
    def test_neutral(self):
        values = {"brightness": 100, "contrast": 100, "saturate": 100, "intensity": 100}
        assert VideoFilters.build_filter_string(values) == "brightness(100.00%) contrast(100.00%) saturate(100.00%)"

    def test_half_intensity_interpolates_toward_neutral(self):
        values = {"brightness": 108, "contrast": 125, "saturate": 140, "intensity": 50}
        assert VideoFilters.build_filter_string(values) == "brightness(104.00%) contrast(112.50%) saturate(120.00%)"

    def test_zero_intensity_is_neutral(self):
        values = {"brightness": 150, "contrast": 40, "saturate": 300, "intensity": 0}
        assert VideoFilters.build_filter_string(values) == "brightness(100.00%) contrast(100.00%) saturate(100.00%)"

    def test_graph_reference_is_last(self):
        values = {"brightness": 105, "contrast": 115, "saturate": 120, "intensity": 100}
        result = VideoFilters.build_filter_string(values, "video-enhancer-filter-s0-sh10")
        assert result == (
            "brightness(105.00%) contrast(115.00%) saturate(120.00%) url(#video-enhancer-filter-s0-sh10)"
        )

    @pytest.mark.parametrize("bad", [None, "abc", float("nan"), float("inf"), [], True])
    def test_bad_inputs_fall_back_to_neutral(self, bad):
        values = {"brightness": bad, "contrast": bad, "saturate": bad, "intensity": bad}
        result = VideoFilters.build_filter_string(values)
        assert result == "brightness(100.00%) contrast(100.00%) saturate(100.00%)"
        assert "nan" not in result

    def test_missing_keys(self):
        assert VideoFilters.build_filter_string({}) == "brightness(100.00%) contrast(100.00%) saturate(100.00%)"
        assert VideoFilters.build_filter_string(None) == "brightness(100.00%) contrast(100.00%) saturate(100.00%)"

    def test_numeric_strings(self):
        values = {"brightness": "110", "contrast": "90.5", "saturate": 100, "intensity": "100"}
        assert VideoFilters.build_filter_string(values) == "brightness(110.00%) contrast(90.50%) saturate(100.00%)"


class TestGraphInputs:
    def test_warmth_scaled_by_intensity(self):
        values = {"warmth": 25, "intensity": 50, "sharpness": 10, "warmthMode": "cinematic"}
        assert VideoFilters.get_graph_inputs(values) == (10, 12.5, "cinematic")

    def test_defaults(self):
        assert VideoFilters.get_graph_inputs({}) == (0, 0, "simple")

    def test_sharpness_truncates_like_integer_parsing(self):
        assert VideoFilters.get_graph_inputs({"sharpness": "42.9"})[0] == 42

    def test_filter_graph_for_preset(self):
        graph = VideoFilters.get_filter_graph({"warmth": 15, "warmthMode": "cinematic", "intensity": 100})
        assert graph["id"] == "video-enhancer-filter-c15-sh0"
        assert VideoFilters.get_filter_graph({"warmth": 0, "sharpness": 0}) is None
