from videoenhancer.filter_library import build_filter_graph, to_number
from videoenhancer.presets import WarmthMode

NEUTRAL = 100


class VideoFilters:
    @staticmethod
    def intensity_factor(values):
        return to_number(values.get("intensity"), NEUTRAL) / 100

    @staticmethod
    def effective_values(values):
        """
        Blends brightness/contrast/saturate toward neutral by intensity.
        effective = 100 + (configured - 100) * intensity / 100
        """
        factor = VideoFilters.intensity_factor(values)
        return {
            key: NEUTRAL + (to_number(values.get(key), NEUTRAL) - NEUTRAL) * factor
            for key in ("brightness", "contrast", "saturate")
        }

    @staticmethod
    def build_filter_string(values, graph_id=None):
        """
        Generates the CSS filter chain for a preset.
        values: dict containing 'brightness', 'contrast', 'saturate', 'intensity'
        """
        eff = VideoFilters.effective_values(values or {})
        chain = [
            f"brightness({eff['brightness']:.2f}%)",
            f"contrast({eff['contrast']:.2f}%)",
            f"saturate({eff['saturate']:.2f}%)",
        ]

        # SVG warmth/sharpening composes after the CSS adjustments
        if graph_id:
            chain.append(f"url(#{graph_id})")

        return " ".join(chain)

    @staticmethod
    def get_graph_inputs(values):
        """(sharpness, warmth, mode) for the SVG graph, with warmth scaled by intensity."""
        values = values or {}
        factor = VideoFilters.intensity_factor(values)
        sharpness = int(to_number(values.get("sharpness"), 0))
        warmth = to_number(values.get("warmth"), 0) * factor
        mode = values.get("warmthMode") or WarmthMode.SIMPLE
        return sharpness, warmth, mode

    @staticmethod
    def get_filter_graph(values):
        return build_filter_graph(*VideoFilters.get_graph_inputs(values))

    @staticmethod
    def apply_filters_to_image(image_path, values, output_path):
        """
        Renders a preset onto a single image file.
        """
        import cv2
        from videoenhancer.renderer import render_image

        image = cv2.imread(image_path, cv2.IMREAD_COLOR)
        if image is None:
            raise ValueError(f"Could not read image: {image_path}")

        result = render_image(image, values, VideoFilters.get_filter_graph(values))
        if not cv2.imwrite(output_path, result):
            raise ValueError(f"Could not write image: {output_path}")
