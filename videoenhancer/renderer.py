"""
Software rendering of the enhancer's filters onto image frames.

Follows the filter chain a browser would run: CSS brightness, contrast and
saturate, then the SVG graph. Frames are float32 RGBA arrays in [0, 1].
"""

import cv2
import numpy as np

from videoenhancer.filter_library import SOURCE_GRAPHIC
from videoenhancer.filters import VideoFilters

# Luminance weights used by the CSS saturate() matrix
LUMA = np.array([0.213, 0.715, 0.072], dtype=np.float32)


def _clip(frame):
    return np.clip(frame, 0.0, 1.0, out=frame)


def saturate_matrix(amount):
    s = amount
    return np.array(
        [
            [LUMA[0] + (1 - LUMA[0]) * s, LUMA[1] - LUMA[1] * s, LUMA[2] - LUMA[2] * s],
            [LUMA[0] - LUMA[0] * s, LUMA[1] + (1 - LUMA[1]) * s, LUMA[2] - LUMA[2] * s],
            [LUMA[0] - LUMA[0] * s, LUMA[1] - LUMA[1] * s, LUMA[2] + (1 - LUMA[2]) * s],
        ],
        dtype=np.float32,
    )


def apply_css_filters(frame, values):
    eff = VideoFilters.effective_values(values or {})
    out = frame.astype(np.float32, copy=True)
    rgb = out[..., :3]

    rgb *= eff["brightness"] / 100
    _clip(rgb)

    rgb -= 0.5
    rgb *= eff["contrast"] / 100
    rgb += 0.5
    _clip(rgb)

    out[..., :3] = _clip(rgb @ saturate_matrix(eff["saturate"] / 100).T)
    return out


def _color_matrix(frame, matrix):
    m = np.asarray(matrix, dtype=np.float32)
    return _clip(frame @ m[:, :4].T + m[:, 4])


def _component_transfer(frame, funcs):
    out = frame.copy()
    for idx, channel in enumerate("RGBA"):
        func = funcs.get(channel, {"type": "identity"})
        if func["type"] == "gamma":
            out[..., idx] = func["amplitude"] * np.power(frame[..., idx], func["exponent"]) + func["offset"]
    return _clip(out)


def _gaussian_blur(frame, deviation):
    return cv2.GaussianBlur(frame, (0, 0), sigmaX=float(deviation), sigmaY=float(deviation))


def _arithmetic(first, second, stage):
    out = stage["k1"] * first * second + stage["k2"] * first + stage["k3"] * second + stage["k4"]
    return _clip(out.astype(np.float32))


def apply_graph(frame, graph):
    if graph is None:
        return frame

    results = {SOURCE_GRAPHIC: frame}
    current = frame
    for stage in graph["stages"]:
        source = results[stage["in"]]
        kind = stage["type"]
        if kind == "feColorMatrix":
            current = _color_matrix(source, stage["matrix"])
        elif kind == "feComponentTransfer":
            current = _component_transfer(source, stage["funcs"])
        elif kind == "feGaussianBlur":
            current = _gaussian_blur(source, stage["stdDeviation"])
        elif kind == "feComposite":
            current = _arithmetic(source, results[stage["in2"]], stage)
        else:
            raise ValueError(f"Unknown filter primitive: {kind}")
        results[stage["result"]] = current
    return results[graph["output"]]


def render_frame(frame, values, graph=None):
    return apply_graph(apply_css_filters(frame, values), graph)


def render_image(image, values, graph=None):
    """Renders onto an 8-bit BGR image as read by OpenCV."""
    rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA).astype(np.float32) / 255.0
    out = render_frame(rgba, values, graph)
    out = np.rint(out * 255.0).astype(np.uint8)
    return cv2.cvtColor(out, cv2.COLOR_RGBA2BGR)
