import math

from videoenhancer.presets import WarmthMode

SVG_FILTER_ID = "video-enhancer-filter"
SOURCE_GRAPHIC = "SourceGraphic"

SHARPNESS_BLUR_DEVIATION = 1.2
SHARPNESS_SCALE = 3
# Warmth below this magnitude is not worth a re-render
WARMTH_THRESHOLD = 0.5

IDENTITY_ALPHA_ROW = [0, 0, 0, 1, 0]


def to_number(value, fallback):
    """Parses value as a finite float, or returns fallback."""
    if isinstance(value, bool):
        return fallback
    try:
        num = float(value)
    except (TypeError, ValueError):
        return fallback
    return num if math.isfinite(num) else fallback


def clamp(value, low, high):
    return max(low, min(high, value))


def round_half_up(value):
    return int(math.floor(value + 0.5))


def normalize_inputs(sharpness, warmth, warmth_mode):
    """Returns (sharpness, warmth, mode) in the form the graph is keyed on."""
    sharpness = clamp(round_half_up(to_number(sharpness, 0)), 0, 100)
    warmth = clamp(to_number(warmth, 0), -100, 100)
    mode = WarmthMode.CINEMATIC if warmth_mode == WarmthMode.CINEMATIC else WarmthMode.SIMPLE
    return sharpness, warmth, mode


def needs_graph(sharpness, warmth):
    return sharpness > 0 or abs(warmth) > WARMTH_THRESHOLD


def filter_id_for(sharpness, warmth, warmth_mode):
    prefix = "c" if warmth_mode == WarmthMode.CINEMATIC else "s"
    # Negative warmth keeps its sign even when it rounds to zero ("-0")
    sign = "-" if warmth < 0 else ""
    return f"{SVG_FILTER_ID}-{prefix}{sign}{round_half_up(abs(warmth))}-sh{sharpness}"


def color_matrix(r, g, b, r_offset=0, g_offset=0, b_offset=0):
    """4x5 affine matrix that only scales and offsets each colour channel."""
    return [
        [r, 0, 0, 0, r_offset],
        [0, g, 0, 0, g_offset],
        [0, 0, b, 0, b_offset],
        list(IDENTITY_ALPHA_ROW),
    ]


def sharpness_stages(sharpness, input_name, output_name):
    """
    Unsharp mask: blur the input, then amplify the original and subtract
    part of the blurred copy (k2 * original + k3 * blurred).
    """
    strength = (sharpness / 100) * SHARPNESS_SCALE

    blur = {
        "type": "feGaussianBlur",
        "in": input_name,
        "stdDeviation": SHARPNESS_BLUR_DEVIATION,
        "result": "sharpnessBlur",
    }
    composite = {
        "type": "feComposite",
        "in": input_name,
        "in2": "sharpnessBlur",
        "operator": "arithmetic",
        "k1": 0,
        "k2": 1 + strength,
        "k3": -strength,
        "k4": 0,
        "result": output_name,
    }
    return [blur, composite]


def simple_warmth_stages(warmth, input_name, output_name):
    w = warmth / 100
    matrix = color_matrix(
        1 + w * 0.15,
        1 + w * 0.05,
        1 - w * 0.15,
        r_offset=w * 0.02,
        b_offset=-w * 0.02,
    )
    return [{"type": "feColorMatrix", "in": input_name, "matrix": matrix, "result": output_name}]


def cinematic_warmth_stages(warmth, input_name, output_name):
    w = warmth / 100

    # 1. Gamma-based tonal separation, so midtones and highlights shift unevenly
    gamma = {
        "type": "feComponentTransfer",
        "in": input_name,
        "funcs": {
            "R": {"type": "gamma", "amplitude": 1 + w * 0.12, "exponent": 1 - w * 0.08, "offset": w * 0.01},
            "G": {"type": "gamma", "amplitude": 1 + w * 0.04, "exponent": 1 - w * 0.02, "offset": 0},
            "B": {"type": "gamma", "amplitude": 1 - w * 0.10, "exponent": 1 + w * 0.12, "offset": w * 0.025},
            "A": {"type": "identity"},
        },
        "result": "gammaCorrected",
    }

    # 2. Highlight colour shift
    highlight = {
        "type": "feColorMatrix",
        "in": "gammaCorrected",
        "matrix": color_matrix(1 + w * 0.05, 1, 1 - w * 0.05),
        "result": "highlightShifted",
    }

    # 3. Final grade
    final = {
        "type": "feColorMatrix",
        "in": "highlightShifted",
        "matrix": color_matrix(1 + w * 0.02, 1, 1 - w * 0.02),
        "result": output_name,
    }
    return [gamma, highlight, final]


def warmth_stages(warmth, warmth_mode, input_name, output_name):
    if warmth_mode == WarmthMode.CINEMATIC:
        return cinematic_warmth_stages(warmth, input_name, output_name)
    return simple_warmth_stages(warmth, input_name, output_name)


def build_filter_graph(sharpness, warmth, warmth_mode=WarmthMode.SIMPLE, filter_id=None):
    """
    Chains warmth then sharpening into one graph.
    Returns None when neither stage is needed.
    """
    sharpness, warmth, warmth_mode = normalize_inputs(sharpness, warmth, warmth_mode)
    if not needs_graph(sharpness, warmth):
        return None

    stages = []
    current_input = SOURCE_GRAPHIC
    step = 0

    if abs(warmth) > WARMTH_THRESHOLD:
        step += 1
        output_name = f"step{step}"
        stages.extend(warmth_stages(warmth, warmth_mode, current_input, output_name))
        current_input = output_name

    if sharpness > 0:
        step += 1
        output_name = f"step{step}"
        stages.extend(sharpness_stages(sharpness, current_input, output_name))
        current_input = output_name

    return {
        "id": filter_id or filter_id_for(sharpness, warmth, warmth_mode),
        "sharpness": sharpness,
        "warmth": warmth,
        "warmthMode": warmth_mode,
        "stages": stages,
        "output": current_input,
    }
