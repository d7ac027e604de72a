"""Serialization of filter graphs into SVG filter elements."""

import xml.etree.ElementTree as ET

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

SVG_STYLE = "position:absolute;width:0;height:0;"


def num2str(value):
    """Formats a number the way filter attributes are written: four decimals."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    text = f"{float(value):.4f}"
    if text == "-0.0000":
        text = "0.0000"
    return text


def matrix2str(matrix):
    return " ".join(num2str(v) for row in matrix for v in row)


def _stage_element(parent, stage):
    kind = stage["type"]
    if kind == "feColorMatrix":
        return ET.SubElement(
            parent,
            kind,
            {"in": stage["in"], "type": "matrix", "result": stage["result"], "values": matrix2str(stage["matrix"])},
        )

    if kind == "feComponentTransfer":
        node = ET.SubElement(parent, kind, {"in": stage["in"], "result": stage["result"]})
        for channel in ("R", "G", "B", "A"):
            func = stage["funcs"][channel]
            attrib = {"type": func["type"]}
            for key in ("amplitude", "exponent", "offset"):
                if key in func:
                    attrib[key] = num2str(func[key])
            ET.SubElement(node, f"feFunc{channel}", attrib)
        return node

    if kind == "feGaussianBlur":
        return ET.SubElement(
            parent,
            kind,
            {"in": stage["in"], "stdDeviation": str(stage["stdDeviation"]), "result": stage["result"]},
        )

    if kind == "feComposite":
        return ET.SubElement(
            parent,
            kind,
            {
                "in": stage["in"],
                "in2": stage["in2"],
                "operator": stage["operator"],
                "k1": num2str(stage["k1"]),
                "k2": num2str(stage["k2"]),
                "k3": num2str(stage["k3"]),
                "k4": num2str(stage["k4"]),
                "result": stage["result"],
            },
        )

    raise ValueError(f"Unknown filter primitive: {kind}")


def graph_to_svg(graph):
    """Builds the hidden <svg> element holding one <filter> for the graph."""
    svg = ET.Element(
        "svg",
        {"xmlns": SVG_NAMESPACE, "aria-hidden": "true", "focusable": "false", "style": SVG_STYLE},
    )
    filter_el = ET.SubElement(
        svg,
        "filter",
        {
            "id": graph["id"],
            "color-interpolation-filters": "sRGB",
            "x": "0",
            "y": "0",
            "width": "100%",
            "height": "100%",
        },
    )
    for stage in graph["stages"]:
        _stage_element(filter_el, stage)
    return svg


def graph_to_string(graph):
    if graph is None:
        return ""
    return ET.tostring(graph_to_svg(graph), encoding="unicode")
