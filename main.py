import asyncio
import json
import logging
import os
import tempfile

from flask import Flask, jsonify, request, send_file

from videoenhancer.config import PORT, STORE_PATH, setup_logging
from videoenhancer.controller import EnhancerController
from videoenhancer.document import PageDocument
from videoenhancer.filters import VideoFilters
from videoenhancer.panel import SettingsPanel
from videoenhancer.presets import PRESET_DEFAULTS, PresetCatalogue
from videoenhancer.storage import JsonFileStore
from videoenhancer.style import build_stylesheet
from videoenhancer.svg import graph_to_string

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = 32 * 1024 * 1024
app.config["UPLOAD_EXTENSIONS"] = {".jpg", ".jpeg", ".png", ".webp", ".bmp"}
store = JsonFileStore(STORE_PATH)


def _load_panel():
    panel = SettingsPanel(store)
    asyncio.run(panel.load())
    return panel


def _save_panel(panel):
    if not asyncio.run(panel.save()):
        return jsonify({"error": "Settings could not be saved", "state": panel.snapshot()}), 500
    return jsonify(panel.snapshot())


@app.route("/", methods=["GET"])
@app.route("/api/state", methods=["GET"])
def state():
    return jsonify(_load_panel().snapshot())


@app.route("/api/enabled", methods=["POST"])
def set_enabled():
    data = request.get_json(force=True, silent=True) or {}
    if "enabled" not in data:
        return jsonify({"error": "Missing 'enabled'"}), 400
    panel = _load_panel()
    panel.set_enabled(data["enabled"])
    return _save_panel(panel)


@app.route("/api/presets/<name>/activate", methods=["POST"])
def activate_preset(name):
    if name not in PRESET_DEFAULTS:
        return jsonify({"error": f"Unknown preset: {name}"}), 404
    panel = _load_panel()
    if not panel.select_preset(name):
        return jsonify(panel.snapshot())
    return _save_panel(panel)


@app.route("/api/presets/<name>", methods=["POST"])
def update_preset(name):
    if name not in PRESET_DEFAULTS:
        return jsonify({"error": f"Unknown preset: {name}"}), 404
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({"error": "Expected a JSON object of settings"}), 400

    panel = _load_panel()
    try:
        for key, value in data.items():
            panel.set_value(key, value, preset=name)
    except (KeyError, ValueError) as e:
        return jsonify({"error": str(e).strip("'\"")}), 400
    return _save_panel(panel)


@app.route("/api/presets/<name>/reset", methods=["POST"])
def reset_preset(name):
    panel = _load_panel()
    if not panel.reset_preset(name):
        return jsonify({"error": f"Unknown preset: {name}"}), 404
    return _save_panel(panel)


@app.route("/api/reset", methods=["POST"])
def reset_all():
    panel = _load_panel()
    panel.reset_all()
    return _save_panel(panel)


@app.route("/api/filter", methods=["GET"])
def filter_value():
    panel = _load_panel()
    if not panel.state["enabled"]:
        return jsonify({"enabled": False, "css": None, "filterId": None, "svg": "", "stylesheet": ""})

    values = PresetCatalogue(panel.state["presets"]).get(request.args.get("preset", panel.state["activePreset"]))
    graph = VideoFilters.get_filter_graph(values)
    graph_id = graph["id"] if graph else None
    css = VideoFilters.build_filter_string(values, graph_id)
    return jsonify(
        {
            "enabled": True,
            "css": css,
            "filterId": graph_id,
            "svg": graph_to_string(graph),
            "stylesheet": build_stylesheet(css),
        }
    )


@app.route("/api/page", methods=["GET"])
def page():
    # Runs one reconciliation against an empty page and returns the result
    document = PageDocument(ready=True)
    controller = EnhancerController(store, document)
    asyncio.run(controller.load_and_apply())
    return app.response_class(document.serialize(), mimetype="text/html")


@app.route("/preview_frame", methods=["POST"])
def preview_frame():
    try:
        if "image" not in request.files:
            return jsonify({"error": "No image provided"}), 400

        image_file = request.files["image"]
        ext = os.path.splitext(image_file.filename or "")[1].lower() or ".jpg"
        if ext not in app.config["UPLOAD_EXTENSIONS"]:
            return jsonify({"error": "Unsupported file type"}), 400

        panel = _load_panel()
        values = PresetCatalogue(panel.state["presets"]).get(
            request.form.get("preset", panel.state["activePreset"])
        )
        # Optional per-request overrides as a JSON object
        overrides = request.form.get("values")
        if overrides:
            try:
                values = {**values, **json.loads(overrides)}
            except (ValueError, TypeError):
                return jsonify({"error": "Invalid 'values' JSON"}), 400

        with tempfile.NamedTemporaryFile(suffix=ext, delete=False) as tmp_in:
            image_file.save(tmp_in.name)
            input_path = tmp_in.name
        output_path = os.path.splitext(input_path)[0] + "_processed.jpg"

        try:
            VideoFilters.apply_filters_to_image(input_path, values, output_path)
        finally:
            os.remove(input_path)

        return send_file(output_path, mimetype="image/jpeg")

    except Exception as e:
        logger.error(f"Preview Error: {e}")
        return jsonify({"error": str(e)}), 500


if __name__ == "__main__":
    setup_logging()
    store.setup()
    app.run(host="0.0.0.0", port=PORT, debug=False)
